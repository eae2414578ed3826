# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Authentication repository.

Account credentials live with the hosted auth provider; the ``profiles`` table
holds the role and display details, with one role-specific profile row per
donor or orphanage.
"""

from typing import Any, Dict, Optional

from opentelemetry import trace

from carebridge.domain.mappers import to_user_account
from carebridge.models.dtos import ProfileDto
from carebridge.models.entities import AuthenticatedUser, UserAccount
from carebridge.models.enums import UserRole
from carebridge.models.outcome import Error, Outcome, Success
from carebridge.repositories.base import BaseRepository

tracer = trace.get_tracer(__name__)

PLACEHOLDER = "To be updated"
DEFAULT_COUNTRY = "Malawi"


class AuthRepository(BaseRepository):
    """Sign-up, sign-in and account maintenance."""

    table_name = "profiles"

    def sign_up(self, email: str, password: str, full_name: str, role: UserRole) -> Outcome[AuthenticatedUser]:
        """
        Register an account.

        Creates the auth user, then the ``profiles`` row, then the
        role-specific profile row. Orphanage profiles start with placeholder
        address fields for the owner to fill in.
        """
        role = UserRole(role)
        with tracer.start_as_current_span("auth.sign_up") as span:
            span.set_attribute("user.role", role.value)
            try:
                response = self.supabase.auth.sign_up({"email": email, "password": password})
                if response.user is None:
                    raise Exception("User ID not found. Please check if email confirmation is required.")
                user_id = response.user.id

                self._table().insert({
                    "id": user_id,
                    "user_type": role.value,
                    "full_name": full_name,
                    "email": email,
                }).execute()
                self._create_role_profile(user_id, full_name, role)

                self.logger.info(f"User signed up: {user_id}", extra={"role": role.value})
                return Success(AuthenticatedUser(
                    account=UserAccount(id=user_id, email=email, role=role, display_name=full_name),
                    access_token=self._access_token(response),
                ))
            except Exception as e:
                return self._failure(e, "Sign up failed", role=role.value)

    def _create_role_profile(self, user_id: str, full_name: str, role: UserRole) -> None:
        if role == UserRole.DONOR:
            self._table("donor_profiles").insert({"id": user_id}).execute()
        elif role == UserRole.ORPHANAGE:
            self._table("orphanage_profiles").insert({
                "id": user_id,
                "orphanage_name": full_name,
                "address": PLACEHOLDER,
                "city": PLACEHOLDER,
                "state": PLACEHOLDER,
                "country": DEFAULT_COUNTRY,
            }).execute()

    @staticmethod
    def _access_token(response: Any) -> Optional[str]:
        session = getattr(response, "session", None)
        return getattr(session, "access_token", None)

    def sign_in(self, email: str, password: str) -> Outcome[AuthenticatedUser]:
        """Sign in with email and password and load the caller's profile."""
        with tracer.start_as_current_span("auth.sign_in"):
            try:
                response = self.supabase.auth.sign_in_with_password({"email": email, "password": password})
                if response.user is None:
                    raise Exception("User not found after sign in")

                rows = self._select(ProfileDto, self._table().select("*").eq("id", response.user.id))
                if not rows:
                    raise Exception("Profile not found. Please sign up first.")

                account = to_user_account(rows[0], strict=True)
                self.logger.info(f"User signed in: {account.id}", extra={"role": account.role.value})
                return Success(AuthenticatedUser(account=account, access_token=self._access_token(response)))
            except Exception as e:
                return self._failure(e, "Sign in failed")

    def sign_out(self) -> Outcome[None]:
        with tracer.start_as_current_span("auth.sign_out"):
            try:
                self.supabase.auth.sign_out()
                self.logger.info("User signed out")
                return Success(None)
            except Exception as e:
                return self._failure(e, "Sign out failed")

    def fetch_current_user(self) -> Outcome[Optional[UserAccount]]:
        """
        Look up the account behind the client's auth session.

        Returns:
            ``Success(None)`` when there is no session or no profile row
        """
        with tracer.start_as_current_span("auth.fetch_current_user"):
            try:
                response = self.supabase.auth.get_user()
                if response is None or response.user is None:
                    return Success(None)

                rows = self._select(ProfileDto, self._table().select("*").eq("id", response.user.id))
                return Success(to_user_account(rows[0]) if rows else None)
            except Exception as e:
                return self._failure(e, "Failed to fetch current user")

    def update_profile(
        self,
        user_id: str,
        full_name: Optional[str] = None,
        phone: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> Outcome[None]:
        """Partially update a profile; nothing is sent when every field is None."""
        with tracer.start_as_current_span("auth.update_profile") as span:
            span.set_attribute("user.id", user_id)
            try:
                fields: Dict[str, Any] = {"full_name": full_name, "phone": phone, "avatar_url": avatar_url}
                self._update_by_id(user_id, {k: v for k, v in fields.items() if v is not None})
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to update profile", user_id=user_id)

    def send_password_reset(self, email: str) -> Outcome[None]:
        """Email a password reset link."""
        with tracer.start_as_current_span("auth.send_password_reset"):
            try:
                redirect = self.supabase.config.password_reset_redirect_url
                options = {"redirect_to": redirect} if redirect else {}
                self.supabase.auth.reset_password_for_email(email, options)
                self.logger.info("Password reset requested")
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to send reset link")

    def change_password(self, email: str, current_password: str, new_password: str) -> Outcome[None]:
        """Verify the current password by signing in again, then set the new one."""
        with tracer.start_as_current_span("auth.change_password"):
            try:
                response = self.supabase.auth.sign_in_with_password(
                    {"email": email, "password": current_password}
                )
                if response.user is None:
                    return Error("Current password is incorrect")

                self.supabase.auth.update_user({"password": new_password})
                self.logger.info(f"Password changed for user {response.user.id}")
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to change password")
