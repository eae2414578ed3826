# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Account screens: sign-in, sign-up, password recovery and the profile.

Forms validate locally before any remote call. Successful sign-in and sign-up
start the session in the shared ``SessionStore``; sign-out clears it.
"""

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Optional

from carebridge.domain.validation import (
    validate_email, validate_password, validate_password_confirmation,
    validate_phone, validate_required
)
from carebridge.models.entities import AuthenticatedUser, UserAccount
from carebridge.models.enums import UserRole
from carebridge.models.outcome import Error, Outcome, Success
from carebridge.repositories.auth import AuthRepository
from carebridge.services.session import SessionStore
from carebridge.viewmodels.base import ViewModel, completed

logger = logging.getLogger(__name__)


class FormViewModel(ViewModel[Any]):
    """Form holder: ``edit`` changes fields and clears their errors."""

    fields: frozenset = frozenset()

    def edit(self, **changes: Any) -> None:
        """
        Change form fields.

        Raises:
            ValueError: If a name is not a field of this form
        """
        unknown = set(changes) - self.fields
        if unknown:
            raise ValueError(f"Unknown form field: {', '.join(sorted(unknown))}")
        errors = {
            f"{name}_error": None for name in changes
            if f"{name}_error" in type(self._state).__dataclass_fields__
        }
        self._update(**changes, **errors)

    def _record_errors(self, **errors: Optional[str]) -> bool:
        """Store field errors; True when there are none."""
        self._update(**errors)
        return not any(errors.values())


@dataclass(frozen=True)
class LoginState:
    email: str = ""
    password: str = ""
    is_loading: bool = False
    email_error: Optional[str] = None
    password_error: Optional[str] = None
    account: Optional[UserAccount] = None
    error: Optional[str] = None
    success_message: Optional[str] = None


class LoginViewModel(FormViewModel):
    """Email and password sign-in."""

    fields = frozenset({"email", "password"})

    def __init__(self, repository: AuthRepository, session: SessionStore, max_workers: Optional[int] = None):
        super().__init__(LoginState(), max_workers)
        self.repository = repository
        self.session = session

    def sign_in(self) -> Future:
        state = self._state
        if not self._record_errors(
            email_error=validate_email(state.email),
            password_error=validate_password(state.password),
        ):
            return completed(None)

        self._update(is_loading=True, error=None)

        def work() -> Outcome[AuthenticatedUser]:
            result = self.repository.sign_in(state.email.strip(), state.password)
            if isinstance(result, Success):
                self.session.start(result.value.account, result.value.access_token)
                self._update(is_loading=False, account=result.value.account, success_message="Login successful!")
            else:
                self._update(is_loading=False, error=result.message)
            return result

        return self._launch(work)


@dataclass(frozen=True)
class SignupState:
    full_name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""
    role: UserRole = UserRole.DONOR
    is_loading: bool = False
    full_name_error: Optional[str] = None
    email_error: Optional[str] = None
    password_error: Optional[str] = None
    confirm_password_error: Optional[str] = None
    account: Optional[UserAccount] = None
    error: Optional[str] = None
    success_message: Optional[str] = None


class SignupViewModel(FormViewModel):
    """Account registration for donors and orphanages."""

    fields = frozenset({"full_name", "email", "password", "confirm_password", "role"})

    def __init__(self, repository: AuthRepository, session: SessionStore, max_workers: Optional[int] = None):
        super().__init__(SignupState(), max_workers)
        self.repository = repository
        self.session = session

    def sign_up(self) -> Future:
        state = self._state
        if not self._record_errors(
            full_name_error=validate_required(state.full_name, "Name"),
            email_error=validate_email(state.email),
            password_error=validate_password(state.password),
            confirm_password_error=validate_password_confirmation(state.password, state.confirm_password),
        ):
            return completed(None)

        self._update(is_loading=True, error=None)

        def work() -> Outcome[AuthenticatedUser]:
            result = self.repository.sign_up(
                state.email.strip(), state.password, state.full_name.strip(), state.role
            )
            if isinstance(result, Success):
                self.session.start(result.value.account, result.value.access_token)
                self._update(
                    is_loading=False,
                    account=result.value.account,
                    success_message="Account created successfully!",
                )
            else:
                self._update(is_loading=False, error=result.message)
            return result

        return self._launch(work)


@dataclass(frozen=True)
class ForgotPasswordState:
    email: str = ""
    is_loading: bool = False
    email_error: Optional[str] = None
    email_sent: bool = False
    error: Optional[str] = None
    success_message: Optional[str] = None


class ForgotPasswordViewModel(FormViewModel):
    """Request a password reset email."""

    fields = frozenset({"email"})

    def __init__(self, repository: AuthRepository, max_workers: Optional[int] = None):
        super().__init__(ForgotPasswordState(), max_workers)
        self.repository = repository

    def send_reset_link(self) -> Future:
        state = self._state
        if not self._record_errors(email_error=validate_email(state.email)):
            return completed(None)

        self._update(is_loading=True, error=None)

        def work() -> Outcome[None]:
            result = self.repository.send_password_reset(state.email.strip())
            if isinstance(result, Success):
                self._update(is_loading=False, email_sent=True)
            else:
                self._update(is_loading=False, error=result.message)
            return result

        return self._launch(work)

    def resend(self) -> None:
        """Back to the email form so the link can be sent again."""
        self._update(email_sent=False)


@dataclass(frozen=True)
class ChangePasswordState:
    current_password: str = ""
    new_password: str = ""
    confirm_password: str = ""
    is_loading: bool = False
    current_password_error: Optional[str] = None
    new_password_error: Optional[str] = None
    confirm_password_error: Optional[str] = None
    error: Optional[str] = None
    success_message: Optional[str] = None


class ChangePasswordViewModel(FormViewModel):
    """Change the signed-in user's password."""

    fields = frozenset({"current_password", "new_password", "confirm_password"})

    def __init__(self, repository: AuthRepository, session: SessionStore, max_workers: Optional[int] = None):
        super().__init__(ChangePasswordState(), max_workers)
        self.repository = repository
        self.session = session

    @staticmethod
    def _new_password_error(current: str, new: str) -> Optional[str]:
        if not new.strip():
            return "New password is required"
        if new == current:
            return "New password must be different"
        return validate_password(new)

    def change_password(self) -> Future:
        state = self._state
        if not self._record_errors(
            current_password_error=validate_required(state.current_password, "Current password"),
            new_password_error=self._new_password_error(state.current_password, state.new_password),
            confirm_password_error=validate_password_confirmation(state.new_password, state.confirm_password),
        ):
            return completed(None)

        current = self.session.current
        if current is None:
            self._update(error="User not logged in")
            return completed(Error("User not logged in"))

        self._update(is_loading=True, error=None)

        def work() -> Outcome[None]:
            result = self.repository.change_password(current.email, state.current_password, state.new_password)
            if isinstance(result, Success):
                self._update(
                    is_loading=False,
                    current_password="",
                    new_password="",
                    confirm_password="",
                    success_message="Password changed successfully",
                )
            else:
                self._update(is_loading=False, error=result.message)
            return result

        return self._launch(work)


@dataclass(frozen=True)
class ProfileState:
    is_loading: bool = False
    is_saving: bool = False
    is_edit_mode: bool = False
    account: Optional[UserAccount] = None
    full_name: str = ""
    phone: str = ""
    full_name_error: Optional[str] = None
    phone_error: Optional[str] = None
    signed_out: bool = False
    error: Optional[str] = None
    success_message: Optional[str] = None


class ProfileViewModel(FormViewModel):
    """View and edit the signed-in user's profile, and sign out."""

    fields = frozenset({"full_name", "phone"})

    def __init__(self, repository: AuthRepository, session: SessionStore, max_workers: Optional[int] = None):
        super().__init__(ProfileState(), max_workers)
        self.repository = repository
        self.session = session

    def load(self) -> Future:
        token = self._next_token("profile")
        self._update(is_loading=True, error=None)

        def work() -> Outcome[Optional[UserAccount]]:
            result = self.repository.fetch_current_user()
            if isinstance(result, Error):
                self._update_if_current("profile", token, is_loading=False, error=result.message)
            elif result.value is None:
                self._update_if_current("profile", token, is_loading=False, error="Failed to load profile")
            else:
                account = result.value
                self._update_if_current(
                    "profile", token,
                    is_loading=False,
                    account=account,
                    full_name=account.display_name,
                    phone=account.phone or "",
                )
            return result

        return self._launch(work)

    def toggle_edit_mode(self) -> None:
        self._update_with(lambda state: {"is_edit_mode": not state.is_edit_mode})

    def cancel_edit(self) -> None:
        """Leave edit mode and restore the loaded values."""
        account = self._state.account
        self._update(
            is_edit_mode=False,
            full_name=account.display_name if account else "",
            phone=(account.phone or "") if account else "",
            full_name_error=None,
            phone_error=None,
        )

    def save(self) -> Future:
        state = self._state
        if not self._record_errors(
            full_name_error=validate_required(state.full_name, "Name"),
            phone_error=validate_phone(state.phone),
        ):
            return completed(None)

        current = self.session.current
        if current is None:
            self._update(error="User not logged in")
            return completed(Error("User not logged in"))

        self._update(is_saving=True, error=None)

        def work() -> Outcome[None]:
            full_name = state.full_name.strip()
            phone = state.phone.strip() or None
            result = self.repository.update_profile(current.user_id, full_name=full_name, phone=phone)
            if isinstance(result, Error):
                self._update(is_saving=False, error=f"Failed to update profile: {result.message}")
                return result

            changes = {"is_saving": False, "is_edit_mode": False, "success_message": "Profile updated successfully"}
            if state.account is not None:
                changes["account"] = state.account.model_copy(update={"display_name": full_name, "phone": phone})
            self._update(**changes)
            return result

        return self._launch(work)

    def sign_out(self) -> Future:
        self._update(is_loading=True)

        def work() -> Outcome[None]:
            result = self.repository.sign_out()
            if isinstance(result, Success):
                self.session.clear()
                self._update(is_loading=False, signed_out=True)
            else:
                logger.warning(f"Sign out failed: {result.message}")
                self._update(is_loading=False, error=f"Logout failed: {result.message}")
            return result

        return self._launch(work)
