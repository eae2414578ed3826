# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Admin repository: user moderation, orphanage verification and the activity log.
"""

from typing import List, Optional

from opentelemetry import trace

from carebridge.domain.admin import (
    build_activity_insert, build_verification_update, is_awaiting_verification, summarize_dashboard
)
from carebridge.domain.mappers import to_activity, to_user_account, to_verification_item
from carebridge.models.dtos import ActivityLogDto, DonationDto, NeedDto, OrphanageDto, ProfileDto
from carebridge.models.entities import (
    ActivityLogEntry, DashboardStats, OrphanageVerificationItem, UserAccount
)
from carebridge.models.enums import ActivityTarget, ActivityType, UserStatus, VerificationStatus
from carebridge.models.outcome import Outcome, Success
from carebridge.repositories.base import BaseRepository

tracer = trace.get_tracer(__name__)

ACTIVITY_TABLE = "admin_activity_logs"


class AdminRepository(BaseRepository):
    """Platform administration over ``profiles`` and ``orphanage_profiles``."""

    table_name = "profiles"

    def fetch_dashboard_stats(self) -> Outcome[DashboardStats]:
        """Platform-wide counts computed from the core tables."""
        with tracer.start_as_current_span("admin.dashboard_stats"):
            try:
                stats = summarize_dashboard(
                    profiles=self._select(ProfileDto, self._table().select("*")),
                    donations=self._select(DonationDto, self._table("donations").select("*")),
                    needs=self._select(NeedDto, self._table("needs").select("*")),
                    orphanages=self._select(OrphanageDto, self._table("orphanage_profiles").select("*")),
                )
                return Success(stats)
            except Exception as e:
                return self._failure(e, "Failed to fetch dashboard stats")

    def fetch_users(self) -> Outcome[List[UserAccount]]:
        """Every profile, newest first."""
        with tracer.start_as_current_span("admin.fetch_users"):
            try:
                rows = self._select(ProfileDto, self._table().select("*").order("created_at", desc=True))
                return Success([to_user_account(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch users")

    def update_user_status(self, user_id: str, status: UserStatus) -> Outcome[None]:
        with tracer.start_as_current_span("admin.update_user_status") as span:
            span.set_attributes({"user.id": user_id, "user.status": UserStatus(status).value})
            try:
                self._update_by_id(user_id, {"status": UserStatus(status).value})
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to update user status", user_id=user_id)

    def verify_user(self, user_id: str, verified: bool = True) -> Outcome[None]:
        with tracer.start_as_current_span("admin.verify_user") as span:
            span.set_attribute("user.id", user_id)
            try:
                self._update_by_id(user_id, {"verified": verified})
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to verify user", user_id=user_id)

    def delete_user(self, user_id: str) -> Outcome[None]:
        with tracer.start_as_current_span("admin.delete_user") as span:
            span.set_attribute("user.id", user_id)
            try:
                self._delete_by_id(user_id)
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to delete user", user_id=user_id)

    def fetch_pending_verifications(self) -> Outcome[List[OrphanageVerificationItem]]:
        """
        Orphanages awaiting verification, each with its owner's email.

        Orphanages whose owning profile is missing or cannot be read are left out.
        """
        with tracer.start_as_current_span("admin.pending_verifications"):
            try:
                orphanages = self._select(
                    OrphanageDto,
                    self._table("orphanage_profiles").select("*")
                    .eq("verification_status", VerificationStatus.PENDING.value),
                )

                items = []
                for orphanage in filter(is_awaiting_verification, orphanages):
                    owner = self._owner_profile(orphanage.id)
                    if owner is not None:
                        items.append(to_verification_item(orphanage, owner))
                return Success(items)
            except Exception as e:
                return self._failure(e, "Failed to fetch pending verifications")

    def _owner_profile(self, orphanage_id: str) -> Optional[ProfileDto]:
        try:
            rows = self._select(ProfileDto, self._table().select("*").eq("id", orphanage_id))
        except Exception as e:
            self.logger.warning(f"Owner lookup failed for orphanage {orphanage_id}: {e}")
            return None
        return rows[0] if rows else None

    def verify_orphanage(
        self,
        orphanage_id: str,
        admin_id: str,
        status: VerificationStatus,
        notes: Optional[str] = None,
    ) -> Outcome[None]:
        """Record a verification decision on an orphanage."""
        with tracer.start_as_current_span("admin.verify_orphanage") as span:
            span.set_attributes({
                "orphanage.id": orphanage_id,
                "verification.status": VerificationStatus(status).value,
            })
            try:
                self._update_by_id(
                    orphanage_id,
                    build_verification_update(admin_id, status, notes),
                    table="orphanage_profiles",
                )
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to verify orphanage", orphanage_id=orphanage_id)

    def log_activity(
        self,
        admin_id: str,
        action_type: ActivityType,
        target_type: Optional[ActivityTarget] = None,
        target_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Outcome[None]:
        """Append an entry to the admin activity log."""
        with tracer.start_as_current_span("admin.log_activity") as span:
            span.set_attribute("activity.type", str(getattr(action_type, "value", action_type)))
            try:
                payload = build_activity_insert(admin_id, action_type, target_type, target_id, description)
                self._table(ACTIVITY_TABLE).insert(payload).execute()
                self.logger.info(f"Logged admin activity {payload['action_type']}", extra={"admin_id": admin_id})
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to log activity", admin_id=admin_id)

    def fetch_recent_activities(self, limit: int = 20) -> Outcome[List[ActivityLogEntry]]:
        with tracer.start_as_current_span("admin.recent_activities"):
            try:
                rows = self._select(
                    ActivityLogDto,
                    self._table(ACTIVITY_TABLE).select("*").order("created_at", desc=True).limit(limit),
                )
                return Success([to_activity(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch activities")
