# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Admin screens: user management, orphanage verification and the dashboard.
"""

import logging
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from carebridge.domain.filters import field_equals, text_contains
from carebridge.models.entities import (
    ActivityLogEntry, DashboardStats, OrphanageVerificationItem, UserAccount
)
from carebridge.models.enums import ActivityTarget, ActivityType, UserStatus, VerificationStatus
from carebridge.models.outcome import Error, Outcome, Success
from carebridge.repositories.admin import AdminRepository
from carebridge.viewmodels.base import ListState, ListViewModel, ViewModel

logger = logging.getLogger(__name__)


class UserManagementViewModel(ListViewModel[ListState[UserAccount]]):
    """
    List, filter and moderate user accounts.

    Filters: ``user_type`` (a ``UserRole``), ``status`` (a ``UserStatus``) and
    ``search`` over display name and email.
    """

    matchers = {
        "user_type": field_equals("role"),
        "status": field_equals("status"),
        "search": text_contains("display_name", "email"),
    }

    def __init__(self, repository: AdminRepository, admin_id: Optional[str] = None,
                 max_workers: Optional[int] = None):
        super().__init__(max_workers=max_workers)
        self.repository = repository
        self.admin_id = admin_id

    def _fetch(self) -> Outcome[List[UserAccount]]:
        return self.repository.fetch_users()

    def update_user_status(self, user_id: str, status: UserStatus) -> Future:
        def call() -> Outcome[None]:
            result = self.repository.update_user_status(user_id, status)
            if isinstance(result, Success):
                self._log(
                    ActivityType.USER_STATUS_CHANGED, user_id, f"User status changed to {UserStatus(status).value}"
                )
            return result

        return self._mutate(call, "User status updated successfully")

    def verify_user(self, user_id: str, verified: bool = True) -> Future:
        def call() -> Outcome[None]:
            result = self.repository.verify_user(user_id, verified)
            if isinstance(result, Success) and verified:
                self._log(ActivityType.USER_VERIFIED, user_id, "User verified")
            return result

        return self._mutate(call, "User verified successfully" if verified else "User unverified")

    def delete_user(self, user_id: str) -> Future:
        def call() -> Outcome[None]:
            result = self.repository.delete_user(user_id)
            if isinstance(result, Success):
                self._log(ActivityType.USER_DELETED, user_id, "User deleted")
            return result

        return self._mutate(call, "User deleted successfully")

    def _log(self, action: ActivityType, user_id: str, description: str) -> None:
        if self.admin_id is None:
            return
        logged = self.repository.log_activity(self.admin_id, action, ActivityTarget.USER, user_id, description)
        if isinstance(logged, Error):
            logger.warning(f"Activity not logged for user {user_id}: {logged.message}")


class OrphanageVerificationViewModel(ListViewModel[ListState[OrphanageVerificationItem]]):
    """Review orphanages waiting for verification."""

    matchers = {
        "search": text_contains("orphanage_name", "email", "city"),
    }

    def __init__(self, repository: AdminRepository, admin_id: str, max_workers: Optional[int] = None):
        super().__init__(max_workers=max_workers)
        self.repository = repository
        self.admin_id = admin_id

    def _fetch(self) -> Outcome[List[OrphanageVerificationItem]]:
        return self.repository.fetch_pending_verifications()

    def approve_orphanage(self, orphanage_id: str, notes: Optional[str] = None) -> Future:
        def call() -> Outcome[None]:
            result = self.repository.verify_orphanage(
                orphanage_id, self.admin_id, VerificationStatus.VERIFIED, notes
            )
            if isinstance(result, Success):
                self._log(ActivityType.ORPHANAGE_VERIFIED, orphanage_id, "Orphanage verified")
            return result

        return self._mutate(call, "Orphanage verified successfully")

    def reject_orphanage(self, orphanage_id: str, notes: str) -> Future:
        def call() -> Outcome[None]:
            result = self.repository.verify_orphanage(
                orphanage_id, self.admin_id, VerificationStatus.REJECTED, notes
            )
            if isinstance(result, Success):
                self._log(ActivityType.ORPHANAGE_REJECTED, orphanage_id, f"Orphanage verification rejected: {notes}")
            return result

        return self._mutate(call, "Orphanage verification rejected")

    def _log(self, action: ActivityType, orphanage_id: str, description: str) -> None:
        logged = self.repository.log_activity(
            self.admin_id, action, ActivityTarget.ORPHANAGE, orphanage_id, description
        )
        if isinstance(logged, Error):
            logger.warning(f"Activity not logged for orphanage {orphanage_id}: {logged.message}")


@dataclass(frozen=True)
class AdminDashboardState:
    """Snapshot of the admin dashboard."""
    is_loading: bool = False
    stats: DashboardStats = field(default_factory=DashboardStats)
    recent_activities: Tuple[ActivityLogEntry, ...] = ()
    error: Optional[str] = None
    success_message: Optional[str] = None


class AdminDashboardViewModel(ViewModel[AdminDashboardState]):
    """Platform counts and the latest admin actions."""

    def __init__(self, repository: AdminRepository, max_workers: Optional[int] = None):
        super().__init__(AdminDashboardState(), max_workers)
        self.repository = repository

    def load(self) -> Future:
        token = self._next_token("stats")
        self._update(is_loading=True, error=None)

        def work() -> Outcome[DashboardStats]:
            result = self.repository.fetch_dashboard_stats()
            if isinstance(result, Success):
                self._update_if_current("stats", token, is_loading=False, stats=result.value)
            else:
                self._update_if_current("stats", token, is_loading=False, error=result.message)
            return result

        return self._launch(work)

    def load_recent_activities(self, limit: int = 20) -> Future:
        """Recent activity is optional; failures leave the list as it was."""
        token = self._next_token("activities")

        def work() -> Outcome[List[ActivityLogEntry]]:
            result = self.repository.fetch_recent_activities(limit)
            if isinstance(result, Success):
                self._update_if_current("activities", token, recent_activities=tuple(result.value))
            return result

        return self._launch(work)

    def refresh(self) -> List[Future]:
        return [self.load(), self.load_recent_activities()]
