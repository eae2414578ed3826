# SPDX-License-Identifier: Apache-2.0

"""
Admin domain logic: dashboard aggregation and verification payloads.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from carebridge.models.dtos import DonationDto, NeedDto, OrphanageDto, ProfileDto
from carebridge.models.entities import DashboardStats
from carebridge.models.enums import (
    DonationStatus, NeedStatus, UserRole, UserStatus, VerificationStatus
)


def is_awaiting_verification(orphanage: OrphanageDto) -> bool:
    """True when the row reads exactly ``pending``; a null status is not pending."""
    return orphanage.verification_status == VerificationStatus.PENDING.value


def summarize_dashboard(
    profiles: Iterable[ProfileDto],
    donations: Iterable[DonationDto],
    needs: Iterable[NeedDto],
    orphanages: Iterable[OrphanageDto],
) -> DashboardStats:
    """Aggregate platform-wide counts from the four core tables."""
    profiles = list(profiles)
    donations = list(donations)
    orphanages = list(orphanages)

    return DashboardStats(
        total_users=len(profiles),
        total_donors=sum(1 for p in profiles if p.user_type == UserRole.DONOR.value),
        total_orphanages=sum(1 for p in profiles if p.user_type == UserRole.ORPHANAGE.value),
        total_admins=sum(1 for p in profiles if p.user_type == UserRole.ADMIN.value),
        active_users=sum(1 for p in profiles if p.status == UserStatus.ACTIVE.value),
        suspended_users=sum(1 for p in profiles if p.status == UserStatus.SUSPENDED.value),
        total_donations_amount=sum(
            d.amount for d in donations if d.status == DonationStatus.COMPLETED.value
        ),
        total_donations_count=len(donations),
        pending_donations=sum(1 for d in donations if d.status == DonationStatus.PENDING.value),
        active_needs=sum(1 for n in needs if n.status == NeedStatus.ACTIVE.value),
        verified_orphanages=sum(
            1 for o in orphanages if o.verification_status == VerificationStatus.VERIFIED.value
        ),
        pending_orphanages=sum(1 for o in orphanages if is_awaiting_verification(o)),
    )


def build_verification_update(
    admin_id: str,
    status: VerificationStatus,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Update payload recording an admin's verification decision."""
    status = VerificationStatus(status)
    updates: Dict[str, Any] = {
        "verification_status": status.value,
        "verified_by": admin_id,
        "verified_at": (now or datetime.now(timezone.utc)).isoformat(),
    }
    if notes is not None:
        updates["verification_notes"] = notes
    if status == VerificationStatus.VERIFIED:
        updates["verified"] = True
    return updates


def _stored(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def build_activity_insert(
    admin_id: str,
    action_type: str,
    target_type: Optional[str] = None,
    target_id: Optional[str] = None,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """Insert payload for an activity log entry; absent optionals are omitted."""
    payload: Dict[str, Any] = {"admin_id": admin_id, "action_type": _stored(action_type)}
    if target_type is not None:
        payload["target_type"] = _stored(target_type)
    if target_id is not None:
        payload["target_id"] = target_id
    if description is not None:
        payload["description"] = description
    return payload
