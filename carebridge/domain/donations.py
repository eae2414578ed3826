# SPDX-License-Identifier: Apache-2.0

"""
Donation domain logic.

Status transitions, deletion rules, write payloads and statistics. All
functions are pure.
"""

from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from carebridge.models.dtos import DonationDto
from carebridge.models.entities import DonationRecord, DonationStatistics, DonorSummary
from carebridge.models.enums import DonationStatus, DonationType, RecurringFrequency


# Forward-only workflow. Exposed for display; writes do not enforce it.
DONATION_TRANSITIONS: Dict[DonationStatus, FrozenSet[DonationStatus]] = {
    DonationStatus.PENDING: frozenset({DonationStatus.CONFIRMED, DonationStatus.CANCELLED}),
    DonationStatus.CONFIRMED: frozenset({DonationStatus.COMPLETED, DonationStatus.CANCELLED}),
    DonationStatus.COMPLETED: frozenset(),
    DonationStatus.CANCELLED: frozenset(),
}


def allowed_transitions(status: DonationStatus) -> FrozenSet[DonationStatus]:
    """Statuses the workflow normally moves to from ``status``."""
    return DONATION_TRANSITIONS[DonationStatus(status)]


def is_forward_transition(current: DonationStatus, target: DonationStatus) -> bool:
    """Check whether ``current -> target`` follows the workflow."""
    return DonationStatus(target) in allowed_transitions(current)


def is_terminal(status: DonationStatus) -> bool:
    return not allowed_transitions(status)


def deletion_error(donation: DonationRecord) -> Optional[str]:
    """
    Validate that a donation may be deleted.

    Returns:
        Error message, or None when the donation is still pending
    """
    if donation.status != DonationStatus.PENDING:
        return "Can only delete pending donations"
    return None


def build_donation_insert(
    donor_id: str,
    orphanage_id: str,
    category_id: str,
    amount: float,
    donation_type: DonationType = DonationType.MONETARY,
    need_id: Optional[str] = None,
    item_description: Optional[str] = None,
    quantity: Optional[int] = None,
    note: Optional[str] = None,
    is_anonymous: bool = False,
    is_recurring: bool = False,
    recurring_frequency: Optional[RecurringFrequency] = None,
) -> Dict[str, Any]:
    """
    Build the insert payload for a new donation.

    Optional columns are included only when a value is given; they are never
    sent as null.
    """
    payload: Dict[str, Any] = {
        "donor_id": donor_id,
        "orphanage_id": orphanage_id,
        "category_id": category_id,
        "amount": amount,
        "donation_type": DonationType(donation_type).value,
        "status": DonationStatus.PENDING.value,
        "is_anonymous": is_anonymous,
        "is_recurring": is_recurring,
    }

    optional = {
        "need_id": need_id,
        "item_description": item_description,
        "quantity": quantity,
        "note": note,
        "recurring_frequency": RecurringFrequency(recurring_frequency).value if recurring_frequency else None,
    }
    payload.update({key: value for key, value in optional.items() if value is not None})

    return payload


def build_status_update(status: DonationStatus, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Update payload for a status change; completion also stamps ``completed_at``."""
    status = DonationStatus(status)
    updates: Dict[str, Any] = {"status": status.value}
    if status == DonationStatus.COMPLETED:
        updates["completed_at"] = (now or datetime.now(timezone.utc)).isoformat()
    return updates


def compute_statistics(donations: Iterable[DonationDto]) -> DonationStatistics:
    """Summarize donation rows; only completed donations count toward the amount."""
    donations = list(donations)
    return DonationStatistics(
        total_donations=len(donations),
        total_amount=sum(d.amount for d in donations if d.status == DonationStatus.COMPLETED.value),
        pending_donations=sum(1 for d in donations if d.status == DonationStatus.PENDING.value),
        completed_donations=sum(1 for d in donations if d.status == DonationStatus.COMPLETED.value),
        monetary_donations=sum(1 for d in donations if d.donation_type == DonationType.MONETARY.value),
        in_kind_donations=sum(1 for d in donations if d.donation_type == DonationType.IN_KIND.value),
    )


def rank_top_donors(donations: Iterable[DonationDto], limit: int = 10) -> List[DonorSummary]:
    """Group donations by donor and return the largest totals first."""
    totals: Dict[str, List[float]] = defaultdict(list)
    for donation in donations:
        totals[donation.donor_id].append(donation.amount)

    summaries = [
        DonorSummary(donor_id=donor_id, total_amount=sum(amounts), donation_count=len(amounts))
        for donor_id, amounts in totals.items()
    ]
    summaries.sort(key=lambda s: s.total_amount, reverse=True)
    return summaries[:limit]
