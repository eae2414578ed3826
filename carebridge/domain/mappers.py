# SPDX-License-Identifier: Apache-2.0

"""
DTO to domain record conversion.

Pure functions, one per entity family. Every optional column has an explicit
default here so a record is never half-built. Unknown enum strings fall back to
the column default except where noted.
"""

from typing import Optional, Type, TypeVar
from enum import Enum

from carebridge.models.dtos import (
    ProfileDto, DonationDto, NeedDto, OrphanageDto, ActivityLogDto, CategoryDto
)
from carebridge.models.entities import (
    UserAccount, DonationRecord, Need, OrphanageProfile, ContactInfo,
    ActivityLogEntry, Category, OrphanageVerificationItem
)
from carebridge.models.enums import (
    UserRole, UserStatus, DonationType, DonationStatus, RecurringFrequency,
    NeedPriority, NeedStatus, VerificationStatus
)

E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: Type[E], raw: Optional[str], default: Optional[E]) -> Optional[E]:
    """Decode a stored enum value, returning ``default`` for unknown or missing values."""
    if raw is None:
        return default
    try:
        return enum_cls(raw)
    except ValueError:
        return default


def to_user_account(dto: ProfileDto, strict: bool = False) -> UserAccount:
    """
    Convert a profile row to a user account.

    Args:
        dto: Profile row
        strict: Raise on an unknown ``user_type`` instead of defaulting to donor

    Raises:
        ValueError: If ``strict`` and the user type is unknown
    """
    role = parse_enum(UserRole, dto.user_type, None)
    if role is None:
        if strict:
            raise ValueError("Invalid user type")
        role = UserRole.DONOR

    return UserAccount(
        id=dto.id,
        email=dto.email,
        role=role,
        display_name=dto.full_name,
        phone=dto.phone,
        avatar_url=dto.avatar_url,
        status=parse_enum(UserStatus, dto.status, UserStatus.ACTIVE),
        verified=dto.verified,
        created_at=dto.created_at,
        last_login_at=dto.last_login_at,
    )


def to_donation(dto: DonationDto, orphanage_name: str = "", category_name: str = "") -> DonationRecord:
    """Convert a donation row, optionally enriched with display names."""
    return DonationRecord(
        id=dto.id,
        donor_id=dto.donor_id,
        orphanage_id=dto.orphanage_id,
        orphanage_name=orphanage_name,
        category_id=dto.category_id,
        category_name=category_name,
        need_id=dto.need_id,
        amount=dto.amount,
        currency=dto.currency,
        type=parse_enum(DonationType, dto.donation_type, DonationType.MONETARY),
        item_description=dto.item_description,
        quantity=dto.quantity,
        status=parse_enum(DonationStatus, dto.status, DonationStatus.PENDING),
        note=dto.note,
        is_anonymous=dto.is_anonymous,
        is_recurring=dto.is_recurring,
        recurring_frequency=parse_enum(RecurringFrequency, dto.recurring_frequency, None),
        created_at=dto.created_at,
        completed_at=dto.completed_at,
    )


def to_need(dto: NeedDto) -> Need:
    """
    Convert a need row.

    Priority is required: an unknown value raises ``ValueError``.
    """
    return Need(
        id=dto.id,
        orphanage_id=dto.orphanage_id,
        category_id=dto.category_id,
        item_name=dto.item_name,
        quantity=dto.quantity,
        quantity_fulfilled=dto.quantity_fulfilled,
        priority=NeedPriority(dto.priority.upper()),
        description=dto.description or "",
        status=parse_enum(NeedStatus, dto.status, NeedStatus.ACTIVE),
        created_at=dto.created_at,
    )


def to_orphanage(dto: OrphanageDto) -> OrphanageProfile:
    """Convert an orphanage profile row."""
    return OrphanageProfile(
        id=dto.id,
        name=dto.orphanage_name,
        description=dto.description or "",
        address=dto.address,
        city=dto.city,
        state=dto.state,
        country=dto.country,
        postal_code=dto.postal_code,
        latitude=dto.latitude,
        longitude=dto.longitude,
        contact=ContactInfo(
            phone=dto.contact_phone or "",
            email=dto.contact_email or "",
            website=dto.website or "",
        ),
        registration_number=dto.registration_number,
        number_of_children=dto.number_of_children,
        total_donations_received=dto.total_donations_received,
        rating=dto.rating,
        rating_count=dto.rating_count,
        image_url=dto.image_url,
        verified=dto.verified,
        verification_status=parse_enum(
            VerificationStatus, dto.verification_status, VerificationStatus.PENDING
        ),
        created_at=dto.created_at,
    )


def to_verification_item(dto: OrphanageDto, owner: ProfileDto) -> OrphanageVerificationItem:
    """Join a pending orphanage with the email of its owning profile."""
    return OrphanageVerificationItem(
        id=dto.id,
        orphanage_name=dto.orphanage_name,
        email=owner.email,
        city=dto.city,
        state=dto.state,
        verification_status=parse_enum(
            VerificationStatus, dto.verification_status, VerificationStatus.PENDING
        ),
        registration_number=dto.registration_number,
        created_at=dto.created_at,
    )


def to_activity(dto: ActivityLogDto) -> ActivityLogEntry:
    """Convert an admin activity log row."""
    return ActivityLogEntry(
        id=dto.id,
        actor_id=dto.admin_id,
        action_type=dto.action_type,
        target_type=dto.target_type,
        target_id=dto.target_id,
        description=dto.description,
        created_at=dto.created_at,
    )


def to_category(dto: CategoryDto) -> Category:
    """Convert a category row."""
    return Category(
        id=dto.id,
        name=dto.name,
        icon_name=dto.icon_name or "",
        color=dto.color or "",
        description=dto.description or "",
    )
