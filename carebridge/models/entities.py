# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Core domain records for the CareBridge platform.
"""

from typing import Optional
from pydantic import BaseModel, Field

from .base import BaseRecord
from .enums import (
    UserRole,
    UserStatus,
    DonationType,
    DonationStatus,
    RecurringFrequency,
    NeedPriority,
    NeedStatus,
    VerificationStatus,
)


class UserAccount(BaseRecord):
    """A signed-up account with its profile."""

    id: str = Field(..., description="Auth user identifier")
    email: str = Field(..., description="Login email")
    role: UserRole = Field(..., description="Account role")
    display_name: str = Field(..., description="Full name shown in the app")
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    status: UserStatus = UserStatus.ACTIVE
    verified: bool = False
    created_at: Optional[str] = None
    last_login_at: Optional[str] = None

    def is_active(self) -> bool:
        """Check if the account is active."""
        return self.status == UserStatus.ACTIVE


class DonationRecord(BaseRecord):
    """A donation pledged by a donor to an orphanage."""

    id: str
    donor_id: str
    orphanage_id: str
    orphanage_name: str = ""
    category_id: str
    category_name: str = ""
    need_id: Optional[str] = None
    amount: float
    currency: str = "USD"
    type: DonationType = DonationType.MONETARY
    item_description: Optional[str] = None
    quantity: Optional[int] = None
    status: DonationStatus = DonationStatus.PENDING
    note: Optional[str] = None
    is_anonymous: bool = False
    is_recurring: bool = False
    recurring_frequency: Optional[RecurringFrequency] = None
    created_at: Optional[str] = None
    completed_at: Optional[str] = None

    def is_pending(self) -> bool:
        return self.status == DonationStatus.PENDING


class Need(BaseRecord):
    """An item an orphanage is asking for."""

    id: str
    orphanage_id: str
    category_id: str
    item_name: str
    quantity: int
    quantity_fulfilled: int = 0
    priority: NeedPriority
    description: str = ""
    status: NeedStatus = NeedStatus.ACTIVE
    created_at: Optional[str] = None


class ContactInfo(BaseRecord):
    """Public contact details of an orphanage."""

    phone: str = ""
    email: str = ""
    website: str = ""


class OrphanageProfile(BaseRecord):
    """An orphanage as shown to donors and admins."""

    id: str
    name: str
    description: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    postal_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    contact: ContactInfo = Field(default_factory=ContactInfo)
    registration_number: Optional[str] = None
    number_of_children: int = 0
    total_donations_received: float = 0.0
    rating: float = 0.0
    rating_count: int = 0
    image_url: Optional[str] = None
    verified: bool = False
    verification_status: VerificationStatus = VerificationStatus.PENDING
    created_at: Optional[str] = None


class ActivityLogEntry(BaseRecord):
    """Append-only record of an admin action."""

    id: str
    actor_id: str
    action_type: str
    target_type: Optional[str] = None
    target_id: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[str] = None


class Category(BaseRecord):
    """Donation and need category."""

    id: str
    name: str
    icon_name: str = ""
    color: str = ""
    description: str = ""


class OrphanageVerificationItem(BaseRecord):
    """A pending orphanage joined with its owner's email."""

    id: str
    orphanage_name: str
    email: str
    city: str
    state: str
    verification_status: VerificationStatus = VerificationStatus.PENDING
    registration_number: Optional[str] = None
    created_at: Optional[str] = None


class DonationStatistics(BaseModel):
    """Donation counts for a donor or an orphanage."""

    total_donations: int = 0
    total_amount: float = 0.0
    pending_donations: int = 0
    completed_donations: int = 0
    monetary_donations: int = 0
    in_kind_donations: int = 0


class DonorSummary(BaseModel):
    """Completed giving of one donor to one orphanage."""

    donor_id: str
    total_amount: float
    donation_count: int


class NeedsStatistics(BaseModel):
    """Need counts for an orphanage."""

    total_needs: int = 0
    active_needs: int = 0
    fulfilled_needs: int = 0
    cancelled_needs: int = 0
    urgent_needs: int = 0
    high_priority_needs: int = 0


class DashboardStats(BaseModel):
    """Platform-wide counts for the admin dashboard."""

    total_users: int = 0
    total_donors: int = 0
    total_orphanages: int = 0
    total_admins: int = 0
    active_users: int = 0
    suspended_users: int = 0
    total_donations_amount: float = 0.0
    total_donations_count: int = 0
    pending_donations: int = 0
    active_needs: int = 0
    verified_orphanages: int = 0
    pending_orphanages: int = 0


class AuthenticatedUser(BaseRecord):
    """Result of a successful sign-in or sign-up."""

    account: UserAccount
    access_token: Optional[str] = None
