# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Enumeration types for the CareBridge platform.
"""

from enum import Enum


class UserRole(str, Enum):
    """Account role, stored as ``profiles.user_type``."""
    DONOR = "donor"
    ORPHANAGE = "orphanage"
    ADMIN = "admin"


class UserStatus(str, Enum):
    """User account status enumeration."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class DonationType(str, Enum):
    """Donation kind."""
    MONETARY = "monetary"
    IN_KIND = "in_kind"


class DonationStatus(str, Enum):
    """Donation workflow status enumeration."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RecurringFrequency(str, Enum):
    """Recurring donation cadence."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class NeedPriority(str, Enum):
    """Need priority levels, stored upper-case in the ``needs`` table."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

    @property
    def rank(self) -> int:
        """Numeric weight, higher is more pressing."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    NeedPriority.LOW: 0,
    NeedPriority.MEDIUM: 1,
    NeedPriority.HIGH: 2,
    NeedPriority.URGENT: 3,
}


class NeedStatus(str, Enum):
    """Need lifecycle status."""
    ACTIVE = "active"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"


class VerificationStatus(str, Enum):
    """Orphanage verification status."""
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class ActivityType(str, Enum):
    """Admin actions recorded in the activity log."""
    ORPHANAGE_VERIFIED = "ORPHANAGE_VERIFIED"
    ORPHANAGE_REJECTED = "ORPHANAGE_REJECTED"
    USER_STATUS_CHANGED = "USER_STATUS_CHANGED"
    USER_VERIFIED = "USER_VERIFIED"
    USER_DELETED = "USER_DELETED"


class ActivityTarget(str, Enum):
    """Kinds of records an admin action can target."""
    ORPHANAGE = "ORPHANAGE"
    USER = "USER"
