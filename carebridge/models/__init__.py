# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - wire rows, domain records and result types.
"""

# Base models
from .base import BaseDto, BaseRecord

# Enumerations
from .enums import (
    UserRole,
    UserStatus,
    DonationType,
    DonationStatus,
    RecurringFrequency,
    NeedPriority,
    NeedStatus,
    VerificationStatus,
    ActivityType,
    ActivityTarget
)

# Wire rows
from .dtos import (
    ProfileDto,
    DonationDto,
    NeedDto,
    OrphanageDto,
    ActivityLogDto,
    CategoryDto
)

# Domain records
from .entities import (
    UserAccount,
    DonationRecord,
    Need,
    ContactInfo,
    OrphanageProfile,
    ActivityLogEntry,
    Category,
    OrphanageVerificationItem,
    DonationStatistics,
    DonorSummary,
    NeedsStatistics,
    DashboardStats,
    AuthenticatedUser
)

# Result type
from .outcome import Success, Error, Outcome, error_message

__all__ = [
    # Base models
    "BaseDto",
    "BaseRecord",

    # Enumerations
    "UserRole",
    "UserStatus",
    "DonationType",
    "DonationStatus",
    "RecurringFrequency",
    "NeedPriority",
    "NeedStatus",
    "VerificationStatus",
    "ActivityType",
    "ActivityTarget",

    # Wire rows
    "ProfileDto",
    "DonationDto",
    "NeedDto",
    "OrphanageDto",
    "ActivityLogDto",
    "CategoryDto",

    # Domain records
    "UserAccount",
    "DonationRecord",
    "Need",
    "ContactInfo",
    "OrphanageProfile",
    "ActivityLogEntry",
    "Category",
    "OrphanageVerificationItem",
    "DonationStatistics",
    "DonorSummary",
    "NeedsStatistics",
    "DashboardStats",
    "AuthenticatedUser",

    # Result type
    "Success",
    "Error",
    "Outcome",
    "error_message"
]
