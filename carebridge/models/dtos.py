# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Wire-shaped rows as returned by the remote tables.

Field names follow the table columns. Defaults mirror the column defaults so a
partial ``select`` still decodes.
"""

from typing import Optional
from pydantic import Field

from .base import BaseDto


class ProfileDto(BaseDto):
    """Row of ``profiles``."""

    id: str
    user_type: str
    full_name: str
    email: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    status: str = "active"
    verified: bool = False
    created_at: Optional[str] = None
    last_login_at: Optional[str] = None


class DonationDto(BaseDto):
    """Row of ``donations``."""

    id: str
    donor_id: str
    orphanage_id: str
    category_id: str
    need_id: Optional[str] = None
    amount: float
    currency: str = "USD"
    donation_type: str = "monetary"
    item_description: Optional[str] = None
    quantity: Optional[int] = None
    status: str = "pending"
    note: Optional[str] = None
    is_anonymous: bool = False
    is_recurring: bool = False
    recurring_frequency: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    completed_at: Optional[str] = None


class NeedDto(BaseDto):
    """Row of ``needs``."""

    id: str
    orphanage_id: str
    category_id: str
    item_name: str
    quantity: int
    quantity_fulfilled: int = 0
    priority: str
    description: Optional[str] = None
    status: str = "active"
    created_at: Optional[str] = None


class OrphanageDto(BaseDto):
    """Row of ``orphanage_profiles``."""

    id: str
    orphanage_name: str
    description: Optional[str] = None
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    postal_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[str] = None
    website: Optional[str] = None
    registration_number: Optional[str] = None
    number_of_children: int = 0
    total_donations_received: float = 0.0
    rating: float = 0.0
    rating_count: int = 0
    image_url: Optional[str] = None
    verified: bool = False
    verification_status: Optional[str] = "pending"
    created_at: Optional[str] = None


class ActivityLogDto(BaseDto):
    """Row of ``admin_activity_logs``."""

    id: str
    admin_id: str
    action_type: str
    target_type: Optional[str] = None
    target_id: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[str] = None


class CategoryDto(BaseDto):
    """Row of ``categories``."""

    id: str
    name: str
    icon_name: Optional[str] = Field(default=None)
    color: Optional[str] = None
    description: Optional[str] = None
