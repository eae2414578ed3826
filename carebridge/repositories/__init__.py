# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Repositories package - remote table, auth and storage access.

Every public repository method returns an ``Outcome`` and never raises.
"""

from .base import BaseRepository
from .auth import AuthRepository
from .donations import DonationRepository
from .needs import NeedsRepository
from .orphanages import OrphanageRepository
from .admin import AdminRepository
from .storage import StorageRepository
from .categories import CategoryRepository

__all__ = [
    "BaseRepository",
    "AuthRepository",
    "DonationRepository",
    "NeedsRepository",
    "OrphanageRepository",
    "AdminRepository",
    "StorageRepository",
    "CategoryRepository"
]
