# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
View-state holders, one per screen.

Each holder exposes an immutable ``state`` snapshot and intent methods; remote
intents return ``concurrent.futures.Future`` objects.
"""

from .base import ViewModel, ListViewModel, ListState, completed
from .auth import (
    LoginViewModel,
    SignupViewModel,
    ForgotPasswordViewModel,
    ChangePasswordViewModel,
    ProfileViewModel
)
from .donor import (
    ViewMyDonationsViewModel,
    DonorHomeViewModel,
    OrphanageDetailViewModel,
    DonationFormViewModel
)
from .orphanage import (
    ViewAllDonationsViewModel,
    OrphanageHomeViewModel,
    UpdateNeedsViewModel
)
from .admin import (
    UserManagementViewModel,
    OrphanageVerificationViewModel,
    AdminDashboardViewModel
)

__all__ = [
    "ViewModel",
    "ListViewModel",
    "ListState",
    "completed",
    "LoginViewModel",
    "SignupViewModel",
    "ForgotPasswordViewModel",
    "ChangePasswordViewModel",
    "ProfileViewModel",
    "ViewMyDonationsViewModel",
    "DonorHomeViewModel",
    "OrphanageDetailViewModel",
    "DonationFormViewModel",
    "ViewAllDonationsViewModel",
    "OrphanageHomeViewModel",
    "UpdateNeedsViewModel",
    "UserManagementViewModel",
    "OrphanageVerificationViewModel",
    "AdminDashboardViewModel"
]
