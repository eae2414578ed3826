# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
CareBridge composition root.

Builds the backend handle, the session store and every repository once, and
creates view-state holders for screens. Holders for the signed-in user's own
data take the user id from the session.
"""

import logging
from typing import List, Optional, TypeVar

from carebridge.repositories import (
    AdminRepository, AuthRepository, CategoryRepository, DonationRepository,
    NeedsRepository, OrphanageRepository, StorageRepository
)
from carebridge.services.session import SessionStore
from carebridge.services.supabase import SupabaseConfig, SupabaseService
from carebridge.viewmodels import (
    AdminDashboardViewModel, ChangePasswordViewModel, DonationFormViewModel,
    DonorHomeViewModel, ForgotPasswordViewModel, LoginViewModel,
    OrphanageDetailViewModel, OrphanageHomeViewModel, OrphanageVerificationViewModel,
    ProfileViewModel, SignupViewModel, UpdateNeedsViewModel, UserManagementViewModel,
    ViewAllDonationsViewModel, ViewModel, ViewMyDonationsViewModel
)

logger = logging.getLogger(__name__)

V = TypeVar("V", bound=ViewModel)


class AppContainer:
    """Owns the long-lived services and the view-state holders it hands out."""

    def __init__(self, supabase: Optional[SupabaseService] = None, session: Optional[SessionStore] = None):
        """
        Initialize the container.

        Args:
            supabase: Backend handle; built from the environment when omitted
            session: Session store; a fresh one when omitted

        Raises:
            SupabaseConfigurationError: If the backend URL or key is missing
        """
        if supabase is None:
            config = SupabaseConfig.from_env()
            config.validate()
            supabase = SupabaseService(config)
        self.supabase = supabase
        self.session = session or SessionStore()

        self.auth = AuthRepository(supabase)
        self.categories = CategoryRepository(supabase)
        self.donations = DonationRepository(supabase)
        self.needs = NeedsRepository(supabase, self.categories)
        self.orphanages = OrphanageRepository(supabase)
        self.admin = AdminRepository(supabase)
        self.storage = StorageRepository(supabase)

        self._holders: List[ViewModel] = []
        logger.info("Application container initialized")

    def _track(self, holder: V) -> V:
        self._holders.append(holder)
        holder.on_close(lambda: self._forget(holder))
        return holder

    def _forget(self, holder: ViewModel) -> None:
        if holder in self._holders:
            self._holders.remove(holder)

    # Account screens

    def login(self) -> LoginViewModel:
        return self._track(LoginViewModel(self.auth, self.session))

    def signup(self) -> SignupViewModel:
        return self._track(SignupViewModel(self.auth, self.session))

    def forgot_password(self) -> ForgotPasswordViewModel:
        return self._track(ForgotPasswordViewModel(self.auth))

    def change_password(self) -> ChangePasswordViewModel:
        return self._track(ChangePasswordViewModel(self.auth, self.session))

    def profile(self) -> ProfileViewModel:
        return self._track(ProfileViewModel(self.auth, self.session))

    # Donor screens

    def donor_home(self) -> DonorHomeViewModel:
        return self._track(DonorHomeViewModel(self.orphanages))

    def orphanage_detail(self, orphanage_id: str) -> OrphanageDetailViewModel:
        return self._track(OrphanageDetailViewModel(self.orphanages, self.needs, orphanage_id))

    def donation_form(self, orphanage_id: str, orphanage_name: str, category_id: str) -> DonationFormViewModel:
        """
        Raises:
            NotSignedInError: If nobody is signed in
        """
        donor = self.session.require()
        return self._track(DonationFormViewModel(
            self.donations, donor.user_id, orphanage_id, orphanage_name, category_id, storage=self.storage
        ))

    def my_donations(self) -> ViewMyDonationsViewModel:
        return self._track(ViewMyDonationsViewModel(self.donations, self.session.require().user_id))

    # Orphanage screens

    def orphanage_home(self) -> OrphanageHomeViewModel:
        return self._track(OrphanageHomeViewModel(self.needs, self.donations, self.session.require().user_id))

    def incoming_donations(self) -> ViewAllDonationsViewModel:
        return self._track(ViewAllDonationsViewModel(self.donations, self.session.require().user_id))

    def update_needs(self) -> UpdateNeedsViewModel:
        return self._track(UpdateNeedsViewModel(self.needs, self.session.require().user_id))

    # Admin screens

    def user_management(self) -> UserManagementViewModel:
        return self._track(UserManagementViewModel(self.admin, self.session.require().user_id))

    def orphanage_verification(self) -> OrphanageVerificationViewModel:
        return self._track(OrphanageVerificationViewModel(self.admin, self.session.require().user_id))

    def admin_dashboard(self) -> AdminDashboardViewModel:
        return self._track(AdminDashboardViewModel(self.admin))

    def close(self) -> None:
        """Close every holder handed out and release the backend client."""
        for holder in list(self._holders):
            holder.close()
        self._holders.clear()
        self.supabase.close_connection()
        logger.info("Application container closed")
