# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Donor screens: browsing orphanages, giving, and the donor's own donations.
"""

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from carebridge.domain.filters import field_equals
from carebridge.domain.validation import (
    is_amount_input, is_quantity_input, parse_amount, parse_quantity
)
from carebridge.models.entities import (
    DonationRecord, DonationStatistics, Need, OrphanageProfile
)
from carebridge.models.enums import DonationType, RecurringFrequency
from carebridge.models.outcome import Error, Outcome, Success
from carebridge.repositories.donations import DonationRepository
from carebridge.repositories.needs import NeedsRepository
from carebridge.repositories.orphanages import OrphanageRepository
from carebridge.repositories.storage import StorageRepository
from carebridge.viewmodels.base import ListState, ListViewModel, ViewModel, completed

logger = logging.getLogger(__name__)


def _is_recurring(record: DonationRecord, value: Any) -> bool:
    return record.is_recurring == bool(value)


@dataclass(frozen=True)
class MyDonationsState(ListState[DonationRecord]):
    """Donor's donations plus their totals."""
    statistics: Optional[DonationStatistics] = None


class ViewMyDonationsViewModel(ListViewModel[MyDonationsState]):
    """
    The signed-in donor's donations.

    Filters: ``status`` (a ``DonationStatus``), ``type`` (a ``DonationType``)
    and ``recurring`` (bool).
    """

    matchers = {
        "status": field_equals("status"),
        "type": field_equals("type"),
        "recurring": _is_recurring,
    }

    def __init__(self, repository: DonationRepository, donor_id: str, max_workers: Optional[int] = None):
        super().__init__(MyDonationsState(), max_workers)
        self.repository = repository
        self.donor_id = donor_id

    def _fetch(self) -> Outcome[List[DonationRecord]]:
        return self.repository.fetch_donations_by_donor(self.donor_id)

    def load_statistics(self) -> Future:
        """Statistics are optional; a failure is logged and not shown."""
        return self._launch(self._refresh_statistics)

    def _refresh_statistics(self) -> Outcome[DonationStatistics]:
        result = self.repository.fetch_donor_statistics(self.donor_id)
        if isinstance(result, Success):
            self._update(statistics=result.value)
        else:
            logger.debug(f"Donor statistics unavailable: {result.message}")
        return result

    def refresh(self) -> List[Future]:
        return [self.load(), self.load_statistics()]

    def cancel_donation(self, donation_id: str) -> Future:
        return self._mutate(lambda: self.repository.cancel_donation(donation_id), "Donation cancelled")

    def delete_donation(self, donation_id: str) -> Future:
        """Only pending donations can be deleted; others come back as an error."""
        return self._mutate(lambda: self.repository.delete_donation(donation_id), "Donation deleted")

    def _after_mutation(self) -> None:
        self._reload_now()
        self._refresh_statistics()


@dataclass(frozen=True)
class DonorHomeState(ListState[OrphanageProfile]):
    """Orphanage browser with featured picks and the remote search query."""
    featured: Tuple[OrphanageProfile, ...] = ()
    search_query: str = ""


class DonorHomeViewModel(ListViewModel[DonorHomeState]):
    """
    Donor landing screen.

    ``search`` runs a remote search; the ``city`` and ``verified`` filters
    narrow the loaded list locally.
    """

    matchers = {
        "city": field_equals("city"),
        "verified": field_equals("verified"),
    }

    FEATURED_LIMIT = 5

    def __init__(self, repository: OrphanageRepository, max_workers: Optional[int] = None):
        super().__init__(DonorHomeState(), max_workers)
        self.repository = repository

    def _fetch(self) -> Outcome[List[OrphanageProfile]]:
        query = self._state.search_query.strip()
        if query:
            return self.repository.search_orphanages(query)
        return self.repository.fetch_orphanages()

    def search(self, query: str) -> Future:
        """Search by name, city or state; a blank query lists everything."""
        self._update(search_query=query)
        return self.load()

    def clear_search(self) -> Future:
        return self.search("")

    def load_featured(self) -> Future:
        def work() -> Outcome[List[OrphanageProfile]]:
            result = self.repository.fetch_top_rated_orphanages(limit=self.FEATURED_LIMIT)
            if isinstance(result, Success):
                self._update(featured=tuple(result.value))
            return result

        return self._launch(work)

    def refresh(self) -> List[Future]:
        return [self.load(), self.load_featured()]


@dataclass(frozen=True)
class OrphanageDetailState:
    """One orphanage with its active needs."""
    is_loading: bool = False
    orphanage: Optional[OrphanageProfile] = None
    needs: Tuple[Need, ...] = ()
    is_favorite: bool = False
    error: Optional[str] = None
    success_message: Optional[str] = None


class OrphanageDetailViewModel(ViewModel[OrphanageDetailState]):
    """Orphanage profile as seen by a donor."""

    def __init__(self, orphanages: OrphanageRepository, needs: NeedsRepository, orphanage_id: str,
                 max_workers: Optional[int] = None):
        super().__init__(OrphanageDetailState(), max_workers)
        self.orphanages = orphanages
        self.needs = needs
        self.orphanage_id = orphanage_id

    def load(self) -> Future:
        token = self._next_token("orphanage")
        self._update(is_loading=True, error=None)

        def work() -> Outcome[OrphanageProfile]:
            result = self.orphanages.fetch_orphanage(self.orphanage_id)
            if isinstance(result, Success):
                self._update_if_current("orphanage", token, is_loading=False, orphanage=result.value)
            else:
                self._update_if_current("orphanage", token, is_loading=False, error=result.message)
            return result

        return self._launch(work)

    def load_needs(self) -> Future:
        """Needs, most pressing first. A failure keeps the current list."""
        token = self._next_token("needs")

        def work() -> Outcome[List[Need]]:
            result = self.needs.fetch_needs_by_orphanage(self.orphanage_id)
            if isinstance(result, Success):
                self._update_if_current("needs", token, needs=tuple(result.value))
            return result

        return self._launch(work)

    def refresh(self) -> List[Future]:
        return [self.load(), self.load_needs()]

    def toggle_favorite(self) -> None:
        self._update_with(lambda state: {"is_favorite": not state.is_favorite})


@dataclass(frozen=True)
class DonationFormState:
    """Donation form fields as typed, plus validation and submission results."""
    donor_id: str = ""
    orphanage_id: str = ""
    orphanage_name: str = ""
    category_id: str = ""
    need_id: Optional[str] = None
    amount: str = ""
    donation_type: DonationType = DonationType.MONETARY
    item_description: str = ""
    quantity: str = ""
    note: str = ""
    is_anonymous: bool = False
    is_recurring: bool = False
    recurring_frequency: Optional[RecurringFrequency] = None
    is_loading: bool = False
    amount_error: Optional[str] = None
    quantity_error: Optional[str] = None
    error: Optional[str] = None
    success_message: Optional[str] = None
    created_donation: Optional[DonationRecord] = None
    photo_urls: Tuple[str, ...] = ()


class DonationFormViewModel(ViewModel[DonationFormState]):
    """Pledge a monetary or in-kind donation to one orphanage."""

    EDITABLE = frozenset({
        "need_id", "donation_type", "item_description", "note",
        "is_anonymous", "is_recurring", "recurring_frequency",
    })

    def __init__(
        self,
        donations: DonationRepository,
        donor_id: str,
        orphanage_id: str,
        orphanage_name: str,
        category_id: str,
        storage: Optional[StorageRepository] = None,
        max_workers: Optional[int] = None,
    ):
        self._initial = DonationFormState(
            donor_id=donor_id,
            orphanage_id=orphanage_id,
            orphanage_name=orphanage_name,
            category_id=category_id,
        )
        super().__init__(self._initial, max_workers)
        self.donations = donations
        self.storage = storage

    def set_amount(self, text: str) -> None:
        """Accept the keystroke only if it still reads as a decimal number."""
        if is_amount_input(text):
            self._update(amount=text, amount_error=None)

    def set_quantity(self, text: str) -> None:
        if is_quantity_input(text):
            self._update(quantity=text, quantity_error=None)

    def edit(self, **fields: Any) -> None:
        """
        Change plain form fields.

        Raises:
            ValueError: If a field is not directly editable
        """
        unknown = set(fields) - self.EDITABLE
        if unknown:
            raise ValueError(f"Not editable: {', '.join(sorted(unknown))}")
        self._update(**fields)

    def validate(self) -> bool:
        """Check the form and record field errors; True when it can be submitted."""
        state = self._state
        errors = {"amount_error": None, "quantity_error": None, "error": None}

        if state.donation_type == DonationType.MONETARY and parse_amount(state.amount) is None:
            errors["amount_error"] = "Please enter a valid amount"

        if state.donation_type == DonationType.IN_KIND:
            if not state.item_description.strip():
                errors["error"] = "Please describe the items you're donating"
            if parse_quantity(state.quantity) is None:
                errors["quantity_error"] = "Please enter a valid quantity"

        if state.is_recurring and state.recurring_frequency is None:
            errors["error"] = "Please select a recurring frequency"

        self._update(**errors)
        return not any(errors.values())

    def submit(self, photos: Sequence[bytes] = ()) -> Future:
        """
        Validate and create the donation, then upload any photos.

        Returns:
            Future resolving to the create outcome, or to None when the form is invalid
        """
        if not self.validate():
            return completed(None)

        state = self._state
        self._update(is_loading=True, error=None)

        def work() -> Outcome[DonationRecord]:
            result = self.donations.create_donation(
                donor_id=state.donor_id,
                orphanage_id=state.orphanage_id,
                category_id=state.category_id,
                amount=parse_amount(state.amount) or 0.0,
                donation_type=state.donation_type,
                need_id=state.need_id,
                item_description=state.item_description.strip() or None,
                quantity=parse_quantity(state.quantity),
                note=state.note.strip() or None,
                is_anonymous=state.is_anonymous,
                is_recurring=state.is_recurring,
                recurring_frequency=state.recurring_frequency if state.is_recurring else None,
            )
            if isinstance(result, Error):
                self._update(is_loading=False, error=result.message)
                return result

            changes = {
                "is_loading": False,
                "created_donation": result.value,
                "success_message": "Donation submitted successfully",
            }
            if photos and self.storage is not None:
                uploaded = self.storage.upload_donation_images(result.value.id, photos)
                if isinstance(uploaded, Success):
                    changes["photo_urls"] = tuple(uploaded.value)
                else:
                    changes["error"] = uploaded.message
            self._update(**changes)
            return result

        return self._launch(work)

    def reset(self) -> None:
        """Back to an empty form for the same donor and orphanage."""
        self._update(**{name: getattr(self._initial, name) for name in DonationFormState.__dataclass_fields__})
