# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Orphanage screens: incoming donations, the home dashboard and needs upkeep.
"""

import logging
from concurrent.futures import Future
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Tuple

from carebridge.domain.filters import field_equals, text_contains
from carebridge.domain.validation import is_quantity_input, parse_quantity, validate_required
from carebridge.models.entities import (
    DonationRecord, DonationStatistics, DonorSummary, Need, NeedsStatistics
)
from carebridge.models.enums import NeedPriority
from carebridge.models.outcome import Outcome, Success
from carebridge.repositories.donations import DonationRepository
from carebridge.repositories.needs import NeedsRepository
from carebridge.viewmodels.base import ListState, ListViewModel, ViewModel, completed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IncomingDonationsState(ListState[DonationRecord]):
    """Donations received, with totals and the top donors."""
    statistics: Optional[DonationStatistics] = None
    top_donors: Tuple[DonorSummary, ...] = ()


class ViewAllDonationsViewModel(ListViewModel[IncomingDonationsState]):
    """
    Donations received by one orphanage.

    Filters: ``status`` (a ``DonationStatus``) and ``type`` (a ``DonationType``).
    """

    matchers = {
        "status": field_equals("status"),
        "type": field_equals("type"),
    }

    TOP_DONORS_LIMIT = 10

    def __init__(self, repository: DonationRepository, orphanage_id: str, max_workers: Optional[int] = None):
        super().__init__(IncomingDonationsState(), max_workers)
        self.repository = repository
        self.orphanage_id = orphanage_id

    def _fetch(self) -> Outcome[List[DonationRecord]]:
        return self.repository.fetch_donations_by_orphanage(self.orphanage_id)

    def load_statistics(self) -> Future:
        return self._launch(self._refresh_statistics)

    def load_top_donors(self) -> Future:
        return self._launch(self._refresh_top_donors)

    def _refresh_statistics(self) -> Outcome[DonationStatistics]:
        result = self.repository.fetch_orphanage_statistics(self.orphanage_id)
        if isinstance(result, Success):
            self._update(statistics=result.value)
        return result

    def _refresh_top_donors(self) -> Outcome[List[DonorSummary]]:
        result = self.repository.fetch_top_donors(self.orphanage_id, limit=self.TOP_DONORS_LIMIT)
        if isinstance(result, Success):
            self._update(top_donors=tuple(result.value))
        return result

    def refresh(self) -> List[Future]:
        return [self.load(), self.load_statistics(), self.load_top_donors()]

    def confirm_donation(self, donation_id: str) -> Future:
        return self._mutate(lambda: self.repository.confirm_donation(donation_id), "Donation confirmed")

    def complete_donation(self, donation_id: str) -> Future:
        return self._mutate(lambda: self.repository.complete_donation(donation_id), "Donation completed")

    def cancel_donation(self, donation_id: str) -> Future:
        return self._mutate(lambda: self.repository.cancel_donation(donation_id), "Donation cancelled")

    def _after_mutation(self) -> None:
        self._reload_now()
        self._refresh_statistics()
        self._refresh_top_donors()


@dataclass(frozen=True)
class OrphanageHomeState:
    """Orphanage dashboard snapshot."""
    is_loading: bool = False
    needs: Tuple[Need, ...] = ()
    recent_donations: Tuple[DonationRecord, ...] = ()
    needs_statistics: Optional[NeedsStatistics] = None
    donation_statistics: Optional[DonationStatistics] = None
    error: Optional[str] = None
    success_message: Optional[str] = None


class OrphanageHomeViewModel(ViewModel[OrphanageHomeState]):
    """
    Orphanage landing screen.

    Only the needs list reports errors; recent donations and both statistics
    panels keep their last value when a fetch fails.
    """

    RECENT_DONATIONS_LIMIT = 5

    def __init__(self, needs: NeedsRepository, donations: DonationRepository, orphanage_id: str,
                 max_workers: Optional[int] = None):
        super().__init__(OrphanageHomeState(), max_workers)
        self.needs = needs
        self.donations = donations
        self.orphanage_id = orphanage_id

    def load(self) -> Future:
        token = self._next_token("needs")
        self._update(is_loading=True, error=None)

        def work() -> Outcome[List[Need]]:
            result = self.needs.fetch_needs_by_orphanage(self.orphanage_id)
            if isinstance(result, Success):
                self._update_if_current("needs", token, is_loading=False, needs=tuple(result.value))
            else:
                self._update_if_current("needs", token, is_loading=False, error=result.message)
            return result

        return self._launch(work)

    def _load_optional(self, fetch, field_name: str, convert=lambda value: value) -> Future:
        def work() -> Outcome[Any]:
            result = fetch()
            if isinstance(result, Success):
                self._update(**{field_name: convert(result.value)})
            else:
                logger.debug(f"{field_name} unavailable: {result.message}")
            return result

        return self._launch(work)

    def refresh(self) -> List[Future]:
        """Reload every panel."""
        return [
            self.load(),
            self._load_optional(
                lambda: self.donations.fetch_recent_donations(
                    orphanage_id=self.orphanage_id, limit=self.RECENT_DONATIONS_LIMIT
                ),
                "recent_donations",
                tuple,
            ),
            self._load_optional(
                lambda: self.needs.fetch_needs_statistics(self.orphanage_id), "needs_statistics"
            ),
            self._load_optional(
                lambda: self.donations.fetch_orphanage_statistics(self.orphanage_id), "donation_statistics"
            ),
        ]


@dataclass(frozen=True)
class NeedForm:
    """Add/edit need dialog fields."""
    category: str = ""
    item_name: str = ""
    quantity: str = ""
    priority: NeedPriority = NeedPriority.MEDIUM
    description: str = ""
    category_error: Optional[str] = None
    item_name_error: Optional[str] = None
    quantity_error: Optional[str] = None


@dataclass(frozen=True)
class UpdateNeedsState(ListState[Need]):
    """Needs list plus the add/edit dialog."""
    form: NeedForm = field(default_factory=NeedForm)
    is_adding: bool = False
    editing_need_id: Optional[str] = None


def _priority_matches(need: Need, value: Any) -> bool:
    return need.priority == NeedPriority(value)


class UpdateNeedsViewModel(ListViewModel[UpdateNeedsState]):
    """
    Maintain an orphanage's needs.

    Filters: ``priority`` (a ``NeedPriority``) and ``search`` over item name
    and description.
    """

    matchers = {
        "priority": _priority_matches,
        "search": text_contains("item_name", "description"),
    }

    def __init__(self, repository: NeedsRepository, orphanage_id: str, max_workers: Optional[int] = None):
        super().__init__(UpdateNeedsState(), max_workers)
        self.repository = repository
        self.orphanage_id = orphanage_id

    def _fetch(self) -> Outcome[List[Need]]:
        return self.repository.fetch_needs_by_orphanage(self.orphanage_id)

    def show_add_dialog(self) -> None:
        self._update(is_adding=True, editing_need_id=None, form=NeedForm())

    def show_edit_dialog(self, need: Need, category_name: str = "") -> None:
        self._update(
            is_adding=False,
            editing_need_id=need.id,
            form=NeedForm(
                category=category_name,
                item_name=need.item_name,
                quantity=str(need.quantity),
                priority=need.priority,
                description=need.description,
            ),
        )

    def hide_dialog(self) -> None:
        self._update(is_adding=False, editing_need_id=None, form=NeedForm())

    def edit_form(self, **fields: Any) -> None:
        """
        Change dialog fields; editing a field clears its error.

        A quantity that is not a whole number is ignored.
        """
        if "quantity" in fields and not is_quantity_input(fields["quantity"]):
            fields.pop("quantity")

        def compute(state: UpdateNeedsState) -> dict:
            cleared = {f"{name}_error": None for name in fields if f"{name}_error" in NeedForm.__dataclass_fields__}
            return {"form": replace(state.form, **fields, **cleared)}

        self._update_with(compute)

    def _validate_form(self, require_category: bool) -> bool:
        form = self._state.form
        errors = {
            "category_error": validate_required(form.category, "Category") if require_category else None,
            "item_name_error": validate_required(form.item_name, "Item name"),
            "quantity_error": None if parse_quantity(form.quantity) else "Please enter a valid quantity",
        }
        self._update(form=replace(form, **errors))
        return not any(errors.values())

    def create_need(self) -> Future:
        """Submit the add dialog."""
        if not self._validate_form(require_category=True):
            return completed(None)

        form = self._state.form

        def call() -> Outcome[Need]:
            result = self.repository.create_need(
                orphanage_id=self.orphanage_id,
                category_name=form.category,
                item_name=form.item_name.strip(),
                quantity=parse_quantity(form.quantity),
                priority=form.priority,
                description=form.description,
            )
            if isinstance(result, Success):
                self.hide_dialog()
            return result

        return self._mutate(call, "Need created successfully")

    def update_need(self) -> Future:
        """Submit the edit dialog."""
        need_id = self._state.editing_need_id
        if need_id is None or not self._validate_form(require_category=False):
            return completed(None)

        form = self._state.form

        def call() -> Outcome[None]:
            result = self.repository.update_need(
                need_id,
                item_name=form.item_name.strip(),
                quantity=parse_quantity(form.quantity),
                priority=form.priority,
                description=form.description,
            )
            if isinstance(result, Success):
                self.hide_dialog()
            return result

        return self._mutate(call, "Need updated successfully")

    def delete_need(self, need_id: str) -> Future:
        return self._mutate(lambda: self.repository.delete_need(need_id), "Need deleted successfully")

    def mark_need_fulfilled(self, need_id: str) -> Future:
        return self._mutate(lambda: self.repository.mark_need_fulfilled(need_id), "Need marked as fulfilled")
