# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Donation repository over the ``donations`` table.
"""

from typing import List, Optional

from opentelemetry import trace

from carebridge.domain.donations import (
    build_donation_insert, build_status_update, compute_statistics, deletion_error, rank_top_donors
)
from carebridge.domain.mappers import to_donation
from carebridge.models.dtos import CategoryDto, DonationDto, OrphanageDto
from carebridge.models.entities import DonationRecord, DonationStatistics, DonorSummary
from carebridge.models.enums import DonationStatus, DonationType, RecurringFrequency
from carebridge.models.outcome import Error, Outcome, Success
from carebridge.repositories.base import BaseRepository

tracer = trace.get_tracer(__name__)

UNKNOWN_ORPHANAGE = "Unknown Orphanage"
UNKNOWN_CATEGORY = "Unknown Category"


class DonationRepository(BaseRepository):
    """Create, query and progress donations."""

    table_name = "donations"

    def create_donation(
        self,
        donor_id: str,
        orphanage_id: str,
        category_id: str,
        amount: float,
        donation_type: DonationType = DonationType.MONETARY,
        need_id: Optional[str] = None,
        item_description: Optional[str] = None,
        quantity: Optional[int] = None,
        note: Optional[str] = None,
        is_anonymous: bool = False,
        is_recurring: bool = False,
        recurring_frequency: Optional[RecurringFrequency] = None,
    ) -> Outcome[DonationRecord]:
        """
        Insert a pending donation and return it as stored.

        The new row is read back as the most recent donation for the same donor
        and orphanage. Two identical donations created at the same moment may
        read back each other's row.
        """
        with tracer.start_as_current_span("donations.create") as span:
            span.set_attributes({"donor.id": donor_id, "orphanage.id": orphanage_id})
            try:
                payload = build_donation_insert(
                    donor_id=donor_id,
                    orphanage_id=orphanage_id,
                    category_id=category_id,
                    amount=amount,
                    donation_type=donation_type,
                    need_id=need_id,
                    item_description=item_description,
                    quantity=quantity,
                    note=note,
                    is_anonymous=is_anonymous,
                    is_recurring=is_recurring,
                    recurring_frequency=recurring_frequency,
                )
                self._table().insert(payload).execute()

                rows = self._select(
                    DonationDto,
                    self._table().select("*")
                    .eq("donor_id", donor_id)
                    .eq("orphanage_id", orphanage_id)
                    .order("created_at", desc=True)
                    .limit(1),
                )
                if not rows:
                    return Error("Failed to create donation")

                self.logger.info(f"Created donation {rows[0].id}", extra={"donor_id": donor_id})
                return Success(to_donation(rows[0]))
            except Exception as e:
                return self._failure(e, "Failed to create donation", donor_id=donor_id)

    def fetch_donations_by_donor(self, donor_id: str) -> Outcome[List[DonationRecord]]:
        """Donor's donations, newest first, with orphanage and category names."""
        with tracer.start_as_current_span("donations.fetch_by_donor") as span:
            span.set_attribute("donor.id", donor_id)
            try:
                rows = self._select(
                    DonationDto,
                    self._table().select("*").eq("donor_id", donor_id).order("created_at", desc=True),
                )
                return Success([
                    to_donation(
                        row,
                        orphanage_name=self._orphanage_name(row.orphanage_id),
                        category_name=self._category_name(row.category_id),
                    )
                    for row in rows
                ])
            except Exception as e:
                return self._failure(e, "Failed to fetch donations", donor_id=donor_id)

    def _orphanage_name(self, orphanage_id: str) -> str:
        try:
            rows = self._select(
                OrphanageDto,
                self._table("orphanage_profiles").select("*").eq("id", orphanage_id),
            )
        except Exception as e:
            self.logger.warning(f"Orphanage name lookup failed for {orphanage_id}: {e}")
            return UNKNOWN_ORPHANAGE
        return rows[0].orphanage_name if rows else UNKNOWN_ORPHANAGE

    def _category_name(self, category_id: str) -> str:
        try:
            rows = self._select(
                CategoryDto,
                self._table("categories").select("*").eq("id", category_id),
            )
        except Exception as e:
            self.logger.warning(f"Category name lookup failed for {category_id}: {e}")
            return UNKNOWN_CATEGORY
        return rows[0].name if rows else UNKNOWN_CATEGORY

    def fetch_donations_by_orphanage(self, orphanage_id: str) -> Outcome[List[DonationRecord]]:
        """Donations received by an orphanage, newest first."""
        with tracer.start_as_current_span("donations.fetch_by_orphanage") as span:
            span.set_attribute("orphanage.id", orphanage_id)
            try:
                rows = self._select(
                    DonationDto,
                    self._table().select("*").eq("orphanage_id", orphanage_id).order("created_at", desc=True),
                )
                return Success([to_donation(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch donations", orphanage_id=orphanage_id)

    def fetch_donation(self, donation_id: str) -> Outcome[DonationRecord]:
        """Get one donation by id."""
        with tracer.start_as_current_span("donations.fetch_one") as span:
            span.set_attribute("donation.id", donation_id)
            try:
                rows = self._select(DonationDto, self._table().select("*").eq("id", donation_id))
                if not rows:
                    return Error("Donation not found")
                return Success(to_donation(rows[0]))
            except Exception as e:
                return self._failure(e, "Failed to fetch donation", donation_id=donation_id)

    def fetch_donations_by_status(
        self,
        status: DonationStatus,
        donor_id: Optional[str] = None,
        orphanage_id: Optional[str] = None,
    ) -> Outcome[List[DonationRecord]]:
        """Donations in one status, optionally scoped to a donor or orphanage."""
        with tracer.start_as_current_span("donations.fetch_by_status") as span:
            span.set_attribute("donation.status", DonationStatus(status).value)
            try:
                query = self._table().select("*").eq("status", DonationStatus(status).value)
                if donor_id is not None:
                    query = query.eq("donor_id", donor_id)
                if orphanage_id is not None:
                    query = query.eq("orphanage_id", orphanage_id)
                rows = self._select(DonationDto, query.order("created_at", desc=True))
                return Success([to_donation(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch donations by status")

    def fetch_pending_donations(self, donor_id: str) -> Outcome[List[DonationRecord]]:
        return self.fetch_donations_by_status(DonationStatus.PENDING, donor_id=donor_id)

    def fetch_completed_donations(self, donor_id: str) -> Outcome[List[DonationRecord]]:
        return self.fetch_donations_by_status(DonationStatus.COMPLETED, donor_id=donor_id)

    def update_donation_status(self, donation_id: str, status: DonationStatus) -> Outcome[None]:
        """
        Set a donation's status.

        Any status may be written from any other; the workflow order in
        ``carebridge.domain.donations`` is not enforced here.
        """
        with tracer.start_as_current_span("donations.update_status") as span:
            span.set_attributes({"donation.id": donation_id, "donation.status": DonationStatus(status).value})
            try:
                self._update_by_id(donation_id, build_status_update(status))
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to update donation status", donation_id=donation_id)

    def confirm_donation(self, donation_id: str) -> Outcome[None]:
        return self.update_donation_status(donation_id, DonationStatus.CONFIRMED)

    def complete_donation(self, donation_id: str) -> Outcome[None]:
        return self.update_donation_status(donation_id, DonationStatus.COMPLETED)

    def cancel_donation(self, donation_id: str) -> Outcome[None]:
        return self.update_donation_status(donation_id, DonationStatus.CANCELLED)

    def fetch_donor_statistics(self, donor_id: str) -> Outcome[DonationStatistics]:
        with tracer.start_as_current_span("donations.donor_statistics"):
            try:
                rows = self._select(DonationDto, self._table().select("*").eq("donor_id", donor_id))
                return Success(compute_statistics(rows))
            except Exception as e:
                return self._failure(e, "Failed to fetch statistics", donor_id=donor_id)

    def fetch_orphanage_statistics(self, orphanage_id: str) -> Outcome[DonationStatistics]:
        with tracer.start_as_current_span("donations.orphanage_statistics"):
            try:
                rows = self._select(DonationDto, self._table().select("*").eq("orphanage_id", orphanage_id))
                return Success(compute_statistics(rows))
            except Exception as e:
                return self._failure(e, "Failed to fetch statistics", orphanage_id=orphanage_id)

    def fetch_recent_donations(
        self,
        donor_id: Optional[str] = None,
        orphanage_id: Optional[str] = None,
        limit: int = 10,
    ) -> Outcome[List[DonationRecord]]:
        """Newest donations, optionally scoped to a donor or orphanage."""
        with tracer.start_as_current_span("donations.fetch_recent"):
            try:
                query = self._table().select("*")
                if donor_id is not None:
                    query = query.eq("donor_id", donor_id)
                if orphanage_id is not None:
                    query = query.eq("orphanage_id", orphanage_id)
                rows = self._select(DonationDto, query.order("created_at", desc=True).limit(limit))
                return Success([to_donation(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch recent donations")

    def fetch_recurring_donations(self, donor_id: str) -> Outcome[List[DonationRecord]]:
        """Donor's completed recurring donations."""
        with tracer.start_as_current_span("donations.fetch_recurring"):
            try:
                rows = self._select(
                    DonationDto,
                    self._table().select("*")
                    .eq("donor_id", donor_id)
                    .eq("is_recurring", True)
                    .eq("status", DonationStatus.COMPLETED.value)
                    .order("created_at", desc=True),
                )
                return Success([to_donation(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch recurring donations", donor_id=donor_id)

    def fetch_donations_by_category(
        self,
        category_id: str,
        donor_id: Optional[str] = None,
        orphanage_id: Optional[str] = None,
    ) -> Outcome[List[DonationRecord]]:
        with tracer.start_as_current_span("donations.fetch_by_category"):
            try:
                query = self._table().select("*").eq("category_id", category_id)
                if donor_id is not None:
                    query = query.eq("donor_id", donor_id)
                if orphanage_id is not None:
                    query = query.eq("orphanage_id", orphanage_id)
                rows = self._select(DonationDto, query.order("created_at", desc=True))
                return Success([to_donation(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch donations by category", category_id=category_id)

    def fetch_top_donors(self, orphanage_id: str, limit: int = 10) -> Outcome[List[DonorSummary]]:
        """Donors with the largest completed totals for an orphanage."""
        with tracer.start_as_current_span("donations.top_donors"):
            try:
                rows = self._select(
                    DonationDto,
                    self._table().select("*")
                    .eq("orphanage_id", orphanage_id)
                    .eq("status", DonationStatus.COMPLETED.value),
                )
                return Success(rank_top_donors(rows, limit=limit))
            except Exception as e:
                return self._failure(e, "Failed to fetch top donors", orphanage_id=orphanage_id)

    def delete_donation(self, donation_id: str) -> Outcome[None]:
        """
        Delete a pending donation.

        The donation is fetched first; anything past pending is refused before
        a delete is sent.
        """
        with tracer.start_as_current_span("donations.delete") as span:
            span.set_attribute("donation.id", donation_id)
            try:
                found = self.fetch_donation(donation_id)
                if isinstance(found, Error):
                    return found

                refusal = deletion_error(found.value)
                if refusal:
                    self.logger.warning(
                        f"Refused to delete donation {donation_id}",
                        extra={"status": found.value.status.value}
                    )
                    return Error(refusal)

                self._delete_by_id(donation_id)
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to delete donation", donation_id=donation_id)
