# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Needs repository over the ``needs`` table.
"""

from typing import List, Optional

from opentelemetry import trace

from carebridge.domain.mappers import to_need
from carebridge.domain.needs import (
    build_need_insert, build_need_update, compute_needs_statistics, sort_by_priority
)
from carebridge.models.dtos import NeedDto
from carebridge.models.entities import Need, NeedsStatistics
from carebridge.models.enums import NeedPriority, NeedStatus
from carebridge.models.outcome import Error, Outcome, Success
from carebridge.repositories.base import BaseRepository
from carebridge.repositories.categories import CategoryRepository
from carebridge.services.supabase import SupabaseService

tracer = trace.get_tracer(__name__)


class NeedsRepository(BaseRepository):
    """Manage the items orphanages ask for."""

    table_name = "needs"

    def __init__(self, supabase: SupabaseService, categories: Optional[CategoryRepository] = None):
        super().__init__(supabase)
        self.categories = categories or CategoryRepository(supabase)

    def fetch_active_needs(self) -> Outcome[List[Need]]:
        """Every active need, newest first."""
        with tracer.start_as_current_span("needs.fetch_active"):
            try:
                rows = self._select(
                    NeedDto,
                    self._table().select("*")
                    .eq("status", NeedStatus.ACTIVE.value)
                    .order("created_at", desc=True),
                )
                return Success([to_need(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch needs")

    def fetch_needs_by_orphanage(self, orphanage_id: str) -> Outcome[List[Need]]:
        """
        Active needs of one orphanage, most pressing first.

        The store sorts ``priority`` as text, so the rows are re-sorted by
        priority weight: URGENT, HIGH, MEDIUM, LOW.
        """
        with tracer.start_as_current_span("needs.fetch_by_orphanage") as span:
            span.set_attribute("orphanage.id", orphanage_id)
            try:
                rows = self._select(
                    NeedDto,
                    self._table().select("*")
                    .eq("orphanage_id", orphanage_id)
                    .eq("status", NeedStatus.ACTIVE.value)
                    .order("priority", desc=True),
                )
                return Success(sort_by_priority(to_need(row) for row in rows))
            except Exception as e:
                return self._failure(e, "Failed to fetch needs", orphanage_id=orphanage_id)

    def fetch_needs_by_category(self, category_id: str) -> Outcome[List[Need]]:
        with tracer.start_as_current_span("needs.fetch_by_category"):
            try:
                rows = self._select(
                    NeedDto,
                    self._table().select("*")
                    .eq("category_id", category_id)
                    .eq("status", NeedStatus.ACTIVE.value),
                )
                return Success([to_need(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch needs", category_id=category_id)

    def fetch_need(self, need_id: str) -> Outcome[Need]:
        with tracer.start_as_current_span("needs.fetch_one") as span:
            span.set_attribute("need.id", need_id)
            try:
                rows = self._select(NeedDto, self._table().select("*").eq("id", need_id))
                if not rows:
                    return Error("Need not found")
                return Success(to_need(rows[0]))
            except Exception as e:
                return self._failure(e, "Failed to fetch need", need_id=need_id)

    def create_need(
        self,
        orphanage_id: str,
        category_name: str,
        item_name: str,
        quantity: int,
        priority: NeedPriority,
        description: str = "",
    ) -> Outcome[Need]:
        """
        Create an active need.

        Args:
            orphanage_id: Owning orphanage
            category_name: Category display name, resolved to its id
            item_name: What is needed
            quantity: How many
            priority: How pressing
            description: Free text

        Returns:
            The stored need, read back as the newest need with the same
            orphanage and item name
        """
        with tracer.start_as_current_span("needs.create") as span:
            span.set_attributes({"orphanage.id": orphanage_id, "category.name": category_name})
            try:
                resolved = self.categories.fetch_category_id_by_name(category_name)
                if isinstance(resolved, Error):
                    return resolved
                if resolved.value is None:
                    return Error(f"Invalid category: {category_name}")

                payload = build_need_insert(
                    orphanage_id=orphanage_id,
                    category_id=resolved.value,
                    item_name=item_name,
                    quantity=quantity,
                    priority=priority,
                    description=description,
                )
                self.logger.debug(f"Creating need: {payload}")
                self._table().insert(payload).execute()

                rows = self._select(
                    NeedDto,
                    self._table().select("*")
                    .eq("orphanage_id", orphanage_id)
                    .eq("item_name", item_name)
                    .order("created_at", desc=True)
                    .limit(1),
                )
                if not rows:
                    return Error("Failed to create need")

                self.logger.info(f"Created need {rows[0].id}", extra={"orphanage_id": orphanage_id})
                return Success(to_need(rows[0]))
            except Exception as e:
                return self._failure(e, "Failed to create need", orphanage_id=orphanage_id)

    def update_need(
        self,
        need_id: str,
        item_name: Optional[str] = None,
        quantity: Optional[int] = None,
        priority: Optional[NeedPriority] = None,
        description: Optional[str] = None,
    ) -> Outcome[None]:
        """Partially update a need; nothing is sent when every field is None."""
        with tracer.start_as_current_span("needs.update") as span:
            span.set_attribute("need.id", need_id)
            try:
                self._update_by_id(
                    need_id,
                    build_need_update(
                        item_name=item_name, quantity=quantity, priority=priority, description=description
                    ),
                )
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to update need", need_id=need_id)

    def delete_need(self, need_id: str) -> Outcome[None]:
        with tracer.start_as_current_span("needs.delete") as span:
            span.set_attribute("need.id", need_id)
            try:
                self._delete_by_id(need_id)
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to delete need", need_id=need_id)

    def mark_need_fulfilled(self, need_id: str) -> Outcome[None]:
        with tracer.start_as_current_span("needs.mark_fulfilled") as span:
            span.set_attribute("need.id", need_id)
            try:
                self._update_by_id(need_id, {"status": NeedStatus.FULFILLED.value})
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to mark need as fulfilled", need_id=need_id)

    def fetch_needs_statistics(self, orphanage_id: str) -> Outcome[NeedsStatistics]:
        with tracer.start_as_current_span("needs.statistics"):
            try:
                rows = self._select(NeedDto, self._table().select("*").eq("orphanage_id", orphanage_id))
                return Success(compute_needs_statistics(rows))
            except Exception as e:
                return self._failure(e, "Failed to fetch statistics", orphanage_id=orphanage_id)
