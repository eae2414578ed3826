# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Orphanage repository over the ``orphanage_profiles`` table.
"""

from typing import Any, Dict, List, Optional

from opentelemetry import trace

from carebridge.domain.mappers import to_orphanage
from carebridge.models.dtos import NeedDto, OrphanageDto
from carebridge.models.entities import OrphanageProfile
from carebridge.models.enums import NeedPriority, NeedStatus
from carebridge.models.outcome import Error, Outcome, Success
from carebridge.repositories.base import BaseRepository, quote_filter_value

tracer = trace.get_tracer(__name__)

TOP_RATED_THRESHOLD = 4.0


class OrphanageRepository(BaseRepository):
    """Browse, search and edit orphanage profiles."""

    table_name = "orphanage_profiles"

    def fetch_orphanages(self) -> Outcome[List[OrphanageProfile]]:
        with tracer.start_as_current_span("orphanages.fetch_all"):
            try:
                rows = self._select(OrphanageDto, self._table().select("*"))
                return Success([to_orphanage(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch orphanages")

    def fetch_orphanage(self, orphanage_id: str) -> Outcome[OrphanageProfile]:
        with tracer.start_as_current_span("orphanages.fetch_one") as span:
            span.set_attribute("orphanage.id", orphanage_id)
            try:
                rows = self._select(OrphanageDto, self._table().select("*").eq("id", orphanage_id))
                if not rows:
                    return Error("Orphanage not found")
                return Success(to_orphanage(rows[0]))
            except Exception as e:
                return self._failure(e, "Failed to fetch orphanage", orphanage_id=orphanage_id)

    def search_orphanages(self, query: str) -> Outcome[List[OrphanageProfile]]:
        """Case-insensitive substring search over name, city and state."""
        with tracer.start_as_current_span("orphanages.search") as span:
            span.set_attribute("search.query", query)
            try:
                pattern = quote_filter_value(f"%{query}%")
                rows = self._select(
                    OrphanageDto,
                    self._table().select("*").or_(
                        f"orphanage_name.ilike.{pattern},city.ilike.{pattern},state.ilike.{pattern}"
                    ),
                )
                return Success([to_orphanage(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Search failed", query=query)

    def fetch_orphanages_by_city(self, city: str) -> Outcome[List[OrphanageProfile]]:
        with tracer.start_as_current_span("orphanages.fetch_by_city"):
            try:
                rows = self._select(OrphanageDto, self._table().select("*").eq("city", city))
                return Success([to_orphanage(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch orphanages", city=city)

    def fetch_verified_orphanages(self) -> Outcome[List[OrphanageProfile]]:
        with tracer.start_as_current_span("orphanages.fetch_verified"):
            try:
                rows = self._select(OrphanageDto, self._table().select("*").eq("verified", True))
                return Success([to_orphanage(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch verified orphanages")

    def fetch_top_rated_orphanages(self, limit: int = 10) -> Outcome[List[OrphanageProfile]]:
        """Orphanages rated 4.0 or better, best first."""
        with tracer.start_as_current_span("orphanages.fetch_top_rated"):
            try:
                rows = self._select(
                    OrphanageDto,
                    self._table().select("*")
                    .gte("rating", TOP_RATED_THRESHOLD)
                    .order("rating", desc=True)
                    .limit(limit),
                )
                return Success([to_orphanage(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch top rated orphanages")

    def fetch_orphanages_with_urgent_needs(self) -> Outcome[List[OrphanageProfile]]:
        """Orphanages that have at least one active URGENT need."""
        with tracer.start_as_current_span("orphanages.fetch_with_urgent_needs"):
            try:
                needs = self._select(
                    NeedDto,
                    self._table("needs").select("*")
                    .eq("priority", NeedPriority.URGENT.value)
                    .eq("status", NeedStatus.ACTIVE.value),
                )
                orphanage_ids = list(dict.fromkeys(need.orphanage_id for need in needs))
                if not orphanage_ids:
                    return Success([])

                rows = self._select(OrphanageDto, self._table().select("*").in_("id", orphanage_ids))
                return Success([to_orphanage(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch orphanages with urgent needs")

    def update_orphanage_profile(
        self,
        orphanage_id: str,
        orphanage_name: Optional[str] = None,
        description: Optional[str] = None,
        address: Optional[str] = None,
        city: Optional[str] = None,
        state: Optional[str] = None,
        contact_phone: Optional[str] = None,
        contact_email: Optional[str] = None,
        website: Optional[str] = None,
        number_of_children: Optional[int] = None,
        image_url: Optional[str] = None,
    ) -> Outcome[None]:
        """Partially update a profile; nothing is sent when every field is None."""
        with tracer.start_as_current_span("orphanages.update_profile") as span:
            span.set_attribute("orphanage.id", orphanage_id)
            try:
                fields: Dict[str, Any] = {
                    "orphanage_name": orphanage_name,
                    "description": description,
                    "address": address,
                    "city": city,
                    "state": state,
                    "contact_phone": contact_phone,
                    "contact_email": contact_email,
                    "website": website,
                    "number_of_children": number_of_children,
                    "image_url": image_url,
                }
                self._update_by_id(orphanage_id, {k: v for k, v in fields.items() if v is not None})
                return Success(None)
            except Exception as e:
                return self._failure(e, "Failed to update profile", orphanage_id=orphanage_id)
