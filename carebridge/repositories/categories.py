# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Category lookups over the ``categories`` table.
"""

from typing import List, Optional

from opentelemetry import trace

from carebridge.domain.mappers import to_category
from carebridge.models.dtos import CategoryDto
from carebridge.models.entities import Category
from carebridge.models.outcome import Outcome, Success
from carebridge.repositories.base import BaseRepository

tracer = trace.get_tracer(__name__)


class CategoryRepository(BaseRepository):
    """Read-only access to donation and need categories."""

    table_name = "categories"

    def fetch_categories(self) -> Outcome[List[Category]]:
        """All categories, by name."""
        with tracer.start_as_current_span("categories.fetch_all"):
            try:
                rows = self._select(CategoryDto, self._table().select("*").order("name"))
                return Success([to_category(row) for row in rows])
            except Exception as e:
                return self._failure(e, "Failed to fetch categories")

    def fetch_category_id_by_name(self, name: str) -> Outcome[Optional[str]]:
        """
        Resolve a category name to its id.

        Returns:
            ``Success(None)`` when no category has that name
        """
        with tracer.start_as_current_span("categories.fetch_id_by_name") as span:
            span.set_attribute("category.name", name)
            try:
                rows = self._select(CategoryDto, self._table().select("*").eq("name", name))
                return Success(rows[0].id if rows else None)
            except Exception as e:
                return self._failure(e, "Failed to get category ID", category=name)
