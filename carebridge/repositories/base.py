# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Shared plumbing for table-backed repositories.
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

from carebridge.models.base import BaseDto
from carebridge.models.outcome import Error, error_message
from carebridge.services.supabase import SupabaseService

D = TypeVar("D", bound=BaseDto)


def quote_filter_value(value: str) -> str:
    """
    Quote a value for a PostgREST logical filter such as ``or=(...)``.

    Commas and parentheses separate clauses there, so free text is wrapped in
    double quotes with backslashes and quotes escaped.
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class BaseRepository:
    """
    Base class for repositories over one primary table.

    Subclasses wrap each remote call in ``try``/``except`` and turn every
    failure into an ``Error`` through ``_failure``; no exception leaves a
    repository method.
    """

    table_name: str = ""

    def __init__(self, supabase: SupabaseService):
        self.supabase = supabase
        self.logger = logging.getLogger(type(self).__module__)

    def _table(self, name: Optional[str] = None) -> Any:
        return self.supabase.table(name or self.table_name)

    @staticmethod
    def _decode(dto_cls: Type[D], response: Any) -> List[D]:
        """Decode the rows of a query response."""
        return [dto_cls.model_validate(row) for row in (response.data or [])]

    def _select(self, dto_cls: Type[D], query: Any) -> List[D]:
        """Execute a select query and decode its rows."""
        rows = self._decode(dto_cls, query.execute())
        self.logger.debug(f"Fetched {len(rows)} rows from {self.table_name}")
        return rows

    def _update_by_id(self, record_id: str, updates: Dict[str, Any], table: Optional[str] = None) -> bool:
        """
        Update one row by id.

        Returns:
            False without contacting the store when ``updates`` is empty
        """
        if not updates:
            self.logger.debug(f"No updates to apply for {record_id} in {table or self.table_name}")
            return False
        self._table(table).update(updates).eq("id", record_id).execute()
        self.logger.info(f"Updated {record_id} in {table or self.table_name}", extra={"fields": sorted(updates)})
        return True

    def _delete_by_id(self, record_id: str, table: Optional[str] = None) -> None:
        self._table(table).delete().eq("id", record_id).execute()
        self.logger.info(f"Deleted {record_id} from {table or self.table_name}")

    def _failure(self, exc: Exception, fallback: str, **context: Any) -> Error:
        """Log a caught failure and convert it to an ``Error`` outcome."""
        self.logger.error(f"{fallback}: {exc}", extra=context)
        return Error(error_message(exc, fallback))
