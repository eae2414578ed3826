# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.

``FakeSupabaseClient`` keeps tables in memory and answers the fluent query
surface the repositories use. Auth and storage are ``Mock`` objects configured
per test.
"""

import os
import re
import copy
import itertools
from collections import namedtuple
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

import pytest

from carebridge.services.session import SessionStore
from carebridge.services.supabase import SupabaseConfig, SupabaseService

# Set test environment
os.environ['ENVIRONMENT'] = 'test'
os.environ['OTEL_ENABLED'] = 'false'


FakeCall = namedtuple("FakeCall", ["table", "operation", "payload", "filters"])


class FakeResponse:
    """Query response carrying ``data`` like the real client's."""

    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data


def _ilike(value: Any, pattern: str) -> bool:
    needle = pattern.strip("%").lower()
    return value is not None and needle in str(value).lower()


_OR_CLAUSE = re.compile(r'(\w+)\.(\w+)\.("(?:[^"\\]|\\.)*"|[^,]*)(?:,|$)')


def _or_clauses(expression: str) -> List[tuple]:
    """Split an ``or`` filter into (column, operator, value), unquoting quoted values."""
    clauses = []
    for column, operator, value in _OR_CLAUSE.findall(expression):
        if value.startswith('"'):
            value = re.sub(r"\\(.)", r"\1", value[1:-1])
        clauses.append((column, operator, value))
    return clauses


class FakeQuery:
    """One chained table query; ``execute`` applies it to the in-memory rows."""

    def __init__(self, client: "FakeSupabaseClient", table: str):
        self.client = client
        self.table = table
        self.operation = "select"
        self.payload: Any = None
        self.filters: List[tuple] = []
        self.orders: List[tuple] = []
        self.row_limit: Optional[int] = None

    def select(self, *columns: str) -> "FakeQuery":
        self.operation = "select"
        return self

    def insert(self, payload: Dict[str, Any]) -> "FakeQuery":
        self.operation = "insert"
        self.payload = payload
        return self

    def update(self, payload: Dict[str, Any]) -> "FakeQuery":
        self.operation = "update"
        self.payload = payload
        return self

    def delete(self) -> "FakeQuery":
        self.operation = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(("eq", column, value))
        return self

    def neq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(("neq", column, value))
        return self

    def gte(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(("gte", column, value))
        return self

    def lte(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(("lte", column, value))
        return self

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        self.filters.append(("ilike", column, pattern))
        return self

    def in_(self, column: str, values: List[Any]) -> "FakeQuery":
        self.filters.append(("in", column, list(values)))
        return self

    def or_(self, expression: str) -> "FakeQuery":
        self.filters.append(("or", expression, None))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.orders.append((column, desc))
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.row_limit = count
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        for op, column, value in self.filters:
            if op == "eq" and row.get(column) != value:
                return False
            if op == "neq" and row.get(column) == value:
                return False
            if op == "gte" and not (row.get(column) is not None and row.get(column) >= value):
                return False
            if op == "lte" and not (row.get(column) is not None and row.get(column) <= value):
                return False
            if op == "ilike" and not _ilike(row.get(column), value):
                return False
            if op == "in" and row.get(column) not in value:
                return False
            if op == "or":
                if not any(_ilike(row.get(col), pattern) for col, _, pattern in _or_clauses(column)):
                    return False
        return True

    def execute(self) -> FakeResponse:
        self.client.calls.append(FakeCall(self.table, self.operation, self.payload, list(self.filters)))
        self.client.raise_if_failing(self.table, self.operation)

        rows = self.client.tables.setdefault(self.table, [])
        if self.operation == "insert":
            row = self.client.stamp(self.table, dict(self.payload))
            rows.append(row)
            return FakeResponse([copy.deepcopy(row)])

        matching = [row for row in rows if self._matches(row)]
        if self.operation == "update":
            for row in matching:
                row.update(self.payload)
            return FakeResponse(copy.deepcopy(matching))
        if self.operation == "delete":
            self.client.tables[self.table] = [row for row in rows if row not in matching]
            return FakeResponse(copy.deepcopy(matching))

        for column, desc in reversed(self.orders):
            matching.sort(key=lambda row: (row.get(column) is None, row.get(column)), reverse=desc)
        if self.row_limit is not None:
            matching = matching[:self.row_limit]
        return FakeResponse(copy.deepcopy(matching))


class FakeSupabaseClient:
    """In-memory stand-in for ``supabase.Client``."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[FakeCall] = []
        self.failures: Dict[tuple, Exception] = {}
        self._sequence = itertools.count(1)
        self.auth = Mock()
        self.storage = Mock()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def seed(self, table: str, rows: List[Dict[str, Any]]) -> None:
        """Add rows without recording calls."""
        self.tables.setdefault(table, []).extend(self.stamp(table, dict(row)) for row in rows)

    def stamp(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        n = next(self._sequence)
        row.setdefault("id", f"{table}-{n}")
        row.setdefault("created_at", f"2024-01-01T00:{n // 60:02d}:{n % 60:02d}+00:00")
        return row

    def fail(self, table: str, operation: Optional[str] = None, error: Optional[Exception] = None) -> None:
        """Make every matching ``execute`` raise."""
        self.failures[(table, operation)] = error or Exception("connection lost")

    def raise_if_failing(self, table: str, operation: str) -> None:
        error = self.failures.get((table, operation)) or self.failures.get((table, None))
        if error is not None:
            raise error

    def calls_for(self, table: str, operation: Optional[str] = None) -> List[FakeCall]:
        return [
            call for call in self.calls
            if call.table == table and (operation is None or call.operation == operation)
        ]

    @property
    def bucket(self) -> Mock:
        """The storage bucket every ``storage.from_`` call returns."""
        return self.storage.from_.return_value


@pytest.fixture
def fake_client():
    """Empty in-memory backend."""
    return FakeSupabaseClient()


@pytest.fixture
def supabase_config():
    return SupabaseConfig(url="https://test-project.supabase.co", key="test-anon-key")


@pytest.fixture
def supabase_service(fake_client, supabase_config):
    """Service bound to the in-memory backend."""
    return SupabaseService(config=supabase_config, client=fake_client)


@pytest.fixture
def session_store():
    return SessionStore()


@pytest.fixture
def sample_profile_row():
    """Sample ``profiles`` row for testing."""
    return {
        "id": "user-1",
        "user_type": "donor",
        "full_name": "Test Donor",
        "email": "donor@example.com",
        "phone": "0991234567",
        "status": "active",
        "verified": False,
    }


@pytest.fixture
def sample_donation_row():
    """Sample ``donations`` row for testing."""
    return {
        "id": "don-1",
        "donor_id": "user-1",
        "orphanage_id": "orph-1",
        "category_id": "cat-1",
        "amount": 50.0,
        "currency": "USD",
        "donation_type": "monetary",
        "status": "pending",
        "is_anonymous": False,
        "is_recurring": False,
    }


@pytest.fixture
def sample_need_row():
    """Sample ``needs`` row for testing."""
    return {
        "id": "need-1",
        "orphanage_id": "orph-1",
        "category_id": "cat-1",
        "item_name": "Blankets",
        "quantity": 20,
        "quantity_fulfilled": 0,
        "priority": "HIGH",
        "description": "Warm blankets for winter",
        "status": "active",
    }


@pytest.fixture
def sample_orphanage_row():
    """Sample ``orphanage_profiles`` row for testing."""
    return {
        "id": "orph-1",
        "orphanage_name": "Hope Children's Home",
        "description": "Caring for children in Lilongwe",
        "address": "Area 47",
        "city": "Lilongwe",
        "state": "Central",
        "country": "Malawi",
        "contact_phone": "0881234567",
        "contact_email": "info@hope.example.org",
        "number_of_children": 40,
        "rating": 4.5,
        "rating_count": 12,
        "verified": True,
        "verification_status": "verified",
    }


@pytest.fixture
def sample_category_row():
    return {"id": "cat-1", "name": "Clothing", "icon_name": "checkroom", "color": "#4CAF50"}
