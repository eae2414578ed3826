# SPDX-License-Identifier: Apache-2.0

"""
In-memory list filtering for view state.

A screen declares one matcher per filter dimension. ``apply_filters`` keeps the
records that every active dimension accepts; a dimension whose selected value
is ``None`` or blank is inactive.
"""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, TypeVar

T = TypeVar("T")

Matcher = Callable[[Any, Any], bool]


def is_active(value: Any) -> bool:
    """Check whether a filter selection constrains the list."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def apply_filters(
    records: Iterable[T],
    selections: Mapping[str, Any],
    matchers: Mapping[str, Matcher],
) -> List[T]:
    """
    Keep records accepted by every active filter dimension.

    Args:
        records: Records to filter
        selections: Selected value per dimension
        matchers: Predicate per dimension, called as ``matcher(record, value)``

    Returns:
        Records in their original order

    Raises:
        KeyError: If a selection names a dimension without a matcher
    """
    active = [(matchers[name], value) for name, value in selections.items() if is_active(value)]
    return [record for record in records if all(match(record, value) for match, value in active)]


def field_equals(attribute: str) -> Matcher:
    """Matcher comparing one attribute to the selected value."""
    def match(record: Any, value: Any) -> bool:
        return getattr(record, attribute) == value
    return match


def text_contains(*attributes: str) -> Matcher:
    """Matcher for case-insensitive substring search over several attributes."""
    def match(record: Any, query: str) -> bool:
        needle = query.strip().lower()
        for attribute in attributes:
            haystack: Optional[str] = getattr(record, attribute, None)
            if haystack and needle in haystack.lower():
                return True
        return False
    return match


def updated_selections(selections: Mapping[str, Any], dimension: str, value: Any) -> Dict[str, Any]:
    """Copy of ``selections`` with one dimension changed."""
    result = dict(selections)
    result[dimension] = value
    return result
