# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Two-variant result type returned by every repository operation.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Operation succeeded; ``value`` is ``None`` for operations with no result."""
    value: T = None

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class Error:
    """Operation failed with a human-readable message."""
    message: str

    @property
    def is_success(self) -> bool:
        return False


Outcome = Union[Success[T], Error]


def error_message(exc: BaseException, fallback: str) -> str:
    """Message text for a caught exception, or the fallback phrase when it has none."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or fallback
