# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Signed-in user context.

The composition root owns one ``SessionStore`` and hands the current
``SessionContext`` to whatever needs to know who is signed in. There is no
process-wide current user.
"""

import logging
import threading
from typing import Callable, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from carebridge.models.entities import UserAccount
from carebridge.models.enums import UserRole

logger = logging.getLogger(__name__)


class SessionContext(BaseModel):
    """Who is signed in, captured at sign-in time."""

    user_id: str = Field(..., description="Authenticated user ID")
    email: str = Field(..., description="User email")
    role: UserRole = Field(..., description="Account role")
    display_name: Optional[str] = Field(None, description="User display name")
    access_token: Optional[str] = Field(None, description="Backend access token")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_account(cls, account: UserAccount, access_token: Optional[str] = None) -> "SessionContext":
        return cls(
            user_id=account.id,
            email=account.email,
            role=account.role,
            display_name=account.display_name,
            access_token=access_token,
        )

    def has_role(self, role: UserRole) -> bool:
        """Check if the signed-in user has the given role."""
        return self.role == role

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class NotSignedInError(Exception):
    """Raised when an operation needs a session and there is none."""
    pass


SessionListener = Callable[[Optional[SessionContext]], None]


class SessionStore:
    """Holds the current session for one running app."""

    def __init__(self):
        self._current: Optional[SessionContext] = None
        self._listeners: List[SessionListener] = []
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[SessionContext]:
        return self._current

    def is_signed_in(self) -> bool:
        return self._current is not None

    def start(self, account: UserAccount, access_token: Optional[str] = None) -> SessionContext:
        """Record a successful sign-in."""
        context = SessionContext.from_account(account, access_token)
        with self._lock:
            self._current = context
        logger.info("Session started", extra={"user_id": account.id, "role": account.role.value})
        self._notify(context)
        return context

    def clear(self) -> None:
        """Forget the signed-in user."""
        with self._lock:
            previous, self._current = self._current, None
        if previous is not None:
            logger.info("Session cleared", extra={"user_id": previous.user_id})
        self._notify(None)

    def require(self) -> SessionContext:
        """
        Get the current session.

        Raises:
            NotSignedInError: If nobody is signed in
        """
        current = self._current
        if current is None:
            raise NotSignedInError("User not logged in")
        return current

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Call ``listener`` on every session change; returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self, current: Optional[SessionContext]) -> None:
        for listener in list(self._listeners):
            listener(current)
