# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
View-state holder base classes.

A holder owns one immutable snapshot (a frozen dataclass) and replaces it
wholesale on every change. Intents that need the remote store run on the
holder's own worker pool and return a ``concurrent.futures.Future``; intents
that only touch local state apply immediately.

Loads carry a sequence token per channel so the response of a superseded load
is dropped. After ``close()`` queued work is cancelled and late completions no
longer write the snapshot.
"""

import os
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar

from carebridge.domain.filters import Matcher, apply_filters, updated_selections
from carebridge.models.outcome import Error, Outcome, Success

logger = logging.getLogger(__name__)

S = TypeVar("S")
T = TypeVar("T")

StateListener = Callable[[Any], None]

DEFAULT_MAX_WORKERS = 4


def default_max_workers() -> int:
    """Worker pool size per holder, from ``VIEWMODEL_MAX_WORKERS``."""
    return int(os.getenv('VIEWMODEL_MAX_WORKERS', str(DEFAULT_MAX_WORKERS)))


def completed(value: Any = None) -> Future:
    """A future that is already resolved, for intents that end before any remote call."""
    future: Future = Future()
    future.set_result(value)
    return future


class ViewModel(Generic[S]):
    """Base view-state holder."""

    def __init__(self, initial_state: S, max_workers: Optional[int] = None):
        self._state = initial_state
        self._lock = threading.Lock()
        self._listeners: List[StateListener] = []
        self._tokens: Dict[str, int] = {}
        self._closed = False
        self._close_callbacks: List[Callable[[], None]] = []
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or default_max_workers(),
            thread_name_prefix=type(self).__name__,
        )

    @property
    def state(self) -> S:
        """Current snapshot."""
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with every new snapshot; returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def on_close(self, callback: Callable[[], None]) -> None:
        """Call ``callback`` once when the holder is closed."""
        self._close_callbacks.append(callback)

    def _update(self, **changes: Any) -> None:
        self._update_with(lambda _: changes)

    def _update_with(self, compute: Callable[[S], Mapping[str, Any]]) -> None:
        """Replace the snapshot with changes computed from the current one."""
        with self._lock:
            if self._closed:
                return
            changes = compute(self._state)
            if not changes:
                return
            self._state = replace(self._state, **changes)
            snapshot = self._state
        for listener in list(self._listeners):
            listener(snapshot)

    def _next_token(self, channel: str) -> int:
        with self._lock:
            token = self._tokens.get(channel, 0) + 1
            self._tokens[channel] = token
            return token

    def _update_if_current(self, channel: str, token: int, **changes: Any) -> bool:
        """Apply ``changes`` only if ``token`` is still the newest for ``channel``."""
        return self._apply_if_current(channel, token, lambda _: changes)

    def _apply_if_current(self, channel: str, token: int, compute: Callable[[S], Mapping[str, Any]]) -> bool:
        applied = []

        def guarded(state: S) -> Mapping[str, Any]:
            if self._tokens.get(channel) != token:
                return {}
            applied.append(token)
            return compute(state)

        self._update_with(guarded)
        if not applied:
            logger.debug(f"Dropping stale {channel} response in {type(self).__name__}")
        return bool(applied)

    def _launch(self, work: Callable[[], Any]) -> Future:
        """Run ``work`` on the holder's pool."""
        with self._lock:
            if self._closed:
                future: Future = Future()
                future.cancel()
                return future
            return self._executor.submit(work)

    def clear_messages(self) -> None:
        """Forget the error and success message."""
        self._update(error=None, success_message=None)

    def close(self) -> None:
        """Cancel queued work and stop writing the snapshot."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)
        for callback in self._close_callbacks:
            callback()
        self._close_callbacks.clear()
        logger.debug(f"{type(self).__name__} closed")


@dataclass(frozen=True)
class ListState(Generic[T]):
    """Snapshot of a list screen."""
    is_loading: bool = False
    items: Tuple[T, ...] = ()
    filtered_items: Tuple[T, ...] = ()
    filters: Mapping[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    success_message: Optional[str] = None


class ListViewModel(ViewModel[S]):
    """
    Holder for a screen showing one filterable list.

    Subclasses provide ``_fetch`` and declare one matcher per filter dimension
    in ``matchers``.
    """

    matchers: Mapping[str, Matcher] = {}

    def __init__(self, initial_state: Optional[S] = None, max_workers: Optional[int] = None):
        super().__init__(initial_state if initial_state is not None else ListState(), max_workers)

    def _fetch(self) -> Outcome[List[Any]]:
        raise NotImplementedError

    def load(self) -> Future:
        """Reload the list from the store."""
        token = self._begin_load()
        return self._launch(lambda: self._finish_load(token))

    def _begin_load(self) -> int:
        token = self._next_token("items")
        self._update(is_loading=True, error=None)
        return token

    def _finish_load(self, token: int) -> Outcome[List[Any]]:
        result = self._fetch()
        if isinstance(result, Success):
            items = tuple(result.value)
            self._apply_if_current("items", token, lambda state: {
                "is_loading": False,
                "items": items,
                "filtered_items": tuple(apply_filters(items, state.filters, self.matchers)),
            })
        else:
            logger.warning(f"{type(self).__name__} load failed: {result.message}")
            self._update_if_current("items", token, is_loading=False, error=result.message)
        return result

    def _reload_now(self) -> Outcome[List[Any]]:
        """Reload synchronously, from inside a worker."""
        return self._finish_load(self._begin_load())

    def set_filter(self, dimension: str, value: Any) -> None:
        """
        Select a value for one filter dimension; ``None`` or blank clears it.

        Raises:
            KeyError: If the screen has no such filter dimension
        """
        if dimension not in self.matchers:
            raise KeyError(f"Unknown filter: {dimension}")

        def compute(state: Any) -> Mapping[str, Any]:
            filters = updated_selections(state.filters, dimension, value)
            return {
                "filters": filters,
                "filtered_items": tuple(apply_filters(state.items, filters, self.matchers)),
            }

        self._update_with(compute)

    def _mutate(self, call: Callable[[], Outcome[Any]], success_message: str) -> Future:
        """
        Run a mutation; on success show ``success_message`` and reload.

        The returned future resolves after the reload finishes.
        """
        def work() -> Outcome[Any]:
            result = call()
            if isinstance(result, Error):
                self._update(error=result.message)
                return result
            self._update(success_message=success_message)
            self._after_mutation()
            return result

        return self._launch(work)

    def _after_mutation(self) -> None:
        self._reload_now()
