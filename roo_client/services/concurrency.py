# Overview: Service-layer helpers for concurrency; keeps list screens consistent under overlapping fetches.

# roo_client/services/concurrency.py
"""
Stale-response protection and debouncing for list screens.

A screen may start a new fetch while an older one is still in flight
(rapid filter changes, pull-to-refresh during a search). Responses can
complete in any order, so every fetch takes a token from a monotonically
increasing sequence and only the holder of the newest token may commit.
Older responses are dropped, not aborted.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Iterable, List, Optional, Sequence

from ..config import Config
from ..errors import RooClientError
from .filter_service import DRIVER_SEARCH_FIELDS, FilterState, SearchField, apply_filter_state

log = logging.getLogger(__name__)


class RequestSequencer:
    """Hands out increasing request tokens; the newest one is current."""

    def __init__(self):
        self._lock = threading.Lock()
        self._latest = 0

    def begin(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._latest

    @property
    def latest(self) -> int:
        with self._lock:
            return self._latest


class Debouncer:
    """
    Run `func` once calls have been quiet for `delay` seconds.

    Each trigger() restarts the timer with the newest arguments; only the
    last call in a burst fires.
    """

    def __init__(self, func: Callable[..., Any], delay: float = Config.SEARCH_DEBOUNCE_SECONDS):
        self.func = func
        self.delay = delay
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        # bumped by every trigger() and cancel(); a timer only fires for its own
        self._generation = 0

    def trigger(self, *args, **kwargs) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._timer = threading.Timer(self.delay, self._fire, args=(self._generation, args, kwargs))
            self._timer.daemon = True
            self._timer.start()

    def _fire(self, generation: int, args: tuple, kwargs: dict) -> None:
        with self._lock:
            if generation != self._generation:
                # superseded or cancelled while this timer was waiting on the lock
                return
            self._timer = None
        self.func(*args, **kwargs)

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


class ListController:
    """
    Owns the visible state of one list screen.

    fetch(state) returns freshly normalized records for a FilterState; the
    controller then refines them client-side with the same state and
    commits both the raw and the visible list, but only if no newer fetch
    was started in the meantime.

    A failing current fetch propagates its error and leaves the previous
    records on screen.
    """

    def __init__(
        self,
        fetch: Callable[[FilterState], Sequence[Any]],
        fields: Iterable[SearchField] = DRIVER_SEARCH_FIELDS,
        on_commit: Optional[Callable[[List[Any]], None]] = None,
        debounce: float = Config.SEARCH_DEBOUNCE_SECONDS,
        max_workers: int = 4,
    ):
        self._fetch = fetch
        self._fields = tuple(fields)
        self._on_commit = on_commit
        self._sequencer = RequestSequencer()
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="roo-list")
        self._debouncer = Debouncer(self._submit_if_open, delay=debounce)
        self._closed = False

        self.state = FilterState()
        self.records: List[Any] = []
        self.visible: List[Any] = []
        self.committed_token = 0

    def refresh(self, state: Optional[FilterState] = None) -> bool:
        """
        Fetch and commit. Returns False when the response was stale and
        therefore discarded.
        """
        state = state if state is not None else self.state
        token = self._sequencer.begin()
        log.debug("List fetch #%d started for %s", token, state)

        try:
            records = list(self._fetch(state))
        except RooClientError:
            if not self._sequencer.is_current(token):
                log.debug("List fetch #%d failed after being superseded; ignoring", token)
                return False
            raise

        with self._lock:
            if not self._sequencer.is_current(token):
                log.debug("Discarding stale response #%d (latest is #%d)", token, self._sequencer.latest)
                return False
            self.records = records
            self.state = state
            self.visible = apply_filter_state(records, state, self._fields)
            self.committed_token = token
            visible = list(self.visible)

        if self._on_commit is not None:
            self._on_commit(visible)
        return True

    def submit(self, state: Optional[FilterState] = None) -> Future:
        """Run refresh() on a worker thread."""
        return self._executor.submit(self.refresh, state)

    def _submit_if_open(self, state: FilterState) -> Optional[Future]:
        # a debounce timer can outlive close(); its late fire is dropped
        with self._lock:
            if self._closed:
                log.debug("Dropping debounced refresh for %s: controller closed", state)
                return None
            return self._executor.submit(self.refresh, state)

    def schedule_refresh(self, state: FilterState) -> None:
        """Debounced submit, for search-as-you-type."""
        self._debouncer.trigger(state)

    def apply_filter(self, state: FilterState) -> List[Any]:
        """Re-filter the committed records locally without refetching."""
        with self._lock:
            self.state = state
            self.visible = apply_filter_state(self.records, state, self._fields)
            visible = list(self.visible)
        if self._on_commit is not None:
            self._on_commit(visible)
        return visible

    def close(self) -> None:
        with self._lock:
            self._closed = True
        self._debouncer.cancel()
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "ListController":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
