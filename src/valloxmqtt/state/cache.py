"""Last-seen value per register.

Decides whether an observation is worth publishing and remembers the
ones that were.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from valloxmqtt._constants import FRESHNESS_WINDOW
from valloxmqtt.models.register import RegisterEvent
from valloxmqtt.state.policy import is_duplicate, is_older_than


class CacheEntry(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    observed_at: float
    event: RegisterEvent


class ValueCache:
    """In-memory cache keyed by register.

    Entries are overwritten, never removed; the register space is a single
    byte so the cache stays small for the lifetime of the process.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        freshness_window: float = FRESHNESS_WINDOW,
    ) -> None:
        self._clock = clock
        self._freshness_window = freshness_window
        self._entries: dict[int, CacheEntry] = {}

    @property
    def freshness_window(self) -> float:
        return self._freshness_window

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, register: object) -> bool:
        return register in self._entries

    def get(self, register: int) -> CacheEntry | None:
        return self._entries.get(register)

    def should_publish(self, event: RegisterEvent) -> bool:
        """False when *event* repeats a raw value cached within the freshness window."""
        cached = self._entries.get(event.register_id)
        return not is_duplicate(
            cached_event=cached.event if cached is not None else None,
            cached_at=cached.observed_at if cached is not None else None,
            incoming=event,
            now=self._clock(),
            freshness_window=self._freshness_window,
        )

    def record(self, event: RegisterEvent) -> CacheEntry:
        """Store *event* as the latest observation of its register."""
        entry = CacheEntry(observed_at=self._clock(), event=event)
        self._entries[event.register_id] = entry
        return entry

    def is_stale(self, register: int) -> bool:
        """Whether *register* is cached but older than the freshness window.

        A register that was never observed is not stale.
        """
        cached = self._entries.get(register)
        if cached is None:
            return False
        return is_older_than(cached.observed_at, self._clock(), self._freshness_window)

    def age(self, register: int) -> float | None:
        cached = self._entries.get(register)
        if cached is None:
            return None
        return self._clock() - cached.observed_at
