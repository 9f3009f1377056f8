"""Time-boxed memoization of an expensive value."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A resolved value and the monotonic time it was resolved at."""

    value: T
    resolved_at: float


class TimedValue(Generic[T]):
    """Thread-safe owner of one value with a time-to-live.

    The entry is only ever replaced as a whole, so concurrent refreshes
    racing past the staleness check end with the last writer's
    ``(value, timestamp)`` pair and never a mix of both.

    Parameters
    ----------
    ttl_seconds : float
        Maximum age at which the cached value is still served
    is_valid : Callable[[T], bool] | None
        Predicate a cached value must satisfy to be served; values failing
        it are refreshed regardless of age
    clock : Callable[[], float]
        Monotonic time source (default: time.monotonic)
    """

    def __init__(
        self,
        ttl_seconds: float,
        is_valid: Callable[[T], bool] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._is_valid = is_valid or (lambda value: True)
        self._clock = clock
        self._lock = threading.Lock()
        self._entry: CacheEntry[T] | None = None

    @property
    def ttl_seconds(self) -> float:
        """Maximum age of a served value."""
        return self._ttl_seconds

    def peek(self) -> CacheEntry[T] | None:
        """Return the current entry without checking its age.

        Returns
        -------
        CacheEntry[T] | None
            Last stored entry, or None if nothing was stored yet
        """
        with self._lock:
            return self._entry

    def is_fresh(self, entry: CacheEntry[T]) -> bool:
        """Check whether an entry may be served without refreshing.

        Parameters
        ----------
        entry : CacheEntry[T]
            Entry to check

        Returns
        -------
        bool
            True if the value is valid and younger than the TTL
        """
        age = self._clock() - entry.resolved_at
        return self._is_valid(entry.value) and age < self._ttl_seconds

    def get_or_refresh(self, refresh: Callable[[], T]) -> T:
        """Return the cached value, refreshing it when stale.

        The lock is not held while ``refresh`` runs, so a slow refresh does
        not block readers of a fresh value.

        Parameters
        ----------
        refresh : Callable[[], T]
            Produces a new value; may raise

        Returns
        -------
        T
            Fresh cached value or the newly refreshed one

        Raises
        ------
        Exception
            Whatever ``refresh`` raises; the stored entry is left untouched
        """
        entry = self.peek()
        if entry is not None and self.is_fresh(entry):
            return entry.value

        value = refresh()

        with self._lock:
            self._entry = CacheEntry(value=value, resolved_at=self._clock())

        return value

    def clear(self) -> None:
        """Drop the stored entry."""
        with self._lock:
            self._entry = None
