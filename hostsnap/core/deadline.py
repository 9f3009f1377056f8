"""Overall time budget for one snapshot request."""

from __future__ import annotations

import time
from collections.abc import Callable


class Deadline:
    """Point in time after which no further probe work is started.

    Parameters
    ----------
    seconds : float | None
        Budget from now, or None for no limit
    clock : Callable[[], float]
        Monotonic time source (default: time.monotonic)
    """

    def __init__(
        self, seconds: float | None, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._clock = clock
        self._expires_at = None if seconds is None else clock() + seconds

    def remaining(self) -> float | None:
        """Seconds left, never negative, or None when unlimited."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        """Whether the budget is used up."""
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def cap(self, timeout: float) -> float:
        """Shorten a per-operation timeout to fit the remaining budget.

        Parameters
        ----------
        timeout : float
            Timeout the operation would use on its own

        Returns
        -------
        float
            The smaller of ``timeout`` and the remaining budget
        """
        remaining = self.remaining()
        if remaining is None:
            return timeout
        return min(timeout, remaining)


def cap_timeout(timeout: float, deadline: Deadline | None) -> float:
    """Apply an optional deadline to a timeout."""
    return timeout if deadline is None else deadline.cap(timeout)
