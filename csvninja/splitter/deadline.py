"""Cooperative wall-clock budget for one split run."""

import time
from typing import Callable, Optional

from .errors import ProcessingTimeoutError


class Deadline:
    """Raise :class:`ProcessingTimeoutError` once ``seconds`` have elapsed.

    The engine calls :meth:`check` between rows and chunks, so a run that
    overshoots stops at the next checkpoint and its sink is aborted.
    ``seconds=None`` never expires.
    """

    def __init__(self, seconds: Optional[float], clock: Callable[[], float] = time.monotonic):
        self.seconds = seconds
        self._clock = clock
        self._expires_at = None if seconds is None else clock() + seconds

    @classmethod
    def unbounded(cls) -> "Deadline":
        return cls(None)

    @property
    def remaining(self) -> Optional[float]:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        return self._expires_at is not None and self._clock() >= self._expires_at

    def check(self) -> None:
        if self.expired():
            raise ProcessingTimeoutError(details={"timeout_seconds": self.seconds})
