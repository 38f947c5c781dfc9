"""Per-request planning deadline shared by all ordering evaluations."""

from __future__ import annotations

import threading
import time

from ...errors import DeadlineExceeded


class Deadline:
    """Monotonic expiry plus a cancel token.

    Evaluations call :meth:`check` before every collaborator call; the
    orchestrator calls :meth:`cancel` once it stops waiting.
    """

    def __init__(self, seconds: float | None, *, clock=time.monotonic) -> None:
        self._clock = clock
        self._expires_at = None if seconds is None else clock() + seconds
        self._cancelled = threading.Event()

    @classmethod
    def never(cls) -> "Deadline":
        return cls(None)

    def cancel(self) -> None:
        self._cancelled.set()

    def remaining(self) -> float | None:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self._expires_at is not None and self._clock() >= self._expires_at

    def check(self) -> None:
        if self.expired():
            raise DeadlineExceeded("Planning deadline exceeded.")
