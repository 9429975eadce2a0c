"""
Time sources for paste expiry.

All timestamps are milliseconds since the Unix epoch.
"""
import time
from typing import Protocol


class Clock(Protocol):
    def now_ms(self) -> int:
        ...


class SystemClock:
    """Wall-clock time."""

    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000


class ManualClock:
    """Clock that only moves when told to. Used to test expiry deterministically."""

    def __init__(self, now_ms: int = 0):
        self._now_ms = now_ms

    def now_ms(self) -> int:
        return self._now_ms

    def set(self, now_ms: int) -> None:
        self._now_ms = now_ms

    def advance(self, seconds: int = 0, ms: int = 0) -> None:
        self._now_ms += seconds * 1000 + ms
