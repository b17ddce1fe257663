"""
Clock - Time source for token issuance and expiry

Module: core.clock
Date: 2025-11-23
Version: 0.1.0-alpha

ARCHITECTURE:
All token timestamps are whole epoch seconds. The codec never calls
time.time() directly; it asks an injected Clock so tests can move time.
"""

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Source of the current time in epoch seconds"""

    @abstractmethod
    def now(self) -> int:
        """Return current epoch seconds"""


class SystemClock(Clock):
    """Wall clock"""

    def now(self) -> int:
        return int(time.time())


class ManualClock(Clock):
    """
    Clock that only moves when told to.

    Used by tests and by tooling that needs reproducible tokens.
    """

    def __init__(self, start: int = 0):
        self._now = int(start)

    def now(self) -> int:
        return self._now

    def set(self, value: int) -> None:
        self._now = int(value)

    def advance(self, seconds: int) -> int:
        """Move forward by seconds and return the new time"""
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now += int(seconds)
        return self._now
