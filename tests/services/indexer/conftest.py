import heapq
import itertools
from typing import Any, Callable

import pytest


class ManualClock:
    """Deterministic stand-in for the event loop's time()/call_later()."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[tuple[float, int, Callable[..., Any], tuple[Any, ...]]] = []
        self._seq = itertools.count()

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> None:
        heapq.heappush(self._timers, (self.now + delay, next(self._seq), callback, args))

    def advance_ms(self, ms: float) -> None:
        target = self.now + ms / 1000.0
        while self._timers and self._timers[0][0] <= target + 1e-9:
            due, _, callback, args = heapq.heappop(self._timers)
            self.now = max(self.now, due)
            callback(*args)
        self.now = target

    @property
    def pending(self) -> int:
        return len(self._timers)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def account_updates() -> list[dict]:
    return [
        {
            "id": "6BhkGCMVMyrjEEkrASJcLxfAvoW43g6BubxjpeUyZFoz",
            "accountType": "mint",
            "tokens": 243,
            "callbackTimeMs": 500,
            "data": {"mintId": "6BhkGCMVMyrjEEkrASJcLxfAvoW43g6BubxjpeUyZFoz"},
            "version": 5,
        },
        {
            "id": "6BhkGCMVMyrjEEkrASJcLxfAvoW43g6BubxjpeUyZFoz",
            "accountType": "mint",
            "tokens": 257,
            "callbackTimeMs": 8400,
            "data": {"mintId": "6BhkGCMVMyrjEEkrASJcLxfAvoW43g6BubxjpeUyZFoz"},
            "version": 7,
        },
    ]
