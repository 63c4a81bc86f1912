"""Lightweight in-process counters for development and tests.

The dispatch middleware and the projector bump counters here so tests and
debugging sessions can see how values were routed without turning on debug
logging.

Usage:
    from stored.metrics import metrics
    metrics.inc("dispatch.thunk")
    snapshot = metrics.snapshot()
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any


class _Metrics:
    def __init__(self) -> None:
        self._counters: dict[str, int] = defaultdict(int)

    def inc(self, key: str, amount: int = 1) -> None:
        self._counters[key] += int(amount)

    def count(self, key: str) -> int:
        return int(self._counters.get(key, 0))

    def snapshot(self) -> dict[str, Any]:
        return {"counters": dict(self._counters)}

    def reset(self) -> None:
        self._counters.clear()


metrics = _Metrics()
