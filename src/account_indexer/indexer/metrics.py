"""Decision counters and confirmation latencies, flushed to the log."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class MetricsRecorder:
    flush_interval_seconds: int = 30
    counters: dict[str, int] = field(default_factory=dict)
    totals: dict[str, int] = field(default_factory=dict)
    latencies: dict[str, list[float]] = field(default_factory=dict)
    last_flush_ts: float = field(default_factory=time.time)

    def record_decision(self, decision: str, reason_code: str | None = None) -> None:
        keys = [f"decision.{decision}"]
        if reason_code:
            keys.append(f"reason.{reason_code}")
        for key in keys:
            self.counters[key] = self.counters.get(key, 0) + 1
            self.totals[key] = self.totals.get(key, 0) + 1

    def record_latency(self, name: str, seconds: float) -> None:
        self.latencies.setdefault(name, []).append(seconds)

    def lifetime(self) -> dict[str, int]:
        """Totals per decision since construction; windowed counters are reset on flush."""
        prefix = "decision."
        return {key[len(prefix):]: value for key, value in self.totals.items() if key.startswith(prefix)}

    def flush_if_due(self, context: dict[str, Any] | None = None, *, force: bool = False) -> None:
        now = time.time()
        if not force and now - self.last_flush_ts < self.flush_interval_seconds:
            return
        window: dict[str, Any] = {
            "window_seconds": round(now - self.last_flush_ts, 3),
            "counters": dict(self.counters),
            "latencies_ms": {name: _latency_summary(samples) for name, samples in self.latencies.items()},
        }
        if context:
            window["context"] = context
        logger.info("Indexer metrics %s", window)
        self.counters.clear()
        self.latencies.clear()
        self.last_flush_ts = now


def _latency_summary(samples: list[float]) -> dict[str, float]:
    ordered = sorted(sample * 1000.0 for sample in samples)
    if not ordered:
        return {"count": 0}
    return {
        "count": len(ordered),
        "mean": sum(ordered) / len(ordered),
        "p50": _nearest_rank(ordered, 50),
        "p95": _nearest_rank(ordered, 95),
        "max": ordered[-1],
    }


def _nearest_rank(ordered: list[float], percentile: int) -> float:
    rank = max(math.ceil(percentile / 100 * len(ordered)), 1)
    return ordered[rank - 1]
