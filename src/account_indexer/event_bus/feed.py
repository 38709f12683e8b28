"""Local JSON feed of raw account update events."""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Any, Iterator


class FeedError(ValueError):
    """Feed file is unreadable or its top level is not an array."""


def load_feed(path: Path) -> list[Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise FeedError(f"FEED_UNREADABLE: {path}") from exc
    if not isinstance(data, list):
        raise FeedError(f"FEED_CORRUPTED: top level of {path} is not an array")
    return data


def arrival_delays(
    count: int,
    min_ms: int = 0,
    max_ms: int = 1000,
    rng: random.Random | None = None,
) -> Iterator[int]:
    """Yield `count` random inter-arrival delays, both bounds inclusive."""
    if min_ms < 0 or max_ms < min_ms:
        raise ValueError(f"ARRIVAL_DELAY_INVALID: {min_ms}..{max_ms}")
    rng = rng or random.Random()
    for _ in range(count):
        yield rng.randint(min_ms, max_ms)
