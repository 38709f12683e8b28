"""Indexer profile loader."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

import yaml


@dataclass(frozen=True)
class IndexerProfile:
    profile_id: str
    feed_path: str | None = None
    min_arrival_delay_ms: int = 0
    max_arrival_delay_ms: int = 1000
    delay_scale: float = 1.0
    metrics_flush_seconds: int = 30
    log_level: str = "INFO"
    log_paths: list[str] | None = None

    @classmethod
    def load(cls, path: Path) -> "IndexerProfile":
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        feed = data.get("feed", {}) or {}
        indexer = data.get("indexer", {}) or {}
        logging_cfg = data.get("logging", {}) or {}
        min_delay = int(feed.get("min_arrival_delay_ms", 0))
        max_delay = int(feed.get("max_arrival_delay_ms", 1000))
        if min_delay < 0 or max_delay < min_delay:
            raise ValueError(f"ARRIVAL_DELAY_INVALID: {min_delay}..{max_delay}")
        delay_scale = float(indexer.get("delay_scale", 1.0))
        if delay_scale < 0:
            raise ValueError(f"DELAY_SCALE_INVALID: {delay_scale}")
        log_level = _resolve_env(logging_cfg.get("level")) or "INFO"
        log_paths = [str(_resolve_env(entry)) for entry in logging_cfg.get("log_paths") or []]
        return cls(
            profile_id=data["profile_id"],
            feed_path=_resolve_env(feed.get("path")),
            min_arrival_delay_ms=min_delay,
            max_arrival_delay_ms=max_delay,
            delay_scale=delay_scale,
            metrics_flush_seconds=int(indexer.get("metrics_flush_seconds", 30)),
            log_level=str(log_level).strip().upper(),
            log_paths=log_paths or None,
        )

    def logging_level(self) -> int:
        level = logging.getLevelName(self.log_level)
        if not isinstance(level, int):
            raise ValueError(f"LOG_LEVEL_INVALID: {self.log_level}")
        return level


_ENV_PATTERN = re.compile(r"^\$\{([A-Z0-9_]+)\}$")


def _resolve_env(value: str | None) -> str | None:
    if value is None or not isinstance(value, str):
        return value
    match = _ENV_PATTERN.match(value.strip())
    if not match:
        return value
    return os.getenv(match.group(1))
