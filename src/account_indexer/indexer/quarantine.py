"""Append-only log of events that failed validation."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from .models import QuarantineRecord


class QuarantineSink:
    def __init__(self) -> None:
        self._records: list[QuarantineRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def record(self, raw: Any, code: str) -> QuarantineRecord:
        entry = QuarantineRecord(
            payload=raw,
            reason_code=code,
            received_at_utc=datetime.now(tz=timezone.utc).isoformat(),
        )
        self._records.append(entry)
        return entry

    def all(self) -> tuple[Any, ...]:
        return tuple(entry.payload for entry in self._records)

    def records(self) -> tuple[QuarantineRecord, ...]:
        return tuple(self._records)
