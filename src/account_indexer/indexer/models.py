"""Indexer core models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class AccountUpdate:
    account_id: str
    category: str
    tokens: float
    delay_ms: float
    version: float
    payload: Any = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.account_id,
            "category": self.category,
            "tokens": self.tokens,
            "delayMs": self.delay_ms,
            "version": self.version,
            "payload": dict(self.payload) if isinstance(self.payload, Mapping) else self.payload,
        }


class GateDecision(str, Enum):
    SCHEDULED = "SCHEDULED"
    SUPERSEDED = "SUPERSEDED"


@dataclass(frozen=True)
class Admission:
    decision: GateDecision
    account_id: str
    version: float
    current_version: float | None
    delay_ms: float


@dataclass(frozen=True)
class ConfirmationNotice:
    """Delivered to the notification hook once a delay elapses and the version is still current."""

    update: AccountUpdate
    elapsed_ms: float

    @property
    def account_id(self) -> str:
        return self.update.account_id

    @property
    def version(self) -> float:
        return self.update.version


@dataclass(frozen=True)
class CancelledConfirmation:
    update: AccountUpdate
    superseded_by: float | None
    elapsed_ms: float


@dataclass(frozen=True)
class QuarantineRecord:
    payload: Any
    reason_code: str
    received_at_utc: str


@dataclass(frozen=True)
class IndexerReport:
    quarantined: list[Any]
    leaders: list[AccountUpdate]
    counters: dict[str, int] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "quarantined": list(self.quarantined),
            "leaders": [leader.as_dict() for leader in self.leaders],
            "counters": dict(self.counters),
        }
