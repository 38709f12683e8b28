"""Indexer orchestration: validate, gate, rank, quarantine."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from .config import IndexerProfile
from .errors import ValidationError, reason_code
from .leaderboard import Leaderboard
from .metrics import MetricsRecorder
from .models import (
    AccountUpdate,
    CancelledConfirmation,
    ConfirmationNotice,
    GateDecision,
    IndexerReport,
    QuarantineRecord,
)
from .quarantine import QuarantineSink
from .validation import validate
from .version_gate import Scheduler, VersionGate

logger = logging.getLogger(__name__)

ConfirmHook = Callable[[ConfirmationNotice], None]
CancelHook = Callable[[CancelledConfirmation], None]


def log_confirmation(notice: ConfirmationNotice) -> None:
    logger.info("%s v%s cb executed +%dms", notice.account_id, notice.version, notice.elapsed_ms)


class Indexer:
    """Owns gate, leaderboard and quarantine state for one stream of account updates."""

    def __init__(
        self,
        *,
        on_confirm: ConfirmHook | None = None,
        on_cancel: CancelHook | None = None,
        scheduler: Scheduler | None = None,
        delay_scale: float = 1.0,
        metrics: MetricsRecorder | None = None,
    ) -> None:
        self.gate = VersionGate(scheduler, delay_scale=delay_scale)
        self.leaderboard = Leaderboard()
        self.quarantine = QuarantineSink()
        self.metrics = metrics or MetricsRecorder()
        self._on_confirm = on_confirm or log_confirmation
        self._on_cancel = on_cancel

    @classmethod
    def build(
        cls,
        profile: IndexerProfile,
        *,
        on_confirm: ConfirmHook | None = None,
        on_cancel: CancelHook | None = None,
        scheduler: Scheduler | None = None,
    ) -> "Indexer":
        return cls(
            on_confirm=on_confirm,
            on_cancel=on_cancel,
            scheduler=scheduler,
            delay_scale=profile.delay_scale,
            metrics=MetricsRecorder(flush_interval_seconds=profile.metrics_flush_seconds),
        )

    @property
    def pending(self) -> int:
        return self.gate.in_flight

    def listener(self, event: Any) -> bool:
        """Process one raw event. Returns False when the event was quarantined."""
        logger.debug("listener(event=%r)", event)
        try:
            update = validate(event)
        except ValidationError as exc:
            self._quarantine(event, exc)
            return False
        try:
            self._index(update)
        except Exception as exc:
            logger.exception("Indexer processing error id=%s version=%s", update.account_id, update.version)
            self._quarantine(event, exc)
            return False
        self.metrics.record_decision("ACCEPTED")
        self.metrics.flush_if_due({"pending": self.pending, "quarantined": len(self.quarantine)})
        return True

    def failed_events(self) -> list[Any]:
        return list(self.quarantine.all())

    def report(self) -> IndexerReport:
        return IndexerReport(
            quarantined=list(self.quarantine.all()),
            leaders=self.leaderboard.snapshot(),
            counters=self.metrics.lifetime(),
        )

    async def wait_idle(self, poll_seconds: float = 0.05) -> None:
        """Return once every delayed confirmation has fired or been cancelled."""
        while self.gate.in_flight:
            await asyncio.sleep(poll_seconds)
        self.metrics.flush_if_due({"pending": 0, "quarantined": len(self.quarantine)}, force=True)

    def _index(self, update: AccountUpdate) -> None:
        admission = self.gate.admit(update)
        if admission.decision is GateDecision.SUPERSEDED:
            logger.info("%s v%s ignored, current v%s", update.account_id, update.version, admission.current_version)
            self.metrics.record_decision("SUPERSEDED")
            return
        try:
            self.gate.schedule(update, self._confirm, self._cancelled)
        except Exception:
            self.gate.rollback(admission)
            raise
        logger.info("%s v%s indexed +%sms", update.account_id, update.version, update.delay_ms)
        self.metrics.record_decision("SCHEDULED")
        self.leaderboard.record(update)

    def _confirm(self, notice: ConfirmationNotice) -> None:
        self.metrics.record_decision("FIRED")
        self.metrics.record_latency("confirm_seconds", notice.elapsed_ms / 1000.0)
        self._on_confirm(notice)

    def _cancelled(self, cancelled: CancelledConfirmation) -> None:
        update = cancelled.update
        logger.info("%s v%s cb cancelled by v%s", update.account_id, update.version, cancelled.superseded_by)
        self.metrics.record_decision("CANCELLED")
        if self._on_cancel is not None:
            self._on_cancel(cancelled)

    def _quarantine(self, event: Any, exc: Exception) -> QuarantineRecord:
        code = reason_code(exc)
        field = getattr(exc, "field", None)
        logger.error("Unable to process unexpected event reason=%s field=%s:\n%r", code, field, event)
        self.metrics.record_decision("QUARANTINED", code)
        return self.quarantine.record(event, code)
