"""Per-account version gate with lazily cancelled delayed confirmations.

The gate remembers, per account id, the highest version it has admitted.
Admitting a newer version never touches timers that are already running:
each delayed action re-reads the stored version when it expires and only
fires if its own version is still the latest one. Superseded actions are
discarded when their delay elapses.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Protocol

from .models import AccountUpdate, Admission, CancelledConfirmation, ConfirmationNotice, GateDecision

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    """Subset of asyncio.AbstractEventLoop used for delayed actions."""

    def time(self) -> float:
        ...

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Any:
        ...


class VersionGate:
    def __init__(self, scheduler: Scheduler | None = None, *, delay_scale: float = 1.0) -> None:
        if delay_scale < 0:
            raise ValueError("delay_scale must be >= 0")
        self._scheduler = scheduler
        self.delay_scale = delay_scale
        self._versions: dict[str, float] = {}
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def current(self, account_id: str) -> float | None:
        return self._versions.get(account_id)

    def versions(self) -> dict[str, float]:
        return dict(self._versions)

    def admit(self, update: AccountUpdate) -> Admission:
        current = self._versions.get(update.account_id)
        if current is not None and update.version < current:
            return Admission(
                decision=GateDecision.SUPERSEDED,
                account_id=update.account_id,
                version=update.version,
                current_version=current,
                delay_ms=update.delay_ms,
            )
        self._versions[update.account_id] = update.version if current is None else max(update.version, current)
        return Admission(
            decision=GateDecision.SCHEDULED,
            account_id=update.account_id,
            version=update.version,
            current_version=current,
            delay_ms=update.delay_ms,
        )

    def should_fire(self, account_id: str, version: float) -> bool:
        return self._versions.get(account_id) == version

    def rollback(self, admission: Admission) -> None:
        """Undo a SCHEDULED admission whose delayed action could not be registered."""
        if self._versions.get(admission.account_id) != admission.version:
            return
        if admission.current_version is None:
            del self._versions[admission.account_id]
        else:
            self._versions[admission.account_id] = admission.current_version

    def schedule(
        self,
        update: AccountUpdate,
        on_fire: Callable[[ConfirmationNotice], None],
        on_cancel: Callable[[CancelledConfirmation], None],
    ) -> None:
        scheduler = self._resolve_scheduler()
        scheduled_at = scheduler.time()
        delay_seconds = (update.delay_ms / 1000.0) * self.delay_scale
        scheduler.call_later(delay_seconds, self._expire, scheduler, update, scheduled_at, on_fire, on_cancel)
        self._in_flight += 1

    def _expire(
        self,
        scheduler: Scheduler,
        update: AccountUpdate,
        scheduled_at: float,
        on_fire: Callable[[ConfirmationNotice], None],
        on_cancel: Callable[[CancelledConfirmation], None],
    ) -> None:
        self._in_flight -= 1
        elapsed_ms = (scheduler.time() - scheduled_at) * 1000.0
        try:
            if self.should_fire(update.account_id, update.version):
                on_fire(ConfirmationNotice(update=update, elapsed_ms=elapsed_ms))
            else:
                on_cancel(
                    CancelledConfirmation(
                        update=update,
                        superseded_by=self._versions.get(update.account_id),
                        elapsed_ms=elapsed_ms,
                    )
                )
        except Exception:
            logger.exception(
                "Delayed confirmation hook failed id=%s version=%s",
                update.account_id,
                update.version,
            )

    def _resolve_scheduler(self) -> Scheduler:
        # without an injected scheduler, bind to whichever loop is running now
        if self._scheduler is not None:
            return self._scheduler
        return asyncio.get_running_loop()
