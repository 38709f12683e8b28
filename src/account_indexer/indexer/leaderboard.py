"""Highest token balance per category."""

from __future__ import annotations

import logging

from .models import AccountUpdate

logger = logging.getLogger(__name__)


class Leaderboard:
    def __init__(self) -> None:
        self._leaders: dict[str, AccountUpdate] = {}

    def record(self, update: AccountUpdate) -> bool:
        """Store the update if it beats the category leader; ties keep the first one seen."""
        current = self._leaders.get(update.category)
        if current is not None and update.tokens <= current.tokens:
            return False
        logger.debug(
            "%s new highest token account %s v%s %s tokens",
            update.category,
            update.account_id,
            update.version,
            update.tokens,
        )
        if current is not None:
            logger.debug(
                "%s previous highest token account %s v%s %s tokens",
                current.category,
                current.account_id,
                current.version,
                current.tokens,
            )
        self._leaders[update.category] = update
        return True

    def leader(self, category: str) -> AccountUpdate | None:
        return self._leaders.get(category)

    def snapshot(self) -> list[AccountUpdate]:
        return sorted(self._leaders.values(), key=lambda update: update.tokens, reverse=True)
