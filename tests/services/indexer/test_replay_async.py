import random

import pytest

from account_indexer.indexer import Indexer
from account_indexer.indexer.cli import replay


@pytest.mark.asyncio
async def test_replay_on_event_loop_confirms_latest_versions(account_updates) -> None:
    confirmations = []
    cancelled = []
    indexer = Indexer(on_confirm=confirmations.append, on_cancel=cancelled.append, delay_scale=0.01)
    events = account_updates + [
        {"id": "E", "category": "escrow", "tokens": 980, "delayMs": 2500, "version": 1},
        {**account_updates[0], "version": None},
    ]
    report = await replay(indexer, events, min_delay_ms=0, max_delay_ms=0, rng=random.Random(3))

    assert indexer.pending == 0
    assert sorted((notice.account_id, notice.version) for notice in confirmations) == sorted([
        ("E", 1),
        (account_updates[0]["id"], 7),
    ])
    assert [(item.update.version, item.superseded_by) for item in cancelled] == [(5, 7)]
    assert [leader.tokens for leader in report.leaders] == [980, 257]
    assert report.quarantined == [events[-1]]
