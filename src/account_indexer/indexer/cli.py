"""Replay CLI: feed a recorded event file through the indexer and print the report."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
from dataclasses import replace
from pathlib import Path

from account_indexer.event_bus import ACCOUNT_UPDATE, EventDispatcher, FeedError, arrival_delays, load_feed

from .config import IndexerProfile
from .indexer import Indexer
from .logging_utils import configure_logging
from .models import IndexerReport

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Account Indexer replay")
    parser.add_argument("--profile", required=True, help="Path to indexer profile YAML")
    parser.add_argument("--feed", help="Path to feed JSON (overrides feed.path)")
    parser.add_argument("--seed", type=int, help="Seed for inter-arrival delays")
    parser.add_argument("--delay-scale", type=float, help="Multiplier applied to every delayMs")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    return parser


async def replay(
    indexer: Indexer,
    events: list,
    *,
    min_delay_ms: int = 0,
    max_delay_ms: int = 1000,
    rng: random.Random | None = None,
) -> IndexerReport:
    dispatcher = EventDispatcher()
    dispatcher.subscribe(ACCOUNT_UPDATE, indexer.listener)
    delays = arrival_delays(len(events), min_delay_ms, max_delay_ms, rng)
    for event, delay_ms in zip(events, delays):
        await asyncio.sleep(delay_ms * indexer.gate.delay_scale / 1000.0)
        dispatcher.emit(ACCOUNT_UPDATE, event)
    await indexer.wait_idle()
    return indexer.report()


def format_report(report: IndexerReport) -> str:
    lines: list[str] = []
    if report.quarantined:
        lines.append(f"\n{len(report.quarantined)} Failed Events:\n")
        lines.extend(repr(event) for event in report.quarantined)
    lines.append("\nHighest Tokens Leaderboard\n")
    for leader in report.leaders:
        lines.append(leader.category.upper())
        lines.append(f"{leader.account_id} v{leader.version}: {leader.tokens}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    profile = IndexerProfile.load(Path(args.profile))
    if args.delay_scale is not None:
        profile = replace(profile, delay_scale=args.delay_scale)
    configure_logging(profile.logging_level(), profile.log_paths)

    feed_path = args.feed or profile.feed_path
    if not feed_path:
        raise SystemExit("Provide --feed or feed.path in the profile")
    try:
        events = load_feed(Path(feed_path))
    except FeedError as exc:
        logger.error("Feed rejected: %s", exc)
        return 2

    indexer = Indexer.build(profile)
    report = asyncio.run(
        replay(
            indexer,
            events,
            min_delay_ms=profile.min_arrival_delay_ms,
            max_delay_ms=profile.max_arrival_delay_ms,
            rng=random.Random(args.seed),
        )
    )
    if args.json:
        print(json.dumps(report.as_dict(), ensure_ascii=True, default=str))
    else:
        print(format_report(report))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
