"""Closed set of account categories accepted by the indexer.

Extending the set is a deploy-time change; it is not read from the profile.
"""

from __future__ import annotations

CATEGORIES: tuple[str, ...] = (
    "mint",
    "metadata",
    "masterEdition",
    "auction",
    "auctionData",
    "account",
    "escrow",
)
