"""Event dispatch + feed adapters."""

from .dispatcher import ACCOUNT_UPDATE, EventDispatcher
from .feed import FeedError, arrival_delays, load_feed

__all__ = [
    "ACCOUNT_UPDATE",
    "EventDispatcher",
    "FeedError",
    "arrival_delays",
    "load_feed",
]
