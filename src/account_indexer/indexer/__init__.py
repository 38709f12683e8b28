"""Account Indexer package."""

from .categories import CATEGORIES
from .config import IndexerProfile
from .indexer import Indexer
from .models import AccountUpdate, ConfirmationNotice, IndexerReport

__all__ = [
    "AccountUpdate",
    "CATEGORIES",
    "ConfirmationNotice",
    "Indexer",
    "IndexerProfile",
    "IndexerReport",
]
