"""Indexer error taxonomy and helpers."""

from __future__ import annotations


class IndexerError(RuntimeError):
    """Stable error surfaced as a reason code."""

    def __init__(self, code: str, detail: str | None = None) -> None:
        self.code = code
        self.detail = detail
        message = f"{code}:{detail}" if detail else code
        super().__init__(message)


class ValidationError(IndexerError):
    """Raw event does not match the account update shape."""

    def __init__(self, code: str, field: str | None = None, detail: str | None = None) -> None:
        self.field = field
        super().__init__(code, detail)


def reason_code(exc: Exception) -> str:
    if isinstance(exc, IndexerError):
        return exc.code
    return "INTERNAL_ERROR"
