"""Account update shape + domain checks."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from jsonschema import Draft202012Validator

from .categories import CATEGORIES
from .errors import ValidationError
from .models import AccountUpdate

# check order; the earliest failing field decides the reason code
FIELD_CODES: dict[str, str] = {
    "id": "ID_INVALID",
    "category": "CATEGORY_INVALID",
    "version": "VERSION_INVALID",
    "tokens": "TOKENS_INVALID",
    "delayMs": "DELAY_INVALID",
}

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "category": ("accountType",),
    "delayMs": ("callbackTimeMs",),
    "payload": ("data",),
}

ACCOUNT_UPDATE_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": list(FIELD_CODES),
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "category": {"enum": list(CATEGORIES)},
        "version": {"type": "number"},
        "tokens": {"type": "number", "minimum": 0},
        "delayMs": {"type": "number", "minimum": 0},
    },
}

_VALIDATOR = Draft202012Validator(ACCOUNT_UPDATE_SCHEMA)
_NUMERIC_FIELDS = ("version", "tokens", "delayMs")


def validate(raw: Any) -> AccountUpdate:
    """Classify a raw event; raise ValidationError naming the first bad field."""
    if not isinstance(raw, Mapping):
        raise ValidationError("EVENT_NOT_MAPPING", detail=type(raw).__name__)
    event = _canonical(raw)
    failed = _failed_fields(event)
    if failed:
        field = min(failed, key=list(FIELD_CODES).index)
        raise ValidationError(FIELD_CODES[field], field=field, detail=repr(event.get(field)))
    payload = event.get("payload", {})
    return AccountUpdate(
        account_id=event["id"],
        category=event["category"],
        tokens=event["tokens"],
        delay_ms=event["delayMs"],
        version=event["version"],
        payload=dict(payload) if isinstance(payload, Mapping) else payload,
    )


def _canonical(raw: Mapping[str, Any]) -> dict[str, Any]:
    event = dict(raw)
    for key, aliases in FIELD_ALIASES.items():
        if key in event:
            continue
        for alias in aliases:
            if alias in event:
                event[key] = event[alias]
                break
    return event


def _failed_fields(event: dict[str, Any]) -> set[str]:
    failed = {key for key in FIELD_CODES if key not in event}
    for error in _VALIDATOR.iter_errors(event):
        if error.path:
            failed.add(str(error.path[0]))
    for key in _NUMERIC_FIELDS:
        value = event.get(key)
        if isinstance(value, float) and not math.isfinite(value):
            failed.add(key)
    return failed
