# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Argument validation for producer API operations.

Everything here runs before a payload is assembled, so a rejected argument
never reaches the network. Failures are raised as IdpackValidationError
subclasses; the pipeline turns them into error envelopes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .errors import InvalidPrimaryKey

OUTPUT_FORMATS = frozenset({"json", "xml"})
MEDIA_OUTPUT_FORMATS = frozenset({"json", "xml", "base64"})
PHOTO_ID_FORMATS = frozenset({"jpeg", "png", "webp"})
BADGE_PREVIEW_FORMATS = frozenset({"jpeg", "png", "webp", "pdf"})
AUTHORIZATIONS = frozenset({"basic", ""})

# 0 is duplex and the server default, so it is never sent.
BADGE_PREVIEW_SIDES = frozenset({1, 2})

_TRUE_STRINGS = frozenset({"1", "true", "on", "yes", "y"})


@dataclass(frozen=True)
class PrimaryKey:
    """A single field/value pair identifying one remote record."""

    field: str
    value: Any

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> PrimaryKey:
        if not data or not isinstance(data, Mapping):
            raise InvalidPrimaryKey("api_primary_key can't be empty.")
        if len(data) > 1:
            raise InvalidPrimaryKey("api_primary_key must have only one argument")
        (field, value), = data.items()
        if not field:
            raise InvalidPrimaryKey("api_primary_key must have a field")
        if _is_empty_value(value):
            raise InvalidPrimaryKey("api_primary_key must have a value")
        return cls(field=str(field), value=value)

    def to_dict(self) -> dict[str, Any]:
        return {self.field: self.value}


def _is_empty_value(value: Any) -> bool:
    # "0", 0 and 0.0 are empty too.
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, (Mapping, list, tuple, set)):
        return len(value) == 0
    if isinstance(value, (int, float)):
        return value == 0
    return False


def validate_primary_key(data: Mapping[str, Any] | PrimaryKey | None) -> PrimaryKey:
    """Return a PrimaryKey, raising InvalidPrimaryKey (720) when malformed."""
    if isinstance(data, PrimaryKey):
        return PrimaryKey.from_mapping(data.to_dict())
    return PrimaryKey.from_mapping(data)


def coerce_bool(value: Any) -> bool:
    """Interpret flags such as "yes", "ON" or 1; non-strings use truthiness."""
    if not isinstance(value, str):
        return bool(value)
    return value.strip().lower() in _TRUE_STRINGS


def normalize_choice(value: Any, allowed: Iterable[str]) -> str | None:
    """Return the lower-cased value when it is one of ``allowed``, else None."""
    normalized = "" if value is None else str(value).lower()
    return normalized if normalized in allowed else None


def normalize_badge_side(value: Any) -> int | None:
    """Return 1 (front) or 2 (back); anything else means the default duplex view."""
    if isinstance(value, (int, float)):
        return int(value) if value in BADGE_PREVIEW_SIDES else None
    try:
        side = float(str(value).strip())
    except ValueError:
        return None
    return int(side) if side in BADGE_PREVIEW_SIDES else None


__all__ = [
    "AUTHORIZATIONS",
    "BADGE_PREVIEW_FORMATS",
    "BADGE_PREVIEW_SIDES",
    "MEDIA_OUTPUT_FORMATS",
    "OUTPUT_FORMATS",
    "PHOTO_ID_FORMATS",
    "PrimaryKey",
    "coerce_bool",
    "normalize_badge_side",
    "normalize_choice",
    "validate_primary_key",
]
