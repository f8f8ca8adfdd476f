# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Request payload builders for the producer API.

Each public builder mirrors one client operation and returns an ActionRequest
holding the action name plus its ``api`` and ``data`` blocks. ``build_payload``
then merges credentials and the always-present api fields into a fresh Payload
for a single call.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .config import Credentials
from .errors import (
    EmptyRecordData,
    InvalidBadgePreviewFormat,
    InvalidOutputFormat,
    InvalidPhotoIdFormat,
)
from .validation import (
    BADGE_PREVIEW_FORMATS,
    MEDIA_OUTPUT_FORMATS,
    OUTPUT_FORMATS,
    PHOTO_ID_FORMATS,
    PrimaryKey,
    coerce_bool,
    normalize_badge_side,
    normalize_choice,
    validate_primary_key,
)
from .version import __version__

CLIENT_VERSION_KEY = "idc_php_version"
MEDIA_ACTIONS = frozenset({"get_photo_id", "get_badge_preview"})

PrimaryKeyInput = Mapping[str, Any] | PrimaryKey | None


@dataclass(frozen=True)
class ActionRequest:
    """Action name plus the operation-specific api/data blocks."""

    action: str
    api: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] | None = None


@dataclass(frozen=True)
class Payload:
    """Wire payload for one call."""

    user_secret_key: str = ""
    project_secret_key: str = ""
    api: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "user_secret_key": self.user_secret_key,
            "project_secret_key": self.project_secret_key,
            "api": dict(self.api),
        }
        if self.data is not None:
            result["data"] = dict(self.data)
        return result

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


def allowed_output_formats(action: str) -> frozenset[str]:
    return MEDIA_OUTPUT_FORMATS if action in MEDIA_ACTIONS else OUTPUT_FORMATS


def check_output_format(action: str, output_format: str) -> str:
    """Return the normalized output format, raising InvalidOutputFormat (610)."""
    normalized = normalize_choice(output_format, allowed_output_formats(action))
    if normalized is None:
        raise InvalidOutputFormat(f"invalid api_output_format: {output_format}")
    return normalized


def build_payload(
    request: ActionRequest,
    credentials: Credentials,
    *,
    output_format: str,
    authorization: str,
) -> Payload:
    """Merge credentials and the standard api fields into a new Payload."""
    api = dict(request.api)
    api.update(
        {
            "api_action": request.action,
            "api_output_format": check_output_format(request.action, output_format),
            "api_authorization": authorization,
            CLIENT_VERSION_KEY: __version__,
        }
    )
    return Payload(
        user_secret_key=credentials.user_secret_key,
        project_secret_key=credentials.project_secret_key,
        api=api,
        data=dict(request.data) if request.data is not None else None,
    )


def _photo_id_format(value: Any) -> str:
    normalized = normalize_choice(value, PHOTO_ID_FORMATS)
    if normalized is None:
        raise InvalidPhotoIdFormat(f"invalid api_photo_id_format: {'' if value is None else value}")
    return normalized


def _badge_preview_fields(badge_preview_format: Any, side: Any) -> dict[str, Any]:
    normalized = normalize_choice(badge_preview_format, BADGE_PREVIEW_FORMATS)
    if normalized is None:
        shown = "" if badge_preview_format is None else badge_preview_format
        raise InvalidBadgePreviewFormat(f"invalid api_badge_preview_format: {shown}")
    fields: dict[str, Any] = {"api_badge_preview_format": normalized}
    number = normalize_badge_side(side)
    if number is not None:
        fields["api_badge_preview_number"] = number
    return fields


def _record_data(data: Mapping[str, Any] | None) -> dict[str, Any]:
    if not data:
        raise EmptyRecordData("api_data can't be empty.")
    if not isinstance(data, Mapping):
        raise EmptyRecordData("api_data must be a set of field/value pairs.")
    return dict(data)


def _flag_update(primary_key: PrimaryKeyInput, data: dict[str, str]) -> ActionRequest:
    pk = validate_primary_key(primary_key)
    return ActionRequest("update_record", {"api_primary_key": pk.to_dict()}, data)


def get_record(
    primary_key: PrimaryKeyInput,
    photo_id: Any = False,
    photo_id_format: str | None = None,
    badge_preview: Any = False,
    badge_preview_format: str | None = None,
    badge_preview_side: Any = 0,
) -> ActionRequest:
    """
    Fetch one record, optionally embedding its photo ID and badge preview.

    ``badge_preview_side`` selects duplex (0), front (1) or back (2).
    """
    pk = validate_primary_key(primary_key)
    api: dict[str, Any] = {"api_primary_key": pk.to_dict()}
    if coerce_bool(photo_id):
        api["api_photo_id"] = 1
        api["api_photo_id_format"] = _photo_id_format(photo_id_format)
    if coerce_bool(badge_preview):
        api["api_badge_preview"] = 1
        api.update(_badge_preview_fields(badge_preview_format, badge_preview_side))
    return ActionRequest("get_record", api)


def get_all_records() -> ActionRequest:
    return ActionRequest("get_all_records")


def get_photo_id(primary_key: PrimaryKeyInput, photo_id_format: str | None = None) -> ActionRequest:
    pk = validate_primary_key(primary_key)
    api = {"api_primary_key": pk.to_dict(), "api_photo_id_format": _photo_id_format(photo_id_format)}
    return ActionRequest("get_photo_id", api)


def get_badge_preview(
    primary_key: PrimaryKeyInput,
    badge_preview_format: str | None = None,
    badge_preview_side: Any = 0,
) -> ActionRequest:
    pk = validate_primary_key(primary_key)
    api: dict[str, Any] = {"api_primary_key": pk.to_dict()}
    api.update(_badge_preview_fields(badge_preview_format, badge_preview_side))
    return ActionRequest("get_badge_preview", api)


def update_record(primary_key: PrimaryKeyInput, data: Mapping[str, Any] | None = None) -> ActionRequest:
    pk = validate_primary_key(primary_key)
    return ActionRequest("update_record", {"api_primary_key": pk.to_dict()}, _record_data(data))


def insert_record(data: Mapping[str, Any] | None = None) -> ActionRequest:
    return ActionRequest("insert_record", {}, _record_data(data))


def delete_record(primary_key: PrimaryKeyInput) -> ActionRequest:
    """Permanently delete a record and its photo ID."""
    return _flag_update(primary_key, {"idc_delete": "1"})


def set_record_active(primary_key: PrimaryKeyInput) -> ActionRequest:
    return _flag_update(primary_key, {"idc_active": "1"})


def set_record_not_active(primary_key: PrimaryKeyInput) -> ActionRequest:
    return _flag_update(primary_key, {"idc_active": "0"})


def set_record_trash(primary_key: PrimaryKeyInput) -> ActionRequest:
    return _flag_update(primary_key, {"idc_trash": "1"})


def set_record_not_trash(primary_key: PrimaryKeyInput) -> ActionRequest:
    return _flag_update(primary_key, {"idc_trash": "0"})


BUILDERS: dict[str, Callable[..., ActionRequest]] = {
    "get_record": get_record,
    "get_all_records": get_all_records,
    "get_photo_id": get_photo_id,
    "get_badge_preview": get_badge_preview,
    "update_record": update_record,
    "insert_record": insert_record,
    "delete_record": delete_record,
    "set_record_active": set_record_active,
    "set_record_not_active": set_record_not_active,
    "set_record_trash": set_record_trash,
    "set_record_not_trash": set_record_not_trash,
}

# Record flag operations are sent to the server as plain record updates.
_FLAG_OPERATIONS = frozenset({"delete_record", "set_record_active", "set_record_not_active", "set_record_trash", "set_record_not_trash"})


def wire_action(operation: str) -> str:
    """Return the api_action the server sees for a client operation."""
    name = operation.lower()
    return "update_record" if name in _FLAG_OPERATIONS else name


__all__ = [
    "BUILDERS",
    "CLIENT_VERSION_KEY",
    "ActionRequest",
    "Payload",
    "allowed_output_formats",
    "build_payload",
    "check_output_format",
    "wire_action",
]
