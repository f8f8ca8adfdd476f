# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Response normalization.

Every call ends in an Exchange whose ``envelope`` is the string handed back to
the caller: either the server body verbatim (HTTP 200, non-empty) or a locally
built error object::

    {"status": "error", "message": "...", "code": 401, "api_action": "get_record",
     "api": {"api_authorization": "basic", "idc_php_version": "1.3.072"}}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from .errors import ErrorCode
from .http.models import HttpResponse
from .payloads import CLIENT_VERSION_KEY, Payload
from .version import __version__

logger = logging.getLogger(__name__)

MESSAGE_PREFIX = "idc-python: "
UNAUTHORIZED_MESSAGE = "HTTP/1.0 401 Unauthorized."
SERVER_ERROR_MESSAGE = "HTTP/1.0 500 IDC API - Server Error."
EMPTY_RESPONSE_MESSAGE = "Response is empty!"


@dataclass
class Exchange:
    """Outcome of one pipeline call."""

    envelope: str
    action: str = ""
    payload: Payload | None = None
    status_code: int | None = None
    remote_ip: str = ""
    insert_id: str | None = None
    ok: bool = False
    payload_json: str = ""


def error_envelope(
    message: str | None = None,
    code: int | None = None,
    *,
    action: str = "",
    authorization: str = "",
) -> str:
    """Serialize the error object returned for every local or remote failure."""
    body: dict[str, Any] = {"status": "error"}
    if message:
        body["message"] = f"{MESSAGE_PREFIX}{message}"
    if code:
        body["code"] = int(code)
    if action:
        body["api_action"] = action
    body["api"] = {
        "api_authorization": authorization,
        CLIENT_VERSION_KEY: __version__,
    }
    return json.dumps(body)


def error_exchange(
    message: str | None,
    code: int | None,
    *,
    action: str = "",
    authorization: str = "",
    payload: Payload | None = None,
    payload_json: str = "",
    remote_ip: str = "",
) -> Exchange:
    return Exchange(
        envelope=error_envelope(message, code, action=action, authorization=authorization),
        action=action,
        payload=payload,
        status_code=int(code) if code else None,
        remote_ip=remote_ip,
        payload_json=payload_json,
    )


def extract_insert_id(body: str) -> str | None:
    """Return ``data.idc_id_number`` from an insert_record response, if present."""
    try:
        parsed = json.loads(body)
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None
    data = parsed.get("data")
    if not isinstance(data, dict) or data.get("idc_id_number") is None:
        return None
    return str(data["idc_id_number"])


def map_response(
    response: HttpResponse,
    *,
    action: str,
    authorization: str,
    payload: Payload | None = None,
    payload_json: str = "",
) -> Exchange:
    """Convert a transport outcome into the caller-facing Exchange."""
    context = {"action": action, "authorization": authorization, "payload": payload, "payload_json": payload_json}

    if not response.ok and response.status_code is None:
        detail = " ".join(part for part in (response.error_message, response.error_type, response.meta.get("error_category")) if part)
        logger.warning("Transport failure for %s: %s", action, detail)
        return error_exchange(f"HTTP transport error: {detail}", ErrorCode.TRANSPORT_FAILED, **context)

    status = int(response.status_code or 0)
    remote_ip = response.remote_ip or ""
    if status == 401:
        logger.warning("Server rejected credentials for %s", action)
        return error_exchange(UNAUTHORIZED_MESSAGE, status, remote_ip=remote_ip, **context)
    if status == 500:
        logger.warning("Server error for %s", action)
        return error_exchange(SERVER_ERROR_MESSAGE, status, remote_ip=remote_ip, **context)
    if status != 200:
        logger.warning("Unexpected HTTP %s for %s", status, action)
        return error_exchange(f"Unexpected {status} HTTP code.", status, remote_ip=remote_ip, **context)
    if response.is_empty:
        return error_exchange(EMPTY_RESPONSE_MESSAGE, ErrorCode.EMPTY_RESPONSE, remote_ip=remote_ip, **context)

    insert_id = extract_insert_id(response.text) if action == "insert_record" else None
    return Exchange(
        envelope=response.text,
        action=action,
        payload=payload,
        status_code=status,
        remote_ip=remote_ip,
        insert_id=insert_id,
        ok=True,
        payload_json=payload_json,
    )


__all__ = [
    "EMPTY_RESPONSE_MESSAGE",
    "Exchange",
    "MESSAGE_PREFIX",
    "SERVER_ERROR_MESSAGE",
    "UNAUTHORIZED_MESSAGE",
    "error_envelope",
    "error_exchange",
    "extract_insert_id",
    "map_response",
]
