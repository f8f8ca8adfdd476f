# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level IDpack facade over the producer API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from contextlib import suppress
from typing import Any

from .config import ClientSettings, Credentials, load_client_settings
from .envelope import Exchange, error_exchange, map_response
from .errors import EmptyPayload, ErrorCode, IdpackError, IdpackValidationError
from .http.client import HttpClient, create_default_http_client
from .http.models import HttpRequest
from .payloads import BUILDERS, ActionRequest, PrimaryKeyInput, build_payload, wire_action
from .validation import AUTHORIZATIONS, MEDIA_OUTPUT_FORMATS, normalize_choice

logger = logging.getLogger(__name__)


class IDpack:
    """
    Client for the IDpack in the Cloud producer endpoint.

    Every operation performs at most one blocking POST and returns a JSON
    string: the server body on success, an error envelope otherwise. Nothing
    is raised to the caller. The accessors (``server_ip``,
    ``server_http_return_code``, ``insert_id``, ``payload_json``, ``payload``)
    reflect the most recent call.

    An instance is not safe for concurrent use; use one instance per in-flight
    call or serialize access.
    """

    def __init__(
        self,
        username: str = "",
        password: str = "",
        user_secret_key: str = "",
        project_secret_key: str = "",
        *,
        settings: ClientSettings | None = None,
        http_client: HttpClient | None = None,
    ):
        self.settings = settings or load_client_settings()
        self.credentials = Credentials(username, password, user_secret_key, project_secret_key)
        self.http_client = http_client
        self._owns_client = http_client is None
        self.api_output_format = self.settings.output_format
        self.api_authorization = self.settings.authorization
        self._last: Exchange | None = None
        self._insert_id = ""

    @classmethod
    def from_env(cls, *, settings: ClientSettings | None = None, http_client: HttpClient | None = None) -> IDpack:
        """Build a client whose credentials come from IDPACK_* environment variables."""
        creds = Credentials.from_env()
        return cls(
            creds.username,
            creds.password,
            creds.user_secret_key,
            creds.project_secret_key,
            settings=settings,
            http_client=http_client,
        )

    # Accessors

    @property
    def last_exchange(self) -> Exchange | None:
        return self._last

    @property
    def server_ip(self) -> str:
        return self._last.remote_ip if self._last else ""

    @property
    def server_http_return_code(self) -> int | None:
        return self._last.status_code if self._last else None

    @property
    def insert_id(self) -> str:
        return self._insert_id

    @property
    def payload_json(self) -> str:
        return self._last.payload_json if self._last else ""

    @property
    def payload(self) -> dict[str, Any] | None:
        if self._last is None or self._last.payload is None:
            return None
        return self._last.payload.to_dict()

    # Configuration

    def set_username(self, username: str) -> None:
        self.credentials.username = username

    def set_password(self, password: str) -> None:
        self.credentials.password = password

    def set_user_secret_key(self, user_secret_key: str) -> None:
        self.credentials.user_secret_key = user_secret_key

    def set_project_secret_key(self, project_secret_key: str) -> None:
        self.credentials.project_secret_key = project_secret_key

    def set_api_authorization(self, api_authorization: str | None) -> bool:
        """Select "basic" (HTTP Basic credentials) or "" (secret keys only)."""
        normalized = normalize_choice(api_authorization, AUTHORIZATIONS)
        if normalized is None:
            return False
        self.api_authorization = normalized
        return True

    def set_api_output_format(self, api_output_format: str | None) -> bool:
        """
        Select json, xml or base64.

        base64 is only honored by get_photo_id and get_badge_preview; other
        operations reject it with code 610 at call time.
        """
        normalized = normalize_choice(api_output_format, MEDIA_OUTPUT_FORMATS)
        if normalized is None:
            return False
        self.api_output_format = normalized
        return True

    # Pipeline

    def call(self, operation: str, *args: Any, **kwargs: Any) -> Exchange:
        """Run one named operation and return the full Exchange."""
        try:
            builder = BUILDERS[operation]
        except KeyError:
            raise ValueError(f"unknown operation: {operation}") from None
        try:
            request = builder(*args, **kwargs)
        except IdpackValidationError as exc:
            logger.debug("Rejected %s before sending: %s", operation, exc.message)
            return self._record(self._error(exc, wire_action(operation)))
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected failure while building %s", operation)
            return self._record(
                error_exchange(
                    f"caught exception: {exc}",
                    ErrorCode.UNEXPECTED_FAULT,
                    action=wire_action(operation),
                    authorization=self.api_authorization,
                )
            )
        return self.execute(request)

    def execute(self, request: ActionRequest) -> Exchange:
        """Send a prebuilt ActionRequest through the pipeline."""
        return self._record(self._exchange(request))

    def _error(self, exc: IdpackError, action: str, **kwargs: Any) -> Exchange:
        return error_exchange(exc.message, exc.code, action=action, authorization=self.api_authorization, **kwargs)

    def _record(self, exchange: Exchange) -> Exchange:
        self._last = exchange
        if exchange.ok and exchange.insert_id is not None:
            self._insert_id = exchange.insert_id
        return exchange

    def _ensure_client(self) -> HttpClient:
        if self.http_client is None:
            self.http_client = create_default_http_client(self.settings)
            self._owns_client = True
        return self.http_client

    def _build_http_request(self, body: bytes) -> HttpRequest:
        headers = {
            "Accept-Language": "en-US",
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
        }
        auth = None
        if self.api_authorization == "basic":
            auth = (self.credentials.username, self.credentials.password)
        return HttpRequest(
            url=self.settings.endpoint,
            method="POST",
            headers=headers,
            body=body,
            timeout=self.settings.timeout,
            auth=auth,
        )

    def _exchange(self, request: ActionRequest) -> Exchange:
        action = request.action
        creds = self.credentials
        try:
            if not (creds.user_secret_key or creds.project_secret_key or request.api or request.data):
                raise EmptyPayload("payload can't be empty!")
            payload = build_payload(
                request,
                creds,
                output_format=self.api_output_format,
                authorization=self.api_authorization,
            )
        except IdpackValidationError as exc:
            return self._error(exc, action)

        payload_json = ""
        try:
            payload_json = payload.to_json()
            body = payload_json.encode("utf-8")
            client = self._ensure_client()
            logger.debug("Sending %s to %s (%d bytes)", action, self.settings.endpoint, len(body))
            response = client.request(self._build_http_request(body))
            exchange = map_response(
                response,
                action=action,
                authorization=self.api_authorization,
                payload=payload,
                payload_json=payload_json,
            )
        except IdpackError as exc:
            logger.warning("Could not send %s: %s", action, exc.message)
            return self._error(exc, action, payload=payload, payload_json=payload_json)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected failure while sending %s", action)
            return error_exchange(
                f"caught exception: {exc}",
                ErrorCode.UNEXPECTED_FAULT,
                action=action,
                authorization=self.api_authorization,
                payload=payload,
                payload_json=payload_json,
            )
        logger.debug("Received HTTP %s for %s from %s", exchange.status_code, action, exchange.remote_ip or "-")
        return exchange

    # Operations

    def get_record(
        self,
        primary_key: PrimaryKeyInput = None,
        photo_id: Any = False,
        photo_id_format: str | None = None,
        badge_preview: Any = False,
        badge_preview_format: str | None = None,
        badge_preview_side: Any = 0,
    ) -> str:
        """
        Fetch one record.

        ``photo_id``/``badge_preview`` accept booleans or flag strings such as
        "yes"; ``badge_preview_side`` is 0 (duplex), 1 (front) or 2 (back).
        """
        return self.call(
            "get_record",
            primary_key,
            photo_id,
            photo_id_format,
            badge_preview,
            badge_preview_format,
            badge_preview_side,
        ).envelope

    def get_all_records(self) -> str:
        return self.call("get_all_records").envelope

    def get_photo_id(self, primary_key: PrimaryKeyInput = None, photo_id_format: str | None = None) -> str:
        return self.call("get_photo_id", primary_key, photo_id_format).envelope

    def get_badge_preview(
        self,
        primary_key: PrimaryKeyInput = None,
        badge_preview_format: str | None = None,
        badge_preview_side: Any = 0,
    ) -> str:
        return self.call("get_badge_preview", primary_key, badge_preview_format, badge_preview_side).envelope

    def update_record(self, primary_key: PrimaryKeyInput = None, data: Mapping[str, Any] | None = None) -> str:
        return self.call("update_record", primary_key, data).envelope

    def insert_record(self, data: Mapping[str, Any] | None = None) -> str:
        """Create a record; on success ``insert_id`` holds the new idc_id_number."""
        return self.call("insert_record", data).envelope

    def delete_record(self, primary_key: PrimaryKeyInput = None) -> str:
        """Permanently delete a record and its photo ID. There is no undo."""
        return self.call("delete_record", primary_key).envelope

    def set_record_active(self, primary_key: PrimaryKeyInput = None) -> str:
        return self.call("set_record_active", primary_key).envelope

    def set_record_not_active(self, primary_key: PrimaryKeyInput = None) -> str:
        return self.call("set_record_not_active", primary_key).envelope

    def set_record_trash(self, primary_key: PrimaryKeyInput = None) -> str:
        return self.call("set_record_trash", primary_key).envelope

    def set_record_not_trash(self, primary_key: PrimaryKeyInput = None) -> str:
        return self.call("set_record_not_trash", primary_key).envelope

    def close(self) -> None:
        if not self._owns_client or self.http_client is None:
            return
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()
        self.http_client = None

    def __enter__(self) -> IDpack:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


__all__ = ["IDpack"]
