# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import logging

import httpx

from ..config import ClientSettings, load_client_settings
from ..errors import categorize_exception
from .client import HttpClient
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)


def _remote_ip(response: httpx.Response) -> str:
    """Peer address of the connection that served ``response``, if the transport exposes it."""
    network_stream = response.extensions.get("network_stream")
    if network_stream is None:
        return ""
    try:
        server_addr = network_stream.get_extra_info("server_addr")
    except (AttributeError, OSError):
        return ""
    if not server_addr:
        return ""
    return str(server_addr[0])


class HttpxClient(HttpClient):
    """Synchronous httpx client wrapper."""

    def __init__(self, settings: ClientSettings | None = None, client: httpx.Client | None = None):
        self.settings = settings or load_client_settings()
        self._client = client or httpx.Client(
            follow_redirects=False,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )
        if not self.settings.verify_ssl:
            logger.warning("TLS certificate verification is disabled for %s", self.settings.base_url)

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)
        timeout = request.timeout if request.timeout is not None else self.settings.timeout

        try:
            with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                content=request.body,
                auth=request.auth,
                timeout=timeout,
            ) as resp:
                remote_ip = _remote_ip(resp)
                content = resp.read()
                encoding = resp.encoding or "utf-8"
                try:
                    text = content.decode(encoding, errors="replace")
                except LookupError:
                    text = content.decode("utf-8", errors="replace")

            return HttpResponse(
                ok=True,
                status_code=resp.status_code,
                headers=dict(resp.headers),
                text=text,
                content=content,
                url=str(resp.url),
                remote_ip=remote_ip,
            )
        except Exception as exc:  # noqa: BLE001
            category = categorize_exception(exc)
            logger.debug("Transport failure for %s: %s (%s)", request.url, exc, category.value)
            return HttpResponse(
                ok=False,
                error_message=str(exc),
                error_type=type(exc).__name__,
                meta={"error_category": category.value},
            )

    def close(self) -> None:
        self._client.close()
