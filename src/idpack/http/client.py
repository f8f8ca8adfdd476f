# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client abstraction and factory."""

from typing import Protocol

from ..config import ClientSettings, load_client_settings
from ..errors import TransportInitError
from .models import HttpRequest, HttpResponse


class HttpClient(Protocol):
    """Minimal protocol for issuing HTTP requests."""

    def request(self, request: HttpRequest) -> HttpResponse: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


def create_default_http_client(settings: ClientSettings | None = None) -> HttpClient:
    """Build the default httpx-backed client, raising TransportInitError if it cannot be set up."""
    from .httpx_client import HttpxClient

    try:
        return HttpxClient(settings or load_client_settings())
    except Exception as exc:  # noqa: BLE001
        raise TransportInitError(f"failed to initialize HTTP client: {exc}") from exc
