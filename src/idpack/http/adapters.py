# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process HttpClient implementations for tests and offline use."""

from __future__ import annotations

from collections.abc import Iterable

from .client import HttpClient
from .models import HttpRequest, HttpResponse


class StubHttpClient(HttpClient):
    """
    Deterministic, programmable HttpClient.

    Responses are served in order; the last one repeats once the queue is
    drained. Every request is recorded in ``requests``.
    """

    def __init__(self, responses: Iterable[HttpResponse] | HttpResponse | None = None):
        if isinstance(responses, HttpResponse):
            responses = [responses]
        self._responses = list(responses or [])
        self.requests: list[HttpRequest] = []
        self.closed = False

    @property
    def last_request(self) -> HttpRequest | None:
        return self.requests[-1] if self.requests else None

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if not self._responses:
            return HttpResponse(ok=False, error_message="No stubbed response configured", error_type="StubHttpClient")
        index = min(len(self.requests) - 1, len(self._responses) - 1)
        return self._responses[index]

    def close(self) -> None:
        self.closed = True
