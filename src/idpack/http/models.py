# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models used by the transport layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "POST"
    headers: Headers | None = None
    body: bytes | None = None
    timeout: float | None = None
    auth: tuple[str, str] | None = None

    def __repr__(self) -> str:
        # Never echo basic-auth credentials into logs.
        auth = "('***', '***')" if self.auth else "None"
        return f"HttpRequest(url={self.url!r}, method={self.method!r}, timeout={self.timeout!r}, auth={auth})"


@dataclass
class HttpResponse:
    """
    Normalized HTTP response.

    ``ok`` is False only for transport-level failures; any response received
    from the server (whatever its status) is ``ok=True`` with ``status_code``
    set.
    """

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    text: str = ""
    content: bytes = b""
    url: str | None = None
    remote_ip: str = ""
    error_message: str | None = None
    error_type: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.content and not self.text
