# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
idpack package entrypoint.

Python client for the IDpack in the Cloud producer REST API. Operations are
validated locally, sent as a single JSON POST and answered with a JSON string:
the server body on success or a uniform error envelope on any failure. HTTP
behavior is abstracted behind an injectable client interface.
"""

from .config import ClientSettings, Credentials, load_client_settings
from .envelope import Exchange, error_envelope
from .errors import ErrorCode, IdpackError, IdpackValidationError
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    StubHttpClient,
    create_default_http_client,
)
from .log import setup_logging
from .payloads import ActionRequest, Payload
from .runtime import IDpack
from .validation import PrimaryKey, coerce_bool
from .version import __version__

__all__ = [
    "ActionRequest",
    "ClientSettings",
    "Credentials",
    "ErrorCode",
    "Exchange",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "IDpack",
    "IdpackError",
    "IdpackValidationError",
    "Payload",
    "PrimaryKey",
    "StubHttpClient",
    "coerce_bool",
    "create_default_http_client",
    "error_envelope",
    "load_client_settings",
    "setup_logging",
    "__version__",
]
