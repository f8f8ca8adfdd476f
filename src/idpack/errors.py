# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

from enum import Enum, IntEnum


class ErrorCode(IntEnum):
    """Locally generated error codes reported in error envelopes."""

    EMPTY_PAYLOAD = 600
    INVALID_OUTPUT_FORMAT = 610
    TRANSPORT_INIT_FAILED = 620
    TRANSPORT_FAILED = 630
    EMPTY_RESPONSE = 640
    UNEXPECTED_FAULT = 650
    INVALID_PRIMARY_KEY = 720
    INVALID_PHOTO_ID_FORMAT = 730
    INVALID_BADGE_PREVIEW_FORMAT = 740
    EMPTY_RECORD_DATA = 750


class IdpackError(Exception):
    """Base error carrying the envelope code and message."""

    code: int = ErrorCode.UNEXPECTED_FAULT

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class IdpackValidationError(IdpackError):
    """Raised before any network activity when an argument is rejected."""


class EmptyPayload(IdpackValidationError):
    code = ErrorCode.EMPTY_PAYLOAD


class InvalidOutputFormat(IdpackValidationError):
    code = ErrorCode.INVALID_OUTPUT_FORMAT


class InvalidPrimaryKey(IdpackValidationError):
    code = ErrorCode.INVALID_PRIMARY_KEY


class InvalidPhotoIdFormat(IdpackValidationError):
    code = ErrorCode.INVALID_PHOTO_ID_FORMAT


class InvalidBadgePreviewFormat(IdpackValidationError):
    code = ErrorCode.INVALID_BADGE_PREVIEW_FORMAT


class EmptyRecordData(IdpackValidationError):
    code = ErrorCode.EMPTY_RECORD_DATA


class TransportInitError(IdpackError):
    code = ErrorCode.TRANSPORT_INIT_FAILED


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.

    httpx wraps the underlying socket/ssl error, so the cause chain is checked
    before giving up on a specific category.
    """
    import socket
    import ssl as ssl_module

    import httpx

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    cause = exc.__cause__ or exc.__context__
    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)) or isinstance(cause, ssl_module.SSLError):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)) or isinstance(cause, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (httpx.RemoteProtocolError, httpx.LocalProtocolError, httpx.UnsupportedProtocol)):
        return ErrorCategory.PROTOCOL_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.NetworkError, httpx.ProxyError, ConnectionError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


__all__ = [
    "EmptyPayload",
    "EmptyRecordData",
    "ErrorCategory",
    "ErrorCode",
    "IdpackError",
    "IdpackValidationError",
    "InvalidBadgePreviewFormat",
    "InvalidOutputFormat",
    "InvalidPhotoIdFormat",
    "InvalidPrimaryKey",
    "TransportInitError",
    "categorize_exception",
]
