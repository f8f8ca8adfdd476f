# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for idpack."""

import os
from dataclasses import dataclass

from .validation import AUTHORIZATIONS, MEDIA_OUTPUT_FORMATS, normalize_choice
from .version import __version__

DEFAULT_BASE_URL = "https://api.idpack.cloud"
DEFAULT_RESOURCE = "/producer/"
DEFAULT_USER_AGENT = f"idpack-python/{__version__}"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip()


@dataclass
class ClientSettings:
    """Endpoint and transport defaults for the producer API."""

    base_url: str = DEFAULT_BASE_URL
    resource: str = DEFAULT_RESOURCE
    timeout: float = 15.0
    verify_ssl: bool = True
    output_format: str = "json"
    authorization: str = "basic"
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{self.resource}"

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Create settings from environment variables (evaluated at call time)."""
        timeout = _float_env("IDPACK_HTTP_TIMEOUT", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        output_format = normalize_choice(_str_env("IDPACK_OUTPUT_FORMAT", cls.output_format), MEDIA_OUTPUT_FORMATS)
        if output_format is None:
            output_format = cls.output_format
        authorization = normalize_choice(_str_env("IDPACK_AUTHORIZATION", cls.authorization), AUTHORIZATIONS)
        if authorization is None:
            authorization = cls.authorization
        return cls(
            base_url=_str_env("IDPACK_BASE_URL", cls.base_url).rstrip("/") or cls.base_url,
            resource=_str_env("IDPACK_RESOURCE", cls.resource) or cls.resource,
            timeout=timeout,
            verify_ssl=_bool_env("IDPACK_HTTP_VERIFY_SSL", cls.verify_ssl),
            output_format=output_format,
            authorization=authorization,
            user_agent=os.getenv("IDPACK_USER_AGENT", cls.user_agent),
        )


@dataclass
class Credentials:
    """Basic-auth login plus the two secret keys embedded in every payload."""

    username: str = ""
    password: str = ""
    user_secret_key: str = ""
    project_secret_key: str = ""

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***', user_secret_key='***', project_secret_key='***')"

    @classmethod
    def from_env(cls) -> "Credentials":
        return cls(
            username=os.getenv("IDPACK_USERNAME", ""),
            password=os.getenv("IDPACK_PASSWORD", ""),
            user_secret_key=os.getenv("IDPACK_USER_SECRET_KEY", ""),
            project_secret_key=os.getenv("IDPACK_PROJECT_SECRET_KEY", ""),
        )


def load_client_settings() -> ClientSettings:
    """Load client settings from environment with sensible defaults."""
    return ClientSettings.from_env()
