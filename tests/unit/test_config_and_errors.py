# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging

from idpack import config
from idpack.config import DEFAULT_USER_AGENT, ClientSettings, Credentials
from idpack.errors import ErrorCode, IdpackError, InvalidOutputFormat
from idpack.log import setup_logging


def test_client_settings_defaults():
    settings = ClientSettings()
    assert settings.endpoint == "https://api.idpack.cloud/producer/"
    assert settings.timeout == 15.0
    assert settings.verify_ssl is True
    assert settings.output_format == "json"
    assert settings.authorization == "basic"


def test_client_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("IDPACK_BASE_URL", "https://staging.idpack.test/")
    monkeypatch.setenv("IDPACK_RESOURCE", "/producer/v2/")
    monkeypatch.setenv("IDPACK_HTTP_TIMEOUT", "5.5")
    monkeypatch.setenv("IDPACK_HTTP_VERIFY_SSL", "0")
    monkeypatch.setenv("IDPACK_OUTPUT_FORMAT", "XML")
    monkeypatch.setenv("IDPACK_AUTHORIZATION", "")
    monkeypatch.setenv("IDPACK_USER_AGENT", "CustomAgent/1.0")

    settings = config.load_client_settings()

    assert settings.endpoint == "https://staging.idpack.test/producer/v2/"
    assert settings.timeout == 5.5
    assert settings.verify_ssl is False
    assert settings.output_format == "xml"
    assert settings.authorization == ""
    assert settings.user_agent == "CustomAgent/1.0"


def test_client_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("IDPACK_HTTP_TIMEOUT", "not-a-number")
    settings = config.load_client_settings()
    assert settings.timeout == ClientSettings.timeout
    assert settings.user_agent == DEFAULT_USER_AGENT

    monkeypatch.setenv("IDPACK_HTTP_TIMEOUT", "-1")
    assert config.load_client_settings().timeout == ClientSettings.timeout


def test_unknown_output_format_and_authorization_fall_back(monkeypatch):
    monkeypatch.setenv("IDPACK_OUTPUT_FORMAT", "yaml")
    monkeypatch.setenv("IDPACK_AUTHORIZATION", "digest")
    settings = config.load_client_settings()
    assert settings.output_format == "json"
    assert settings.authorization == "basic"

    monkeypatch.setenv("IDPACK_OUTPUT_FORMAT", " Base64 ")
    monkeypatch.setenv("IDPACK_AUTHORIZATION", "BASIC")
    settings = config.load_client_settings()
    assert settings.output_format == "base64"
    assert settings.authorization == "basic"


def test_verify_ssl_truthy_variants(monkeypatch):
    for value in ("1", "true", "on", "YES"):
        monkeypatch.setenv("IDPACK_HTTP_VERIFY_SSL", value)
        assert config.load_client_settings().verify_ssl is True
    monkeypatch.setenv("IDPACK_HTTP_VERIFY_SSL", "off")
    assert config.load_client_settings().verify_ssl is False


def test_load_client_settings_reads_env_at_call_time(monkeypatch):
    monkeypatch.setenv("IDPACK_HTTP_TIMEOUT", "7.7")
    assert config.load_client_settings().timeout == 7.7
    monkeypatch.setenv("IDPACK_HTTP_TIMEOUT", "8.8")
    assert config.load_client_settings().timeout == 8.8


def test_credentials_from_env_and_repr(monkeypatch):
    monkeypatch.setenv("IDPACK_USERNAME", "ann")
    monkeypatch.setenv("IDPACK_PASSWORD", "hunter2")
    monkeypatch.delenv("IDPACK_USER_SECRET_KEY", raising=False)
    monkeypatch.setenv("IDPACK_PROJECT_SECRET_KEY", "psk")
    creds = Credentials.from_env()
    assert creds == Credentials("ann", "hunter2", "", "psk")
    assert "hunter2" not in repr(creds)
    assert "psk" not in repr(creds)


def test_error_codes_and_messages():
    assert [int(code) for code in ErrorCode] == [600, 610, 620, 630, 640, 650, 720, 730, 740, 750]
    exc = InvalidOutputFormat("invalid api_output_format: yaml")
    assert exc.code == 610
    assert str(exc) == "invalid api_output_format: yaml"
    assert IdpackError("custom", code=642).code == 642
    assert IdpackError("fallback").code == ErrorCode.UNEXPECTED_FAULT


def test_setup_logging_quiets_httpx(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
    setup_logging("info")
    assert calls["level"] == logging.INFO
    assert logging.getLogger("httpx").level == logging.WARNING

    setup_logging("bogus")
    assert calls["level"] == logging.WARNING
