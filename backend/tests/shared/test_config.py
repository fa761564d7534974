"""Tests for settings, logging setup and HTTP helpers."""

import json
import logging

import httpx

from shared.config import Settings, get_settings
from shared.http import create_http_client, error_payload, read_json
from shared.logging_config import JSONFormatter, configure_logging


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.port == 3001
        assert settings.http_timeout_seconds == 30.0
        assert settings.log_level == "INFO"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("ADMIN_EMAIL", "admin@example.com")
        settings = Settings(_env_file=None)
        assert settings.port == 8080
        assert settings.admin_email == "admin@example.com"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestHttpHelpers:
    def test_client_uses_configured_timeout(self):
        client = create_http_client(timeout=5.0)
        assert client.timeout.read == 5.0

    def test_read_json_non_object(self):
        assert read_json(httpx.Response(200, json=[1, 2])) == {}
        assert read_json(httpx.Response(200, text="not json")) == {}

    def test_error_payload(self):
        response = httpx.Response(
            400, json={"error": {"code": 400, "message": "EMAIL_EXISTS", "status": "INVALID_ARGUMENT"}}
        )
        assert error_payload(response)["message"] == "EMAIL_EXISTS"

    def test_error_payload_string_error(self):
        response = httpx.Response(400, json={"error": "invalid_grant"})
        assert error_payload(response) == {"message": "invalid_grant"}

    def test_error_payload_missing(self):
        assert error_payload(httpx.Response(500, text="oops")) == {}


class TestLogging:
    def test_json_formatter(self):
        record = logging.LogRecord("filters", logging.WARNING, __file__, 1, "hello %s", ("x",), None)
        entry = json.loads(JSONFormatter().format(record))
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "filters"
        assert entry["message"] == "hello x"

    def test_configure_logging_replaces_handlers(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging(level="debug", log_format="json")
            configure_logging(level="debug", log_format="json")
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
