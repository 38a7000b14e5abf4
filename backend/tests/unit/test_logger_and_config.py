"""Unit tests for logging setup and environment-driven configuration."""

from __future__ import annotations

import json
import logging
from datetime import timedelta

import pytest

from biblio.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_seconds,
    get_config,
)
from biblio.core.logger import REQUEST_ID_HEADER, JSONFormatter, configure_logging


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_sets_level(restore_root_logger) -> None:
    configure_logging("DEBUG")

    assert restore_root_logger.level == logging.DEBUG
    assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)


def test_json_formatter_copies_extra_keys() -> None:
    record = logging.LogRecord("biblio", logging.INFO, __file__, 1, "auth.login", None, None)
    record.username = "alice"
    record.reason = "invalid_credentials"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "auth.login"
    assert payload["username"] == "alice"
    assert payload["reason"] == "invalid_credentials"
    assert "user_id" not in payload


def test_request_id_header_is_echoed(client) -> None:
    resp = client.get("/api/health", headers={REQUEST_ID_HEADER: "req-123"})
    assert resp.headers[REQUEST_ID_HEADER] == "req-123"


@pytest.mark.parametrize(
    "raw, expected",
    [("1", True), ("yes", True), (" On ", True), ("0", False), ("nope", False)],
)
def test_env_bool(monkeypatch, raw, expected) -> None:
    monkeypatch.setenv("BIBLIO_FLAG", raw)
    assert env_bool("BIBLIO_FLAG") is expected


def test_env_bool_default(monkeypatch) -> None:
    monkeypatch.delenv("BIBLIO_FLAG", raising=False)
    assert env_bool("BIBLIO_FLAG", True) is True


def test_env_seconds(monkeypatch) -> None:
    monkeypatch.setenv("BIBLIO_TTL", "90")
    assert env_seconds("BIBLIO_TTL", 10) == timedelta(seconds=90)
    monkeypatch.setenv("BIBLIO_TTL", " ")
    assert env_seconds("BIBLIO_TTL", 10) == timedelta(seconds=10)
    monkeypatch.setenv("BIBLIO_TTL", "soon")
    with pytest.raises(ValueError):
        env_seconds("BIBLIO_TTL", 10)


@pytest.mark.parametrize(
    "env, expected",
    [
        ("testing", TestingConfig),
        ("PRODUCTION", ProductionConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config(monkeypatch, env, expected) -> None:
    monkeypatch.setenv("APP_ENV", env)
    assert get_config() is expected
