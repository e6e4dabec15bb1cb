"""Tests for the command-line entry points."""

from __future__ import annotations

import logging
import runpy

import pytest
from fakes import FakeApi
from typer.testing import CliRunner

from cursor_exporter import cli
from cursor_exporter.services.container import ServiceContainer

runner = CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CURSOR_API_TOKEN",
        "CURSOR_API_URL",
        "CURSOR_API_VARIANT",
        "LISTEN_ADDRESS",
        "METRICS_PATH",
        "LOG_LEVEL",
        "CURSOR_MAX_PAGES",
        "CURSOR_API_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


def test_missing_token_exits_with_error() -> None:
    result = runner.invoke(cli.app, [])

    assert result.exit_code == 1
    assert "CURSOR_API_TOKEN environment variable is required" in result.output


def test_invalid_listen_address_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CURSOR_API_TOKEN", "tok")
    result = runner.invoke(cli.app, ["--listen-address", "nope"])

    assert result.exit_code == 1
    assert "listen_address" in result.output


def test_serve_runs_uvicorn(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, object]] = []
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append(kwargs))
    monkeypatch.setenv("CURSOR_API_TOKEN", "tok")
    monkeypatch.setenv("LISTEN_ADDRESS", "127.0.0.1:9123")

    result = runner.invoke(cli.app, ["--api-variant", "legacy"])

    assert result.exit_code == 0, result.output
    assert calls == [{"host": "127.0.0.1", "port": 9123, "log_level": "info"}]


def test_scrape_prints_exposition(monkeypatch: pytest.MonkeyPatch) -> None:
    fake_api = FakeApi()
    fake_api.add("GET", "/teams/members", {"teamMembers": []})
    real_create = ServiceContainer.create.__func__

    def create(cls, config, *, transport=None):
        return real_create(cls, config, transport=fake_api.transport())

    monkeypatch.setattr(ServiceContainer, "create", classmethod(create))
    result = runner.invoke(cli.app, ["scrape", "--api-token", "tok"])

    assert result.exit_code == 0, result.output
    assert "cursor_team_members_total 0.0" in result.output
    assert "cursor_exporter_scrape_duration_seconds_count 1.0" in result.output


def test_configure_logging_rejects_unknown_level(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    seen: list[int] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: seen.append(kwargs["level"]))

    cli.configure_logging("verbose")
    cli.configure_logging("debug")

    assert seen == [logging.INFO, logging.DEBUG]
    assert "Invalid log level 'verbose'" in caplog.text


def test_module_entry_point(monkeypatch: pytest.MonkeyPatch) -> None:
    called: list[bool] = []
    monkeypatch.setattr(cli, "app", lambda: called.append(True))

    runpy.run_module("cursor_exporter.__main__", run_name="__main__")

    assert called == [True]
