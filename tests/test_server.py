"""Tests for the HTTP surface."""

from __future__ import annotations

import datetime as dt
import logging

import pytest
from fakes import FakeDataSource
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from cursor_exporter.server import create_app
from cursor_exporter.services.exporter import CursorExporter


@pytest.fixture
def registry(fake_source: FakeDataSource) -> CollectorRegistry:
    registry = CollectorRegistry()
    registry.register(CursorExporter(fake_source))
    return registry


def test_metrics_endpoint(registry: CollectorRegistry) -> None:
    client = TestClient(create_app(registry))
    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "cursor_team_members_total 0.0" in response.text
    assert "cursor_exporter_scrape_errors_total 0.0" in response.text


def test_custom_metrics_path(registry: CollectorRegistry) -> None:
    client = TestClient(create_app(registry, metrics_path="/prom"))

    assert client.get("/prom").status_code == 200
    assert client.get("/metrics").status_code == 404
    assert 'href="/prom"' in client.get("/").text


def test_health(registry: CollectorRegistry) -> None:
    body = TestClient(create_app(registry)).get("/health").json()

    assert body["status"] == "healthy"
    stamp = dt.datetime.fromisoformat(body["timestamp"])
    assert stamp.utcoffset() == dt.timedelta(0)
    assert stamp.microsecond == 0


def test_index_links(registry: CollectorRegistry) -> None:
    response = TestClient(create_app(registry)).get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "Cursor Admin API Exporter" in response.text
    assert 'href="/metrics"' in response.text
    assert 'href="/health"' in response.text


def test_debug_request_logging(
    registry: CollectorRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    client = TestClient(create_app(registry, debug=True))
    with caplog.at_level(logging.DEBUG, logger="cursor_exporter.server"):
        client.get("/health")

    assert "HTTP request received: GET /health" in caplog.text
    assert "HTTP request completed: GET /health -> 200" in caplog.text
