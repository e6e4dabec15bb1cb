"""Shared fixtures for exporter tests."""

from __future__ import annotations

import datetime as dt
from collections.abc import Callable

import pytest
from fakes import BASE_URL, FIXED_NOW, TOKEN, FakeApi, FakeDataSource

from cursor_exporter.config import Config
from cursor_exporter.data.transport import CursorTransport


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def transport(fake_api: FakeApi) -> CursorTransport:
    return CursorTransport(BASE_URL, TOKEN, transport=fake_api.transport())


@pytest.fixture
def fake_source() -> FakeDataSource:
    return FakeDataSource()


@pytest.fixture
def fixed_clock() -> Callable[[], dt.datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def test_config() -> Config:
    return Config(api_token=TOKEN, api_url=BASE_URL)
