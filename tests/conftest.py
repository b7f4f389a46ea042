"""Shared fixtures: every test runs with local time pinned to UTC."""

from __future__ import annotations

import time

import pytest

_TS_ENV = ("TS_FORMAT", "TS_LINE_CAPACITY", "TS_FORMAT_CAPACITY", "TS_LOG_LEVEL")


@pytest.fixture(autouse=True)
def utc_localtime(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("TZ", "UTC")
    for name in _TS_ENV:
        monkeypatch.delenv(name, raising=False)
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
