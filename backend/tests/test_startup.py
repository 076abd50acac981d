from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from backend.app import main
from backend.app.database import read_bool_env


@pytest.mark.parametrize(
    ("raw", "default", "expected"),
    [
        (None, True, True),
        (None, False, False),
        ("1", False, True),
        (" Yes ", False, True),
        ("0", True, False),
        ("off", True, False),
    ],
)
def test_read_bool_env(monkeypatch, raw, default, expected):
    if raw is None:
        monkeypatch.delenv("INVENTORY_FLAG", raising=False)
    else:
        monkeypatch.setenv("INVENTORY_FLAG", raw)

    assert read_bool_env("INVENTORY_FLAG", default) is expected


@pytest.mark.parametrize(("raw", "runs"), [(None, True), ("1", True), ("0", False)])
def test_startup_migrations_follow_environment(monkeypatch, raw, runs):
    calls = []
    monkeypatch.setattr(main, "ensure_database_is_ready", lambda: calls.append(True))
    if raw is None:
        monkeypatch.delenv(main.STARTUP_MIGRATIONS_ENV, raising=False)
    else:
        monkeypatch.setenv(main.STARTUP_MIGRATIONS_ENV, raw)

    with TestClient(main.app):
        pass

    assert calls == ([True] if runs else [])
