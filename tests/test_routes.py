"""End-to-end tests for the HTTP routes."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import pymysql
import pytest

from introspect.models.probe_models import ConnectionConfig, ProbeSuccess
from introspect.routes.deps import get_prober
from introspect.services.formatter import MISSING_CONFIG_MESSAGE

from conftest import DB_ENV

META_ENV = {"APP_VERSION": "1.4.2", "GIT_SHA": "abc1234", "FEATURE_NEW_UI": "true"}


class _TrackedConnection:
    """Counts how many fake connections are still open."""

    open_count = 0

    def __init__(self, version: str) -> None:
        self._version = version
        _TrackedConnection.open_count += 1

    def cursor(self) -> "_TrackedConnection":
        return self

    def __enter__(self) -> "_TrackedConnection":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        return None

    def execute(self, query: str) -> None:
        return None

    def fetchone(self) -> dict[str, Any]:
        return {"now": datetime(2024, 5, 1, 12, 30, 0), "version": self._version}

    def close(self) -> None:
        _TrackedConnection.open_count -= 1


def test_health_does_not_depend_on_datastore(make_client) -> None:
    client = make_client({**DB_ENV, "DB_HOST": "unreachable.invalid"})

    resp = client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["ts"].endswith("Z")


def test_banner_lists_metadata_and_endpoints(make_client) -> None:
    client = make_client(META_ENV)

    resp = client.get("/")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    lines = resp.text.splitlines()
    assert lines[0] == "ECS + RDS + GitHub Actions Demo"
    assert lines[1].startswith("hostname=")
    assert "version=1.4.2" in lines
    assert "git_sha=abc1234" in lines
    assert "feature_new_ui=true" in lines
    assert "Endpoints:" in lines
    assert any(line.strip().startswith("/db") for line in lines)


def test_version_is_stable_apart_from_timestamp(make_client) -> None:
    client = make_client(META_ENV)

    first = client.get("/version").json()
    second = client.get("/version").json()

    assert first.pop("ts") and second.pop("ts")
    assert first == second
    assert first["app_version"] == "1.4.2"
    assert first["git_sha"] == "abc1234"
    assert first["hostname"]
    assert first["runtime"]


@pytest.mark.parametrize(
    ("raw", "enabled", "message"),
    [
        ("true", True, "New UI enabled (feature flag ON)"),
        ("TRUE", True, "New UI enabled (feature flag ON)"),
        ("no", False, "New UI disabled (feature flag OFF)"),
    ],
)
def test_feature_flag(make_client, raw: str, enabled: bool, message: str) -> None:
    client = make_client({"FEATURE_NEW_UI": raw})

    first = client.get("/feature")
    second = client.get("/feature")

    assert first.status_code == 200
    assert first.json() == {"feature_new_ui": enabled, "message": message}
    assert first.json() == second.json()


def test_db_without_config_returns_400(make_client) -> None:
    client = make_client({"DB_HOST": "", "DB_USER": "x", "DB_PASSWORD": "y", "DB_NAME": "z"})

    resp = client.get("/db")

    assert resp.status_code == 400
    assert resp.json() == {"ok": False, "error": MISSING_CONFIG_MESSAGE}
    assert "DB_HOST" in resp.json()["error"]


def test_db_success_reports_server_version(make_client, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "introspect.db.client.pymysql.connect", lambda **kwargs: _TrackedConnection("8.0.35")
    )
    client = make_client(DB_ENV)

    resp = client.get("/db")

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["db"]["version"] == "8.0.35"
    assert body["db"]["now"] == "2024-05-01T12:30:00.000Z"
    assert "error" not in body


def test_db_failures_do_not_leak_connections(make_client, monkeypatch: pytest.MonkeyPatch) -> None:
    attempts = {"count": 0}

    def _flaky_connect(**kwargs: Any) -> _TrackedConnection:
        attempts["count"] += 1
        if attempts["count"] % 2:
            raise pymysql.err.OperationalError(2003, "Can't connect to MySQL server")
        return _TrackedConnection("8.0.35")

    monkeypatch.setattr("introspect.db.client.pymysql.connect", _flaky_connect)
    _TrackedConnection.open_count = 0
    client = make_client(DB_ENV)

    statuses = [client.get("/db").status_code for _ in range(6)]

    assert statuses == [500, 200] * 3
    assert _TrackedConnection.open_count == 0


def test_db_unreachable_host_returns_500(make_client) -> None:
    # Nothing listens on port 1 locally, so the connect is refused immediately
    client = make_client(
        {**DB_ENV, "DB_HOST": "127.0.0.1", "DB_PORT": "1", "DB_CONNECT_TIMEOUT_MS": "1000"}
    )

    resp = client.get("/db")

    assert resp.status_code == 500
    body = resp.json()
    assert body["ok"] is False
    assert "Can't connect" in body["error"]


def test_db_unexpected_fault_is_caught_at_handler(make_client) -> None:
    client = make_client(DB_ENV)

    async def _exploding_prober(config: ConnectionConfig) -> ProbeSuccess:
        raise RuntimeError("driver exploded")

    client.app.dependency_overrides[get_prober] = lambda: _exploding_prober

    resp = client.get("/db")

    assert resp.status_code == 500
    assert resp.json() == {"ok": False, "error": "driver exploded"}


def test_db_passes_resolved_config_to_prober(make_client) -> None:
    client = make_client({**DB_ENV, "DB_PORT": "3307"})
    seen: list[ConnectionConfig] = []

    async def _recording_prober(config: ConnectionConfig) -> ProbeSuccess:
        seen.append(config)
        return ProbeSuccess(server_time=datetime(2024, 5, 1), server_version="10.11.6-MariaDB")

    client.app.dependency_overrides[get_prober] = lambda: _recording_prober

    resp = client.get("/db")

    assert resp.status_code == 200
    assert resp.json()["db"]["version"] == "10.11.6-MariaDB"
    assert seen[0].port == 3307
    assert seen[0].host == "db.internal"


@pytest.mark.parametrize("raw", ["abc", "70000"])
def test_db_with_malformed_port_reports_the_port(make_client, raw: str) -> None:
    client = make_client({**DB_ENV, "DB_PORT": raw})

    resp = client.get("/db")

    assert resp.status_code == 500
    body = resp.json()
    assert body["ok"] is False
    assert "DB_PORT" in body["error"]
    assert body["error"] != MISSING_CONFIG_MESSAGE


@pytest.fixture
def restore_package_log_level():
    package = logging.getLogger("introspect")
    previous = package.level
    yield
    package.setLevel(previous)


def test_log_level_setting_reaches_module_loggers(make_client, restore_package_log_level) -> None:
    make_client({"LOG_LEVEL": "debug"})

    for name in ("introspect.db.client", "introspect.config.settings", "introspect.routes.db_routes"):
        assert logging.getLogger(name).getEffectiveLevel() == logging.DEBUG

    make_client({"LOG_LEVEL": "WARNING"})

    assert logging.getLogger("introspect.db.client").getEffectiveLevel() == logging.WARNING
