"""Tests for the database pool accessor."""
import asyncio
from unittest.mock import MagicMock, patch

import pytest
from fastapi.concurrency import run_in_threadpool
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from github_login.database import create_pool, get_conn
from github_login.errors import PoolError
from github_login.main import create_app


def test_get_conn_returns_usable_connection():
    pool = create_pool("sqlite:///:memory:")
    conn = asyncio.run(get_conn(pool))
    try:
        assert conn.execute(text("SELECT 1")).scalar() == 1
    finally:
        conn.close()
        pool.dispose()


def test_pool_exhausted_raises_pool_error():
    pool = MagicMock()
    pool.connect.side_effect = PoolTimeoutError("QueuePool limit reached")
    with pytest.raises(PoolError) as exc:
        asyncio.run(get_conn(pool))
    assert "exhausted" in exc.value.message


def test_connection_failure_raises_pool_error():
    pool = MagicMock()
    pool.connect.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
    with pytest.raises(PoolError):
        asyncio.run(get_conn(pool))


def test_health_db_ok():
    client = TestClient(create_app(github_config=None, redis=MagicMock(), db_pool=create_pool("sqlite:///:memory:")))
    r = client.get("/health/db")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_health_db_pool_failure_is_503():
    pool = MagicMock()
    pool.connect.side_effect = PoolTimeoutError("QueuePool limit reached")
    client = TestClient(create_app(github_config=None, redis=MagicMock(), db_pool=pool))
    r = client.get("/health/db")
    assert r.status_code == 503
    assert r.json()["error"] == "temporarily_unavailable"


def test_checkout_runs_through_fastapi_threadpool():
    pool = create_pool("sqlite:///:memory:")
    with patch("github_login.database.run_in_threadpool", wraps=run_in_threadpool) as spy:
        conn = asyncio.run(get_conn(pool))
    conn.close()
    pool.dispose()
    spy.assert_called_once_with(pool.connect)
