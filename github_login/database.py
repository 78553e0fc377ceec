"""
Database pool and connection checkout for request handlers.
"""
import logging

from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.pool import StaticPool

from github_login.config import DATABASE_URL, DB_POOL_SIZE, DB_POOL_TIMEOUT
from github_login.errors import PoolError

logger = logging.getLogger(__name__)


def create_pool(url: str = DATABASE_URL) -> Engine:
    """Engine with its connection pool. Nothing connects until the first checkout."""
    # SQLite: in-memory needs StaticPool so all connections share the same DB (for tests)
    # File-based SQLite needs check_same_thread=False for FastAPI
    if url.startswith("sqlite:///:memory:"):
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_size=DB_POOL_SIZE,
        pool_timeout=DB_POOL_TIMEOUT,
        pool_pre_ping=True,
    )


async def get_conn(pool: Engine) -> Connection:
    """
    Check out a connection without blocking the event loop.
    Raises PoolError if the pool is exhausted, times out, or the checkout fails.
    Caller must close the connection.
    """
    try:
        return await run_in_threadpool(pool.connect)
    except PoolTimeoutError as e:
        raise PoolError(f"Database pool exhausted: {e}") from e
    except SQLAlchemyError as e:
        raise PoolError(f"Database connection failed: {e}") from e
    except RuntimeError as e:
        # Worker thread could not run the checkout
        raise PoolError(f"Database checkout task failed: {e}") from e


async def get_db(request: Request):
    """Dependency: yield a pooled connection, returned to the pool afterwards."""
    conn = await get_conn(request.app.state.db_pool)
    try:
        yield conn
    finally:
        conn.close()
