"""
GitHub login service.
GitHub OAuth2 (code + PKCE) under /github, health checks, database pool on app.state.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from redis.asyncio import Redis
from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

from github_login.config import LOG_LEVEL, REDIS_URL, GitHubConfig, load_github_config
from github_login.database import create_pool, get_db
from github_login.errors import register_exception_handlers
from github_login.github import GitHubClient
from github_login.routes import github_router

logger = logging.getLogger(__name__)

_FROM_ENV = object()


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Root handler + level from GITHUB_LOGIN_LOG_LEVEL. Level applies even if a handler already exists."""
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(level)


def create_app(
    *,
    github_config: GitHubConfig | None | object = _FROM_ENV,
    github_client: GitHubClient | None = None,
    redis: Redis | None = None,
    db_pool: Engine | None = None,
) -> FastAPI:
    """
    Assemble the app. github_config defaults to env; pass None to run without GitHub login.
    Redis client and pool are lazy, nothing connects until a request needs it.
    """
    if github_config is _FROM_ENV:
        github_config = load_github_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.redis.aclose()
        app.state.db_pool.dispose()

    app = FastAPI(title="GitHub Login", version="0.1.0", lifespan=lifespan)
    app.state.redis = redis if redis is not None else Redis.from_url(REDIS_URL, decode_responses=True)
    app.state.db_pool = db_pool if db_pool is not None else create_pool()
    register_exception_handlers(app)
    app.include_router(github_router(github_config, client=github_client))

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"status": "ok", "service": "github_login"}

    @app.get("/health/db")
    def health_db(conn: Connection = Depends(get_db)):
        """Check out a pooled connection and run a trivial query; 503 if the pool fails."""
        conn.execute(text("SELECT 1"))
        return {"status": "ok", "database": "reachable"}

    return app


configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "github_login.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
