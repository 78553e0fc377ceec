"""
GitHub login service configuration.
No secrets in this file; GitHub credentials come from env.
"""
import logging
import os
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)

# Public base URL of this service; the GitHub callback URL is built from it
HOST_URL = os.environ.get("GITHUB_LOGIN_HOST_URL", "http://127.0.0.1:8000").rstrip("/")

# Key-value store holding state -> PKCE verifier between /github/auth and /github/callback
REDIS_URL = os.environ.get("GITHUB_LOGIN_REDIS_URL", "redis://127.0.0.1:6379/0")

# Database for other request handlers (pool accessor only)
DATABASE_URL = os.environ.get("GITHUB_LOGIN_DATABASE_URL", "sqlite:///./github_login.db")

# Pool sizing; ignored for SQLite
DB_POOL_SIZE = int(os.environ.get("GITHUB_LOGIN_DB_POOL_SIZE", "5"))
DB_POOL_TIMEOUT = float(os.environ.get("GITHUB_LOGIN_DB_POOL_TIMEOUT", "30"))

LOG_LEVEL = os.environ.get("GITHUB_LOGIN_LOG_LEVEL", "INFO").upper()

# Path GitHub redirects back to; must match the OAuth app's registered callback URL
GITHUB_CALLBACK_PATH = "/github/callback"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class GitHubConfig:
    client_id: str
    client_secret: str
    redirect_uri: str
    # None: no expiry is set on stored verifiers (rely on the store's own policy)
    state_ttl_seconds: int | None = None
    # True: fail /github/auth when the verifier cannot be stored; False: log and redirect anyway
    strict_state_write: bool = False

    def __repr__(self) -> str:
        return f"GitHubConfig(client_id={self.client_id!r}, redirect_uri={self.redirect_uri!r})"


def load_github_config(environ: Mapping[str, str] | None = None) -> GitHubConfig | None:
    """
    Build the GitHub feature config from env. Returns None when GITHUB_CLIENT_ID or
    GITHUB_CLIENT_SECRET is missing: the feature is off, not broken.
    """
    env = os.environ if environ is None else environ
    client_id = env.get("GITHUB_CLIENT_ID", "").strip()
    client_secret = env.get("GITHUB_CLIENT_SECRET", "").strip()
    if not client_id or not client_secret:
        logger.info("GITHUB_CLIENT_ID/GITHUB_CLIENT_SECRET not set; starting without GitHub login")
        return None

    ttl_raw = env.get("GITHUB_STATE_TTL_SECONDS", "").strip()
    try:
        ttl = int(ttl_raw) if ttl_raw else 0
    except ValueError:
        logger.warning("GITHUB_STATE_TTL_SECONDS=%r is not an integer; stored state will not expire", ttl_raw)
        ttl = 0
    host_url = env.get("GITHUB_LOGIN_HOST_URL", HOST_URL).rstrip("/")
    return GitHubConfig(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=host_url + GITHUB_CALLBACK_PATH,
        state_ttl_seconds=ttl if ttl > 0 else None,
        strict_state_write=env.get("GITHUB_STRICT_STATE_WRITE", "").strip().lower() in _TRUTHY,
    )
