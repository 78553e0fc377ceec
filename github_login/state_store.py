"""
Pending GitHub logins (state -> PKCE verifier) in Redis.
Written by /github/auth, consumed by /github/callback. Keys are the raw state tokens.
"""
import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError

from github_login.errors import StateLookupError, StateStoreError

logger = logging.getLogger(__name__)


class StateStore:
    def __init__(self, redis: Redis, ttl_seconds: int | None = None):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    async def save(self, state: str, verifier: str) -> None:
        """Store the verifier under its state. No expiry unless a TTL is configured."""
        try:
            await self.redis.set(state, verifier, ex=self.ttl_seconds)
        except RedisError as e:
            raise StateStoreError(f"Could not store login state: {e}") from e

    async def load(self, state: str) -> str:
        """
        Return the verifier for state and remove it, so one verifier backs at most one
        token exchange. Raises StateLookupError on a miss.
        """
        try:
            verifier = await self.redis.getdel(state)
        except RedisError as e:
            raise StateStoreError(f"Could not read login state: {e}") from e
        if verifier is None:
            raise StateLookupError("Invalid or expired state. Please try logging in again.")
        if isinstance(verifier, bytes):
            verifier = verifier.decode("ascii")
        return verifier
