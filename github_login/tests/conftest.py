"""
Pytest configuration for github_login. In-memory SQLite and no GitHub credentials from
the developer's shell; tests that need GitHub login build their own app.
"""
import os

import pytest

# In-memory SQLite; database.py uses StaticPool so all connections share the same DB
os.environ["GITHUB_LOGIN_DATABASE_URL"] = "sqlite:///:memory:"
os.environ["GITHUB_LOGIN_HOST_URL"] = "http://testserver"
for _name in ("GITHUB_CLIENT_ID", "GITHUB_CLIENT_SECRET", "GITHUB_STATE_TTL_SECONDS", "GITHUB_STRICT_STATE_WRITE"):
    os.environ.pop(_name, None)


class FakeRedis:
    """Dict-backed stand-in for the few redis.asyncio.Redis calls the state store makes."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.expiry: dict[str, int | None] = {}

    async def set(self, key, value, ex=None):
        self.data[key] = value
        self.expiry[key] = ex
        return True

    async def get(self, key):
        return self.data.get(key)

    async def getdel(self, key):
        self.expiry.pop(key, None)
        return self.data.pop(key, None)

    async def aclose(self):
        pass


@pytest.fixture
def fake_redis():
    return FakeRedis()
