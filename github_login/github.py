"""
GitHub OAuth2 client: authorize URL, code exchange (PKCE) and the /user profile fetch.
"""
import logging
from datetime import datetime

import httpx
from pydantic import BaseModel, HttpUrl, ValidationError, field_validator

from github_login.config import GitHubConfig
from github_login.errors import AuthenticationError, ProviderError
from github_login.pkce import build_authorize_url

logger = logging.getLogger(__name__)

GITHUB_AUTH_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_USER_API_URL = "https://api.github.com/user"

# Public repos + email address
GITHUB_SCOPES = ("public_repo", "user:email")


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = ""
    scope: str = ""

    @field_validator("token_type", "scope", mode="before")
    @classmethod
    def _null_as_empty(cls, v):
        return "" if v is None else v

    @property
    def scopes(self) -> list[str]:
        # GitHub returns one comma-separated scope string instead of space-separated scopes
        return [s for s in self.scope.split(",") if s]

    def __repr__(self) -> str:
        return f"TokenResponse(token_type={self.token_type!r}, scope={self.scope!r})"


class GitHubUser(BaseModel):
    """Simple public profile of a GitHub user (GET /user)."""

    id: int
    node_id: str
    login: str
    name: str | None = None
    email: str | None = None
    avatar_url: HttpUrl
    gravatar_id: str
    url: HttpUrl
    html_url: HttpUrl
    followers_url: HttpUrl
    following_url: HttpUrl
    gists_url: HttpUrl
    starred_url: HttpUrl
    subscriptions_url: HttpUrl
    organizations_url: HttpUrl
    repos_url: HttpUrl
    events_url: HttpUrl
    received_events_url: HttpUrl
    type: str
    site_admin: bool
    starred_at: datetime | None = None


class GitHubClient:
    def __init__(
        self,
        config: GitHubConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self.config = config
        self._transport = transport
        self._timeout = timeout

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self._timeout)

    def authorize_url(self, state: str, code_challenge: str) -> str:
        return build_authorize_url(
            authorize_endpoint=GITHUB_AUTH_URL,
            client_id=self.config.client_id,
            redirect_uri=self.config.redirect_uri,
            scopes=GITHUB_SCOPES,
            state=state,
            code_challenge=code_challenge,
        )

    async def exchange_code(self, code: str, code_verifier: str) -> TokenResponse:
        """Redeem the authorization code plus its PKCE verifier at the token endpoint."""
        try:
            async with self._http() as http:
                r = await http.post(
                    GITHUB_TOKEN_URL,
                    data={
                        "grant_type": "authorization_code",
                        "code": code,
                        "redirect_uri": self.config.redirect_uri,
                        "code_verifier": code_verifier,
                    },
                    auth=(self.config.client_id, self.config.client_secret),
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            raise ProviderError(f"Token exchange with GitHub failed: {e}") from e

        try:
            data = r.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        # GitHub reports a bad code/verifier as HTTP 200 with an error body
        if r.status_code != 200 or "error" in data:
            desc = data.get("error_description") or data.get("error") or "Token exchange failed"
            raise ProviderError(str(desc), status_code=400)

        access_token = data.get("access_token")
        if not access_token:
            raise ProviderError("GitHub token response has no access_token")
        try:
            token = TokenResponse.model_validate(data)
        except ValidationError as e:
            raise ProviderError("GitHub token response is malformed") from e
        logger.debug("GitHub returned the following scopes: %s", token.scopes)
        logger.debug("Token type: %s", token.token_type)
        return token

    async def fetch_user(self, token: TokenResponse) -> GitHubUser:
        """
        GET /user with the bearer token.
        200 -> GitHubUser; 401 -> AuthenticationError; anything else -> ProviderError.
        """
        if token.token_type.lower() != "bearer":
            raise ProviderError("Unsupported token type")

        try:
            async with self._http() as http:
                r = await http.get(
                    GITHUB_USER_API_URL,
                    headers={
                        "Authorization": f"Bearer {token.access_token}",
                        "Accept": "application/vnd.github+json",
                    },
                )
        except httpx.HTTPError as e:
            raise ProviderError("Failed to get user info from GitHub") from e

        if r.status_code == 401:
            raise AuthenticationError()
        if r.status_code != 200:
            raise ProviderError("Failed to get user info from GitHub")

        try:
            user = GitHubUser.model_validate_json(r.content)
        except ValidationError as e:
            raise ProviderError("Failed to parse user info from GitHub") from e

        logger.debug("GitHub returned user: login=%s id=%s", user.login, user.id)
        return user
