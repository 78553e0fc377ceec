"""
GitHub login routes: GET /github/auth and GET /github/callback.
Only registered when GitHub credentials are configured.
"""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse, Response

from github_login.config import GitHubConfig
from github_login.errors import StateLookupError, StateStoreError
from github_login.github import GitHubClient
from github_login.pkce import generate_pkce, generate_state
from github_login.state_store import StateStore

logger = logging.getLogger(__name__)


def github_router(config: GitHubConfig | None, *, client: GitHubClient | None = None) -> APIRouter:
    """
    Router for the GitHub login flow. With config=None the router is empty, so both
    paths answer 404.
    """
    router = APIRouter(prefix="/github", tags=["github"])
    if config is None:
        return router
    github = client or GitHubClient(config)

    def state_store(request: Request) -> StateStore:
        return StateStore(request.app.state.redis, ttl_seconds=config.state_ttl_seconds)

    @router.get("/auth")
    async def auth(request: Request):
        """Generate state + PKCE, remember the verifier, send the user to GitHub."""
        state = generate_state()
        code_verifier, code_challenge = generate_pkce()
        url = github.authorize_url(state, code_challenge)

        try:
            await state_store(request).save(state, code_verifier)
        except StateStoreError as e:
            if config.strict_state_write:
                raise
            # The callback for this attempt will fail the state lookup
            logger.warning("Redirecting to GitHub without stored state: %s", e.message)

        return RedirectResponse(url=url, status_code=303, headers={"X-CSRF-Token": state})

    @router.get("/callback")
    async def callback(
        request: Request,
        code: str | None = None,
        state: str | None = None,
        error: str | None = None,
        error_description: str | None = None,
    ):
        """
        Handle GitHub's redirect: state -> verifier, code -> token, token -> profile.
        The store lookup is the only check on state.
        """
        if error:
            if state:
                try:
                    await state_store(request).load(state)
                except (StateLookupError, StateStoreError):
                    pass
            raise StateLookupError(f"GitHub authorization failed: {error_description or error}")
        if not state:
            raise StateLookupError("Missing state parameter.")
        if not code:
            raise StateLookupError("Missing code parameter.")

        code_verifier = await state_store(request).load(state)
        token = await github.exchange_code(code, code_verifier)
        user = await github.fetch_user(token)

        # Profile is not persisted or linked to a session yet
        logger.info("GitHub login succeeded: login=%s id=%s", user.login, user.id)
        return Response(status_code=200)

    return router
