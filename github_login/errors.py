"""
Typed failures for the GitHub login flow and the pool accessor, and their mapping
to HTTP error responses. Body shape follows OAuth error responses.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class GitHubLoginError(Exception):
    status_code = 500
    error = "server_error"

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class AuthenticationError(GitHubLoginError):
    """GitHub rejected the access token (HTTP 401 from the profile endpoint)."""

    status_code = 401
    error = "authentication_failed"

    def __init__(self, message: str = "GitHub rejected the access token"):
        super().__init__(message)


class ProviderError(GitHubLoginError):
    """Anything else that went wrong talking to GitHub."""

    status_code = 502
    error = "provider_error"


class StateLookupError(GitHubLoginError):
    """No verifier for the callback's state, or the callback itself is unusable."""

    status_code = 400
    error = "invalid_request"


class StateStoreError(GitHubLoginError):
    status_code = 503
    error = "temporarily_unavailable"


class PoolError(GitHubLoginError):
    status_code = 503
    error = "temporarily_unavailable"


async def _handle_login_error(request: Request, exc: GitHubLoginError) -> JSONResponse:
    logger.warning("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "error_description": exc.message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GitHubLoginError, _handle_login_error)
