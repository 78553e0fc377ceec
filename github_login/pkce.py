"""
PKCE (RFC 7636) and authorize URL helpers for the GitHub login redirect.
S256 only.
"""
import hashlib
import secrets
from base64 import urlsafe_b64encode
from typing import Iterable
from urllib.parse import urlencode


def generate_state() -> str:
    """Opaque CSRF token; GitHub echoes it back on the callback."""
    return secrets.token_urlsafe(32)


def generate_pkce() -> tuple[str, str]:
    """
    Generate code_verifier and code_challenge (S256).
    Returns (code_verifier, code_challenge). Verifier is 43 chars (256 bits entropy).
    """
    code_verifier = secrets.token_urlsafe(32)
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    code_challenge = urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")
    return code_verifier, code_challenge


def build_authorize_url(
    *,
    authorize_endpoint: str,
    client_id: str,
    redirect_uri: str,
    scopes: Iterable[str],
    state: str,
    code_challenge: str,
) -> str:
    """Build the provider authorize URL for the code flow with PKCE."""
    params = {
        "response_type": "code",
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "scope": " ".join(scopes),
        "state": state,
        "code_challenge": code_challenge,
        "code_challenge_method": "S256",
    }
    return f"{authorize_endpoint}?{urlencode(params)}"
