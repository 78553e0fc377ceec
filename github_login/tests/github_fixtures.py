"""Canned GitHub responses and a MockTransport builder shared by the client and route tests."""
import httpx

from github_login.config import GitHubConfig

CONFIG = GitHubConfig(
    client_id="test-client-id",
    client_secret="test-client-secret",
    redirect_uri="http://testserver/github/callback",
)

TOKEN_BODY = {
    "access_token": "gho_testtoken",
    "token_type": "bearer",
    "scope": "public_repo,user:email",
}

USER_BODY = {
    "login": "octocat",
    "id": 1,
    "node_id": "MDQ6VXNlcjE=",
    "avatar_url": "https://github.com/images/error/octocat_happy.gif",
    "gravatar_id": "",
    "url": "https://api.github.com/users/octocat",
    "html_url": "https://github.com/octocat",
    "followers_url": "https://api.github.com/users/octocat/followers",
    "following_url": "https://api.github.com/users/octocat/following{/other_user}",
    "gists_url": "https://api.github.com/users/octocat/gists{/gist_id}",
    "starred_url": "https://api.github.com/users/octocat/starred{/owner}{/repo}",
    "subscriptions_url": "https://api.github.com/users/octocat/subscriptions",
    "organizations_url": "https://api.github.com/users/octocat/orgs",
    "repos_url": "https://api.github.com/users/octocat/repos",
    "events_url": "https://api.github.com/users/octocat/events{/privacy}",
    "received_events_url": "https://api.github.com/users/octocat/received_events",
    "type": "User",
    "site_admin": False,
    "name": "monalisa octocat",
    "email": "octocat@github.com",
}


def github_transport(
    *,
    token_status: int = 200,
    token_body: dict | None = None,
    user_status: int = 200,
    user_body: dict | str | None = None,
    calls: list | None = None,
) -> httpx.MockTransport:
    """Answer the token and /user endpoints; record every request in calls."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if request.url.path == "/login/oauth/access_token":
            return httpx.Response(token_status, json=TOKEN_BODY if token_body is None else token_body)
        if request.url.path == "/user":
            body = USER_BODY if user_body is None else user_body
            if isinstance(body, str):
                return httpx.Response(user_status, text=body)
            return httpx.Response(user_status, json=body)
        return httpx.Response(404)

    return httpx.MockTransport(handler)
