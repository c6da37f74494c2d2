"""TokenAuthMiddlewareのユニットテスト。"""

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from pattern_police.middleware import TokenAuthMiddleware


async def _ok(request: Request) -> PlainTextResponse:
    return PlainTextResponse("ok")


def _client(url_token: str) -> TestClient:
    app = Starlette(
        routes=[Route("/mcp", _ok), Route("/health", _ok)],
        middleware=[Middleware(TokenAuthMiddleware, url_token=url_token)],
    )
    return TestClient(app)


class TestTokenAuthMiddleware:
    def test_no_token_configured_allows_all(self) -> None:
        assert _client("").get("/mcp").status_code == 200

    def test_rejects_missing_token(self) -> None:
        response = _client("secret").get("/mcp")
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"

    def test_accepts_query_token(self) -> None:
        assert _client("secret").get("/mcp?token=secret").status_code == 200

    def test_accepts_bearer_header(self) -> None:
        response = _client("secret").get("/mcp", headers={"Authorization": "Bearer secret"})
        assert response.status_code == 200

    def test_rejects_wrong_token(self) -> None:
        assert _client("secret").get("/mcp?token=wrong").status_code == 401

    def test_health_skips_authentication(self) -> None:
        assert _client("secret").get("/health").status_code == 200
