"""Tests for the FastAPI application, exception handlers and the webhook."""

from unittest.mock import AsyncMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

from jobsearch_bot.bot import BotRouter
from jobsearch_bot.core.config import settings
from jobsearch_bot.core.errors import DialogAborted, UpstreamUnavailable
from jobsearch_bot.main import build_bot_router, create_app, lifespan
from jobsearch_bot.wizard.state import EventKind

_WEBHOOK = "/api/v1/telegram/webhook"
_SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"

_MESSAGE_UPDATE = {
    "update_id": 100,
    "message": {
        "message_id": 1,
        "from": {"id": 7, "first_name": "Ivan"},
        "chat": {"id": 70},
        "text": "/search",
    },
}


@pytest.fixture
def bot_router() -> AsyncMock:
    """Bot router double placed on app.state."""
    return AsyncMock(spec=BotRouter)


@pytest.fixture
def app(bot_router):
    """Create test application instance with a stubbed bot router."""
    application = create_app()
    application.state.bot_router = bot_router
    return application


@pytest.fixture
async def client(app):
    """Create async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_healthy_status(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestWebhook:
    """Tests for POST /api/v1/telegram/webhook."""

    @pytest.mark.asyncio
    async def test_routes_parsed_event(self, client, bot_router):
        response = await client.post(_WEBHOOK, json=_MESSAGE_UPDATE)

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        event = bot_router.route.await_args.args[0]
        assert event.kind is EventKind.COMMAND
        assert event.payload == "search"
        assert event.user_id == "7"

    @pytest.mark.asyncio
    async def test_ignores_unsupported_update(self, client, bot_router):
        response = await client.post(
            _WEBHOOK, json={"update_id": 101, "edited_message": {"text": "x"}}
        )

        assert response.status_code == 200
        bot_router.route.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            UpstreamUnavailable("telegram", "chat not found"),
            DialogAborted("gone", reply="bye"),
        ],
    )
    async def test_wizard_errors_still_acknowledged(self, client, bot_router, error):
        """Telegram must not redeliver an update that failed downstream."""
        bot_router.route.side_effect = error

        response = await client.post(_WEBHOOK, json=_MESSAGE_UPDATE)

        assert response.status_code == 200
        assert response.json() == {"ok": True}

    @pytest.mark.asyncio
    async def test_rejects_non_json_body(self, client):
        response = await client.post(
            _WEBHOOK,
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422


class TestWebhookSecret:
    """Tests for the X-Telegram-Bot-Api-Secret-Token check."""

    @pytest.fixture(autouse=True)
    def _secret(self, monkeypatch):
        monkeypatch.setattr(settings, "telegram_webhook_secret", SecretStr("s3cret"))

    @pytest.mark.asyncio
    async def test_missing_secret_rejected(self, client, bot_router):
        response = await client.post(_WEBHOOK, json=_MESSAGE_UPDATE)

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "UNAUTHORIZED"
        bot_router.route.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wrong_secret_rejected(self, client):
        response = await client.post(
            _WEBHOOK, json=_MESSAGE_UPDATE, headers={_SECRET_HEADER: "guess"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_correct_secret_accepted(self, client, bot_router):
        response = await client.post(
            _WEBHOOK, json=_MESSAGE_UPDATE, headers={_SECRET_HEADER: "s3cret"}
        )
        assert response.status_code == 200
        bot_router.route.assert_awaited_once()


class TestExceptionHandlers:
    """Tests for exception handlers.

    These tests verify that errors escaping an endpoint are converted to
    HTTP responses with the error envelope.
    """

    @pytest.mark.asyncio
    async def test_wizard_error_uses_its_status(self, app, client):
        @app.get("/test/upstream-error")
        async def raise_upstream_error():
            raise UpstreamUnavailable("catalog", "down")

        response = await client.get("/test/upstream-error")

        assert response.status_code == 502
        assert response.json() == {
            "error": {
                "code": "UPSTREAM_UNAVAILABLE",
                "message": "catalog: down",
                "details": None,
            }
        }

    @pytest.mark.asyncio
    async def test_unhandled_error_returns_generic_500(self, app):
        """Unexpected exceptions do not leak their message."""

        @app.get("/test/crash")
        async def crash():
            raise RuntimeError("secret internals")

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/test/crash")

        assert response.status_code == 500
        data = response.json()
        assert data["error"]["code"] == "INTERNAL_ERROR"
        assert "secret internals" not in response.text


class TestLifespan:
    """Tests for application wiring."""

    @pytest.mark.asyncio
    async def test_build_bot_router(self):
        async with httpx.AsyncClient() as http_client:
            assert isinstance(build_bot_router(http_client), BotRouter)

    @pytest.mark.asyncio
    async def test_builds_router_when_absent(self):
        application = create_app()
        async with lifespan(application):
            assert isinstance(application.state.bot_router, BotRouter)

    @pytest.mark.asyncio
    async def test_keeps_preset_router(self, bot_router):
        application = create_app()
        application.state.bot_router = bot_router
        async with lifespan(application):
            assert application.state.bot_router is bot_router
