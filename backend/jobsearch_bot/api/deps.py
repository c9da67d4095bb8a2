"""Shared dependencies for API endpoints.

The bot router is built once per process (see main.lifespan) and stored on
app.state; endpoints receive it through BotRouterDep so tests can swap it.
"""

import secrets
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from jobsearch_bot.bot import BotRouter
from jobsearch_bot.core.config import settings

# Generic 401 detail, identical for a missing and a wrong secret
_UNAUTHORIZED_DETAIL = {
    "code": "UNAUTHORIZED",
    "message": "Authentication required",
}


def get_bot_router(request: Request) -> BotRouter:
    """Return the process-wide bot router.

    Raises:
        RuntimeError: If the application started without one.
    """
    bot_router: BotRouter | None = getattr(request.app.state, "bot_router", None)
    if bot_router is None:
        raise RuntimeError("Bot router not initialised")
    return bot_router


def verify_webhook_secret(
    x_telegram_bot_api_secret_token: Annotated[str | None, Header()] = None,
) -> None:
    """Check Telegram's secret header when a webhook secret is configured.

    Raises:
        HTTPException: 401 if the header is missing or wrong.
    """
    expected = settings.telegram_webhook_secret.get_secret_value()
    if not expected:
        return
    if x_telegram_bot_api_secret_token is None or not secrets.compare_digest(
        x_telegram_bot_api_secret_token, expected
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=_UNAUTHORIZED_DETAIL
        )


BotRouterDep = Annotated[BotRouter, Depends(get_bot_router)]
