"""Telegram webhook router.

Endpoints:
- POST /webhook: receive one Telegram update and run it through the bot.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends

from jobsearch_bot.adapters.telegram import parse_update
from jobsearch_bot.api.deps import BotRouterDep, verify_webhook_secret
from jobsearch_bot.core.errors import WizardError
from jobsearch_bot.core.responses import WebhookAck

logger = structlog.get_logger()

router = APIRouter()


@router.post("/webhook", dependencies=[Depends(verify_webhook_secret)])
async def telegram_webhook(
    bot_router: BotRouterDep,
    update: dict[str, Any] = Body(...),
) -> WebhookAck:
    """Process a Telegram update.

    Unsupported update types are acknowledged and ignored. Wizard errors that
    escape the router (e.g. Telegram refusing a reply) are logged and still
    acknowledged, so Telegram does not redeliver the same update forever.

    Args:
        bot_router: Process-wide bot router (injected).
        update: Raw update body.

    Returns:
        {"ok": true}
    """
    event = parse_update(update)
    if event is None:
        logger.debug("update_ignored", update_id=update.get("update_id"))
        return WebhookAck()

    try:
        await bot_router.route(event)
    except WizardError as e:
        logger.exception(
            "update_failed",
            update_id=update.get("update_id"),
            user_id=event.user_id,
            code=e.code,
        )
    return WebhookAck()
