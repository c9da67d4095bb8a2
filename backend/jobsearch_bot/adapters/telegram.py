"""Telegram Bot API transport.

Inbound: parse_update() turns a webhook update into an InboundEvent.
Outbound: TelegramTransport sends messages with inline keyboards and answers
callback queries.

Selection tokens are encoded into callback_data here and nowhere else.
"""

from typing import Any

import httpx
import structlog

from jobsearch_bot.adapters.base import request_json
from jobsearch_bot.core.config import settings
from jobsearch_bot.core.errors import UpstreamUnavailable
from jobsearch_bot.wizard.menu import decode_token, encode_token
from jobsearch_bot.wizard.state import EventKind, InboundEvent, LinkButton, Menu

logger = structlog.get_logger()

_SERVICE = "telegram"


def _parse_command(text: str) -> str | None:
    """Return the command name for "/search@my_bot args", else None."""
    if not text.startswith("/"):
        return None
    head = text[1:].split(maxsplit=1)[0] if len(text) > 1 else ""
    name = head.split("@", 1)[0].lower()
    return name or None


def parse_update(update: dict[str, Any]) -> InboundEvent | None:
    """Convert a Telegram update into an InboundEvent.

    Args:
        update: Decoded webhook body.

    Returns:
        The event, or None for update types the bot does not handle
        (edited messages, stickers, channel posts, ...).
    """
    callback = update.get("callback_query")
    if isinstance(callback, dict):
        sender = callback.get("from") or {}
        message = callback.get("message") or {}
        chat = message.get("chat") or {}
        data = callback.get("data")
        if not isinstance(data, str):
            return None
        return InboundEvent(
            event_id=str(callback.get("id", "")),
            user_id=str(sender["id"]) if sender.get("id") is not None else None,
            chat_id=chat.get("id", sender.get("id")),
            kind=EventKind.MENU_SELECTION,
            payload=data,
            first_name=sender.get("first_name"),
            token=decode_token(data),
        )

    message = update.get("message")
    if not isinstance(message, dict):
        return None
    text = message.get("text")
    if not isinstance(text, str):
        return None

    sender = message.get("from") or {}
    chat = message.get("chat") or {}
    command = _parse_command(text)
    return InboundEvent(
        event_id=str(message.get("message_id", "")),
        user_id=str(sender["id"]) if sender.get("id") is not None else None,
        chat_id=chat.get("id"),
        kind=EventKind.COMMAND if command else EventKind.TEXT,
        payload=command or text,
        first_name=sender.get("first_name"),
    )


def render_keyboard(
    menu: Menu | None = None, link: LinkButton | None = None
) -> dict[str, Any] | None:
    """Build an InlineKeyboardMarkup for a menu and/or a URL button."""
    rows: list[list[dict[str, str]]] = []
    if menu is not None:
        rows.extend(
            [
                {"text": button.label, "callback_data": encode_token(button.token)}
                for button in row
            ]
            for row in menu.rows
        )
    if link is not None:
        rows.append([{"text": link.label, "url": link.url}])
    if not rows:
        return None
    return {"inline_keyboard": rows}


class TelegramTransport:
    """Outbound side of the Telegram Bot API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        token: str | None = None,
        api_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        if token is None:
            token = settings.telegram_bot_token.get_secret_value()
        base = (api_url or settings.telegram_api_url).rstrip("/")
        self._client = client
        self._base_url = f"{base}/bot{token}"
        self._timeout = timeout if timeout is not None else settings.http_timeout

    async def _call(self, method: str, payload: dict[str, Any]) -> Any:
        body = await request_json(
            self._client,
            "POST",
            f"{self._base_url}/{method}",
            service=_SERVICE,
            json=payload,
            timeout=self._timeout,
        )
        if not isinstance(body, dict) or not body.get("ok"):
            description = body.get("description") if isinstance(body, dict) else None
            raise UpstreamUnavailable(_SERVICE, f"{method} failed: {description}")
        return body.get("result")

    async def send(
        self,
        chat_id: int,
        text: str,
        *,
        menu: Menu | None = None,
        link: LinkButton | None = None,
        parse_mode: str | None = None,
    ) -> None:
        """Send a message, optionally with a selection menu and a URL button.

        Raises:
            UpstreamUnavailable: If Telegram rejects the message.
        """
        payload: dict[str, Any] = {"chat_id": chat_id, "text": text}
        keyboard = render_keyboard(menu, link)
        if keyboard is not None:
            payload["reply_markup"] = keyboard
        if parse_mode:
            payload["parse_mode"] = parse_mode
        await self._call("sendMessage", payload)

    async def acknowledge(self, event_id: str, text: str | None = None) -> None:
        """Answer a callback query so the client stops its spinner.

        Failures are logged, not raised: an expired query must not abort the
        step that already processed the selection.
        """
        payload: dict[str, Any] = {"callback_query_id": event_id}
        if text:
            payload["text"] = text
        try:
            await self._call("answerCallbackQuery", payload)
        except UpstreamUnavailable:
            logger.warning("callback_ack_failed", event_id=event_id, exc_info=True)
