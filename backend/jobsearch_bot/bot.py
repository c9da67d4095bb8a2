"""Command router in front of the wizard engine.

Routes parsed Telegram events:

    /start                 → greeting with the hh.ru sign-in button
    /help                  → command list
    /search                → enter the wizard
    callback start_search  → acknowledge, confirm sign-in, enter the wizard
    anything else          → WizardEngine.handle

start_search is the button the backend sends after a successful sign-in.
"""

import html
import logging

from jobsearch_bot.adapters.backend import build_auth_url
from jobsearch_bot.wizard import messages
from jobsearch_bot.wizard.base import Transport
from jobsearch_bot.wizard.engine import WizardEngine
from jobsearch_bot.wizard.state import EventKind, InboundEvent, LinkButton

logger = logging.getLogger(__name__)

START_COMMAND = "start"
HELP_COMMAND = "help"
SEARCH_COMMAND = "search"
START_SEARCH_CALLBACK = "start_search"

_HTML = "HTML"


class BotRouter:
    """Dispatches inbound events to command handlers or the wizard."""

    def __init__(
        self,
        engine: WizardEngine,
        transport: Transport,
        *,
        backend_url: str | None = None,
    ) -> None:
        self._engine = engine
        self._transport = transport
        self._backend_url = backend_url

    async def route(self, event: InboundEvent) -> None:
        """Handle one inbound event."""
        if event.kind is EventKind.COMMAND:
            if event.payload == START_COMMAND:
                await self.send_greeting(event)
                return
            if event.payload == HELP_COMMAND:
                await self.send_help(event)
                return
            if event.payload == SEARCH_COMMAND:
                await self._engine.enter(event)
                return

        if (
            event.kind is EventKind.MENU_SELECTION
            and event.payload == START_SEARCH_CALLBACK
        ):
            await self.start_from_notification(event)
            return

        await self._engine.handle(event)

    async def send_greeting(self, event: InboundEvent) -> None:
        """Greet the user and offer the hh.ru sign-in link."""
        if event.chat_id is None:
            return
        if not event.user_id:
            await self._transport.send(event.chat_id, messages.IDENTITY_MISSING)
            return
        name = html.escape(event.first_name or messages.GREETING_FALLBACK_NAME)
        await self._transport.send(
            event.chat_id,
            messages.GREETING_HTML.format(first_name=name),
            link=LinkButton(
                label=messages.AUTH_BUTTON,
                url=build_auth_url(event.user_id, self._backend_url),
            ),
            parse_mode=_HTML,
        )

    async def send_help(self, event: InboundEvent) -> None:
        """Send the command list."""
        if event.chat_id is not None:
            await self._transport.send(
                event.chat_id, messages.HELP_HTML, parse_mode=_HTML
            )

    async def start_from_notification(self, event: InboundEvent) -> None:
        """Restart the wizard from the backend's post-sign-in button."""
        await self._transport.acknowledge(event.event_id)
        if event.chat_id is not None:
            await self._transport.send(event.chat_id, messages.AUTH_CONFIRMED)
        logger.info("Sign-in confirmed for user %s", event.user_id)
        await self._engine.enter(event)
