"""Result dispatcher.

Runs once, when the last wizard step completes:

    session ──► build_search_criteria ──► SearchClient.search
                                               │
               ┌───────────────┬───────────────┴──────────────┐
               ▼               ▼                              ▼
          failure msg     "no results"        summary + first N vacancies,
                                              paced, one message each

Failures are never retried. A vacancy that cannot be formatted or sent is
reported with a generic message and delivery moves on to the next one.
"""

import asyncio
import logging
from typing import Any

from jobsearch_bot.core.config import settings
from jobsearch_bot.core.errors import PartialRenderFailure, UpstreamUnavailable
from jobsearch_bot.wizard import messages
from jobsearch_bot.wizard.base import SearchClient, Transport
from jobsearch_bot.wizard.formatting import format_vacancy
from jobsearch_bot.wizard.state import WizardSession

logger = logging.getLogger(__name__)

_HTML = "HTML"

# Session field → search request key
_CRITERIA_KEYS = {
    "selected_resume_id": "resumeId",
    "work_schedule": "workSchedule",
    "employment_type": "employmentType",
    "professional_area": "professionalArea",
    "keywords": "keywords",
    "cover_letter": "coverLetter",
}


def build_search_criteria(session: WizardSession) -> dict[str, Any]:
    """Assemble the backend search request from a finished session.

    The chosen subregion, when present, replaces the parent region as the
    search area. Unset fields are omitted rather than sent as null.

    Args:
        session: Completed wizard session.

    Returns:
        Request body for POST /search.
    """
    criteria: dict[str, Any] = {"telegramId": session.user_id}
    region = session.subregion or session.region
    if region is not None:
        criteria["region"] = region
    for field_name, key in _CRITERIA_KEYS.items():
        value = getattr(session, field_name)
        if value is not None:
            criteria[key] = value
    return criteria


class ResultDispatcher:
    """Performs the search and streams results back to the chat.

    Attributes:
        result_limit: Maximum vacancies delivered per search.
        send_delay: Seconds between consecutive result messages.
    """

    def __init__(
        self,
        transport: Transport,
        search_client: SearchClient,
        *,
        result_limit: int | None = None,
        send_delay: float | None = None,
    ) -> None:
        self._transport = transport
        self._search_client = search_client
        self.result_limit = (
            result_limit if result_limit is not None else settings.result_limit
        )
        self.send_delay = (
            send_delay if send_delay is not None else settings.result_send_delay
        )

    async def dispatch(self, session: WizardSession) -> None:
        """Search with the session's criteria and deliver the results.

        Args:
            session: Completed wizard session. Its chat_id receives messages.
        """
        chat_id = session.chat_id
        if chat_id is None:
            logger.error("No chat to deliver results for user %s", session.user_id)
            return

        criteria = build_search_criteria(session)
        await self._transport.send(chat_id, messages.SEARCHING)

        try:
            vacancies = await self._search_client.search(criteria)
        except UpstreamUnavailable:
            logger.warning("Search failed for user %s", session.user_id, exc_info=True)
            await self._transport.send(chat_id, messages.SEARCH_FAILED)
            return

        if not vacancies:
            logger.info("Search returned no vacancies for user %s", session.user_id)
            await self._transport.send(chat_id, messages.NO_RESULTS)
            return

        batch = vacancies[: self.result_limit]
        logger.info(
            "Delivering %d of %d vacancies to user %s",
            len(batch),
            len(vacancies),
            session.user_id,
        )
        await self._transport.send(
            chat_id,
            messages.RESULTS_FOUND.format(total=len(vacancies), shown=len(batch)),
        )

        for position, vacancy in enumerate(batch):
            if position:
                await asyncio.sleep(self.send_delay)
            await self._deliver(chat_id, position, vacancy)

    async def _deliver(self, chat_id: int, position: int, vacancy: Any) -> None:
        try:
            text, link = format_vacancy(vacancy)
            await self._transport.send(chat_id, text, link=link, parse_mode=_HTML)
        except (UpstreamUnavailable, AttributeError, TypeError, ValueError) as e:
            failure = PartialRenderFailure(position, str(e))
            logger.warning("Vacancy not delivered: %s", failure, exc_info=True)
            try:
                await self._transport.send(chat_id, messages.RESULT_FAILED)
            except UpstreamUnavailable:
                logger.warning("Failure notice not delivered for %s", failure)
