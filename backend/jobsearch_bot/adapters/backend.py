"""Companion backend adapter.

The backend owns the hh.ru OAuth tokens of every Telegram user. The bot only
asks it for the user's resumes and forwards the assembled search criteria:

    GET  {backend_url}/user/{telegram_id}/resumes   → {"items": [...]} or [...]
    POST {backend_url}/search                       → [vacancy, ...]
"""

from typing import Any

import httpx

from jobsearch_bot.adapters.base import request_json
from jobsearch_bot.core.config import settings
from jobsearch_bot.core.errors import UpstreamUnavailable

_SERVICE = "backend"


def build_auth_url(telegram_id: str, backend_url: str | None = None) -> str:
    """Return the hh.ru sign-in link served by the backend."""
    base = (backend_url or settings.backend_url).rstrip("/")
    return f"{base}/auth/hh?telegramId={telegram_id}"


class BackendClient:
    """Client for the companion backend (resumes and vacancy search)."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._client = client
        self.base_url = (base_url or settings.backend_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.http_timeout

    async def list_resumes(self, user_id: str) -> list[dict[str, Any]]:
        """List the user's hh.ru resumes.

        Args:
            user_id: Telegram user id.

        Returns:
            Resume dicts with at least "id" and usually "title".

        Raises:
            UpstreamUnavailable: If the backend fails or answers with neither
                a list nor an {"items": [...]} envelope.
        """
        data = await request_json(
            self._client,
            "GET",
            f"{self.base_url}/user/{user_id}/resumes",
            service=_SERVICE,
            timeout=self._timeout,
        )
        if isinstance(data, dict):
            data = data.get("items", [])
        if not isinstance(data, list):
            raise UpstreamUnavailable(_SERVICE, "unexpected resumes payload")
        return data

    async def search(self, criteria: dict[str, Any]) -> list[dict[str, Any]]:
        """Run a vacancy search.

        Args:
            criteria: Search request built from the wizard session. Unset
                fields are already omitted.

        Returns:
            Vacancies in the order the backend ranked them.

        Raises:
            UpstreamUnavailable: On any transport failure or a non-list body.
        """
        data = await request_json(
            self._client,
            "POST",
            f"{self.base_url}/search",
            service=_SERVICE,
            json=criteria,
            timeout=self._timeout,
        )
        if data is None:
            return []
        if not isinstance(data, list):
            raise UpstreamUnavailable(_SERVICE, "unexpected search payload")
        return data
