"""hh.ru catalog adapter.

Read-only dictionaries used to build wizard menus:

    GET /areas               region tree (countries → regions → cities)
    GET /schedules           flat list of work schedules
    GET /employments         flat list of employment types
    GET /professional_areas  groups, each with a list of categories

Responses are returned raw; shaping into options happens in
wizard.options.OptionProvider.
"""

from typing import Any

import httpx

from jobsearch_bot.adapters.base import request_json
from jobsearch_bot.core.config import settings
from jobsearch_bot.core.errors import UpstreamUnavailable

_SERVICE = "catalog"


class HHCatalogClient:
    """Client for the hh.ru public catalog.

    Attributes:
        base_url: Catalog root, without trailing slash.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._client = client
        self.base_url = (base_url or settings.catalog_api_url).rstrip("/")
        self._headers = {"User-Agent": user_agent or settings.catalog_user_agent}
        self._timeout = timeout if timeout is not None else settings.http_timeout

    async def _get_list(self, path: str) -> list[dict[str, Any]]:
        data = await request_json(
            self._client,
            "GET",
            f"{self.base_url}{path}",
            service=_SERVICE,
            headers=self._headers,
            timeout=self._timeout,
        )
        if not isinstance(data, list):
            raise UpstreamUnavailable(_SERVICE, f"expected a list from {path}")
        return data

    async def get_areas(self) -> list[dict[str, Any]]:
        """Fetch the full region tree.

        Each node has id, name, parent_id and a nested "areas" list.
        """
        return await self._get_list("/areas")

    async def get_schedules(self) -> list[dict[str, Any]]:
        """Fetch work schedules ({id, name})."""
        return await self._get_list("/schedules")

    async def get_employments(self) -> list[dict[str, Any]]:
        """Fetch employment types ({id, name})."""
        return await self._get_list("/employments")

    async def get_professional_areas(self) -> list[dict[str, Any]]:
        """Fetch professional area groups ({id, name, categories: [...]})."""
        return await self._get_list("/professional_areas")
