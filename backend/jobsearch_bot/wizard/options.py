"""Option provider.

Fetches option lists from the catalog (and resumes from the backend) and
shapes them into OptionItem lists for the menu builder:

- REGION: hierarchical; top-level entries or one node's direct children
- SCHEDULE, EMPLOYMENT: flat lists
- PROFESSIONAL_AREA: groups flattened to their categories, groups dropped

Every item gets a non-empty label ("ID: <id>" when the upstream has no name).
Nothing is cached: each call hits the upstream once.
"""

from collections.abc import Iterable
from enum import Enum
from typing import Any

from jobsearch_bot.core.errors import UpstreamUnavailable
from jobsearch_bot.wizard.base import CatalogSource, SearchClient
from jobsearch_bot.wizard.state import OptionItem


class OptionKind(str, Enum):
    """Catalog dictionaries the wizard renders as menus."""

    REGION = "region"
    SCHEDULE = "schedule"
    EMPLOYMENT = "employment"
    PROFESSIONAL_AREA = "professional_area"


def _label(record: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return f"ID: {record.get('id')}"


def _to_option(record: Any, service: str = "catalog") -> OptionItem:
    if not isinstance(record, dict) or record.get("id") is None:
        raise UpstreamUnavailable(service, f"malformed catalog record: {record!r}")
    return OptionItem(id=str(record["id"]), label=_label(record, "name", "title"))


def _to_region(record: Any) -> OptionItem:
    item = _to_option(record)
    item.children = [_to_region(child) for child in record.get("areas") or []]
    return item


def find_region(regions: Iterable[OptionItem], region_id: str) -> OptionItem | None:
    """Depth-first search of a region tree by id."""
    for region in regions:
        if region.id == region_id:
            return region
        found = find_region(region.children, region_id)
        if found is not None:
            return found
    return None


class OptionProvider:
    """Shapes catalog and backend data into selectable options."""

    def __init__(self, catalog: CatalogSource, backend: SearchClient) -> None:
        self._catalog = catalog
        self._backend = backend

    async def fetch_region_tree(self) -> list[OptionItem]:
        """Fetch the whole region tree, top-level entries at the root.

        hh.ru returns countries as roots; any root that still names a parent
        is dropped so only real top-level entries remain.

        Raises:
            UpstreamUnavailable: If the catalog fails.
        """
        raw = await self._catalog.get_areas()
        return [
            _to_region(record)
            for record in raw
            if not (isinstance(record, dict) and record.get("parent_id"))
        ]

    async def fetch_options(
        self, kind: OptionKind, parent_id: str | None = None
    ) -> list[OptionItem]:
        """Fetch one option list.

        Args:
            kind: Which dictionary to fetch.
            parent_id: For REGION only: return this node's direct children
                instead of the top-level entries.

        Returns:
            Options in upstream order. REGION items keep their children;
            an unknown parent_id yields an empty list.

        Raises:
            UpstreamUnavailable: If the catalog fails or returns malformed data.
        """
        if kind is OptionKind.REGION:
            tree = await self.fetch_region_tree()
            if parent_id is None:
                return tree
            parent = find_region(tree, parent_id)
            return list(parent.children) if parent is not None else []

        if kind is OptionKind.SCHEDULE:
            return [_to_option(r) for r in await self._catalog.get_schedules()]

        if kind is OptionKind.EMPLOYMENT:
            return [_to_option(r) for r in await self._catalog.get_employments()]

        groups = await self._catalog.get_professional_areas()
        return [
            _to_option(category)
            for group in groups
            if isinstance(group, dict)
            for category in group.get("categories") or []
        ]

    async def find_region(self, region_id: str) -> OptionItem | None:
        """Look a region up anywhere in the tree.

        Raises:
            UpstreamUnavailable: If the catalog fails.
        """
        return find_region(await self.fetch_region_tree(), region_id)

    async def fetch_resumes(self, user_id: str) -> list[OptionItem]:
        """Fetch the user's resumes as options (label from title).

        Raises:
            UpstreamUnavailable: If the backend fails.
        """
        resumes = await self._backend.list_resumes(user_id)
        return [_to_option(r, service="backend") for r in resumes]
