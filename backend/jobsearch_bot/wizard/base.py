"""Collaborator interfaces consumed by the wizard.

The wizard never imports concrete adapters. It works against these protocols,
which the Telegram, hh.ru and backend adapters satisfy structurally, and which
tests replace with AsyncMock or small fakes.
"""

from typing import Any, Protocol

from jobsearch_bot.wizard.state import LinkButton, Menu


class Transport(Protocol):
    """Outbound side of the chat transport."""

    async def send(
        self,
        chat_id: int,
        text: str,
        *,
        menu: Menu | None = None,
        link: LinkButton | None = None,
        parse_mode: str | None = None,
    ) -> None:
        """Send a message to a chat.

        Raises:
            UpstreamUnavailable: If the transport rejects the message.
        """
        ...

    async def acknowledge(self, event_id: str, text: str | None = None) -> None:
        """Clear the pending indicator of a menu selection."""
        ...


class CatalogSource(Protocol):
    """Read-only option catalog (hh.ru dictionaries)."""

    async def get_areas(self) -> list[dict[str, Any]]:
        """Fetch the full region tree."""
        ...

    async def get_schedules(self) -> list[dict[str, Any]]:
        """Fetch work schedules."""
        ...

    async def get_employments(self) -> list[dict[str, Any]]:
        """Fetch employment types."""
        ...

    async def get_professional_areas(self) -> list[dict[str, Any]]:
        """Fetch grouped professional areas."""
        ...


class SearchClient(Protocol):
    """Companion backend: resumes and vacancy search."""

    async def list_resumes(self, user_id: str) -> list[dict[str, Any]]:
        """List the user's resumes."""
        ...

    async def search(self, criteria: dict[str, Any]) -> list[dict[str, Any]]:
        """Run a vacancy search."""
        ...
