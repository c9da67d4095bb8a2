"""Shared fixtures for wizard tests.

Provides in-memory fakes for every collaborator the wizard consumes:

- RecordingTransport: captures outbound messages and acknowledgements
- FakeCatalog: serves hh.ru-shaped dictionaries, can be told to fail
- FakeBackend: serves resumes and search results, records search criteria

plus event factories and a fully wired WizardEngine.
"""

from dataclasses import dataclass, field
from typing import Any

import pytest

from jobsearch_bot.core.errors import UpstreamUnavailable
from jobsearch_bot.wizard.dispatch import ResultDispatcher
from jobsearch_bot.wizard.engine import WizardEngine
from jobsearch_bot.wizard.menu import decode_token, encode_token
from jobsearch_bot.wizard.options import OptionProvider
from jobsearch_bot.wizard.sessions import InMemorySessionStore
from jobsearch_bot.wizard.state import (
    EventKind,
    InboundEvent,
    LinkButton,
    Menu,
    SelectionToken,
)

TEST_USER_ID = "424242"
TEST_CHAT_ID = 424242

RUSSIA_ID = "113"
MOSCOW_ID = "1"
SAINT_PETERSBURG_ID = "2"
ICELAND_ID = "9001"

AREAS: list[dict[str, Any]] = [
    {
        "id": RUSSIA_ID,
        "name": "Россия",
        "parent_id": None,
        "areas": [
            {"id": MOSCOW_ID, "name": "Москва", "parent_id": RUSSIA_ID, "areas": []},
            {
                "id": SAINT_PETERSBURG_ID,
                "name": "Санкт-Петербург",
                "parent_id": RUSSIA_ID,
                "areas": [],
            },
        ],
    },
    {"id": ICELAND_ID, "name": "Iceland", "parent_id": None, "areas": []},
]

SCHEDULES: list[dict[str, Any]] = [
    {"id": "fullDay", "name": "Полный день"},
    {"id": "remote", "name": "Удаленная работа"},
    {"id": "flexible", "name": "Гибкий график"},
]

EMPLOYMENTS: list[dict[str, Any]] = [
    {"id": "full", "name": "Полная занятость"},
    {"id": "part", "name": "Частичная занятость"},
    {"id": "probation"},
]

PROFESSIONAL_AREAS: list[dict[str, Any]] = [
    {
        "id": "1",
        "name": "Информационные технологии",
        "categories": [
            {"id": "1.221", "name": "Программирование, Разработка"},
            {"id": "1.9", "name": "Web инженер"},
        ],
    },
    {"id": "2", "name": "Продажи", "categories": [{"id": "2.1", "name": "Продажи"}]},
]

RESUMES: list[dict[str, Any]] = [
    {"id": "R1", "title": "Backend developer"},
    {"id": "R2", "title": "Team lead"},
]


def make_vacancy(index: int = 1, **overrides: Any) -> dict[str, Any]:
    """Create a backend vacancy record with optional overrides."""
    vacancy: dict[str, Any] = {
        "id": f"v{index}",
        "name": f"Python developer {index}",
        "employer": {"name": "Acme"},
        "salary": {"from": 100000, "to": 150000, "currency": "RUR", "gross": False},
        "area": {"name": "Москва"},
        "published_at": "2024-03-15T10:30:00+0300",
        "alternate_url": f"https://hh.ru/vacancy/{index}",
    }
    vacancy.update(overrides)
    return vacancy


# =============================================================================
# Fakes
# =============================================================================


@dataclass
class SentMessage:
    """One message captured by RecordingTransport."""

    chat_id: int
    text: str
    menu: Menu | None = None
    link: LinkButton | None = None
    parse_mode: str | None = None


class RecordingTransport:
    """Transport fake that records everything it is asked to send."""

    def __init__(self) -> None:
        self.sent: list[SentMessage] = []
        self.acks: list[tuple[str, str | None]] = []
        self.fail_texts: set[str] = set()

    async def send(
        self,
        chat_id: int,
        text: str,
        *,
        menu: Menu | None = None,
        link: LinkButton | None = None,
        parse_mode: str | None = None,
    ) -> None:
        if text in self.fail_texts:
            raise UpstreamUnavailable("telegram", "message rejected")
        self.sent.append(SentMessage(chat_id, text, menu, link, parse_mode))

    async def acknowledge(self, event_id: str, text: str | None = None) -> None:
        self.acks.append((event_id, text))

    @property
    def texts(self) -> list[str]:
        """Texts of all sent messages, in order."""
        return [message.text for message in self.sent]

    @property
    def last_menu(self) -> Menu | None:
        """Menu of the most recent message that carried one."""
        for message in reversed(self.sent):
            if message.menu is not None:
                return message.menu
        return None

    def clear(self) -> None:
        self.sent.clear()
        self.acks.clear()


@dataclass
class FakeCatalog:
    """Catalog fake serving the module-level dictionaries."""

    areas: list[dict[str, Any]] = field(default_factory=lambda: AREAS)
    schedules: list[dict[str, Any]] = field(default_factory=lambda: SCHEDULES)
    employments: list[dict[str, Any]] = field(default_factory=lambda: EMPLOYMENTS)
    professional_areas: list[dict[str, Any]] = field(
        default_factory=lambda: PROFESSIONAL_AREAS
    )
    failing: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)

    def _serve(self, name: str, data: list[dict[str, Any]]) -> list[dict[str, Any]]:
        self.calls.append(name)
        if name in self.failing:
            raise UpstreamUnavailable("catalog", f"{name} down")
        return data

    async def get_areas(self) -> list[dict[str, Any]]:
        return self._serve("areas", self.areas)

    async def get_schedules(self) -> list[dict[str, Any]]:
        return self._serve("schedules", self.schedules)

    async def get_employments(self) -> list[dict[str, Any]]:
        return self._serve("employments", self.employments)

    async def get_professional_areas(self) -> list[dict[str, Any]]:
        return self._serve("professional_areas", self.professional_areas)


@dataclass
class FakeBackend:
    """Backend fake serving resumes and search results."""

    resumes: list[dict[str, Any]] = field(default_factory=lambda: RESUMES)
    vacancies: list[dict[str, Any]] = field(default_factory=list)
    fail_resumes: bool = False
    fail_search: bool = False
    searches: list[dict[str, Any]] = field(default_factory=list)

    async def list_resumes(self, user_id: str) -> list[dict[str, Any]]:
        if self.fail_resumes:
            raise UpstreamUnavailable("backend", "resumes down")
        return self.resumes

    async def search(self, criteria: dict[str, Any]) -> list[dict[str, Any]]:
        self.searches.append(criteria)
        if self.fail_search:
            raise UpstreamUnavailable("backend", "search down")
        return self.vacancies


# =============================================================================
# Event factories
# =============================================================================


def command_event(
    name: str, user_id: str | None = TEST_USER_ID, first_name: str | None = "Ivan"
) -> InboundEvent:
    """Create a slash-command event."""
    return InboundEvent(
        event_id="m-cmd",
        user_id=user_id,
        chat_id=TEST_CHAT_ID,
        kind=EventKind.COMMAND,
        payload=name,
        first_name=first_name,
    )


def text_event(text: str, user_id: str | None = TEST_USER_ID) -> InboundEvent:
    """Create a free-text event."""
    return InboundEvent(
        event_id="m-text",
        user_id=user_id,
        chat_id=TEST_CHAT_ID,
        kind=EventKind.TEXT,
        payload=text,
    )


def selection_event(
    step_index: int,
    field_name: str,
    value: str,
    user_id: str | None = TEST_USER_ID,
    event_id: str = "cb-1",
) -> InboundEvent:
    """Create a menu-selection event the way the transport would parse it."""
    data = encode_token(SelectionToken(step_index, field_name, value))
    return raw_selection_event(data, user_id=user_id, event_id=event_id)


def raw_selection_event(
    data: str, user_id: str | None = TEST_USER_ID, event_id: str = "cb-1"
) -> InboundEvent:
    """Create a menu-selection event from raw callback data."""
    return InboundEvent(
        event_id=event_id,
        user_id=user_id,
        chat_id=TEST_CHAT_ID,
        kind=EventKind.MENU_SELECTION,
        payload=data,
        token=decode_token(data),
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def transport() -> RecordingTransport:
    """Recording transport."""
    return RecordingTransport()


@pytest.fixture
def catalog() -> FakeCatalog:
    """Catalog fake with hh.ru-shaped data."""
    return FakeCatalog()


@pytest.fixture
def backend() -> FakeBackend:
    """Backend fake with two resumes and no vacancies."""
    return FakeBackend()


@pytest.fixture
def store() -> InMemorySessionStore:
    """Empty session store."""
    return InMemorySessionStore()


@pytest.fixture
def options(catalog: FakeCatalog, backend: FakeBackend) -> OptionProvider:
    """Option provider over the fakes."""
    return OptionProvider(catalog, backend)


@pytest.fixture
def dispatcher(
    transport: RecordingTransport, backend: FakeBackend
) -> ResultDispatcher:
    """Result dispatcher without pacing delay."""
    return ResultDispatcher(transport, backend, result_limit=10, send_delay=0)


@pytest.fixture
def engine(
    store: InMemorySessionStore,
    options: OptionProvider,
    transport: RecordingTransport,
    dispatcher: ResultDispatcher,
) -> WizardEngine:
    """Fully wired wizard engine over the fakes."""
    return WizardEngine(
        store=store, options=options, transport=transport, dispatcher=dispatcher
    )
