"""Wizard data model.

Types shared by the option provider, menu builder, session store, engine and
result dispatcher:

    InboundEvent ──► WizardEngine ──► StepDefinition.on_input ──► StepOutcome
                          │                                          │
                          ▼                                          ▼
                    WizardSession ◄──────── SessionStore.update ◄────┘

Menus are grids of MenuButton, each tagged with a structural SelectionToken.
Tokens are turned into Telegram callback_data strings only at the transport
edge (see wizard.menu.encode_token / decode_token).
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any

# Reserved selection ids
ALL = "ALL"
"""Subregion sentinel: keep the parent region, do not narrow further."""

ANY = "ANY"
"""Flat-list sentinel: leave the field unset (wildcard)."""

SKIP_MARKER = "-"
"""Cover letter text that means "explicitly skipped"."""


class EventKind(str, Enum):
    """Kinds of inbound events delivered by the transport."""

    COMMAND = "command"
    MENU_SELECTION = "menu_selection"
    TEXT = "text"


class StepKind(str, Enum):
    """Whether a step must render a menu before it can accept input."""

    PROMPT_THEN_WAIT = "prompt_then_wait"
    WAIT_ONLY = "wait_only"


class Expectation(str, Enum):
    """Shape of input a step accepts."""

    SELECTION = "selection"
    TEXT = "text"


@dataclass(frozen=True)
class SelectionToken:
    """Structural tag carried by every menu button.

    Attributes:
        step_index: Index of the step that rendered the menu.
        field: Session field the step owns.
        value: Selected option id or sentinel.
    """

    step_index: int
    field: str
    value: str


@dataclass(frozen=True)
class InboundEvent:
    """One event from the transport, already parsed.

    Attributes:
        event_id: Transport id (callback query id for menu selections).
        user_id: Stable external user id. None when the transport could not
            resolve one.
        chat_id: Where replies go.
        kind: Command, menu selection or free text.
        payload: Command name without the slash, raw callback data, or text.
        first_name: Display name, used by the greeting.
        token: Parsed selection token for menu selections. None when the
            callback data is not a wizard token.
    """

    event_id: str
    user_id: str | None
    chat_id: int | None
    kind: EventKind
    payload: str
    first_name: str | None = None
    token: SelectionToken | None = None


@dataclass
class OptionItem:
    """A selectable option.

    Attributes:
        id: Catalog id, always a string.
        label: Non-empty display text.
        children: Nested options (regions only).
    """

    id: str
    label: str
    children: list["OptionItem"] = field(default_factory=list)


@dataclass(frozen=True)
class Sentinel:
    """Reserved menu entry placed before the catalog items."""

    label: str
    id: str


@dataclass(frozen=True)
class MenuButton:
    """One button of a rendered menu."""

    label: str
    token: SelectionToken


@dataclass(frozen=True)
class Menu:
    """Rows of selection buttons."""

    rows: list[list[MenuButton]]

    @property
    def buttons(self) -> list[MenuButton]:
        """All buttons in row-major order."""
        return [button for row in self.rows for button in row]


@dataclass(frozen=True)
class LinkButton:
    """Inline button that opens a URL."""

    label: str
    url: str


# Session fields owned by wizard steps, in step order
ANSWER_FIELDS = (
    "selected_resume_id",
    "region",
    "subregion",
    "work_schedule",
    "employment_type",
    "professional_area",
    "keywords",
    "cover_letter",
)


@dataclass
class WizardSession:
    """Per-user accumulator of answers plus the step pointer.

    Attributes:
        user_id: Stable external user id (store key).
        chat_id: Where replies for this dialog go.
        current_step_index: Step waiting for a response.
        entered: True once the current step rendered its menu or prompt.
        selected_resume_id .. cover_letter: Answers; None means unset.
    """

    user_id: str
    chat_id: int | None = None
    current_step_index: int = 0
    entered: bool = False

    selected_resume_id: str | None = None
    region: str | None = None
    subregion: str | None = None
    work_schedule: str | None = None
    employment_type: str | None = None
    professional_area: str | None = None
    keywords: str | None = None
    cover_letter: str | None = None

    def answers(self) -> dict[str, Any]:
        """Return the answer fields that are set."""
        return {
            name: getattr(self, name)
            for name in ANSWER_FIELDS
            if getattr(self, name) is not None
        }

    def copy(self) -> "WizardSession":
        """Return a shallow copy (all fields are immutable scalars)."""
        return WizardSession(**{f.name: getattr(self, f.name) for f in fields(self)})


@dataclass
class StepOutcome:
    """Result of a step consuming a matching event.

    Attributes:
        next_index: Step to move to. Equal to the step count when the wizard
            is complete.
        updates: Field values to write. Only the step's own field may appear;
            None records an explicit absence.
        confirmation: Optional text sent before the next step is entered.
        ack_text: Optional short text for the menu-selection acknowledgement.
    """

    next_index: int
    updates: dict[str, str | None] = field(default_factory=dict)
    confirmation: str | None = None
    ack_text: str | None = None
