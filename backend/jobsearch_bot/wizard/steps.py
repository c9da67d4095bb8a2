"""Wizard step table.

The questionnaire is a fixed sequence of steps. Each step owns exactly one
session field and declares how it is entered and how it consumes input:

    0 resume ─► 1 region ─┬─► 2 subregion ─► 3 work_schedule ─► 4 employment_type
                          │                        ▲
                          └── no child areas ──────┘
        ─► 5 professional_area ─► 6 keywords ─► 7 cover_letter ─► [search]

Steps 0-5 are PROMPT_THEN_WAIT: on_enter fetches options and renders a menu.
Steps 6-7 are WAIT_ONLY: entering sends a text prompt.

on_input handlers receive the already-matched value (selection id or trimmed
text) and return a StepOutcome naming the next step explicitly. The only
branch is the region step skipping the subregion step.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from jobsearch_bot.core.errors import (
    DialogAborted,
    InputMismatch,
    UpstreamUnavailable,
)
from jobsearch_bot.wizard import messages
from jobsearch_bot.wizard.base import Transport
from jobsearch_bot.wizard.menu import build_menu, encode_token
from jobsearch_bot.wizard.options import OptionKind, OptionProvider
from jobsearch_bot.wizard.state import (
    ALL,
    ANY,
    SKIP_MARKER,
    Expectation,
    OptionItem,
    Sentinel,
    StepKind,
    StepOutcome,
    WizardSession,
)


@dataclass(frozen=True)
class StepContext:
    """Everything a step handler may touch.

    Handlers read the session snapshot but never write it; writes go through
    the returned StepOutcome.
    """

    step: "StepDefinition"
    session: WizardSession
    chat_id: int | None
    options: OptionProvider
    transport: Transport

    async def send(self, text: str) -> None:
        """Send plain text to the dialog's chat."""
        await self.transport.send(self.chat_id, text)

    async def send_menu(
        self,
        text: str,
        items: Sequence[OptionItem],
        *,
        columns: int = 2,
        sentinels: Sequence[Sentinel] = (),
    ) -> None:
        """Render items as a menu tagged with this step and send it.

        Raises:
            UpstreamUnavailable: If the options cannot be rendered (duplicate
                ids, or an id too long for callback data).
        """
        try:
            menu = build_menu(
                items,
                step_index=self.step.index,
                field=self.step.field,
                columns=columns,
                sentinels=sentinels,
            )
            for button in menu.buttons:
                encode_token(button.token)
        except ValueError as e:
            raise UpstreamUnavailable("options", str(e)) from e
        await self.transport.send(self.chat_id, text, menu=menu)


EnterHandler = Callable[[StepContext], Awaitable[None]]
InputHandler = Callable[[StepContext, str], Awaitable[StepOutcome]]


@dataclass(frozen=True)
class StepDefinition:
    """One position in the wizard.

    Attributes:
        index: 0-based position in the sequence.
        name: Stable step name (for logs).
        kind: PROMPT_THEN_WAIT or WAIT_ONLY.
        expects: Shape of acceptable input.
        field: Session field this step owns.
        on_input: Consumes a matching value, returns the outcome.
        reprompt: Sent when an event does not match.
        failure_text: Sent when the step aborts on an upstream failure.
        on_enter: Renders the menu (PROMPT_THEN_WAIT only).
        prompt: Sent on entry (WAIT_ONLY only).
    """

    index: int
    name: str
    kind: StepKind
    expects: Expectation
    field: str
    on_input: InputHandler
    reprompt: str
    failure_text: str = messages.GENERIC_FAILURE
    on_enter: EnterHandler | None = None
    prompt: str | None = None


_ALL_REGIONS = Sentinel(label=messages.ALL_REGIONS_LABEL, id=ALL)
_ANY = Sentinel(label=messages.ANY_LABEL, id=ANY)


# =============================================================================
# Step 0: resume
# =============================================================================


async def enter_resume(ctx: StepContext) -> None:
    """List the user's resumes.

    Raises:
        DialogAborted: If the user has no resumes (not signed in yet).
        UpstreamUnavailable: If the backend fails.
    """
    resumes = await ctx.options.fetch_resumes(ctx.session.user_id)
    if not resumes:
        raise DialogAborted("User has no resumes", reply=messages.NO_RESUMES)
    await ctx.send_menu(messages.CHOOSE_RESUME, resumes)


async def select_resume(ctx: StepContext, value: str) -> StepOutcome:
    """Store the chosen resume."""
    return StepOutcome(
        next_index=ctx.step.index + 1, updates={"selected_resume_id": value}
    )


# =============================================================================
# Step 1: region
# =============================================================================


async def enter_region(ctx: StepContext) -> None:
    """Render top-level regions (countries)."""
    regions = await ctx.options.fetch_options(OptionKind.REGION)
    await ctx.send_menu(messages.CHOOSE_REGION, regions, columns=3)


async def select_region(ctx: StepContext, value: str) -> StepOutcome:
    """Store the region and skip the subregion step when it has no areas.

    Raises:
        InputMismatch: If the id no longer exists in the catalog.
        UpstreamUnavailable: If the catalog fails.
    """
    region = await ctx.options.find_region(value)
    if region is None:
        raise InputMismatch(
            f"Unknown region id '{value}'", reply=messages.REGION_NOT_FOUND
        )

    if region.children:
        return StepOutcome(next_index=ctx.step.index + 1, updates={"region": value})

    return StepOutcome(
        next_index=ctx.step.index + 2,
        updates={"region": value},
        confirmation=messages.REGION_WITHOUT_AREAS.format(name=region.label),
    )


# =============================================================================
# Step 2: subregion
# =============================================================================


async def enter_subregion(ctx: StepContext) -> None:
    """Render the chosen region's child areas after an "all regions" entry."""
    region_id = ctx.session.region or ""
    parent = await ctx.options.find_region(region_id)
    children = parent.children if parent is not None else []
    name = parent.label if parent is not None else region_id
    await ctx.send_menu(
        messages.CHOOSE_SUBREGION.format(name=name),
        children,
        columns=2,
        sentinels=[_ALL_REGIONS],
    )


async def select_subregion(ctx: StepContext, value: str) -> StepOutcome:
    """Narrow the search to one area, or keep the parent region for ALL."""
    next_index = ctx.step.index + 1
    if value == ALL:
        return StepOutcome(
            next_index=next_index,
            updates={"subregion": None},
            confirmation=messages.ALL_REGIONS_CHOSEN,
            ack_text=messages.ALL_REGIONS_ACK,
        )
    return StepOutcome(
        next_index=next_index,
        updates={"subregion": value},
        confirmation=messages.SUBREGION_CHOSEN,
    )


# =============================================================================
# Steps 3-5: flat catalogs with an ANY entry
# =============================================================================


def catalog_menu(kind: OptionKind, text: str, columns: int) -> EnterHandler:
    """Build an on_enter handler rendering a flat catalog plus ANY."""

    async def enter(ctx: StepContext) -> None:
        items = await ctx.options.fetch_options(kind)
        await ctx.send_menu(text, items, columns=columns, sentinels=[_ANY])

    return enter


def any_or_value(chosen_text: str, any_text: str) -> InputHandler:
    """Build an on_input handler where ANY leaves the field unset."""

    async def select(ctx: StepContext, value: str) -> StepOutcome:
        wildcard = value == ANY
        return StepOutcome(
            next_index=ctx.step.index + 1,
            updates={ctx.step.field: None if wildcard else value},
            confirmation=any_text if wildcard else chosen_text,
        )

    return select


# =============================================================================
# Steps 6-7: free text
# =============================================================================


async def capture_keywords(ctx: StepContext, value: str) -> StepOutcome:
    """Store search keywords as typed (trimmed)."""
    return StepOutcome(next_index=ctx.step.index + 1, updates={"keywords": value})


async def capture_cover_letter(ctx: StepContext, value: str) -> StepOutcome:
    """Store the cover letter; "-" records an explicit skip."""
    letter = None if value == SKIP_MARKER else value
    return StepOutcome(next_index=ctx.step.index + 1, updates={"cover_letter": letter})


# =============================================================================
# Step table
# =============================================================================

RESUME_STEP = 0
REGION_STEP = 1
SUBREGION_STEP = 2
SCHEDULE_STEP = 3
EMPLOYMENT_STEP = 4
PROFESSIONAL_AREA_STEP = 5
KEYWORDS_STEP = 6
COVER_LETTER_STEP = 7

WIZARD_STEPS: tuple[StepDefinition, ...] = (
    StepDefinition(
        index=RESUME_STEP,
        name="resume",
        kind=StepKind.PROMPT_THEN_WAIT,
        expects=Expectation.SELECTION,
        field="selected_resume_id",
        on_enter=enter_resume,
        on_input=select_resume,
        reprompt=messages.REPROMPT_RESUME,
        failure_text=messages.RESUMES_FAILED,
    ),
    StepDefinition(
        index=REGION_STEP,
        name="region",
        kind=StepKind.PROMPT_THEN_WAIT,
        expects=Expectation.SELECTION,
        field="region",
        on_enter=enter_region,
        on_input=select_region,
        reprompt=messages.REPROMPT_REGION,
        failure_text=messages.REGIONS_FAILED,
    ),
    StepDefinition(
        index=SUBREGION_STEP,
        name="subregion",
        kind=StepKind.PROMPT_THEN_WAIT,
        expects=Expectation.SELECTION,
        field="subregion",
        on_enter=enter_subregion,
        on_input=select_subregion,
        reprompt=messages.REPROMPT_SUBREGION,
        failure_text=messages.SUBREGIONS_FAILED,
    ),
    StepDefinition(
        index=SCHEDULE_STEP,
        name="work_schedule",
        kind=StepKind.PROMPT_THEN_WAIT,
        expects=Expectation.SELECTION,
        field="work_schedule",
        on_enter=catalog_menu(OptionKind.SCHEDULE, messages.CHOOSE_SCHEDULE, 2),
        on_input=any_or_value(messages.SCHEDULE_CHOSEN, messages.SCHEDULE_ANY),
        reprompt=messages.REPROMPT_SCHEDULE,
        failure_text=messages.SCHEDULES_FAILED,
    ),
    StepDefinition(
        index=EMPLOYMENT_STEP,
        name="employment_type",
        kind=StepKind.PROMPT_THEN_WAIT,
        expects=Expectation.SELECTION,
        field="employment_type",
        on_enter=catalog_menu(OptionKind.EMPLOYMENT, messages.CHOOSE_EMPLOYMENT, 2),
        on_input=any_or_value(messages.EMPLOYMENT_CHOSEN, messages.EMPLOYMENT_ANY),
        reprompt=messages.REPROMPT_EMPLOYMENT,
        failure_text=messages.EMPLOYMENTS_FAILED,
    ),
    StepDefinition(
        index=PROFESSIONAL_AREA_STEP,
        name="professional_area",
        kind=StepKind.PROMPT_THEN_WAIT,
        expects=Expectation.SELECTION,
        field="professional_area",
        on_enter=catalog_menu(
            OptionKind.PROFESSIONAL_AREA, messages.CHOOSE_PROFESSIONAL_AREA, 1
        ),
        on_input=any_or_value(
            messages.PROFESSIONAL_AREA_CHOSEN, messages.PROFESSIONAL_AREA_ANY
        ),
        reprompt=messages.REPROMPT_PROFESSIONAL_AREA,
        failure_text=messages.PROFESSIONAL_AREAS_FAILED,
    ),
    StepDefinition(
        index=KEYWORDS_STEP,
        name="keywords",
        kind=StepKind.WAIT_ONLY,
        expects=Expectation.TEXT,
        field="keywords",
        on_input=capture_keywords,
        prompt=messages.ENTER_KEYWORDS,
        reprompt=messages.REPROMPT_KEYWORDS,
    ),
    StepDefinition(
        index=COVER_LETTER_STEP,
        name="cover_letter",
        kind=StepKind.WAIT_ONLY,
        expects=Expectation.TEXT,
        field="cover_letter",
        on_input=capture_cover_letter,
        prompt=messages.ENTER_COVER_LETTER,
        reprompt=messages.REPROMPT_COVER_LETTER,
    ),
)


def validate_steps(steps: Sequence[StepDefinition]) -> None:
    """Check a step table is well formed.

    Raises:
        ValueError: If indices are not 0..N-1 in order, a field is owned by
            two steps, or a step lacks the handler its kind requires.
    """
    if not steps:
        raise ValueError("Wizard needs at least one step")
    owners: dict[str, str] = {}
    for position, step in enumerate(steps):
        if step.index != position:
            raise ValueError(
                f"Step '{step.name}' has index {step.index}, expected {position}"
            )
        if step.field in owners:
            raise ValueError(
                f"Field '{step.field}' owned by both '{owners[step.field]}' "
                f"and '{step.name}'"
            )
        owners[step.field] = step.name
        if step.kind is StepKind.PROMPT_THEN_WAIT and step.on_enter is None:
            raise ValueError(f"Step '{step.name}' renders a menu but has no on_enter")
        if step.kind is StepKind.WAIT_ONLY and not step.prompt:
            raise ValueError(f"Step '{step.name}' waits for text but has no prompt")
