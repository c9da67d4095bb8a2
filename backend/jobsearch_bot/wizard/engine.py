"""Wizard engine: the per-user step sequencer.

States are the step indices 0..N-1 plus an implicit terminal state reached
when a step returns next_index == N. Each inbound event is processed to
completion and control returns to the caller; the dialog resumes when the
next event for the same user arrives.

Per event (user U, session S, step = steps[S.current_step_index]):

    1. enter trigger     → reset S, enter step 0, stop
    2. step not entered  → render its menu / prompt, mark entered, stop
    3. event mismatches  → re-prompt, S untouched
    4. event matches     → on_input → write the step's field
    5. next == N         → dispatch results, clear S
    6. otherwise         → advance, enter the next step right away

Upstream failures abort the dialog: the session is cleared and the user gets
one failure message. Menu selections are acknowledged exactly once whatever
the outcome.
"""

import logging
from collections.abc import Sequence

from jobsearch_bot.core.errors import (
    DialogAborted,
    IdentityMissing,
    InputMismatch,
    UpstreamUnavailable,
)
from jobsearch_bot.wizard import messages
from jobsearch_bot.wizard.base import Transport
from jobsearch_bot.wizard.dispatch import ResultDispatcher
from jobsearch_bot.wizard.options import OptionProvider
from jobsearch_bot.wizard.sessions import SessionMutator, SessionStore
from jobsearch_bot.wizard.state import (
    EventKind,
    Expectation,
    InboundEvent,
    StepKind,
    StepOutcome,
    WizardSession,
)
from jobsearch_bot.wizard.steps import (
    WIZARD_STEPS,
    StepContext,
    StepDefinition,
    validate_steps,
)

logger = logging.getLogger(__name__)


def match_event(step: StepDefinition, event: InboundEvent) -> str:
    """Check an event against a step's expectation.

    Args:
        step: Active step.
        event: Inbound event.

    Returns:
        The selected option id, or the trimmed text.

    Raises:
        InputMismatch: Wrong event kind, a token rendered by another step
            (including stale taps on earlier menus), or blank text.
    """
    if step.expects is Expectation.SELECTION:
        if event.kind is not EventKind.MENU_SELECTION:
            raise InputMismatch(f"Step '{step.name}' expects a menu selection")
        token = event.token
        if token is None or token.step_index != step.index or token.field != step.field:
            raise InputMismatch(
                f"Selection {event.payload!r} does not belong to step '{step.name}'"
            )
        return token.value

    if event.kind is not EventKind.TEXT:
        raise InputMismatch(f"Step '{step.name}' expects text")
    text = event.payload.strip()
    if not text:
        raise InputMismatch(f"Step '{step.name}' got blank text")
    return text


class WizardEngine:
    """Drives every user's dialog through the step table.

    Attributes:
        steps: The step table, validated on construction.
    """

    def __init__(
        self,
        store: SessionStore,
        options: OptionProvider,
        transport: Transport,
        dispatcher: ResultDispatcher,
        steps: Sequence[StepDefinition] = WIZARD_STEPS,
    ) -> None:
        validate_steps(steps)
        self.steps = tuple(steps)
        self._store = store
        self._options = options
        self._transport = transport
        self._dispatcher = dispatcher

    @property
    def step_count(self) -> int:
        """Number of steps (N); next_index == N completes the wizard."""
        return len(self.steps)

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    async def enter(self, event: InboundEvent) -> None:
        """Start (or restart) the wizard for the event's user.

        Any existing session is replaced by a fresh one at step 0; answers
        are never merged.
        """
        try:
            user_id = self._require_identity(event)
        except IdentityMissing:
            await self._reply_identity_missing(event)
            return

        self._store.reset(user_id)
        session = self._store.update(user_id, _set_chat(event.chat_id))
        logger.info("Wizard started for user %s", user_id)
        await self._enter_step(session, self.steps[0])

    async def handle(self, event: InboundEvent) -> None:
        """Process one inbound event for the event's user."""
        ack_text: str | None = None
        try:
            ack_text = await self._process(event)
        finally:
            if event.kind is EventKind.MENU_SELECTION:
                await self._transport.acknowledge(event.event_id, ack_text)

    # -------------------------------------------------------------------------
    # Transition algorithm
    # -------------------------------------------------------------------------

    async def _process(self, event: InboundEvent) -> str | None:
        try:
            user_id = self._require_identity(event)
        except IdentityMissing:
            await self._reply_identity_missing(event)
            return None

        session = self._store.get_or_create(user_id)
        if event.chat_id is not None and session.chat_id != event.chat_id:
            session = self._store.update(user_id, _set_chat(event.chat_id))
        step = self.steps[session.current_step_index]

        if not session.entered:
            await self._enter_step(session, step)
            return None

        try:
            value = match_event(step, event)
            outcome = await step.on_input(self._context(step, session), value)
        except InputMismatch as e:
            logger.info("Re-prompting user %s at '%s': %s", user_id, step.name, e)
            await self._transport.send(session.chat_id, e.reply or step.reprompt)
            return None
        except (UpstreamUnavailable, DialogAborted) as e:
            await self._abort(session, step, e)
            return None

        self._check_outcome(step, outcome)
        session = self._store.update(user_id, _apply_updates(outcome))
        if outcome.confirmation:
            await self._transport.send(session.chat_id, outcome.confirmation)

        if outcome.next_index == self.step_count:
            await self._complete(session)
            return outcome.ack_text

        session = self._store.update(user_id, _advance(outcome.next_index))
        await self._enter_step(session, self.steps[outcome.next_index])
        return outcome.ack_text

    async def _enter_step(self, session: WizardSession, step: StepDefinition) -> None:
        """Render the step's menu or prompt and mark it entered."""
        try:
            if step.kind is StepKind.PROMPT_THEN_WAIT and step.on_enter is not None:
                await step.on_enter(self._context(step, session))
            elif step.prompt:
                await self._transport.send(session.chat_id, step.prompt)
        except (UpstreamUnavailable, DialogAborted) as e:
            await self._abort(session, step, e)
            return

        self._store.update(session.user_id, _mark_entered)
        logger.debug("User %s entered step '%s'", session.user_id, step.name)

    async def _complete(self, session: WizardSession) -> None:
        """Run the search and tear the session down."""
        logger.info("Wizard completed for user %s", session.user_id)
        try:
            await self._dispatcher.dispatch(session)
        finally:
            self._store.clear(session.user_id)

    async def _abort(
        self,
        session: WizardSession,
        step: StepDefinition,
        error: UpstreamUnavailable | DialogAborted,
    ) -> None:
        """End the dialog after a step-local fatal error."""
        logger.warning(
            "Aborting wizard for user %s at '%s': %s",
            session.user_id,
            step.name,
            error,
        )
        self._store.clear(session.user_id)
        reply = error.reply if isinstance(error, DialogAborted) else step.failure_text
        await self._transport.send(session.chat_id, reply)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _context(self, step: StepDefinition, session: WizardSession) -> StepContext:
        return StepContext(
            step=step,
            session=session,
            chat_id=session.chat_id,
            options=self._options,
            transport=self._transport,
        )

    def _check_outcome(self, step: StepDefinition, outcome: StepOutcome) -> None:
        """Enforce field ownership and forward-only transitions.

        Raises:
            ValueError: If the step wrote a field it does not own or named a
                next step outside (index, N].
        """
        foreign = set(outcome.updates) - {step.field}
        if foreign:
            raise ValueError(f"Step '{step.name}' cannot write {sorted(foreign)}")
        if not step.index < outcome.next_index <= self.step_count:
            raise ValueError(
                f"Step '{step.name}' returned invalid next index {outcome.next_index}"
            )

    @staticmethod
    def _require_identity(event: InboundEvent) -> str:
        if not event.user_id:
            raise IdentityMissing()
        return event.user_id

    async def _reply_identity_missing(self, event: InboundEvent) -> None:
        logger.warning("Inbound event %s has no user id", event.event_id)
        if event.chat_id is not None:
            await self._transport.send(event.chat_id, messages.IDENTITY_MISSING)


# -----------------------------------------------------------------------------
# Session mutators (the only writers of session state)
# -----------------------------------------------------------------------------


def _set_chat(chat_id: int | None) -> SessionMutator:
    def mutate(session: WizardSession) -> None:
        session.chat_id = chat_id

    return mutate


def _mark_entered(session: WizardSession) -> None:
    session.entered = True


def _apply_updates(outcome: StepOutcome) -> SessionMutator:
    def mutate(session: WizardSession) -> None:
        for field_name, value in outcome.updates.items():
            setattr(session, field_name, value)

    return mutate


def _advance(next_index: int) -> SessionMutator:
    def mutate(session: WizardSession) -> None:
        session.current_step_index = next_index
        session.entered = False

    return mutate
