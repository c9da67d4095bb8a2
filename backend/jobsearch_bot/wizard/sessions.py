"""Per-user wizard session store.

The store is the only place session state lives. The engine reads with get /
get_or_create and funnels every mutation through update(), which hands the
mutator a working copy and stores it back only when the mutator returns. A
mutator that raises leaves the stored session untouched.

InMemorySessionStore keeps sessions in a dict for the lifetime of the process.
Sessions have no expiry; an abandoned dialog stays until the user re-enters the
wizard.
"""

import logging
from collections.abc import Callable
from typing import Protocol

from jobsearch_bot.wizard.state import WizardSession

logger = logging.getLogger(__name__)

SessionMutator = Callable[[WizardSession], None]


class SessionStore(Protocol):
    """Key-value table of wizard sessions keyed by user id."""

    def get(self, user_id: str) -> WizardSession | None:
        """Return a snapshot of the session, or None."""
        ...

    def get_or_create(self, user_id: str) -> WizardSession:
        """Return a snapshot of the session, creating an empty one if absent."""
        ...

    def update(self, user_id: str, mutator: SessionMutator) -> WizardSession:
        """Apply mutator to the session and return the stored result."""
        ...

    def reset(self, user_id: str) -> WizardSession:
        """Replace any session with a fresh one at step 0."""
        ...

    def clear(self, user_id: str) -> None:
        """Remove the session. No-op when absent."""
        ...


class InMemorySessionStore:
    """Process-local session store.

    get() and get_or_create() return copies, so callers can never mutate
    stored state except through update().
    """

    def __init__(self) -> None:
        self._sessions: dict[str, WizardSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._sessions

    def get(self, user_id: str) -> WizardSession | None:
        session = self._sessions.get(user_id)
        return session.copy() if session is not None else None

    def get_or_create(self, user_id: str) -> WizardSession:
        if user_id not in self._sessions:
            self._sessions[user_id] = WizardSession(user_id=user_id)
        return self._sessions[user_id].copy()

    def update(self, user_id: str, mutator: SessionMutator) -> WizardSession:
        """Apply mutator to a working copy and store it.

        Raises:
            KeyError: If no session exists for user_id.
        """
        current = self._sessions.get(user_id)
        if current is None:
            raise KeyError(f"No wizard session for user {user_id}")
        working = current.copy()
        mutator(working)
        if working.user_id != user_id:
            raise ValueError("Session mutators must not change user_id")
        self._sessions[user_id] = working
        return working.copy()

    def reset(self, user_id: str) -> WizardSession:
        if user_id in self._sessions:
            logger.debug("Resetting wizard session for user %s", user_id)
        self._sessions[user_id] = WizardSession(user_id=user_id)
        return self._sessions[user_id].copy()

    def clear(self, user_id: str) -> None:
        self._sessions.pop(user_id, None)
