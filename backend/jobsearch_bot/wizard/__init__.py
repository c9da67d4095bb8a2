"""Guided job-search questionnaire.

Modules:
    state: Data model (sessions, events, options, menus, tokens)
    base: Collaborator protocols (transport, catalog, search backend)
    options: Option provider shaping catalog data into menu items
    menu: Menu builder and selection token codec
    sessions: Per-user session store
    steps: The step table
    engine: Step sequencer
    dispatch: Search call and paced result delivery
    formatting: Vacancy and salary rendering
    messages: User-facing texts
"""

from jobsearch_bot.wizard.dispatch import ResultDispatcher, build_search_criteria
from jobsearch_bot.wizard.engine import WizardEngine, match_event
from jobsearch_bot.wizard.menu import build_menu, decode_token, encode_token
from jobsearch_bot.wizard.options import OptionKind, OptionProvider
from jobsearch_bot.wizard.sessions import InMemorySessionStore, SessionStore
from jobsearch_bot.wizard.steps import WIZARD_STEPS, StepDefinition

__all__ = [
    "build_menu",
    "build_search_criteria",
    "decode_token",
    "encode_token",
    "InMemorySessionStore",
    "match_event",
    "OptionKind",
    "OptionProvider",
    "ResultDispatcher",
    "SessionStore",
    "StepDefinition",
    "WIZARD_STEPS",
    "WizardEngine",
]
