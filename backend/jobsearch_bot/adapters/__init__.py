"""Upstream adapters.

This package provides:
- HHCatalogClient for hh.ru dictionaries (regions, schedules, ...)
- BackendClient for resumes and vacancy search
- TelegramTransport and parse_update for the chat transport
"""

from jobsearch_bot.adapters.backend import BackendClient, build_auth_url
from jobsearch_bot.adapters.catalog import HHCatalogClient
from jobsearch_bot.adapters.telegram import TelegramTransport, parse_update

__all__ = [
    "BackendClient",
    "build_auth_url",
    "HHCatalogClient",
    "parse_update",
    "TelegramTransport",
]
