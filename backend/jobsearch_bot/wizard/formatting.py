"""Vacancy rendering helpers.

Formats search results for Telegram (HTML parse mode). Every value coming from
the backend is escaped before it is interpolated.
"""

import html
import math
from datetime import datetime
from typing import Any

from jobsearch_bot.wizard import messages
from jobsearch_bot.wizard.state import LinkButton


def _format_amount(value: Any) -> str:
    """Round half up to whole units and group thousands with commas."""
    if not value:
        return "?"
    return f"{math.floor(value + 0.5):,}"


def format_salary(salary: dict[str, Any] | None) -> str:
    """Format a salary range.

    Args:
        salary: {"from", "to", "currency", "gross"}, any key may be missing.

    Returns:
        "1,000-2,000 RUR (на руки)" style text. A missing bound renders as
        "?"; an absent or empty salary renders as "Не указана".
    """
    if not salary:
        return messages.SALARY_NOT_SPECIFIED

    low = _format_amount(salary.get("from"))
    high = _format_amount(salary.get("to"))
    text = f"{low}-{high}"
    currency = salary.get("currency")
    if currency:
        text += f" {currency}"
    suffix = messages.SALARY_GROSS if salary.get("gross") else messages.SALARY_NET
    return text + suffix


def format_published_at(value: str | None) -> str:
    """Render an ISO-8601 timestamp as DD.MM.YYYY.

    hh.ru sends offsets without a colon ("+0300"), which strptime's %z
    accepts.
    """
    if not value:
        return messages.PUBLISHED_UNKNOWN
    try:
        published = datetime.fromisoformat(value)
    except ValueError:
        try:
            published = datetime.strptime(value, "%Y-%m-%dT%H:%M:%S%z")
        except ValueError:
            return messages.PUBLISHED_UNKNOWN
    return published.strftime("%d.%m.%Y")


def _nested_name(vacancy: dict[str, Any], key: str) -> str | None:
    value = vacancy.get(key)
    if isinstance(value, dict):
        return value.get("name") or None
    return None


def format_vacancy(vacancy: dict[str, Any]) -> tuple[str, LinkButton | None]:
    """Render one vacancy as HTML text plus an optional link button.

    Args:
        vacancy: Search result with name, employer.name, salary, area.name,
            published_at and alternate_url (or url).

    Returns:
        (text, link). link is None when the vacancy has no URL.

    Raises:
        TypeError, AttributeError, ValueError: If the record is malformed.
    """
    text = messages.VACANCY_HTML.format(
        name=html.escape(vacancy.get("name") or messages.UNTITLED_VACANCY),
        employer=html.escape(
            _nested_name(vacancy, "employer") or messages.EMPLOYER_UNKNOWN
        ),
        salary=html.escape(format_salary(vacancy.get("salary"))),
        area=html.escape(_nested_name(vacancy, "area") or messages.AREA_UNKNOWN),
        published=format_published_at(vacancy.get("published_at")),
    )
    url = vacancy.get("alternate_url") or vacancy.get("url")
    link = LinkButton(label=messages.OPEN_VACANCY, url=url) if url else None
    return text, link
