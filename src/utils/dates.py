"""Date helpers for valuation dates and mailbox searches."""

from __future__ import annotations

from datetime import date, datetime, timedelta


def default_valuation_date(today: date | None = None) -> str:
    """Prices are published for the previous calendar day."""
    today = today or date.today()
    return (today - timedelta(days=1)).isoformat()


def mailbox_search_date(day: date | None = None) -> str:
    return (day or date.today()).strftime("%Y/%m/%d")


def truncate_to_date(value: object) -> str:
    """Return the ``YYYY-MM-DD`` part of a date, datetime, or timestamp string.

    Raises ValueError when the remaining text is not a calendar date.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    for separator in ("T", " "):
        text = text.split(separator, 1)[0]
    return date.fromisoformat(text).isoformat()
