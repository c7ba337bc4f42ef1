"""Timezone-aware date helpers for the hotel application."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from flask import current_app


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'Europe/Madrid')
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def parse_date(value) -> date:
    """
    Coerce a date, datetime or ISO string (YYYY-MM-DD) into a date.

    Returns:
        date, or None for empty input

    Raises:
        ValueError: If the string is not a valid ISO date
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value).strip(), '%Y-%m-%d').date()
