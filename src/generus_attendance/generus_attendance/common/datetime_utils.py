from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return parse_iso_date(value)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month (both inclusive)."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
