"""Shared utility functions — date parsing, calendar arithmetic, rounding."""

from __future__ import annotations

import calendar
import math
from datetime import date, datetime, timedelta

# ── Supported date formats (most specific first) ─────────────────────────
_DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%fZ",
]

CANONICAL_FORMAT = "%Y-%m-%d"


def parse_date(value: str) -> date:
    """Parse a date string (ISO day, optionally with a time part).

    Raises ``ValueError`` if the string cannot be parsed.
    """
    value = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValueError(
        f"Invalid date format: '{value}'. Expected YYYY-MM-DD."
    )


def format_date(d: date) -> str:
    """Format a date to the canonical string representation."""
    return d.strftime(CANONICAL_FORMAT)


def normalise_date_str(value: str) -> str:
    """Parse then re-format to guarantee canonical output."""
    return format_date(parse_date(value))


# ── Calendar arithmetic ───────────────────────────────────────────────────

def add_months(d: date, months: int) -> date:
    """Shift *d* by *months* calendar months.

    A day that does not exist in the target month rolls forward into the
    following month (31 Aug + 6 months → 3 Mar, or 2 Mar in a leap year).
    """
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    if d.day <= last_day:
        return d.replace(year=year, month=month)
    return date(year, month, last_day) + timedelta(days=d.day - last_day)


def add_years(d: date, years: int) -> date:
    """Shift *d* by whole years (29 Feb rolls to 1 Mar in non-leap years)."""
    return add_months(d, years * 12)


# ── Rounding ──────────────────────────────────────────────────────────────

def round_half_up(value: float) -> float:
    """Round to the nearest rupee, halves towards +∞."""
    return float(math.floor(value + 0.5))
