"""Fiscal calendar, Cost Inflation Index lookup and holding-period rules.

Indian financial year:
    1 April (Y) – 31 March (Y+1)  →  keyed "Y", labelled "Y-(Y+1)"

Cost Inflation Index (base year 2001-02 = 100):
    Dates after the last tabulated year use the latest entry.
    Dates before the base year use the base entry.

Holding period (immovable property):
    months = floor(days / 30.44)
    long-term  ⇔  months ≥ 24
"""

from __future__ import annotations

import math
from datetime import date
from typing import Dict

from capgains.config import settings
from capgains.models.schemas import HoldingPeriod
from capgains.utils.helpers import add_months, add_years

# FY start year → CII
CII_TABLE: Dict[str, int] = {
    "2001": 100, "2002": 105, "2003": 109, "2004": 113, "2005": 117,
    "2006": 122, "2007": 129, "2008": 137, "2009": 148, "2010": 167,
    "2011": 184, "2012": 200, "2013": 220, "2014": 240, "2015": 254,
    "2016": 264, "2017": 272, "2018": 280, "2019": 289, "2020": 301,
    "2021": 317, "2022": 331, "2023": 348, "2024": 363, "2025": 376,
    "2026": 390,  # Estimated (~3.7 % growth)
}

_BASE_YEAR = min(CII_TABLE, key=int)
_LATEST_YEAR = max(CII_TABLE, key=int)


# ── Financial year ────────────────────────────────────────────────────────

def financial_year(d: date) -> str:
    """Return the start year of the financial year containing *d*.

    Jan–Mar of year Y belong to FY (Y − 1).
    """
    return str(d.year if d.month >= 4 else d.year - 1)


def financial_year_label(d: date) -> str:
    """Human-readable FY label, e.g. ``2014-15``."""
    start = int(financial_year(d))
    return f"{start}-{str(start + 1)[-2:]}"


# ── CII lookup ────────────────────────────────────────────────────────────

def get_cii(d: date) -> int:
    """CII for the financial year of *d*, clamped to the tabulated range."""
    fy = financial_year(d)
    if fy in CII_TABLE:
        return CII_TABLE[fy]
    if int(fy) < int(_BASE_YEAR):
        return CII_TABLE[_BASE_YEAR]
    return CII_TABLE[_LATEST_YEAR]


# ── Holding period ────────────────────────────────────────────────────────

def holding_period(purchase_date: date, sale_date: date) -> HoldingPeriod:
    """Elapsed months/years between purchase and sale, and LT/ST class.

    A sale before the purchase yields a negative span; callers validate.
    """
    days = (sale_date - purchase_date).days
    months = math.floor(days / settings.DAYS_PER_MONTH)
    return HoldingPeriod(
        days=days,
        months=months,
        years=months // 12,
        remainingMonths=months % 12,
        isLongTerm=months >= settings.LONG_TERM_MONTHS,
    )


# ── Statutory deadlines ───────────────────────────────────────────────────

def section_54_deadline(sale_date: date) -> date:
    """Purchase window for a new residential house: sale + 2 years."""
    return add_years(sale_date, 2)


def section_54ec_deadline(sale_date: date) -> date:
    """Bond subscription window: sale + 6 months."""
    return add_months(sale_date, 6)
