# Test type: Unit Test
# Validation to be executed: Validates the fiscal calendar — financial-year
#   resolution, CII lookup with clamping, holding-period classification at the
#   24-month boundary, and statutory deadlines.
# Command: pytest test/test_unit_temporal.py -v

"""Unit tests for capgains.services.temporal_service module."""

from datetime import date, timedelta

import pytest

from capgains.services.temporal_service import (
    CII_TABLE,
    financial_year,
    financial_year_label,
    get_cii,
    holding_period,
    section_54_deadline,
    section_54ec_deadline,
)


# ── Financial year ────────────────────────────────────────────────────────

class TestFinancialYear:
    """April–March year keyed by its start year."""

    def test_march_belongs_to_previous_year(self):
        assert financial_year(date(2024, 3, 31)) == "2023"

    def test_april_starts_new_year(self):
        assert financial_year(date(2024, 4, 1)) == "2024"

    def test_january(self):
        assert financial_year(date(2015, 1, 1)) == "2014"

    def test_december(self):
        assert financial_year(date(2024, 12, 31)) == "2024"

    @pytest.mark.parametrize("d", [date(2020, m, 15) for m in range(1, 13)])
    def test_date_within_its_year(self, d):
        """Every date lies between 1 April of its FY and 31 March after."""
        start = int(financial_year(d))
        assert date(start, 4, 1) <= d <= date(start + 1, 3, 31)

    def test_label(self):
        assert financial_year_label(date(2015, 1, 1)) == "2014-15"
        assert financial_year_label(date(2099, 6, 1)) == "2099-00"


# ── CII lookup ────────────────────────────────────────────────────────────

class TestGetCii:
    def test_base_year(self):
        assert get_cii(date(2001, 4, 1)) == 100

    def test_known_years(self):
        assert get_cii(date(2015, 1, 1)) == 240   # FY 2014-15
        assert get_cii(date(2025, 1, 1)) == 363   # FY 2024-25
        assert get_cii(date(2005, 6, 1)) == 117
        assert get_cii(date(2025, 6, 1)) == 376

    def test_future_clamps_to_latest(self):
        assert get_cii(date(2031, 5, 1)) == CII_TABLE["2026"] == 390

    def test_before_base_clamps_to_base(self):
        assert get_cii(date(1995, 5, 1)) == 100

    def test_table_is_monotonic(self):
        values = [CII_TABLE[k] for k in sorted(CII_TABLE, key=int)]
        assert values == sorted(values)


# ── Holding period ────────────────────────────────────────────────────────

class TestHoldingPeriod:
    def test_ten_years(self):
        hp = holding_period(date(2015, 1, 1), date(2025, 1, 1))
        assert hp.days == 3653
        assert hp.months == 120
        assert hp.years == 10
        assert hp.remainingMonths == 0
        assert hp.isLongTerm is True

    def test_exactly_24_calendar_months_with_leap_day(self):
        """731 days ≥ 24 × 30.44 → long-term."""
        hp = holding_period(date(2023, 1, 1), date(2025, 1, 1))
        assert hp.months == 24
        assert hp.isLongTerm is True

    def test_730_days_is_short_of_threshold(self):
        """730 days / 30.44 = 23.98 → 23 months → short-term."""
        hp = holding_period(date(2022, 1, 1), date(2024, 1, 1))
        assert hp.days == 730
        assert hp.months == 23
        assert hp.isLongTerm is False

    def test_23_months_short_term(self):
        hp = holding_period(date(2023, 1, 1), date(2024, 12, 20))
        assert hp.months == 23
        assert hp.isLongTerm is False

    @pytest.mark.parametrize("days", [700, 730, 731, 800])
    def test_long_term_iff_threshold_days(self, days):
        start = date(2020, 1, 1)
        hp = holding_period(start, start + timedelta(days=days))
        assert hp.isLongTerm == (days >= 24 * 30.44)

    def test_sale_before_purchase_is_negative(self):
        hp = holding_period(date(2025, 1, 1), date(2024, 1, 1))
        assert hp.months < 0
        assert hp.isLongTerm is False


# ── Deadlines ─────────────────────────────────────────────────────────────

class TestDeadlines:
    def test_section_54_two_years(self):
        assert section_54_deadline(date(2025, 1, 1)) == date(2027, 1, 1)

    def test_section_54ec_six_months(self):
        assert section_54ec_deadline(date(2025, 1, 1)) == date(2025, 7, 1)

    def test_section_54ec_month_end_rolls_over(self):
        assert section_54ec_deadline(date(2024, 8, 31)) == date(2025, 3, 3)
