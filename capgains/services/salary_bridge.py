"""Bridge to the salary calculator's persisted state.

The salary calculator stores ``{ctc, taxRegime, userModified, ...}``. When
the user has actually filled it in, its taxable income replaces the flat
slab for every tax on ordinary income in this planner.

    PF               = 12 % of basic (40 % of CTC)
    standard ded.    = ₹75,000 (new) / ₹50,000 (old)
    taxable income   = max(0, CTC − PF − standard deduction)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from capgains.config import settings
from capgains.models.schemas import SalaryBridgeStatus, SalaryDataForCalc, SalaryRecord
from capgains.services.tax_service import calculate_income_tax, marginal_bracket
from capgains.utils.helpers import round_half_up

logger = logging.getLogger(__name__)

SalaryDataProvider = Callable[[], Optional[SalaryDataForCalc]]


def estimate_taxable_income(ctc: float, regime: str = "new") -> float:
    pf = ctc * settings.BASIC_SHARE * settings.PF_RATE
    standard_deduction = (
        settings.STANDARD_DEDUCTION_NEW if regime == "new" else settings.STANDARD_DEDUCTION_OLD
    )
    return max(0.0, ctc - pf - standard_deduction)


def derive_salary_bridge(record: Optional[SalaryRecord]) -> SalaryBridgeStatus:
    """Summarise a salary record into the planner's bracket context.

    A record still holding the calculator's default CTC (and not flagged
    as user-modified) is treated as absent.
    """
    if record is None:
        return SalaryBridgeStatus(available=False)

    ctc = record.ctc or 0.0
    is_user_modified = record.userModified or ctc != settings.DEFAULT_CTC
    if ctc <= 0 or not is_user_modified:
        return SalaryBridgeStatus(available=False)

    regime = record.taxRegime
    taxable_income = estimate_taxable_income(ctc, regime)
    marginal, next_rate, room = marginal_bracket(taxable_income, regime)

    return SalaryBridgeStatus(
        available=True,
        ctc=ctc,
        taxableIncome=taxable_income,
        marginalRate=marginal,
        nextBracketRate=next_rate,
        roomInBracket=room,
        regime=regime,
        currentTax=round_half_up(
            calculate_income_tax(taxable_income, regime) * (1 + settings.CESS_RATE)
        ),
    )


def parse_salary_record(raw: Optional[Dict[str, Any]]) -> Optional[SalaryRecord]:
    """Validate a raw stored payload; malformed payloads count as absent."""
    if not raw:
        return None
    try:
        return SalaryRecord.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Ignoring malformed salary state: %s", exc)
        return None


def salary_provider_from_record(raw: Optional[Dict[str, Any]]) -> SalaryDataProvider:
    """Build a provider that yields salary context from a stored payload."""

    def provider() -> Optional[SalaryDataForCalc]:
        status = derive_salary_bridge(parse_salary_record(raw))
        if not status.available:
            return None
        return SalaryDataForCalc(taxableIncome=status.taxableIncome, regime=status.regime)

    return provider


def resolve_salary_context(
    use_salary_bracket: bool,
    explicit: Optional[SalaryDataForCalc],
    provider: Optional[SalaryDataProvider] = None,
) -> Optional[SalaryDataForCalc]:
    """Salary context to apply, or ``None`` to fall back to the flat slab."""
    if not use_salary_bracket:
        return None
    if explicit is not None:
        return explicit
    if provider is None:
        return None
    return provider()
