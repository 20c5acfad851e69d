"""Routers for calculation endpoints:
    POST  /realestate/v1/gains:calculate
    POST  /realestate/v1/gains:exemptions
    POST  /realestate/v1/gains:allocate
    POST  /realestate/v1/gains:export
    POST  /realestate/v1/tax:split-bracket
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from capgains.config import settings
from capgains.database import get_session
from capgains.models.db_models import CalculationAudit
from capgains.models.schemas import (
    AllocationRequest,
    AllocationResult,
    CapitalGainsResult,
    ExemptionsRequest,
    ExemptionsResponse,
    ExemptionStrategy,
    GainsRequest,
    GainsResponse,
    PropertyDetails,
    SalaryDataForCalc,
    Section54ProjectionState,
    SplitBracketRequest,
    SplitBracketResult,
)
from capgains.services.allocation_service import calculate_allocation
from capgains.services.capital_gains_service import (
    calculate_capital_gains,
    resolve_active_regime,
)
from capgains.services.exemption_service import calculate_exemptions, default_projection_state
from capgains.services.report_service import build_csv_report
from capgains.services.salary_bridge import resolve_salary_context, salary_provider_from_record
from capgains.services.state_service import load_state
from capgains.services.tax_service import calculate_split_bracket_tax

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/realestate/v1",
    tags=["Capital Gains"],
)


# ── Shared helpers ────────────────────────────────────────────────────────

async def _salary_context(
    use_salary_bracket: bool,
    explicit: Optional[SalaryDataForCalc],
) -> Optional[SalaryDataForCalc]:
    """Salary context for this request; the stored salary state is re-read
    every time so edits in the salary calculator are picked up."""
    if not use_salary_bracket or explicit is not None:
        return resolve_salary_context(use_salary_bracket, explicit)
    raw = await load_state(settings.SALARY_STATE_KEY)
    return resolve_salary_context(True, None, salary_provider_from_record(raw))


async def _exemption_pipeline(body: ExemptionsRequest) -> tuple[
    CapitalGainsResult, Section54ProjectionState, Optional[SalaryDataForCalc], List[ExemptionStrategy]
]:
    gains = calculate_capital_gains(body.property)
    projection = body.projection or default_projection_state(body.property, gains)
    salary = await _salary_context(body.useSalaryBracket, body.salaryData)
    exemptions = calculate_exemptions(body.property, gains, projection, salary)
    return gains, projection, salary, exemptions


async def _audit(endpoint: str, prop: PropertyDetails, strategy_count: int, summary: dict) -> None:
    async with get_session() as session:
        if session is not None:
            session.add(
                CalculationAudit(
                    endpoint=endpoint,
                    property_type=prop.propertyType,
                    strategy_count=strategy_count,
                    summary=json.dumps(summary),
                )
            )


# ── 1. Capital gains ─────────────────────────────────────────────────────

@router.post(
    "/gains:calculate",
    response_model=GainsResponse,
    summary="Compute capital gains, tax and net proceeds for a property sale",
)
async def gains_calculate(body: GainsRequest) -> GainsResponse:
    """Evaluate holding period, indexation and both LTCG regimes.

    ``selectedRegime`` overrides the recommendation when the taxpayer has
    a choice; it is ignored otherwise.
    """
    try:
        result = calculate_capital_gains(body.property)
        active = resolve_active_regime(result, body.selectedRegime)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    await _audit(
        "/gains:calculate",
        body.property,
        0,
        {"capitalGain": active.capitalGain, "totalTax": active.totalTax, "regime": active.regime},
    )
    return GainsResponse(result=result, active=active)


# ── 2. Exemption strategies ──────────────────────────────────────────────

@router.post(
    "/gains:exemptions",
    response_model=ExemptionsResponse,
    summary="Sections 54 / 54EC / 54F strategies with reinvestment projections",
)
async def gains_exemptions(body: ExemptionsRequest) -> ExemptionsResponse:
    """List the exemption strategies available for a long-term gain.

    When ``projection`` is omitted the appreciation rate defaults to the
    sold property's realised CAGR.
    """
    try:
        gains, projection, salary, exemptions = await _exemption_pipeline(body)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    await _audit(
        "/gains:exemptions",
        body.property,
        len(exemptions),
        {"sections": [e.section for e in exemptions], "salaryInUse": salary is not None},
    )
    return ExemptionsResponse(
        gains=gains,
        projection=projection,
        salaryInUse=salary,
        exemptions=exemptions,
    )


# ── 3. Reinvestment allocation ───────────────────────────────────────────

@router.post(
    "/gains:allocate",
    response_model=AllocationResult,
    summary="Split after-tax proceeds across personal use, bonds and real estate",
)
async def gains_allocate(body: AllocationRequest) -> AllocationResult:
    """Project each enabled bucket to the end of its lock-in and sum them.

    The real-estate amount is always the remainder after personal use and
    bonds.
    """
    try:
        gains = calculate_capital_gains(body.property)
        active = resolve_active_regime(gains, body.selectedRegime)
        projection = body.projection or default_projection_state(body.property, gains)
        salary = await _salary_context(body.useSalaryBracket, body.salaryData)
        result = calculate_allocation(
            net_proceeds=active.netProceeds,
            allocation=body.allocation,
            tax_slab=projection.taxSlab,
            salary=salary,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    await _audit(
        "/gains:allocate",
        body.property,
        0,
        {"netProceeds": result.netProceeds, "totalProjectedValue": result.totalProjectedValue},
    )
    return result


# ── 4. CSV export ────────────────────────────────────────────────────────

@router.post(
    "/gains:export",
    response_class=PlainTextResponse,
    summary="Download the calculation as CSV",
)
async def gains_export(body: ExemptionsRequest) -> PlainTextResponse:
    try:
        gains, _, _, exemptions = await _exemption_pipeline(body)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    filename = f"RealEstate_CG_{body.property.salePrice:.0f}.csv"
    return PlainTextResponse(
        build_csv_report(body.property, gains, exemptions),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ── 5. Split-bracket tax ─────────────────────────────────────────────────

@router.post(
    "/tax:split-bracket",
    response_model=SplitBracketResult,
    summary="Tax on extra income stacked on an existing taxable income",
    tags=["Tax"],
)
async def tax_split_bracket(body: SplitBracketRequest) -> SplitBracketResult:
    """Tax each slice of ``additionalIncome`` at the bracket it lands in."""
    try:
        return calculate_split_bracket_tax(
            additional_income=body.additionalIncome,
            current_taxable_income=body.currentTaxableIncome,
            regime=body.regime,
            include_cess=body.includeCess,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
