"""Routers for persisted calculator state:
    GET     /realestate/v1/state
    PUT     /realestate/v1/state
    DELETE  /realestate/v1/state
    GET     /realestate/v1/salary
    PUT     /realestate/v1/salary
    GET     /realestate/v1/salary:bridge
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from capgains.config import settings
from capgains.models.schemas import RealEstateState, SalaryBridgeStatus, SalaryRecord
from capgains.services.salary_bridge import derive_salary_bridge, parse_salary_record
from capgains.services.state_service import (
    clear_state,
    load_state,
    restore_realestate_state,
    save_state,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/realestate/v1",
    tags=["State"],
)


# ── Real-estate calculator ────────────────────────────────────────────────

@router.get("/state", response_model=RealEstateState, summary="Restore saved inputs")
async def get_state() -> RealEstateState:
    """Saved property and tab, or fresh defaults for a new session."""
    raw = await load_state(settings.REALESTATE_STATE_KEY)
    return restore_realestate_state(raw)


@router.put("/state", response_model=RealEstateState, summary="Save inputs")
async def put_state(body: RealEstateState) -> RealEstateState:
    await save_state(settings.REALESTATE_STATE_KEY, body.model_dump())
    return body


@router.delete("/state", response_model=RealEstateState, summary="Clear inputs")
async def delete_state() -> RealEstateState:
    """Forget saved inputs and return the defaults."""
    await clear_state(settings.REALESTATE_STATE_KEY)
    logger.info("Real-estate calculator state cleared.")
    return restore_realestate_state(None)


# ── Salary calculator bridge ──────────────────────────────────────────────

@router.get("/salary", response_model=SalaryRecord, summary="Saved salary calculator state")
async def get_salary() -> SalaryRecord:
    record = parse_salary_record(await load_state(settings.SALARY_STATE_KEY))
    return record or SalaryRecord(ctc=settings.DEFAULT_CTC)


@router.put("/salary", response_model=SalaryRecord, summary="Save salary calculator state")
async def put_salary(body: SalaryRecord) -> SalaryRecord:
    await save_state(settings.SALARY_STATE_KEY, body.model_dump())
    return body


@router.get(
    "/salary:bridge",
    response_model=SalaryBridgeStatus,
    summary="Marginal bracket derived from the salary calculator",
)
async def salary_bridge() -> SalaryBridgeStatus:
    """Whether salary data is usable, with its taxable income and bracket."""
    record = parse_salary_record(await load_state(settings.SALARY_STATE_KEY))
    return derive_salary_bridge(record)
