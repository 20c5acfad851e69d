"""Calculator state persistence — a small JSON key-value store.

Keys mirror the browser's local storage:
    calc_realestate  → {property, activeTab}
    calc_salary      → {ctc, taxRegime, userModified, ...}

Backed by the ``calculator_state`` table when PostgreSQL is reachable,
otherwise by a process-local dict. Projection assumptions and the
reinvestment allocation are deliberately not persisted.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Dict, Optional

from pydantic import ValidationError
from sqlalchemy import delete, select

from capgains.database import get_session
from capgains.models.db_models import CalculatorState
from capgains.models.schemas import PropertyDetails, RealEstateState
from capgains.utils.helpers import format_date

logger = logging.getLogger(__name__)

_memory_store: Dict[str, str] = {}


def reset_memory_store() -> None:
    """Forget all in-memory state."""
    _memory_store.clear()


# ── Key-value access ──────────────────────────────────────────────────────

async def load_state(key: str) -> Optional[Dict[str, Any]]:
    """Return the stored JSON object for *key*, or ``None``."""
    async with get_session() as session:
        if session is not None:
            row = (
                await session.execute(select(CalculatorState).where(CalculatorState.key == key))
            ).scalar_one_or_none()
            raw = row.payload if row is not None else None
        else:
            raw = _memory_store.get(key)

    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error("Failed to load saved state for %s: %s", key, exc)
        return None
    return data if isinstance(data, dict) else None


async def save_state(key: str, payload: Dict[str, Any]) -> None:
    """Store *payload* under *key*, replacing any previous value."""
    raw = json.dumps(payload)
    async with get_session() as session:
        if session is not None:
            await session.merge(CalculatorState(key=key, payload=raw))
        else:
            _memory_store[key] = raw
    logger.debug("Saved state for %s", key)


async def clear_state(key: str) -> None:
    async with get_session() as session:
        if session is not None:
            await session.execute(delete(CalculatorState).where(CalculatorState.key == key))
        else:
            _memory_store.pop(key, None)


# ── Real-estate calculator state ──────────────────────────────────────────

def default_property(today: Optional[date] = None) -> PropertyDetails:
    """Fresh-session inputs: bought five years ago, selling today."""
    today = today or date.today()
    try:
        purchased = today.replace(year=today.year - 5)
    except ValueError:  # 29 Feb
        purchased = today.replace(year=today.year - 5, day=28)
    return PropertyDetails(
        propertyType="residential",
        purchaseDate=format_date(purchased),
        purchasePrice=5_000_000,
        stampDuty=300_000,
        improvementCost=0,
        improvementDate="",
        saleDate=format_date(today),
        salePrice=8_000_000,
        brokerage=80_000,
        legalFees=20_000,
    )


def restore_realestate_state(
    raw: Optional[Dict[str, Any]],
    today: Optional[date] = None,
) -> RealEstateState:
    """Rebuild calculator state, falling back to defaults field by field."""
    raw = raw or {}

    prop = None
    if raw.get("property"):
        try:
            prop = PropertyDetails.model_validate(raw["property"])
        except ValidationError as exc:
            logger.warning("Discarding invalid saved property: %s", exc)
    if prop is None:
        prop = default_property(today)

    tab = raw.get("activeTab") or "calculate"
    if tab not in ("calculate", "exemptions", "compare"):
        tab = "calculate"
    return RealEstateState(property=prop, activeTab=tab)
