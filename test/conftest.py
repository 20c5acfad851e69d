# Test type: Configuration
# Validation to be executed: Shared fixtures for all test modules
# Command: pytest test/ -v (this file is auto-loaded by pytest)

"""Shared pytest fixtures for the Real Estate Capital Gains Planner test suite."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from capgains.main import app
from capgains.models.schemas import PropertyDetails
from capgains.services.state_service import reset_memory_store


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def client():
    """Async HTTP client bound to the FastAPI app (no real server needed)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture(autouse=True)
def _clean_state():
    """Every test starts with an empty in-memory state store."""
    reset_memory_store()
    yield
    reset_memory_store()


# ── Sample data fixtures ─────────────────────────────────────────────────

@pytest.fixture
def ten_year_residential_payload():
    """Flat bought Jan-2015, sold Jan-2025 — indexation beats 12.5 %."""
    return {
        "propertyType": "residential",
        "purchaseDate": "2015-01-01",
        "purchasePrice": 5_000_000,
        "stampDuty": 300_000,
        "saleDate": "2025-01-01",
        "salePrice": 12_000_000,
        "brokerage": 120_000,
        "legalFees": 30_000,
    }


@pytest.fixture
def ten_year_residential(ten_year_residential_payload):
    return PropertyDetails(**ten_year_residential_payload)


@pytest.fixture
def ten_year_commercial(ten_year_residential_payload):
    return PropertyDetails(**{**ten_year_residential_payload, "propertyType": "commercial"})


@pytest.fixture
def twenty_year_residential():
    """Bought FY2005 (CII 117) for ₹20 L, sold FY2025 (CII 376) for ₹1 Cr."""
    return PropertyDetails(
        purchaseDate="2005-06-01",
        purchasePrice=2_000_000,
        saleDate="2025-06-01",
        salePrice=10_000_000,
    )


@pytest.fixture
def one_year_residential():
    """Held 12 months — short-term."""
    return PropertyDetails(
        purchaseDate="2023-06-01",
        purchasePrice=5_000_000,
        saleDate="2024-06-01",
        salePrice=6_000_000,
    )


@pytest.fixture
def salary_record_payload():
    """A salary calculator the user actually filled in (₹20 L CTC)."""
    return {"ctc": 2_000_000, "taxRegime": "new", "userModified": True}
