"""Real Estate Capital Gains & Reinvestment Planner API.

Serves the calculation engines over JSON on port 5478 and keeps the
calculator's saved inputs in PostgreSQL, or in memory without it.

Usage:
    uvicorn capgains.main:app --host 0.0.0.0 --port 5478 --reload
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from capgains.config import settings
from capgains.database import close_db, init_db, is_db_available
from capgains.routers import gains, state
from capgains.services.temporal_service import CII_TABLE

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Capital gains planner listening on port %s", settings.APP_PORT)
    await init_db()
    yield
    await close_db()


app = FastAPI(
    title="Real Estate Capital Gains & Reinvestment Planner",
    description=(
        "Capital-gains tax on Indian property sales with CII indexation, "
        "old vs new LTCG regime comparison, Section 54 / 54EC / 54F "
        "exemption projections, split-bracket tax on reinvestment income "
        "and allocation of the after-tax proceeds."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


@app.middleware("http")
async def response_time_header(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.2f}"
    logger.debug("%s %s -> %s in %.2f ms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. Please check the logs."},
    )


app.include_router(gains.router)
app.include_router(state.router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness plus where state is kept and the newest CII year loaded."""
    return {
        "status": "healthy",
        "port": settings.APP_PORT,
        "storage": "postgresql" if is_db_available() else "memory",
        "latestCiiYear": max(CII_TABLE, key=int),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("capgains.main:app", host=settings.APP_HOST, port=settings.APP_PORT, reload=True)
