"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import (
    account_updates,
    assets,
    auth,
    fx_rates,
    liquidity,
    market_data,
    pending_assets,
    portfolio,
    projection_settings,
    snapshots,
)
from config import settings
from database import get_session_local
from logging_config import setup_logging
from services.fx_rate_service import FXRateService

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Seed the default FX table on first start.

    The schema itself is managed by Alembic (``alembic upgrade head``).
    """
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        seeded = FXRateService.seed_defaults(db)
        if seeded:
            logger.info("Seeded %d default FX rates on first start", seeded)
    except Exception:
        logger.warning("FX rate seeding failed on startup", exc_info=True)
    finally:
        db.close()
    if settings.REQUIRE_AUTH and not settings.APP_PASSWORD:
        logger.warning("REQUIRE_AUTH is on but APP_PASSWORD is not set; logins will fail")
    yield


app = FastAPI(
    title="famfolio",
    description="Family portfolio tracking across entities, banks and currencies",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS configuration for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(auth.router)
app.include_router(assets.router)
app.include_router(portfolio.router)
app.include_router(fx_rates.router)
app.include_router(market_data.router)
app.include_router(snapshots.router)
app.include_router(liquidity.router)
app.include_router(projection_settings.router)
app.include_router(account_updates.router)
app.include_router(pending_assets.router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
