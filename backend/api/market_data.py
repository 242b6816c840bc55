"""Market data API endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from api.dependencies import require_session
from database import get_db
from integrations.exceptions import MarketDataError
from services.market_data_service import MarketDataService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/market-data",
    tags=["market-data"],
    dependencies=[Depends(require_session)],
)

# Dependency injection for testing
_market_data_service_override: Optional[MarketDataService] = None


def get_market_data_service() -> MarketDataService:
    """Get MarketDataService instance, allowing for test overrides."""
    if _market_data_service_override is not None:
        return _market_data_service_override
    return MarketDataService()


def set_market_data_service_override(service: Optional[MarketDataService]) -> None:
    """Set a MarketDataService override for testing."""
    global _market_data_service_override
    _market_data_service_override = service


class PriceRefreshResponse(BaseModel):
    """Outcome of a price refresh across all listed holdings."""

    updated_count: int
    updated_names: list[str]
    failed_symbols: list[str]


@router.post("/refresh-prices", response_model=PriceRefreshResponse)
def refresh_prices(
    db: Session = Depends(get_db),
    service: MarketDataService = Depends(get_market_data_service),
):
    """Fetch the latest close for every holding that carries a ticker.

    Symbols with no quote are reported in ``failed_symbols``; their
    holdings keep the previous price.
    """
    try:
        result = service.refresh_prices(db)
    except MarketDataError as e:
        logger.error("Price refresh failed: %s", e)
        raise HTTPException(status_code=502, detail=f"Price refresh failed: {e}")
    return PriceRefreshResponse(
        updated_count=result.updated_count,
        updated_names=result.updated_names,
        failed_symbols=result.failed_symbols,
    )
