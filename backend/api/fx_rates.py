"""FX rate API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.dependencies import require_session
from api.market_data import get_market_data_service
from database import get_db
from integrations.exceptions import MarketDataError
from schemas.fx_rate import FXRateManualUpdate, FXRateResponse, FXRefreshResponse
from services.fx_rate_service import FXRateService
from services.market_data_service import MarketDataService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/fx-rates",
    tags=["fx-rates"],
    dependencies=[Depends(require_session)],
)


def _to_response(row) -> FXRateResponse:
    return FXRateResponse(
        currency=row.currency,
        to_usd_rate=row.to_usd_rate,
        to_ils_rate=row.to_ils_rate,
        source=row.source,
        is_manual_override=bool(row.is_manual_override),
        last_updated=row.last_updated,
    )


@router.get("", response_model=list[FXRateResponse])
def list_rates(db: Session = Depends(get_db)):
    """List every stored currency rate."""
    return [_to_response(r) for r in FXRateService.list_rates(db)]


@router.put("/{currency}", response_model=FXRateResponse)
def set_manual_rate(currency: str, body: FXRateManualUpdate, db: Session = Depends(get_db)):
    """Pin a currency's ILS rate. Provider refreshes skip it until cleared."""
    try:
        row = FXRateService.set_manual_rate(db, currency, body.to_ils_rate)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _to_response(row)


@router.delete("/{currency}/override", response_model=FXRateResponse)
def clear_manual_override(currency: str, db: Session = Depends(get_db)):
    row = FXRateService.clear_manual_override(db, currency)
    if row is None:
        raise HTTPException(status_code=404, detail=f"No rate stored for {currency.upper()}")
    return _to_response(row)


@router.post("/refresh", response_model=FXRefreshResponse)
def refresh_rates(
    db: Session = Depends(get_db),
    service: MarketDataService = Depends(get_market_data_service),
):
    """Refresh non-manual rates from the exchange rate provider."""
    try:
        result = service.refresh_fx_rates(db)
    except MarketDataError as e:
        logger.error("FX refresh failed: %s", e)
        raise HTTPException(status_code=502, detail=f"FX refresh failed: {e}")
    except ValueError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return FXRefreshResponse(
        updated=result.updated, skipped_manual=result.skipped_manual, missing=result.missing
    )
