"""Liquidity settings API endpoints: limited-liquidity flags and liquidation years."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.dependencies import require_session
from config import settings
from database import get_db
from schemas.liquidity import (
    LimitedAssetRequest,
    LimitedAssetsResponse,
    LiquidationYearsResponse,
    LiquidationYearUpdate,
)
from services.asset_service import AssetService
from services.liquidity_service import (
    LiquiditySettingsService,
    get_eligible_limited_liquidity_assets,
)

router = APIRouter(
    prefix="/api/liquidity",
    tags=["liquidity"],
    dependencies=[Depends(require_session)],
)


def _limited_response(db: Session) -> LimitedAssetsResponse:
    return LimitedAssetsResponse(
        asset_names=LiquiditySettingsService.list_limited(db),
        eligible_names=get_eligible_limited_liquidity_assets(
            AssetService().list_assets(db), settings.FUNDS_ASSET_NAMES
        ),
    )


@router.get("/limited-assets", response_model=LimitedAssetsResponse)
def list_limited_assets(db: Session = Depends(get_db)):
    """Names flagged as limited liquidity, plus the names that may be flagged."""
    return _limited_response(db)


@router.post("/limited-assets", response_model=LimitedAssetsResponse)
def add_limited_asset(body: LimitedAssetRequest, db: Session = Depends(get_db)):
    name = body.asset_name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Asset name is required")
    LiquiditySettingsService.add_limited(db, name)
    return _limited_response(db)


@router.delete("/limited-assets/{asset_name}", response_model=LimitedAssetsResponse)
def remove_limited_asset(asset_name: str, db: Session = Depends(get_db)):
    if not LiquiditySettingsService.remove_limited(db, asset_name):
        raise HTTPException(status_code=404, detail=f"'{asset_name}' is not flagged")
    return _limited_response(db)


@router.get("/liquidation-years", response_model=LiquidationYearsResponse)
def get_liquidation_years(db: Session = Depends(get_db)):
    """Name → liquidation year ("YYYY" or "later")."""
    return LiquidationYearsResponse(years=LiquiditySettingsService.get_liquidation_years(db))


@router.put("/liquidation-years", response_model=LiquidationYearsResponse)
def set_liquidation_year(body: LiquidationYearUpdate, db: Session = Depends(get_db)):
    try:
        LiquiditySettingsService.set_liquidation_year(db, body.asset_name, body.liquidation_year)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return LiquidationYearsResponse(years=LiquiditySettingsService.get_liquidation_years(db))


@router.delete("/liquidation-years/{asset_name}", status_code=204)
def delete_liquidation_year(asset_name: str, db: Session = Depends(get_db)):
    if not LiquiditySettingsService.delete_liquidation_year(db, asset_name):
        raise HTTPException(status_code=404, detail=f"No liquidation year for '{asset_name}'")
