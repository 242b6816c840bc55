"""Pydantic schemas for FX rates."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class FXRateResponse(BaseModel):
    """One currency's rates to USD and ILS."""

    currency: str
    to_usd_rate: Decimal
    to_ils_rate: Decimal
    source: str
    is_manual_override: bool
    last_updated: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class FXRateManualUpdate(BaseModel):
    """Pin a currency's ILS rate."""

    to_ils_rate: Decimal = Field(gt=0)


class FXRefreshResponse(BaseModel):
    updated: list[str]
    skipped_manual: list[str]
    missing: list[str]
