"""Pydantic schemas for pending assets."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class PendingAssetCreate(BaseModel):
    name: str
    asset_class: str
    value_usd: Decimal


class PendingAssetUpdate(BaseModel):
    asset_class: Optional[str] = None
    value_usd: Optional[Decimal] = None


class PendingAssetResponse(BaseModel):
    id: str
    name: str
    asset_class: str
    value_usd: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PendingAssetWriteResponse(BaseModel):
    """A written pending asset plus near-duplicate name warnings."""

    item: PendingAssetResponse
    warnings: list[str] = []


class PendingAssetListResponse(BaseModel):
    """Pending assets by descending value, with their total."""

    items: list[PendingAssetResponse]
    total_value_usd: Decimal
