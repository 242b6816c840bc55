"""Pydantic schemas for portfolio snapshots."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict


class SnapshotCreate(BaseModel):
    """Save the current portfolio. ``suffix`` is appended to the date-based name."""

    suffix: Optional[str] = None
    description: Optional[str] = None


class SnapshotSummary(BaseModel):
    """Snapshot metadata and totals, without the holdings document."""

    id: str
    name: str
    description: Optional[str] = None
    snapshot_date: datetime
    total_value_usd: Decimal
    liquid_fixed_income_value_usd: Decimal
    private_equity_value_usd: Decimal
    real_estate_value_usd: Decimal

    model_config = ConfigDict(from_attributes=True)


class SnapshotDetail(SnapshotSummary):
    assets: list[dict[str, Any]]
    fx_rates: dict[str, Any]


ComparisonCategory = Literal["liquid", "private_equity", "real_estate"]


class AssetDeltaResponse(BaseModel):
    asset_name: str
    origin_currency: str
    value_a: Decimal
    value_b: Decimal
    delta: Decimal
    delta_usd: Decimal


class SnapshotComparisonResponse(BaseModel):
    snapshot_a_id: str
    snapshot_b_id: str
    category: ComparisonCategory
    deltas: list[AssetDeltaResponse]
