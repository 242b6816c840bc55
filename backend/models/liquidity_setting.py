"""Per-asset-name liquidity settings."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String

from database import Base
from models.utils import generate_uuid


class LimitedLiquidityAsset(Base):
    """An equity or commodity name flagged as having limited liquidity."""

    __tablename__ = "limited_liquidity_assets"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    asset_name = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class AssetLiquidationSetting(Base):
    """Planning year in which a Real Estate / Private Equity name is sold."""

    __tablename__ = "asset_liquidation_settings"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    asset_name = Column(String, unique=True, index=True, nullable=False)
    liquidation_year = Column(String(8), nullable=False)  # "2027" or "later"
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
