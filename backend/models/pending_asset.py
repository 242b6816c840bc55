"""PendingAsset model - an expected asset not yet booked as a holding."""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, DateTime, Numeric, String

from database import Base
from models.utils import generate_uuid


class PendingAsset(Base):
    """A placeholder asset with a rough USD value."""

    __tablename__ = "pending_assets"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    asset_class = Column(String, nullable=False)
    value_usd = Column(Numeric(20, 2), nullable=False, default=Decimal("0"))
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
