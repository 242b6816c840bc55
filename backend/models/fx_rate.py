"""FXRate model - conversion rates for one currency."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Numeric, String

from database import Base
from models.utils import generate_uuid


class FXRate(Base):
    """Rates converting one unit of ``currency`` into USD and ILS."""

    __tablename__ = "fx_rates"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    currency = Column(String(3), unique=True, index=True, nullable=False)
    to_usd_rate = Column(Numeric(18, 8), nullable=False)
    to_ils_rate = Column(Numeric(18, 8), nullable=False)
    source = Column(String, nullable=False, default="default")  # "api" | "manual" | "default"
    is_manual_override = Column(Boolean, nullable=False, default=False)
    last_updated = Column(DateTime, default=lambda: datetime.now(timezone.utc))
