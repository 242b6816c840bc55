"""PortfolioSnapshot model - frozen copy of the holdings and FX table."""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import JSON, Column, DateTime, Numeric, String, Text

from database import Base
from models.utils import generate_uuid


class PortfolioSnapshot(Base):
    """An immutable, user-saved copy of the whole portfolio.

    ``assets`` and ``fx_rates`` are stored as JSON documents so later
    edits to the live holdings never change a saved snapshot.
    """

    __tablename__ = "portfolio_snapshots"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    snapshot_date = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    assets = Column(JSON, nullable=False)
    fx_rates = Column(JSON, nullable=False)
    total_value_usd = Column(Numeric(20, 2), nullable=False, default=Decimal("0"))
    liquid_fixed_income_value_usd = Column(Numeric(20, 2), nullable=False, default=Decimal("0"))
    private_equity_value_usd = Column(Numeric(20, 2), nullable=False, default=Decimal("0"))
    real_estate_value_usd = Column(Numeric(20, 2), nullable=False, default=Decimal("0"))
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
