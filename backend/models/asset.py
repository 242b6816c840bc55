"""Asset model - one holding of a named asset by one entity at one bank."""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, Column, Date, DateTime, Numeric, String

from database import Base
from models.utils import generate_uuid


class Asset(Base):
    """A single holding.

    Holdings that share a ``name`` form an implicit group; the fields that
    must agree across that group are declared in
    :mod:`services.asset_fields`, not here.
    """

    __tablename__ = "assets"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False, index=True)
    asset_class = Column("class", String, nullable=False)  # e.g., "Public Equity"
    sub_class = Column(String, nullable=False)
    isin = Column(String, nullable=True)
    account_entity = Column(String, nullable=False)
    account_bank = Column(String, nullable=False)
    beneficiary = Column(String, nullable=False)  # Derived from account_entity
    origin_currency = Column(String(3), nullable=False)
    quantity = Column(Numeric(20, 8), nullable=False, default=Decimal("0"))
    price = Column(Numeric(20, 8), nullable=True)
    factor = Column(Numeric(6, 4), nullable=True)  # 0-1, Private Equity / Real Estate
    maturity_date = Column(Date, nullable=True)  # Fixed Income only
    ytw = Column(Numeric(10, 6), nullable=True)  # Fixed Income only, decimal fraction
    pe_company_value = Column(Numeric(20, 2), nullable=True)
    pe_holding_percentage = Column(Numeric(9, 6), nullable=True)  # Percent, e.g. 5 = 5%
    is_cash_equivalent = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
