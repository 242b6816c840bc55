"""Liquidity matrix and the per-name liquidity settings behind it."""

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import AssetLiquidationSetting, LimitedLiquidityAsset
from services.valuation_service import calculate_asset_value
from services.valuation_types import FXRateTable
from utils.reference_data import (
    BENEFICIARIES,
    CASH,
    CASH_LIKE_FIXED_INCOME,
    COMMODITIES,
    FIXED_INCOME,
    PRIVATE_EQUITY,
    PUBLIC_EQUITY,
    REAL_ESTATE,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

LIQUIDITY_CASH = "Cash"
LIQUIDITY_BONDS = "Bonds"
LIQUIDITY_EQUITIES_LIQUID = "Equities - Liquid"
LIQUIDITY_EQUITIES_LIMITED = "Equities - Limited Liquidity"
LIQUIDITY_FUNDS = "Funds"
LIQUIDITY_REAL_ESTATE = "Real Estate"
LIQUIDITY_PRIVATE_EQUITY = "Private Equity"

LIQUIDITY_CATEGORIES: list[str] = [
    LIQUIDITY_CASH,
    LIQUIDITY_BONDS,
    LIQUIDITY_EQUITIES_LIQUID,
    LIQUIDITY_EQUITIES_LIMITED,
    LIQUIDITY_FUNDS,
    LIQUIDITY_REAL_ESTATE,
    LIQUIDITY_PRIVATE_EQUITY,
]

LIQUIDITY_CATEGORY_DESCRIPTIONS: dict[str, str] = {
    LIQUIDITY_CASH: "Cash class + Bank Deposit + Money Market (Fixed Income)",
    LIQUIDITY_BONDS: "Fixed Income excluding Bank Deposit, Money Market and Private Credit",
    LIQUIDITY_EQUITIES_LIQUID: "Public Equity + Commodities & more (excluding limited liquidity assets)",
    LIQUIDITY_EQUITIES_LIMITED: "Manually flagged assets with limited liquidity",
    LIQUIDITY_FUNDS: "Private Credit (Fixed Income) + named fund assets",
    LIQUIDITY_REAL_ESTATE: "All Real Estate class",
    LIQUIDITY_PRIVATE_EQUITY: "All Private Equity class",
}

PRIVATE_CREDIT = "Private Credit"
LATER = "later"
_YEAR_PATTERN = re.compile(r"^\d{4}$")


def classify_asset_liquidity(
    asset,
    limited_names: Iterable[str],
    fund_names: Iterable[str],
) -> Optional[str]:
    """Assign a holding to one liquidity category, or None if none applies.

    Precedence: cash-like, funds, remaining Fixed Income, Real Estate,
    Private Equity, then Public Equity / Commodities split by the limited
    liquidity name set.
    """
    asset_class = asset.asset_class
    if asset_class == CASH:
        return LIQUIDITY_CASH
    if asset_class == FIXED_INCOME and asset.sub_class in CASH_LIKE_FIXED_INCOME:
        return LIQUIDITY_CASH
    if asset_class == FIXED_INCOME and asset.sub_class == PRIVATE_CREDIT:
        return LIQUIDITY_FUNDS
    if asset.name in set(fund_names):
        return LIQUIDITY_FUNDS
    if asset_class == FIXED_INCOME:
        return LIQUIDITY_BONDS
    if asset_class == REAL_ESTATE:
        return LIQUIDITY_REAL_ESTATE
    if asset_class == PRIVATE_EQUITY:
        return LIQUIDITY_PRIVATE_EQUITY
    if asset_class in (PUBLIC_EQUITY, COMMODITIES):
        if asset.name in set(limited_names):
            return LIQUIDITY_EQUITIES_LIMITED
        return LIQUIDITY_EQUITIES_LIQUID
    return None


@dataclass
class LiquidityMatrix:
    """Category × beneficiary totals in the reporting currency."""

    matrix: dict[str, dict[str, Decimal]]
    row_totals: dict[str, Decimal]
    column_totals: dict[str, Decimal]
    grand_total: Decimal = ZERO
    excluded_count: int = 0
    excluded_asset_ids: list[str] = field(default_factory=list)


def calculate_liquidity_matrix(
    assets: Sequence,
    limited_names: Iterable[str],
    fund_names: Iterable[str],
    fx_rates: FXRateTable,
    view_currency: str,
) -> LiquidityMatrix:
    """Build the liquidity matrix.

    Holdings that match no category, or whose beneficiary is outside the
    fixed beneficiary list, are left out and counted in ``excluded_count``.
    """
    limited = set(limited_names)
    funds = set(fund_names)
    matrix = {c: {b: ZERO for b in BENEFICIARIES} for c in LIQUIDITY_CATEGORIES}
    excluded = []

    for asset in assets:
        category = classify_asset_liquidity(asset, limited, funds)
        if category is None or asset.beneficiary not in BENEFICIARIES:
            excluded.append(asset.id)
            continue
        value = calculate_asset_value(asset, fx_rates, view_currency).display_value
        matrix[category][asset.beneficiary] += value

    if excluded:
        logger.warning("Liquidity matrix excluded %d unclassified holdings", len(excluded))

    row_totals = {c: sum(matrix[c].values(), ZERO) for c in LIQUIDITY_CATEGORIES}
    column_totals = {
        b: sum((matrix[c][b] for c in LIQUIDITY_CATEGORIES), ZERO) for b in BENEFICIARIES
    }
    return LiquidityMatrix(
        matrix=matrix,
        row_totals=row_totals,
        column_totals=column_totals,
        grand_total=sum(row_totals.values(), ZERO),
        excluded_count=len(excluded),
        excluded_asset_ids=excluded,
    )


def get_eligible_limited_liquidity_assets(assets: Iterable, fund_names: Iterable[str]) -> list[str]:
    """Distinct Public Equity / Commodities names that can be flagged as limited."""
    funds = set(fund_names)
    return sorted({
        a.name
        for a in assets
        if a.asset_class in (PUBLIC_EQUITY, COMMODITIES) and a.name not in funds
    })


def validate_liquidation_year(year: str) -> str:
    """Normalize a liquidation year: a four-digit year or ``"later"``.

    Raises:
        ValueError: If the value is neither
    """
    value = str(year).strip()
    if value.lower() == LATER:
        return LATER
    if not _YEAR_PATTERN.match(value):
        raise ValueError(f"Liquidation year must be a four-digit year or 'later', got {year!r}")
    return value


class LiquiditySettingsService:
    """Limited-liquidity flags and liquidation years, both keyed by asset name."""

    @staticmethod
    def list_limited(db: Session) -> list[str]:
        rows = db.query(LimitedLiquidityAsset).order_by(LimitedLiquidityAsset.asset_name).all()
        return [r.asset_name for r in rows]

    @staticmethod
    def add_limited(db: Session, asset_name: str) -> LimitedLiquidityAsset:
        """Flag a name as limited liquidity. Flagging twice is a no-op."""
        row = db.query(LimitedLiquidityAsset).filter_by(asset_name=asset_name).first()
        if row is not None:
            return row
        row = LimitedLiquidityAsset(asset_name=asset_name)
        db.add(row)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            row = db.query(LimitedLiquidityAsset).filter_by(asset_name=asset_name).first()
            logger.info("Limited liquidity flag already set (concurrent insert): %s", asset_name)
            return row
        db.refresh(row)
        logger.info("Flagged limited liquidity: %s", asset_name)
        return row

    @staticmethod
    def remove_limited(db: Session, asset_name: str) -> bool:
        """Unflag a name. Returns False if it was not flagged."""
        row = db.query(LimitedLiquidityAsset).filter_by(asset_name=asset_name).first()
        if row is None:
            return False
        db.delete(row)
        db.commit()
        logger.info("Removed limited liquidity flag: %s", asset_name)
        return True

    @staticmethod
    def get_liquidation_years(db: Session) -> dict[str, str]:
        """Name → liquidation year. Names without a row default to "later" at use."""
        rows = db.query(AssetLiquidationSetting).all()
        return {r.asset_name: r.liquidation_year for r in rows}

    @staticmethod
    def set_liquidation_year(db: Session, asset_name: str, year: str) -> AssetLiquidationSetting:
        """Upsert the liquidation year for a name.

        Raises:
            ValueError: If ``year`` is not a four-digit year or "later"
        """
        value = validate_liquidation_year(year)
        row = db.query(AssetLiquidationSetting).filter_by(asset_name=asset_name).first()
        if row is None:
            row = AssetLiquidationSetting(asset_name=asset_name, liquidation_year=value)
            db.add(row)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                row = db.query(AssetLiquidationSetting).filter_by(asset_name=asset_name).first()
                row.liquidation_year = value
                db.commit()
        else:
            row.liquidation_year = value
            db.commit()
        db.refresh(row)
        logger.info("Set liquidation year for %s: %s", asset_name, value)
        return row

    @staticmethod
    def delete_liquidation_year(db: Session, asset_name: str) -> bool:
        row = db.query(AssetLiquidationSetting).filter_by(asset_name=asset_name).first()
        if row is None:
            return False
        db.delete(row)
        db.commit()
        logger.info("Cleared liquidation year for %s", asset_name)
        return True
