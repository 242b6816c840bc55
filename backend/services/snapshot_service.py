"""Snapshot service - saving frozen portfolio copies and comparing them."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Optional

from sqlalchemy.orm import Session

from models import Asset, PortfolioSnapshot
from services.valuation_service import (
    calculate_asset_value,
    convert_amount,
    raw_base_value,
)
from services.valuation_types import FXRateEntry, FXRateTable
from utils.reference_data import (
    CASH,
    COMMODITIES,
    FIXED_INCOME,
    PRIVATE_EQUITY,
    PUBLIC_EQUITY,
    REAL_ESTATE,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
USD = "USD"

LIQUID_CLASSES = (CASH, FIXED_INCOME, PUBLIC_EQUITY, COMMODITIES)

COMPARISON_CATEGORIES: dict[str, tuple[str, ...]] = {
    "liquid": LIQUID_CLASSES,
    "private_equity": (PRIVATE_EQUITY,),
    "real_estate": (REAL_ESTATE,),
}

_DECIMAL_FIELDS = (
    "quantity",
    "price",
    "factor",
    "ytw",
    "pe_company_value",
    "pe_holding_percentage",
)


@dataclass
class HoldingRecord:
    """A holding as stored inside a snapshot document."""

    id: str
    name: str
    asset_class: str
    sub_class: str
    account_entity: str
    account_bank: str
    beneficiary: str
    origin_currency: str
    quantity: Decimal
    price: Optional[Decimal] = None
    factor: Optional[Decimal] = None
    maturity_date: Optional[date] = None
    ytw: Optional[Decimal] = None
    pe_company_value: Optional[Decimal] = None
    pe_holding_percentage: Optional[Decimal] = None
    isin: Optional[str] = None
    is_cash_equivalent: bool = False


def serialize_asset(asset: Asset) -> dict[str, Any]:
    doc = {
        "id": asset.id,
        "name": asset.name,
        "asset_class": asset.asset_class,
        "sub_class": asset.sub_class,
        "isin": asset.isin,
        "account_entity": asset.account_entity,
        "account_bank": asset.account_bank,
        "beneficiary": asset.beneficiary,
        "origin_currency": asset.origin_currency,
        "maturity_date": asset.maturity_date.isoformat() if asset.maturity_date else None,
        "is_cash_equivalent": bool(asset.is_cash_equivalent),
    }
    for name in _DECIMAL_FIELDS:
        value = getattr(asset, name)
        doc[name] = str(value) if value is not None else None
    return doc


def deserialize_asset(doc: dict[str, Any]) -> HoldingRecord:
    values = dict(doc)
    for name in _DECIMAL_FIELDS:
        if values.get(name) is not None:
            values[name] = Decimal(str(values[name]))
    if values.get("quantity") is None:
        values["quantity"] = ZERO
    if values.get("maturity_date"):
        values["maturity_date"] = date.fromisoformat(values["maturity_date"])
    known = HoldingRecord.__dataclass_fields__
    return HoldingRecord(**{k: v for k, v in values.items() if k in known})


def serialize_fx_table(fx_rates: FXRateTable) -> dict[str, Any]:
    return {
        currency: {
            "to_usd": str(entry.to_usd),
            "to_ils": str(entry.to_ils),
            "last_updated": entry.last_updated.isoformat() if entry.last_updated else None,
        }
        for currency, entry in fx_rates.items()
    }


def deserialize_fx_table(doc: dict[str, Any]) -> FXRateTable:
    return {
        currency: FXRateEntry(
            to_usd=Decimal(str(entry["to_usd"])),
            to_ils=Decimal(str(entry["to_ils"])),
            last_updated=datetime.fromisoformat(entry["last_updated"]) if entry.get("last_updated") else None,
        )
        for currency, entry in doc.items()
    }


def snapshot_name(suffix: Optional[str] = None, on: Optional[date] = None) -> str:
    """``YYYY-MM-DD`` or ``YYYY-MM-DD - suffix``."""
    base = (on or date.today()).isoformat()
    suffix = (suffix or "").strip()
    return f"{base} - {suffix}" if suffix else base


@dataclass
class AssetDelta:
    asset_name: str
    origin_currency: str
    value_a: Decimal  # origin currency
    value_b: Decimal
    delta: Decimal
    delta_usd: Decimal


def aggregate_by_name(assets: Iterable, category: str) -> dict[str, tuple[str, Decimal]]:
    """Name → (origin currency, summed factored value) within a category.

    Raises:
        ValueError: On an unknown category
    """
    if category not in COMPARISON_CATEGORIES:
        raise ValueError(f"Unknown comparison category: {category}")
    classes = COMPARISON_CATEGORIES[category]
    aggregated: dict[str, tuple[str, Decimal]] = {}
    for asset in assets:
        if asset.asset_class not in classes:
            continue
        currency, total = aggregated.get(asset.name, (asset.origin_currency, ZERO))
        aggregated[asset.name] = (currency, total + raw_base_value(asset))
    return aggregated


def compare_holdings(
    assets_a: Iterable, assets_b: Iterable, fx_rates: FXRateTable, category: str
) -> list[AssetDelta]:
    """Per-name change from ``assets_a`` to ``assets_b``, priced in USD with ``fx_rates``."""
    a = aggregate_by_name(assets_a, category)
    b = aggregate_by_name(assets_b, category)
    deltas = []
    for name in sorted(set(a) | set(b)):
        currency = (a.get(name) or b.get(name))[0]
        value_a = a.get(name, (currency, ZERO))[1]
        value_b = b.get(name, (currency, ZERO))[1]
        delta = value_b - value_a
        deltas.append(
            AssetDelta(
                asset_name=name,
                origin_currency=currency,
                value_a=value_a,
                value_b=value_b,
                delta=delta,
                delta_usd=convert_amount(delta, currency, USD, fx_rates),
            )
        )
    return deltas


def get_top_deltas(deltas: list[AssetDelta], limit: int) -> list[AssetDelta]:
    """Largest changes by absolute USD amount."""
    return sorted(deltas, key=lambda d: abs(d.delta_usd), reverse=True)[:limit]


class SnapshotService:
    """Service for saved portfolio snapshots."""

    @staticmethod
    def list_snapshots(db: Session) -> list[PortfolioSnapshot]:
        return db.query(PortfolioSnapshot).order_by(PortfolioSnapshot.snapshot_date.desc()).all()

    @staticmethod
    def get_snapshot(db: Session, snapshot_id: str) -> Optional[PortfolioSnapshot]:
        return db.query(PortfolioSnapshot).filter_by(id=snapshot_id).first()

    @staticmethod
    def save_snapshot(
        db: Session,
        assets: list[Asset],
        fx_rates: FXRateTable,
        suffix: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PortfolioSnapshot:
        """Freeze the current holdings and FX table with USD totals."""
        totals = {"total": ZERO, "liquid": ZERO, PRIVATE_EQUITY: ZERO, REAL_ESTATE: ZERO}
        for asset in assets:
            value = calculate_asset_value(asset, fx_rates, USD).converted_value
            totals["total"] += value
            if asset.asset_class in LIQUID_CLASSES:
                totals["liquid"] += value
            elif asset.asset_class in totals:
                totals[asset.asset_class] += value

        snapshot = PortfolioSnapshot(
            name=snapshot_name(suffix),
            description=description,
            snapshot_date=datetime.now(timezone.utc),
            assets=[serialize_asset(a) for a in assets],
            fx_rates=serialize_fx_table(fx_rates),
            total_value_usd=totals["total"],
            liquid_fixed_income_value_usd=totals["liquid"],
            private_equity_value_usd=totals[PRIVATE_EQUITY],
            real_estate_value_usd=totals[REAL_ESTATE],
        )
        db.add(snapshot)
        db.commit()
        db.refresh(snapshot)
        logger.info(
            "Saved snapshot %s with %d holdings (id=%s)", snapshot.name, len(assets), snapshot.id,
        )
        return snapshot

    @staticmethod
    def compare_snapshots(
        db: Session,
        snapshot_a_id: str,
        snapshot_b_id: str,
        fx_rates: FXRateTable,
        category: str,
        limit: Optional[int] = None,
    ) -> list[AssetDelta]:
        """Compare two snapshots name by name.

        Raises:
            LookupError: If either snapshot does not exist
            ValueError: If the category is unknown
        """
        a = SnapshotService.get_snapshot(db, snapshot_a_id)
        b = SnapshotService.get_snapshot(db, snapshot_b_id)
        if a is None or b is None:
            raise LookupError("Snapshot not found")
        deltas = compare_holdings(
            [deserialize_asset(d) for d in a.assets],
            [deserialize_asset(d) for d in b.assets],
            fx_rates,
            category,
        )
        if limit is not None:
            return get_top_deltas(deltas, limit)
        return sorted(deltas, key=lambda d: abs(d.delta_usd), reverse=True)
