"""Valuation engine: turns one holding into a value in a reporting currency.

Currency conversion always goes through the ILS pivot: only ILS cross
rates are authoritative, so converting X into T uses
``X→ILS / T→ILS`` (or just ``X→ILS`` when T is ILS). A currency with no
usable rate converts at 1 and the result is flagged with
``fx_rate_missing`` so callers can surface the distortion.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable

from services.valuation_types import AssetValue, FXRateTable
from utils.reference_data import (
    CASH,
    CASH_LIKE_FIXED_INCOME,
    FACTORED_CLASSES,
    FIXED_INCOME,
    PIVOT_CURRENCY,
    PRIVATE_EQUITY,
)

logger = logging.getLogger(__name__)

ONE = Decimal("1")
ZERO = Decimal("0")

CASH_EQUIVALENT_HORIZON_DAYS = 365


def _dec(value) -> Decimal:
    """Coerce a nullable numeric into a Decimal (None -> 0)."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def derive_pe_price(asset) -> Decimal | None:
    """Implied per-unit price of a Private Equity stake.

    ``pe_company_value × pe_holding_percentage / 100 / quantity`` when both
    company-value fields are set and quantity is positive, else None.
    """
    if asset.asset_class != PRIVATE_EQUITY:
        return None
    if asset.pe_company_value is None or asset.pe_holding_percentage is None:
        return None
    quantity = _dec(asset.quantity)
    if quantity <= 0:
        return None
    return (
        _dec(asset.pe_company_value)
        * _dec(asset.pe_holding_percentage)
        / Decimal("100")
        / quantity
    )


def effective_price(asset) -> Decimal:
    """Per-unit price used for valuation.

    Cash defaults to 1, Private Equity with company-value fields uses the
    derived price, everything else uses the stored price (0 if unset).
    """
    derived = derive_pe_price(asset)
    if derived is not None:
        return derived
    if asset.price is None:
        return ONE if asset.asset_class == CASH else ZERO
    return _dec(asset.price)


def potential_base_value(asset) -> Decimal:
    """Full paper value ``quantity × price`` in origin currency."""
    return _dec(asset.quantity) * effective_price(asset)


def raw_base_value(asset) -> Decimal:
    """Value in origin currency, factored for Private Equity / Real Estate."""
    value = potential_base_value(asset)
    if asset.asset_class in FACTORED_CLASSES:
        factor = ONE if asset.factor is None else _dec(asset.factor)
        value = value * factor
    return value


def _to_ils(currency: str, fx_rates: FXRateTable) -> Decimal | None:
    entry = fx_rates.get(currency)
    if entry is None or not entry.to_ils:
        return None
    return _dec(entry.to_ils)


def get_conversion_rate(
    from_currency: str, to_currency: str, fx_rates: FXRateTable
) -> tuple[Decimal, bool]:
    """Rate converting ``from_currency`` into ``to_currency`` via ILS.

    Returns:
        ``(rate, missing)``. When either leg has no usable rate the amount
        is left unconverted: ``(1, True)``.
    """
    if from_currency == to_currency:
        return ONE, False

    from_ils = _to_ils(from_currency, fx_rates)
    if from_ils is None:
        return ONE, True
    if to_currency == PIVOT_CURRENCY:
        return from_ils, False

    to_ils = _to_ils(to_currency, fx_rates)
    if to_ils is None:
        return ONE, True
    return from_ils / to_ils, False


def convert_amount(
    amount: Decimal, from_currency: str, to_currency: str, fx_rates: FXRateTable
) -> Decimal:
    """Convert an amount between currencies through the ILS pivot."""
    rate, _ = get_conversion_rate(from_currency, to_currency, fx_rates)
    return _dec(amount) * rate


def calculate_asset_value(asset, fx_rates: FXRateTable, view_currency: str) -> AssetValue:
    """Value one holding in ``view_currency``.

    Args:
        asset: An ``Asset`` (or any object with the same attributes)
        fx_rates: Currency -> rates table
        view_currency: Reporting currency ("USD" or "ILS")

    Returns:
        AssetValue with raw, converted, display and potential values
    """
    rate, missing = get_conversion_rate(asset.origin_currency, view_currency, fx_rates)
    if missing:
        logger.debug(
            "No FX rate for %s -> %s, valuing %s unconverted",
            asset.origin_currency, view_currency, asset.name,
        )

    raw = raw_base_value(asset)
    converted = raw * rate
    return AssetValue(
        asset_id=asset.id,
        raw_base_value=raw,
        converted_value=converted,
        display_value=converted,
        potential_value=potential_base_value(asset) * rate,
        fx_rate=rate,
        fx_rate_missing=missing,
    )


def calculate_asset_values(
    assets: Iterable, fx_rates: FXRateTable, view_currency: str
) -> dict[str, AssetValue]:
    """Value every holding, keyed by asset id."""
    return {
        asset.id: calculate_asset_value(asset, fx_rates, view_currency)
        for asset in assets
    }


def missing_fx_currencies(assets: Iterable, fx_rates: FXRateTable, view_currency: str) -> list[str]:
    """Currencies whose missing rate leaves some holding unconverted."""
    origins = {a.origin_currency for a in assets} - {view_currency}
    missing = {c for c in origins if _to_ils(c, fx_rates) is None}
    if origins and view_currency != PIVOT_CURRENCY and _to_ils(view_currency, fx_rates) is None:
        missing.add(view_currency)
    return sorted(missing)


def is_cash_equivalent(asset, as_of: date | None = None) -> bool:
    """Cash, money-market/deposit Fixed Income, or Fixed Income maturing within a year."""
    if asset.asset_class == CASH:
        return True
    if asset.asset_class != FIXED_INCOME:
        return False
    if asset.sub_class in CASH_LIKE_FIXED_INCOME:
        return True
    if asset.maturity_date is None:
        return False
    as_of = as_of or date.today()
    return asset.maturity_date <= as_of + timedelta(days=CASH_EQUIVALENT_HORIZON_DAYS)
