"""Value objects for portfolio valuation."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass
class FXRateEntry:
    """Rates converting one unit of a currency into USD and ILS."""

    to_usd: Decimal
    to_ils: Decimal
    last_updated: datetime | None = None


# currency code -> rates
FXRateTable = dict[str, FXRateEntry]


@dataclass
class AssetValue:
    """Calculated values for a single holding in a reporting currency.

    ``raw_base_value`` is in the holding's origin currency and already
    factored for Private Equity / Real Estate. ``potential_value`` is the
    unfactored paper value, converted like ``converted_value``.
    """

    asset_id: str
    raw_base_value: Decimal
    converted_value: Decimal
    display_value: Decimal
    potential_value: Decimal
    fx_rate: Decimal
    fx_rate_missing: bool = False
    percentage_of_scope: Decimal = Decimal("0")


@dataclass
class AssetGroup:
    """Holdings sharing the same values for a set of grouping fields."""

    key: str
    asset_ids: list[str] = field(default_factory=list)
    total_value: Decimal = Decimal("0")
    asset_count: int = 0
    percentage_of_total: Decimal = Decimal("0")


@dataclass
class NameTotal:
    name: str
    total_value: Decimal


@dataclass
class SubClassTotal:
    sub_class: str
    total_value: Decimal
    assets: list[NameTotal] = field(default_factory=list)


@dataclass
class ClassTotal:
    asset_class: str
    total_value: Decimal
    sub_classes: list[SubClassTotal] = field(default_factory=list)


@dataclass
class HierarchyResult:
    """Class → sub-class → asset-name rollup."""

    classes: list[ClassTotal] = field(default_factory=list)
    grand_total: Decimal = Decimal("0")
