"""Aggregation engine: percentages, grouping, rollups and summaries.

Every function here works on an already-loaded list of holdings plus the
per-holding ``AssetValue`` map produced by the valuation engine, so the
same values can be reused across several views of one request.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from services.valuation_service import calculate_asset_value
from services.valuation_types import (
    AssetGroup,
    AssetValue,
    ClassTotal,
    FXRateTable,
    HierarchyResult,
    NameTotal,
    SubClassTotal,
)
from utils.reference_data import (
    ASSET_CLASSES,
    CASH,
    COMMODITIES,
    FIXED_INCOME,
    PRIVATE_EQUITY,
    PUBLIC_EQUITY,
    REAL_ESTATE,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

GROUP_KEY_SEPARATOR = " | "

GROUPABLE_FIELDS: frozenset[str] = frozenset({
    "name",
    "asset_class",
    "sub_class",
    "account_entity",
    "account_bank",
    "beneficiary",
    "origin_currency",
})

HIERARCHY_CLASS_ORDER: list[str] = [
    PUBLIC_EQUITY,
    FIXED_INCOME,
    REAL_ESTATE,
    PRIVATE_EQUITY,
    COMMODITIES,
    CASH,
]

TOP_POSITIONS_LIMIT = 10


def _value_of(values: dict[str, AssetValue], asset_id: str) -> Decimal:
    value = values.get(asset_id)
    return value.display_value if value is not None else ZERO


def _percent(part: Decimal, total: Decimal) -> Decimal:
    if total == 0:
        return ZERO
    return part / total * HUNDRED


def total_value(assets: Iterable, values: dict[str, AssetValue]) -> Decimal:
    return sum((_value_of(values, a.id) for a in assets), ZERO)


def calculate_percentages(
    assets: Sequence, values: dict[str, AssetValue]
) -> dict[str, Decimal]:
    """Share of each holding in the total of ``assets``.

    Also stores the share on each ``AssetValue.percentage_of_scope``.
    All shares are 0 when the total is 0.
    """
    total = total_value(assets, values)
    percentages = {}
    for asset in assets:
        pct = _percent(_value_of(values, asset.id), total)
        percentages[asset.id] = pct
        if asset.id in values:
            values[asset.id].percentage_of_scope = pct
    return percentages


def group_key(asset, fields: Sequence[str]) -> str:
    return GROUP_KEY_SEPARATOR.join(str(getattr(asset, f, None) or "") for f in fields)


def group_assets(
    assets: Sequence,
    values: dict[str, AssetValue],
    fields: Sequence[str],
    sort: str = "value",
) -> list[AssetGroup]:
    """Partition holdings by the combined values of ``fields``.

    Args:
        assets: Holdings in scope (already filtered)
        values: Per-holding valuations keyed by id
        fields: One or more of :data:`GROUPABLE_FIELDS`
        sort: ``"value"`` for descending total, ``"key"`` for alphabetical

    Returns:
        Groups whose ``percentage_of_total`` is relative to the filtered total

    Raises:
        ValueError: On an empty/unknown field list or an unknown sort mode
    """
    if not fields:
        raise ValueError("At least one grouping field is required")
    unknown = [f for f in fields if f not in GROUPABLE_FIELDS]
    if unknown:
        raise ValueError(f"Cannot group by: {', '.join(unknown)}")
    if sort not in ("value", "key"):
        raise ValueError(f"Unknown sort mode: {sort}")

    groups: dict[str, AssetGroup] = {}
    for asset in assets:
        key = group_key(asset, fields)
        group = groups.get(key)
        if group is None:
            group = groups[key] = AssetGroup(key=key)
        group.asset_ids.append(asset.id)
        group.asset_count += 1
        group.total_value += _value_of(values, asset.id)

    grand_total = sum((g.total_value for g in groups.values()), ZERO)
    for group in groups.values():
        group.percentage_of_total = _percent(group.total_value, grand_total)

    if sort == "key":
        return sorted(groups.values(), key=lambda g: g.key)
    return sorted(groups.values(), key=lambda g: (-g.total_value, g.key))


def build_hierarchy(
    assets: Sequence, fx_rates: FXRateTable, view_currency: str
) -> HierarchyResult:
    """Class → sub-class → name rollup of converted values.

    Children are sorted by descending value; classes follow a fixed display
    order and are omitted when their total is zero. An empty FX table gives
    an empty result rather than unconverted totals.
    """
    if not fx_rates:
        return HierarchyResult()

    tree: dict[str, dict[str, dict[str, Decimal]]] = {}
    for asset in assets:
        value = calculate_asset_value(asset, fx_rates, view_currency).display_value
        names = tree.setdefault(asset.asset_class, {}).setdefault(asset.sub_class, {})
        names[asset.name] = names.get(asset.name, ZERO) + value

    result = HierarchyResult()
    order = HIERARCHY_CLASS_ORDER + [c for c in tree if c not in HIERARCHY_CLASS_ORDER]
    for asset_class in order:
        sub_map = tree.get(asset_class)
        if not sub_map:
            continue
        sub_classes = []
        for sub_class, names in sub_map.items():
            name_totals = sorted(
                (NameTotal(name=n, total_value=v) for n, v in names.items()),
                key=lambda t: t.total_value,
                reverse=True,
            )
            sub_classes.append(
                SubClassTotal(
                    sub_class=sub_class,
                    total_value=sum((t.total_value for t in name_totals), ZERO),
                    assets=name_totals,
                )
            )
        sub_classes.sort(key=lambda s: s.total_value, reverse=True)
        class_total = sum((s.total_value for s in sub_classes), ZERO)
        if class_total == 0:
            continue
        result.classes.append(
            ClassTotal(asset_class=asset_class, total_value=class_total, sub_classes=sub_classes)
        )
        result.grand_total += class_total
    return result


def weighted_ytw(assets: Iterable, values: dict[str, AssetValue]) -> Decimal:
    """Value-weighted yield-to-worst of Fixed Income holdings with a YTW.

    Returned as a decimal fraction like the stored ``ytw`` (0.07 = 7%);
    0 when no holding qualifies or their total value is 0.
    """
    weighted = ZERO
    total = ZERO
    for asset in assets:
        if asset.asset_class != FIXED_INCOME or asset.ytw is None:
            continue
        value = _value_of(values, asset.id)
        weighted += Decimal(str(asset.ytw)) * value
        total += value
    if total == 0:
        return ZERO
    return weighted / total


@dataclass
class AssetFilter:
    """Include/exclude criteria; empty lists mean "no constraint"."""

    asset_class: list[str] = field(default_factory=list)
    sub_class: list[str] = field(default_factory=list)
    account_entity: list[str] = field(default_factory=list)
    account_bank: list[str] = field(default_factory=list)
    beneficiary: list[str] = field(default_factory=list)
    origin_currency: list[str] = field(default_factory=list)
    cash_equivalent: Optional[bool] = None
    exclude_asset_class: list[str] = field(default_factory=list)
    exclude_sub_class: list[str] = field(default_factory=list)
    exclude_account_entity: list[str] = field(default_factory=list)
    exclude_account_bank: list[str] = field(default_factory=list)
    exclude_beneficiary: list[str] = field(default_factory=list)
    exclude_origin_currency: list[str] = field(default_factory=list)
    maturity_date_from: Optional[date] = None
    maturity_date_to: Optional[date] = None


_FILTER_FIELDS = (
    "asset_class",
    "sub_class",
    "account_entity",
    "account_bank",
    "beneficiary",
    "origin_currency",
)


def _matches(asset, criteria: AssetFilter) -> bool:
    for name in _FILTER_FIELDS:
        value = getattr(asset, name)
        include = getattr(criteria, name)
        if include and value not in include:
            return False
        if value in getattr(criteria, f"exclude_{name}"):
            return False
    if criteria.cash_equivalent is not None:
        if bool(asset.is_cash_equivalent) != criteria.cash_equivalent:
            return False
    # Holdings without a maturity date are not constrained by the range
    if asset.maturity_date is not None:
        if criteria.maturity_date_from and asset.maturity_date < criteria.maturity_date_from:
            return False
        if criteria.maturity_date_to and asset.maturity_date > criteria.maturity_date_to:
            return False
    return True


def filter_assets(assets: Iterable, criteria: Optional[AssetFilter]) -> list:
    if criteria is None:
        return list(assets)
    return [a for a in assets if _matches(a, criteria)]


def calculate_class_totals(
    assets: Iterable, values: dict[str, AssetValue]
) -> dict[str, Decimal]:
    """Total value per asset class, every class present (zero if empty)."""
    totals = {asset_class: ZERO for asset_class in ASSET_CLASSES}
    for asset in assets:
        totals[asset.asset_class] = totals.get(asset.asset_class, ZERO) + _value_of(values, asset.id)
    return totals


@dataclass
class ClassSummary:
    asset_class: str
    count: int
    total_value: Decimal
    percentage: Decimal


@dataclass
class PortfolioSummary:
    total_value: Decimal
    by_class: list[ClassSummary]
    by_entity: dict[str, Decimal]
    top_positions: list[tuple[str, Decimal]]  # (asset id, value)
    fixed_income_ytw: Decimal
    ytw_by_sub_class: dict[str, Decimal]


def build_summary(assets: Sequence, values: dict[str, AssetValue]) -> PortfolioSummary:
    """Class breakdown, entity totals, top positions and Fixed Income yields."""
    grand_total = total_value(assets, values)

    counts: dict[str, int] = {}
    class_values: dict[str, Decimal] = {}
    by_entity: dict[str, Decimal] = {}
    for asset in assets:
        value = _value_of(values, asset.id)
        counts[asset.asset_class] = counts.get(asset.asset_class, 0) + 1
        class_values[asset.asset_class] = class_values.get(asset.asset_class, ZERO) + value
        by_entity[asset.account_entity] = by_entity.get(asset.account_entity, ZERO) + value

    by_class = [
        ClassSummary(
            asset_class=c,
            count=counts[c],
            total_value=class_values[c],
            percentage=_percent(class_values[c], grand_total),
        )
        for c in counts
    ]
    by_class.sort(key=lambda s: s.total_value, reverse=True)

    top = sorted(
        ((a.id, _value_of(values, a.id)) for a in assets),
        key=lambda item: item[1],
        reverse=True,
    )[:TOP_POSITIONS_LIMIT]

    fixed_income = [a for a in assets if a.asset_class == FIXED_INCOME]
    ytw_by_sub_class = {}
    for sub_class in sorted({a.sub_class for a in fixed_income if a.ytw is not None}):
        ytw_by_sub_class[sub_class] = weighted_ytw(
            [a for a in fixed_income if a.sub_class == sub_class], values
        )

    return PortfolioSummary(
        total_value=grand_total,
        by_class=by_class,
        by_entity=dict(sorted(by_entity.items(), key=lambda item: item[1], reverse=True)),
        top_positions=top,
        fixed_income_ytw=weighted_ytw(fixed_income, values),
        ytw_by_sub_class=ytw_by_sub_class,
    )
