"""Projection engine: compounds the portfolio forward over fixed year buckets.

Buckets are the current year, the next three calendar years and a terminal
"later" bucket. Liquid classes appear in every bucket at their compounded
value; Real Estate and Private Equity appear only once toggled on and past
their liquidation year. Cumulative yearly spending is drawn from Cash first,
then Fixed Income.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import ProjectionSetting
from services.aggregation_service import weighted_ytw
from services.valuation_service import calculate_asset_values, convert_amount
from services.valuation_types import FXRateTable
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
ONE = Decimal("1")
HUNDRED = Decimal("100")

LATER = "later"
# Compounding horizon of the terminal bucket
LATER_OFFSET = 4
YEAR_OFFSETS = (1, 2, 3)

TOGGLEABLE_CLASSES = (REAL_ESTATE, PRIVATE_EQUITY)


@dataclass
class ProjectionToggles:
    """Inclusion switches for Real Estate / Private Equity.

    The most specific switch wins: name, then ``"<class>|<sub_class>"``,
    then class.
    """

    classes: dict[str, bool] = field(default_factory=dict)
    sub_classes: dict[str, bool] = field(default_factory=dict)
    names: dict[str, bool] = field(default_factory=dict)


def sub_class_toggle_key(asset_class: str, sub_class: str) -> str:
    return f"{asset_class}|{sub_class}"


def expand_toggles(assets: Sequence, toggles: ProjectionToggles) -> set[str]:
    """Resolve class/sub-class/name switches into the set of included names."""
    included = set()
    for asset in assets:
        if asset.asset_class not in TOGGLEABLE_CLASSES:
            continue
        on = toggles.names.get(asset.name)
        if on is None:
            on = toggles.sub_classes.get(sub_class_toggle_key(asset.asset_class, asset.sub_class))
        if on is None:
            on = toggles.classes.get(asset.asset_class, False)
        if on:
            included.add(asset.name)
    return included


@dataclass
class ProjectionConfig:
    public_equity_irr: Decimal = Decimal("12")
    commodities_irr: Decimal = Decimal("12")
    yearly_spending: Decimal = ZERO
    spending_currency: str = "USD"
    toggles: ProjectionToggles = field(default_factory=ProjectionToggles)
    liquidation_years: dict[str, str] = field(default_factory=dict)
    current_year: Optional[int] = None


@dataclass
class ProjectionBucket:
    label: str  # "current", "+1", "+2", "+3" or "later"
    year: Optional[int]
    offset: int
    cash: Decimal = ZERO
    fixed_income: Decimal = ZERO
    public_equity: Decimal = ZERO
    commodities: Decimal = ZERO
    real_estate: Decimal = ZERO
    private_equity_factored: Decimal = ZERO
    private_equity_potential: Decimal = ZERO
    spending: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        """Bucket total; Private Equity potential is never part of it."""
        return (
            self.cash
            + self.fixed_income
            + self.public_equity
            + self.commodities
            + self.real_estate
            + self.private_equity_factored
        )


@dataclass
class ProjectionResult:
    buckets: list[ProjectionBucket]
    fixed_income_rate: Decimal  # percent
    included_names: list[str]

    @property
    def later_liquid_total(self) -> Decimal:
        return self.buckets[-1].total


def compound(value: Decimal, rate: Decimal, offset: int) -> Decimal:
    """``value × (1 + rate/100)^offset``."""
    return value * (ONE + Decimal(str(rate)) / HUNDRED) ** offset


def _included_in_bucket(liquidation_year: str, bucket: ProjectionBucket) -> bool:
    if bucket.label == "current":
        return False
    if bucket.label == LATER:
        return True
    if liquidation_year == LATER:
        return False
    return bucket.year >= int(liquidation_year)


def apply_spending(bucket: ProjectionBucket, spend: Decimal) -> None:
    """Take ``spend`` from Cash, then Fixed Income, flooring each at zero."""
    bucket.spending = spend
    remaining = spend - bucket.cash
    bucket.cash = max(bucket.cash - spend, ZERO)
    if remaining > 0:
        bucket.fixed_income = max(bucket.fixed_income - remaining, ZERO)


def _empty_buckets(current_year: int) -> list[ProjectionBucket]:
    buckets = [ProjectionBucket(label="current", year=current_year, offset=0)]
    for offset in YEAR_OFFSETS:
        buckets.append(ProjectionBucket(label=f"+{offset}", year=current_year + offset, offset=offset))
    buckets.append(ProjectionBucket(label=LATER, year=None, offset=LATER_OFFSET))
    return buckets


def project_portfolio(
    assets: Sequence,
    fx_rates: FXRateTable,
    view_currency: str,
    config: ProjectionConfig,
) -> ProjectionResult:
    """Project holdings across the current, +1, +2, +3 and later buckets.

    Args:
        assets: Holdings to project
        fx_rates: Currency -> rates table
        view_currency: Reporting currency of every output number
        config: Growth rates, spending, toggles and liquidation years

    Returns:
        ProjectionResult with one bucket per horizon
    """
    values = calculate_asset_values(assets, fx_rates, view_currency)
    fixed_income_rate = weighted_ytw(assets, values) * HUNDRED
    rates = {
        CASH: ZERO,
        FIXED_INCOME: fixed_income_rate,
        PUBLIC_EQUITY: Decimal(str(config.public_equity_irr)),
        COMMODITIES: Decimal(str(config.commodities_irr)),
    }

    base = {CASH: ZERO, FIXED_INCOME: ZERO, PUBLIC_EQUITY: ZERO, COMMODITIES: ZERO}
    toggled = []
    included = expand_toggles(assets, config.toggles)
    for asset in assets:
        value = values[asset.id]
        if asset.asset_class in base:
            base[asset.asset_class] += value.display_value
        elif asset.asset_class in TOGGLEABLE_CLASSES and asset.name in included:
            toggled.append((asset, value))

    current_year = config.current_year or date.today().year
    spend_per_year = convert_amount(
        Decimal(str(config.yearly_spending)), config.spending_currency, view_currency, fx_rates
    )

    buckets = _empty_buckets(current_year)
    for bucket in buckets:
        bucket.cash = compound(base[CASH], rates[CASH], bucket.offset)
        bucket.fixed_income = compound(base[FIXED_INCOME], rates[FIXED_INCOME], bucket.offset)
        bucket.public_equity = compound(base[PUBLIC_EQUITY], rates[PUBLIC_EQUITY], bucket.offset)
        bucket.commodities = compound(base[COMMODITIES], rates[COMMODITIES], bucket.offset)

        for asset, value in toggled:
            year = config.liquidation_years.get(asset.name, LATER)
            if not _included_in_bucket(year, bucket):
                continue
            if asset.asset_class == REAL_ESTATE:
                bucket.real_estate += value.display_value
            else:
                bucket.private_equity_factored += value.display_value
                bucket.private_equity_potential += value.potential_value - value.converted_value

        if bucket.offset > 0 and spend_per_year > 0:
            apply_spending(bucket, spend_per_year * bucket.offset)

    logger.debug(
        "Projected %d holdings (%d toggled) in %s", len(assets), len(toggled), view_currency,
    )
    return ProjectionResult(
        buckets=buckets,
        fixed_income_rate=fixed_income_rate,
        included_names=sorted(included),
    )


SETTINGS_KEY = "projection"


class ProjectionSettingsService:
    """Persists the last-used projection configuration as JSON."""

    @staticmethod
    def get(db: Session) -> Optional[dict[str, Any]]:
        row = db.query(ProjectionSetting).filter(ProjectionSetting.key == SETTINGS_KEY).first()
        if row is None:
            return None
        return json.loads(row.value)

    @staticmethod
    def save(db: Session, value: dict[str, Any]) -> ProjectionSetting:
        """Create or replace the stored configuration."""
        serialized = json.dumps(value)
        row = db.query(ProjectionSetting).filter(ProjectionSetting.key == SETTINGS_KEY).first()
        if row is None:
            row = ProjectionSetting(key=SETTINGS_KEY, value=serialized)
            db.add(row)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                row = db.query(ProjectionSetting).filter(
                    ProjectionSetting.key == SETTINGS_KEY
                ).first()
                row.value = serialized
                db.commit()
                logger.info("Updated projection settings (concurrent insert)")
            else:
                logger.info("Created projection settings")
        else:
            row.value = serialized
            db.commit()
            logger.info("Updated projection settings")
        db.refresh(row)
        return row
