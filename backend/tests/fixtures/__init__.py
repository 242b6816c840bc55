"""Test fixtures and sample data."""
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.orm import Session

from models import Asset, FXRate
from services.asset_service import apply_derived_fields
from services.valuation_types import FXRateEntry, FXRateTable
from utils.reference_data import get_beneficiary

# currency -> (to_usd, to_ils); USD = 4 ILS, EUR = 4.4 ILS
SAMPLE_RATES: dict[str, tuple[Decimal, Decimal]] = {
    "ILS": (Decimal("0.25"), Decimal("1")),
    "USD": (Decimal("1"), Decimal("4")),
    "EUR": (Decimal("1.1"), Decimal("4.4")),
}

_ASSET_DEFAULTS = {
    "name": "Apple",
    "asset_class": "Public Equity",
    "sub_class": "Big Tech",
    "isin": None,
    "account_entity": "Shimon",
    "account_bank": "Poalim",
    "origin_currency": "USD",
    "quantity": Decimal("10"),
    "price": Decimal("100"),
    "factor": None,
    "maturity_date": None,
    "ytw": None,
    "pe_company_value": None,
    "pe_holding_percentage": None,
}

_counter = iter(range(1, 1_000_000))


def make_holding(**overrides) -> SimpleNamespace:
    """Build an unsaved holding-like object for pure engine tests.

    This is a helper function (not a fixture); the valuation, aggregation,
    liquidity and projection engines only read attributes.
    """
    values = {**_ASSET_DEFAULTS, "is_cash_equivalent": False, **overrides}
    values.setdefault("id", f"h-{next(_counter)}")
    values.setdefault("beneficiary", get_beneficiary(values["account_entity"]) or "")
    return SimpleNamespace(**values)


def create_asset(db: Session, **overrides) -> Asset:
    """Persist a holding with derived fields applied."""
    values = {**_ASSET_DEFAULTS, **overrides}
    asset = Asset(**values)
    apply_derived_fields(asset)
    db.add(asset)
    db.commit()
    db.refresh(asset)
    return asset


def create_fx_rates(db: Session, rates: dict[str, tuple[Decimal, Decimal]] | None = None) -> None:
    """Store ``currency -> (to_usd, to_ils)`` rows."""
    for currency, (to_usd, to_ils) in (rates or SAMPLE_RATES).items():
        db.add(
            FXRate(
                currency=currency,
                to_usd_rate=to_usd,
                to_ils_rate=to_ils,
                source="default",
                last_updated=datetime.now(timezone.utc),
            )
        )
    db.commit()


@pytest.fixture
def fx_table() -> FXRateTable:
    """In-memory FX table: USD = 4 ILS, EUR = 4.4 ILS."""
    return {
        currency: FXRateEntry(to_usd=to_usd, to_ils=to_ils)
        for currency, (to_usd, to_ils) in SAMPLE_RATES.items()
    }


@pytest.fixture
def fx_rates(db: Session) -> None:
    """The sample FX table stored in the test database."""
    create_fx_rates(db)


@pytest.fixture
def seeded_fx(db: Session) -> None:
    """The default FX seed rows stored in the test database."""
    from services.fx_rate_service import FXRateService

    FXRateService.seed_defaults(db)


@pytest.fixture
def acme_fund_holdings(db: Session) -> tuple[Asset, Asset]:
    """Two holdings of "Acme Fund" at different accounts."""
    first = create_asset(
        db,
        name="Acme Fund",
        sub_class="other",
        account_entity="Shimon",
        account_bank="Poalim",
        quantity=Decimal("10"),
        price=Decimal("50"),
    )
    second = create_asset(
        db,
        name="Acme Fund",
        sub_class="other",
        account_entity="Hagit",
        account_bank="Leumi 1",
        quantity=Decimal("20"),
        price=Decimal("50"),
    )
    return first, second
