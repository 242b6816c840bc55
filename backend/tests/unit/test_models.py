"""Unit tests for SQLAlchemy models."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from models import (
    AccountUpdateStatus,
    AppSession,
    FXRate,
    LimitedLiquidityAsset,
    PortfolioSnapshot,
)
from tests.fixtures import create_asset


def test_asset_defaults(db):
    """Holdings get an id, timestamps and derived fields."""
    asset = create_asset(db, account_entity="Guy", account_bank="Julius Bär")
    assert len(asset.id) == 36
    assert asset.beneficiary == "Kids"
    assert asset.is_cash_equivalent is False
    assert asset.created_at is not None


def test_asset_class_column_name(db):
    """``asset_class`` is stored in the ``class`` column."""
    create_asset(db)
    row = db.execute(text('SELECT "class" FROM assets')).scalar_one()
    assert row == "Public Equity"


def test_fx_rate_currency_unique(db):
    db.add(FXRate(currency="USD", to_usd_rate=Decimal("1"), to_ils_rate=Decimal("3.6")))
    db.commit()
    db.add(FXRate(currency="USD", to_usd_rate=Decimal("1"), to_ils_rate=Decimal("3.7")))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_fx_rate_defaults(db):
    rate = FXRate(currency="EUR", to_usd_rate=Decimal("1.1"), to_ils_rate=Decimal("4"))
    db.add(rate)
    db.commit()
    assert rate.source == "default"
    assert rate.is_manual_override is False


def test_account_tracker_unique_per_account(db):
    db.add(AccountUpdateStatus(account_entity="Shimon", account_bank="Poalim"))
    db.add(AccountUpdateStatus(account_entity="Shimon", account_bank="Poalim"))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_limited_liquidity_name_unique(db):
    db.add(LimitedLiquidityAsset(asset_name="Acme Fund"))
    db.add(LimitedLiquidityAsset(asset_name="Acme Fund"))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_snapshot_json_documents(db):
    snapshot = PortfolioSnapshot(
        name="2026-01-01",
        assets=[{"name": "Apple", "quantity": "10"}],
        fx_rates={"USD": {"to_usd": "1", "to_ils": "3.6"}},
    )
    db.add(snapshot)
    db.commit()
    db.expire_all()

    stored = db.query(PortfolioSnapshot).one()
    assert stored.assets[0]["quantity"] == "10"
    assert stored.fx_rates["USD"]["to_ils"] == "3.6"
    assert stored.total_value_usd == Decimal("0")


def test_session_token_unique(db):
    expires = datetime(2030, 1, 1, tzinfo=timezone.utc)
    db.add(AppSession(session_token="abc", expires_at=expires))
    db.add(AppSession(session_token="abc", expires_at=expires))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()
