"""Unit tests for the projection engine."""

from decimal import Decimal

import pytest

from services.projection_service import (
    ProjectionBucket,
    ProjectionConfig,
    ProjectionSettingsService,
    ProjectionToggles,
    apply_spending,
    compound,
    expand_toggles,
    project_portfolio,
)
from tests.fixtures import make_holding


def _cash(amount: str):
    return make_holding(
        name="USD Cash", asset_class="Cash", sub_class="USD",
        quantity=Decimal(amount), price=Decimal("1"),
    )


def _bond(amount: str, ytw=None):
    return make_holding(
        name="Bond", asset_class="Fixed Income", sub_class="Corporate",
        quantity=Decimal(amount), price=Decimal("1"), ytw=ytw,
    )


def _tower():
    return make_holding(
        name="Tower", asset_class="Real Estate", sub_class="Tel-Aviv",
        quantity=Decimal("1"), price=Decimal("1000000"), factor=Decimal("0.5"),
    )


def _startup():
    return make_holding(
        name="Startup", asset_class="Private Equity", sub_class="Growth",
        quantity=Decimal("1"), price=None, factor=Decimal("0.6"),
        pe_company_value=Decimal("10000000"), pe_holding_percentage=Decimal("5"),
    )


def _bucket(result, label):
    return next(b for b in result.buckets if b.label == label)


class TestCompound:
    def test_zero_offset_is_identity(self):
        assert compound(Decimal("100"), Decimal("12"), 0) == Decimal("100")

    def test_two_years(self):
        assert compound(Decimal("100"), Decimal("10"), 2) == Decimal("121")


class TestApplySpending:
    def test_cash_first_then_fixed_income(self):
        """100k spend against 80k cash leaves FI at 180k."""
        bucket = ProjectionBucket(
            label="+2", year=2028, offset=2,
            cash=Decimal("80000"), fixed_income=Decimal("200000"),
        )
        apply_spending(bucket, Decimal("100000"))

        assert bucket.cash == Decimal("0")
        assert bucket.fixed_income == Decimal("180000")
        assert bucket.spending == Decimal("100000")

    def test_floors_at_zero(self):
        bucket = ProjectionBucket(
            label="+1", year=2027, offset=1, cash=Decimal("10"), fixed_income=Decimal("20"),
        )
        apply_spending(bucket, Decimal("100"))
        assert bucket.cash == Decimal("0")
        assert bucket.fixed_income == Decimal("0")


class TestExpandToggles:
    def test_most_specific_switch_wins(self):
        holdings = [
            _tower(),
            make_holding(name="Villa", asset_class="Real Estate", sub_class="Abroad"),
            make_holding(name="Flat", asset_class="Real Estate", sub_class="Living"),
        ]
        toggles = ProjectionToggles(
            classes={"Real Estate": True},
            sub_classes={"Real Estate|Abroad": False},
            names={"Tower": True, "Flat": False},
        )
        assert expand_toggles(holdings, toggles) == {"Tower"}

    def test_liquid_classes_never_toggled(self):
        toggles = ProjectionToggles(classes={"Public Equity": True})
        assert expand_toggles([make_holding()], toggles) == set()


class TestProjectPortfolio:
    def test_spending_drawn_cumulatively(self, fx_table):
        config = ProjectionConfig(yearly_spending=Decimal("50000"), current_year=2026)
        result = project_portfolio([_cash("80000"), _bond("200000")], fx_table, "USD", config)

        plus_two = _bucket(result, "+2")
        assert plus_two.year == 2028
        assert plus_two.cash == Decimal("0")
        assert plus_two.fixed_income == Decimal("180000")

        current = _bucket(result, "current")
        assert current.cash == Decimal("80000")
        assert current.spending == Decimal("0")

    def test_spending_converted_from_spending_currency(self, fx_table):
        config = ProjectionConfig(
            yearly_spending=Decimal("1000"), spending_currency="USD", current_year=2026,
        )
        result = project_portfolio([_cash("10000")], fx_table, "ILS", config)
        assert _bucket(result, "+1").spending == Decimal("4000")

    def test_fixed_income_grows_at_weighted_ytw(self, fx_table):
        config = ProjectionConfig(current_year=2026)
        result = project_portfolio(
            [_bond("100", ytw=Decimal("0.04")), _bond("300", ytw=Decimal("0.08"))],
            fx_table, "USD", config,
        )
        assert result.fixed_income_rate == Decimal("7")
        assert _bucket(result, "+1").fixed_income == pytest.approx(Decimal("428"))

    def test_equity_and_commodity_irr(self, fx_table):
        holdings = [
            make_holding(quantity=Decimal("1"), price=Decimal("1000")),
            make_holding(name="Gold", asset_class="Commodities & more", sub_class="Commodities",
                         quantity=Decimal("1"), price=Decimal("1000")),
        ]
        config = ProjectionConfig(
            public_equity_irr=Decimal("10"), commodities_irr=Decimal("5"), current_year=2026,
        )
        result = project_portfolio(holdings, fx_table, "USD", config)

        later = _bucket(result, "later")
        assert later.offset == 4
        assert later.public_equity == pytest.approx(Decimal("1464.1"))
        assert later.commodities == pytest.approx(Decimal("1215.50625"))

    def test_toggled_real_estate_enters_from_liquidation_year(self, fx_table):
        config = ProjectionConfig(
            current_year=2026,
            toggles=ProjectionToggles(classes={"Real Estate": True}),
            liquidation_years={"Tower": "2028"},
        )
        result = project_portfolio([_tower()], fx_table, "USD", config)

        assert _bucket(result, "current").real_estate == Decimal("0")
        assert _bucket(result, "+1").real_estate == Decimal("0")
        assert _bucket(result, "+2").real_estate == Decimal("500000")
        assert _bucket(result, "+3").real_estate == Decimal("500000")
        assert _bucket(result, "later").real_estate == Decimal("500000")
        assert result.included_names == ["Tower"]

    def test_missing_liquidation_year_means_later(self, fx_table):
        config = ProjectionConfig(
            current_year=2026, toggles=ProjectionToggles(names={"Tower": True}),
        )
        result = project_portfolio([_tower()], fx_table, "USD", config)

        assert _bucket(result, "+3").real_estate == Decimal("0")
        assert _bucket(result, "later").real_estate == Decimal("500000")

    def test_untoggled_illiquid_assets_excluded(self, fx_table):
        result = project_portfolio([_tower(), _startup()], fx_table, "USD", ProjectionConfig())
        later = _bucket(result, "later")
        assert later.real_estate == Decimal("0")
        assert later.private_equity_factored == Decimal("0")
        assert result.included_names == []

    def test_private_equity_potential_not_in_total(self, fx_table):
        config = ProjectionConfig(
            current_year=2026,
            toggles=ProjectionToggles(classes={"Private Equity": True}),
            liquidation_years={"Startup": "later"},
        )
        result = project_portfolio([_startup()], fx_table, "USD", config)

        later = _bucket(result, "later")
        assert later.private_equity_factored == Decimal("300000")
        assert later.private_equity_potential == Decimal("200000")
        assert later.total == Decimal("300000")
        assert result.later_liquid_total == Decimal("300000")
        assert _bucket(result, "+3").private_equity_factored == Decimal("0")

    def test_five_buckets(self, fx_table):
        result = project_portfolio([], fx_table, "USD", ProjectionConfig(current_year=2026))
        assert [b.label for b in result.buckets] == ["current", "+1", "+2", "+3", "later"]
        assert [b.year for b in result.buckets] == [2026, 2027, 2028, 2029, None]


class TestProjectionSettingsService:
    def test_get_returns_none_when_unsaved(self, db):
        assert ProjectionSettingsService.get(db) is None

    def test_save_then_replace(self, db):
        ProjectionSettingsService.save(db, {"public_equity_irr": "8"})
        ProjectionSettingsService.save(db, {"public_equity_irr": "9", "yearly_spending": "100"})
        assert ProjectionSettingsService.get(db) == {"public_equity_irr": "9", "yearly_spending": "100"}
