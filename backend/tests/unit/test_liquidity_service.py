"""Unit tests for the liquidity matrix and liquidity settings."""

from decimal import Decimal

import pytest

from services.liquidity_service import (
    LIQUIDITY_CATEGORIES,
    LiquiditySettingsService,
    calculate_liquidity_matrix,
    classify_asset_liquidity,
    get_eligible_limited_liquidity_assets,
    validate_liquidation_year,
)
from tests.fixtures import make_holding

FUNDS = ["Crypto Fund (Ben)"]


class TestClassifyAssetLiquidity:
    @pytest.mark.parametrize(
        "overrides,expected",
        [
            ({"asset_class": "Cash", "sub_class": "USD", "name": "USD Cash"}, "Cash"),
            ({"asset_class": "Fixed Income", "sub_class": "Money Market"}, "Cash"),
            ({"asset_class": "Fixed Income", "sub_class": "Bank Deposit"}, "Cash"),
            ({"asset_class": "Fixed Income", "sub_class": "Private Credit"}, "Funds"),
            ({"asset_class": "Fixed Income", "sub_class": "Corporate"}, "Bonds"),
            ({"asset_class": "Real Estate", "sub_class": "Living"}, "Real Estate"),
            ({"asset_class": "Private Equity", "sub_class": "Growth"}, "Private Equity"),
            ({"asset_class": "Public Equity", "sub_class": "Big Tech"}, "Equities - Liquid"),
            ({"asset_class": "Commodities & more", "sub_class": "Commodities"}, "Equities - Liquid"),
        ],
    )
    def test_class_rules(self, overrides, expected):
        assert classify_asset_liquidity(make_holding(**overrides), [], FUNDS) == expected

    def test_flagged_name_is_limited(self):
        holding = make_holding(name="Lockup Co")
        assert classify_asset_liquidity(holding, ["Lockup Co"], FUNDS) == "Equities - Limited Liquidity"

    def test_named_fund_wins_over_equity(self):
        holding = make_holding(
            name="Crypto Fund (Ben)", asset_class="Commodities & more", sub_class="Cryptocurrency"
        )
        assert classify_asset_liquidity(holding, ["Crypto Fund (Ben)"], FUNDS) == "Funds"

    def test_unknown_class_is_unclassified(self):
        assert classify_asset_liquidity(make_holding(asset_class="Art"), [], FUNDS) is None


class TestLiquidityMatrix:
    def test_totals_by_category_and_beneficiary(self, fx_table):
        holdings = [
            make_holding(quantity=Decimal("10"), price=Decimal("100")),
            make_holding(account_entity="Roy", account_bank="Poalim",
                         quantity=Decimal("5"), price=Decimal("100")),
            make_holding(name="USD Cash", asset_class="Cash", sub_class="USD",
                         account_entity="Hagit", account_bank="Leumi 1",
                         quantity=Decimal("250"), price=Decimal("1")),
        ]
        result = calculate_liquidity_matrix(holdings, [], FUNDS, fx_table, "USD")

        assert set(result.matrix) == set(LIQUIDITY_CATEGORIES)
        assert result.matrix["Equities - Liquid"]["Shimon"] == Decimal("1000")
        assert result.matrix["Equities - Liquid"]["Kids"] == Decimal("500")
        assert result.matrix["Cash"]["Hagit"] == Decimal("250")
        assert result.row_totals["Equities - Liquid"] == Decimal("1500")
        assert result.column_totals["Kids"] == Decimal("500")
        assert result.grand_total == Decimal("1750")
        assert result.excluded_count == 0

    def test_grand_total_equals_row_and_column_sums(self, fx_table):
        holdings = [
            make_holding(),
            make_holding(name="Bond", asset_class="Fixed Income", sub_class="Corporate",
                         account_entity="Tom", account_bank="Tom Trust"),
        ]
        result = calculate_liquidity_matrix(holdings, [], FUNDS, fx_table, "ILS")

        assert sum(result.row_totals.values()) == result.grand_total
        assert sum(result.column_totals.values()) == result.grand_total

    def test_unclassified_holdings_are_counted(self, fx_table):
        holdings = [make_holding(), make_holding(asset_class="Art")]
        result = calculate_liquidity_matrix(holdings, [], FUNDS, fx_table, "USD")

        assert result.excluded_count == 1
        assert result.excluded_asset_ids == [holdings[1].id]
        assert result.grand_total == Decimal("1000")


class TestEligibleLimitedAssets:
    def test_distinct_equity_names_without_funds(self):
        holdings = [
            make_holding(name="Apple"),
            make_holding(name="Apple", account_entity="Hagit"),
            make_holding(name="Gold", asset_class="Commodities & more", sub_class="Commodities"),
            make_holding(name="Crypto Fund (Ben)", asset_class="Commodities & more",
                         sub_class="Cryptocurrency"),
            make_holding(name="Bond", asset_class="Fixed Income", sub_class="Corporate"),
        ]
        assert get_eligible_limited_liquidity_assets(holdings, FUNDS) == ["Apple", "Gold"]


class TestValidateLiquidationYear:
    @pytest.mark.parametrize("value,expected", [("2027", "2027"), (2030, "2030"), ("Later", "later")])
    def test_accepts(self, value, expected):
        assert validate_liquidation_year(value) == expected

    @pytest.mark.parametrize("value", ["27", "soon", "", "20277"])
    def test_rejects(self, value):
        with pytest.raises(ValueError):
            validate_liquidation_year(value)


class TestLiquiditySettingsService:
    def test_add_is_idempotent(self, db):
        LiquiditySettingsService.add_limited(db, "Lockup Co")
        LiquiditySettingsService.add_limited(db, "Lockup Co")
        assert LiquiditySettingsService.list_limited(db) == ["Lockup Co"]

    def test_remove(self, db):
        LiquiditySettingsService.add_limited(db, "Lockup Co")
        assert LiquiditySettingsService.remove_limited(db, "Lockup Co") is True
        assert LiquiditySettingsService.remove_limited(db, "Lockup Co") is False
        assert LiquiditySettingsService.list_limited(db) == []

    def test_liquidation_year_upsert(self, db):
        LiquiditySettingsService.set_liquidation_year(db, "Tower", "2027")
        LiquiditySettingsService.set_liquidation_year(db, "Tower", "later")
        assert LiquiditySettingsService.get_liquidation_years(db) == {"Tower": "later"}

    def test_invalid_year_rejected(self, db):
        with pytest.raises(ValueError):
            LiquiditySettingsService.set_liquidation_year(db, "Tower", "next year")
        assert LiquiditySettingsService.get_liquidation_years(db) == {}

    def test_delete_year(self, db):
        LiquiditySettingsService.set_liquidation_year(db, "Tower", "2028")
        assert LiquiditySettingsService.delete_liquidation_year(db, "Tower") is True
        assert LiquiditySettingsService.delete_liquidation_year(db, "Tower") is False
