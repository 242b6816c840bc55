"""Tests for MarketDataService price and FX refresh."""

from decimal import Decimal

import pytest

from integrations.exceptions import MarketDataConnectionError
from services.fx_rate_service import FXRateService
from services.market_data_service import MarketDataService, is_price_refreshable
from tests.fixtures import create_asset, make_holding
from tests.fixtures.mocks import MockExchangeRateProvider, MockPriceProvider


class TestEligibility:
    @pytest.mark.parametrize(
        "overrides,expected",
        [
            ({"isin": "AAPL"}, True),
            ({"isin": "  "}, False),
            ({"isin": None}, False),
            ({"isin": "GLD", "asset_class": "Commodities & more", "sub_class": "Commodities"}, True),
            ({"isin": "O", "asset_class": "Fixed Income", "sub_class": "REIT stock"}, True),
            ({"isin": "O:SPY251219C00600000"}, False),
            ({"isin": "IL0011", "asset_class": "Fixed Income", "sub_class": "Gov long"}, False),
            ({"isin": "X", "asset_class": "Private Equity", "sub_class": "Growth"}, False),
        ],
    )
    def test_refreshable(self, overrides, expected):
        assert is_price_refreshable(make_holding(**overrides)) is expected


class TestRefreshPrices:
    def test_updates_every_holding_with_ticker(self, db, acme_fund_holdings):
        first, second = acme_fund_holdings
        for asset in acme_fund_holdings:
            asset.isin = "ACME"
        db.commit()
        provider = MockPriceProvider({"ACME": Decimal("57.5")})

        result = MarketDataService(price_provider=provider).refresh_prices(db)

        assert provider.requested == [["ACME"]]
        assert result.updated_count == 2
        assert result.updated_names == ["Acme Fund"]
        db.refresh(second)
        assert second.price == Decimal("57.5")

    def test_tel_aviv_prices_converted_from_agorot(self, db):
        teva = create_asset(db, name="Teva", isin="TEVA.TA", origin_currency="ILS")
        local = create_asset(db, name="Local ETF", isin="1159250", origin_currency="ILS")
        provider = MockPriceProvider({"TEVA.TA": Decimal("5600"), "1159250": Decimal("12345")})

        MarketDataService(price_provider=provider).refresh_prices(db)

        db.refresh(teva)
        db.refresh(local)
        assert teva.price == Decimal("56")
        assert local.price == Decimal("123.45")

    def test_failed_symbols_reported(self, db):
        apple = create_asset(db, name="Apple", isin="AAPL")
        create_asset(db, name="Gone", isin="GONE")
        provider = MockPriceProvider({"AAPL": Decimal("200")})

        result = MarketDataService(price_provider=provider).refresh_prices(db)

        assert result.failed_symbols == ["GONE"]
        assert result.updated_names == ["Apple"]
        db.refresh(apple)
        assert apple.price == Decimal("200")

    def test_options_keep_their_price(self, db):
        create_asset(db, name="Apple", isin="AAPL")
        option = create_asset(
            db, name="SPY Dec Call", isin="O:SPY251219C00600000",
            price=Decimal("12"),
        )
        provider = MockPriceProvider({"AAPL": Decimal("200")})

        result = MarketDataService(price_provider=provider).refresh_prices(db)

        assert provider.requested == [["AAPL"]]
        assert result.failed_symbols == []
        db.refresh(option)
        assert option.price == Decimal("12")

    def test_no_tickers_skips_provider(self, db, acme_fund_holdings):
        provider = MockPriceProvider()
        result = MarketDataService(price_provider=provider).refresh_prices(db)
        assert result.updated_count == 0
        assert provider.requested == []

    def test_provider_failure_propagates(self, db):
        create_asset(db, name="Apple", isin="AAPL")
        service = MarketDataService(price_provider=MockPriceProvider(should_fail=True))
        with pytest.raises(MarketDataConnectionError):
            service.refresh_prices(db)


class TestRefreshFxRates:
    def test_delegates_to_fx_service(self, db):
        result = MarketDataService(fx_provider=MockExchangeRateProvider()).refresh_fx_rates(db)
        assert "EUR" in result.updated
        assert FXRateService.get_rate(db, "EUR").source == "api"
