"""Tests for FXRateService."""

from decimal import Decimal

import pytest

from integrations.exceptions import MarketDataConnectionError
from models import FXRate
from services.fx_rate_service import DEFAULT_RATES, FXRateService
from tests.fixtures.mocks import MockExchangeRateProvider


class TestSeedDefaults:
    def test_seeds_empty_table(self, db):
        added = FXRateService.seed_defaults(db)

        assert added == len(DEFAULT_RATES)
        table = FXRateService.load_table(db)
        assert table["ILS"].to_ils == Decimal("1")
        assert table["USD"].to_usd == Decimal("1")

    def test_leaves_existing_rows_alone(self, db, fx_rates):
        assert FXRateService.seed_defaults(db) == 0
        assert FXRateService.load_table(db)["USD"].to_ils == Decimal("4")


class TestSetManualRate:
    def test_derives_to_usd_from_usd_leg(self, db, fx_rates):
        row = FXRateService.set_manual_rate(db, "eur", Decimal("4.2"))

        assert row.currency == "EUR"
        assert row.to_ils_rate == Decimal("4.2")
        assert row.to_usd_rate == pytest.approx(Decimal("1.05"))
        assert row.is_manual_override is True
        assert row.source == "manual"

    def test_new_currency_row_created(self, db, fx_rates):
        FXRateService.set_manual_rate(db, "GBP", Decimal("5"))
        assert FXRateService.get_rate(db, "GBP").to_usd_rate == pytest.approx(Decimal("1.25"))

    def test_without_usd_row_defaults_to_usd_one(self, db):
        row = FXRateService.set_manual_rate(db, "CHF", Decimal("4"))
        assert row.to_usd_rate == Decimal("1")

    @pytest.mark.parametrize(
        "currency,rate,message",
        [
            ("ILS", Decimal("2"), "pivot"),
            ("JPY", Decimal("1"), "Unsupported currency"),
            ("EUR", Decimal("0"), "positive"),
        ],
    )
    def test_rejects_invalid_rates(self, db, fx_rates, currency, rate, message):
        with pytest.raises(ValueError, match=message):
            FXRateService.set_manual_rate(db, currency, rate)

    def test_clear_override(self, db, fx_rates):
        FXRateService.set_manual_rate(db, "EUR", Decimal("4.2"))
        row = FXRateService.clear_manual_override(db, "EUR")
        assert row.is_manual_override is False
        assert FXRateService.clear_manual_override(db, "CAD") is None


class TestRefreshFromProvider:
    def test_inverts_usd_quotes(self, db):
        result = FXRateService.refresh_from_provider(db, MockExchangeRateProvider())

        table = FXRateService.load_table(db)
        assert set(result.updated) == {"ILS", "USD", "CHF", "EUR", "CAD", "HKD", "GBP"}
        assert table["USD"].to_ils == Decimal("3.6")
        assert table["ILS"].to_usd == pytest.approx(Decimal("1") / Decimal("3.6"))
        assert table["EUR"].to_usd == pytest.approx(Decimal("1") / Decimal("0.9"))
        assert table["EUR"].to_ils == pytest.approx(Decimal("4"))
        assert table["GBP"].to_ils == pytest.approx(Decimal("4.8"))

    def test_skips_manual_overrides(self, db, fx_rates):
        FXRateService.set_manual_rate(db, "EUR", Decimal("4.2"))
        result = FXRateService.refresh_from_provider(db, MockExchangeRateProvider())

        assert result.skipped_manual == ["EUR"]
        assert FXRateService.get_rate(db, "EUR").to_ils_rate == Decimal("4.2")
        assert FXRateService.get_rate(db, "USD").source == "api"

    def test_reports_missing_quotes(self, db):
        provider = MockExchangeRateProvider(rates={"USD": Decimal("1"), "ILS": Decimal("3.6")})
        result = FXRateService.refresh_from_provider(db, provider)
        assert sorted(result.missing) == ["CAD", "CHF", "EUR", "GBP", "HKD"]

    def test_requires_ils_quote(self, db, fx_rates):
        provider = MockExchangeRateProvider(rates={"USD": Decimal("1"), "EUR": Decimal("0.9")})
        with pytest.raises(ValueError, match="ILS"):
            FXRateService.refresh_from_provider(db, provider)
        assert db.query(FXRate).filter_by(source="api").count() == 0

    def test_provider_failure_propagates(self, db):
        with pytest.raises(MarketDataConnectionError):
            FXRateService.refresh_from_provider(db, MockExchangeRateProvider(should_fail=True))
