"""Integration tests for FX rate endpoints."""

from decimal import Decimal

import pytest

from api.market_data import get_market_data_service
from main import app
from services.market_data_service import MarketDataService
from tests.fixtures.mocks import MockExchangeRateProvider


@pytest.fixture
def fx_provider():
    return MockExchangeRateProvider()


@pytest.fixture
def fx_client(client, fx_provider):
    """Client whose MarketDataService uses the mock FX feed."""
    service = MarketDataService(fx_provider=fx_provider)
    app.dependency_overrides[get_market_data_service] = lambda: service
    yield client
    app.dependency_overrides.pop(get_market_data_service, None)


class TestListAndOverride:
    def test_list(self, client, seeded_fx):
        data = client.get("/api/fx-rates").json()
        assert [r["currency"] for r in data] == ["CAD", "CHF", "EUR", "HKD", "ILS", "USD"]

    def test_manual_rate(self, client, fx_rates):
        response = client.put("/api/fx-rates/EUR", json={"to_ils_rate": "4.2"})

        assert response.status_code == 200
        data = response.json()
        assert data["is_manual_override"] is True
        assert Decimal(data["to_usd_rate"]) == Decimal("1.05")

    def test_manual_rate_rejects_ils(self, client, fx_rates):
        response = client.put("/api/fx-rates/ILS", json={"to_ils_rate": "2"})
        assert response.status_code == 422

    def test_manual_rate_must_be_positive(self, client, fx_rates):
        response = client.put("/api/fx-rates/EUR", json={"to_ils_rate": "0"})
        assert response.status_code == 422

    def test_clear_override(self, client, fx_rates):
        client.put("/api/fx-rates/EUR", json={"to_ils_rate": "4.2"})
        data = client.delete("/api/fx-rates/EUR/override").json()
        assert data["is_manual_override"] is False
        assert client.delete("/api/fx-rates/GBP/override").status_code == 404


class TestRefresh:
    def test_refresh_skips_manual(self, fx_client, fx_rates):
        fx_client.put("/api/fx-rates/EUR", json={"to_ils_rate": "4.2"})
        data = fx_client.post("/api/fx-rates/refresh").json()

        assert data["skipped_manual"] == ["EUR"]
        assert "GBP" in data["updated"]
        rates = {r["currency"]: r for r in fx_client.get("/api/fx-rates").json()}
        assert Decimal(rates["EUR"]["to_ils_rate"]) == Decimal("4.2")
        assert Decimal(rates["USD"]["to_ils_rate"]) == Decimal("3.6")

    @pytest.mark.parametrize("fx_provider", [MockExchangeRateProvider(should_fail=True)])
    def test_provider_failure_is_502(self, fx_client, fx_provider):
        response = fx_client.post("/api/fx-rates/refresh")
        assert response.status_code == 502
        assert response.json()["detail"].startswith("FX refresh failed")

    @pytest.mark.parametrize("fx_provider", [MockExchangeRateProvider(rates={"USD": Decimal("1")})])
    def test_missing_ils_quote_is_502(self, fx_client, fx_provider):
        assert fx_client.post("/api/fx-rates/refresh").status_code == 502
