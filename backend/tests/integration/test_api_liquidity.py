"""Integration tests for liquidity settings endpoints."""

from tests.fixtures import create_asset


class TestLimitedAssets:
    def test_flag_and_unflag(self, client, db):
        create_asset(db, name="Apple")
        create_asset(db, name="Gold", asset_class="Commodities & more", sub_class="Commodities")

        data = client.post("/api/liquidity/limited-assets", json={"asset_name": "Gold"}).json()
        assert data["asset_names"] == ["Gold"]
        assert data["eligible_names"] == ["Apple", "Gold"]

        data = client.delete("/api/liquidity/limited-assets/Gold").json()
        assert data["asset_names"] == []
        assert client.delete("/api/liquidity/limited-assets/Gold").status_code == 404

    def test_blank_name(self, client):
        response = client.post("/api/liquidity/limited-assets", json={"asset_name": "  "})
        assert response.status_code == 422


class TestLiquidationYears:
    def test_set_and_delete(self, client):
        client.put("/api/liquidity/liquidation-years", json={"asset_name": "Tower", "liquidation_year": 2028})
        data = client.put(
            "/api/liquidity/liquidation-years",
            json={"asset_name": "Startup", "liquidation_year": "LATER"},
        ).json()
        assert data["years"] == {"Tower": "2028", "Startup": "later"}

        assert client.delete("/api/liquidity/liquidation-years/Tower").status_code == 204
        assert client.get("/api/liquidity/liquidation-years").json()["years"] == {"Startup": "later"}
        assert client.delete("/api/liquidity/liquidation-years/Tower").status_code == 404

    def test_invalid_year(self, client):
        response = client.put(
            "/api/liquidity/liquidation-years", json={"asset_name": "Tower", "liquidation_year": "28"}
        )
        assert response.status_code == 422
