"""Unit tests for the market data exception hierarchy."""

import pytest

from integrations.exceptions import (
    MarketDataAPIError,
    MarketDataConnectionError,
    MarketDataError,
    MarketDataResponseError,
)


class TestExceptionHierarchy:
    """All provider failures are caught by except MarketDataError."""

    @pytest.mark.parametrize(
        "exc",
        [
            MarketDataConnectionError("timeout", provider_name="yahoo"),
            MarketDataAPIError("500 error", provider_name="exchangerate-api", status_code=500),
            MarketDataResponseError("bad json", provider_name="exchangerate-api"),
        ],
    )
    def test_is_market_data_error(self, exc):
        assert isinstance(exc, MarketDataError)

    def test_message_and_provider(self):
        exc = MarketDataConnectionError("timeout", provider_name="yahoo")
        assert str(exc) == "timeout"
        assert exc.provider_name == "yahoo"


class TestRateLimit:
    def test_429_is_rate_limited(self):
        assert MarketDataAPIError("slow down", status_code=429).is_rate_limited

    def test_other_status_is_not(self):
        assert not MarketDataAPIError("boom", status_code=500).is_rate_limited
        assert MarketDataAPIError("boom").status_code is None
