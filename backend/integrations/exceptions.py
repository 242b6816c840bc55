"""Typed exceptions for market data providers.

Lets the FX and price jobs tell a bad response from an unreachable
provider and report either without crashing the request.
"""


class MarketDataError(Exception):
    """Base exception for market data provider failures."""

    def __init__(self, message: str, provider_name: str = ""):
        self.provider_name = provider_name
        super().__init__(message)


class MarketDataConnectionError(MarketDataError):
    """Timeouts, DNS failures and refused connections."""


class MarketDataAPIError(MarketDataError):
    """Non-2xx HTTP response from the provider."""

    def __init__(
        self,
        message: str,
        provider_name: str = "",
        status_code: int | None = None,
    ):
        self.status_code = status_code
        super().__init__(message, provider_name)

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429


class MarketDataResponseError(MarketDataError):
    """Response arrived but could not be parsed or lacks required rates."""
