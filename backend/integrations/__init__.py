"""External API integrations.

This package contains:
- Market data protocol: Common interface for price and FX feeds
- Yahoo Finance client: Latest closing prices by ticker
- Exchange rate client: USD-based FX rates over HTTP
"""

from integrations.market_data_protocol import (
    ExchangeRateProvider,
    ExchangeRates,
    PriceProvider,
    PriceQuote,
)

__all__ = [
    "ExchangeRateProvider",
    "ExchangeRates",
    "PriceProvider",
    "PriceQuote",
]
