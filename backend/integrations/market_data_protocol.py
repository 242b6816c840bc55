"""Interfaces for the two external market data lookups.

Prices come from a ticker → price feed, FX from a USD-based rate feed.
Both are only called from the refresh jobs, never while valuing.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Protocol


@dataclass
class PriceQuote:
    """Latest closing price for a ticker."""

    symbol: str
    price_date: date  # Last trading day, may be before today
    close_price: Decimal
    source: str  # e.g., "yahoo"


@dataclass
class ExchangeRates:
    """Units of each currency per one USD."""

    base: str
    rates: dict[str, Decimal] = field(default_factory=dict)
    fetched_at: datetime | None = None


class PriceProvider(Protocol):
    @property
    def provider_name(self) -> str:
        ...

    def get_latest_prices(self, symbols: list[str]) -> dict[str, PriceQuote]:
        """Latest close per symbol. Unknown or failed symbols are omitted."""
        ...


class ExchangeRateProvider(Protocol):
    @property
    def provider_name(self) -> str:
        ...

    def get_usd_rates(self) -> ExchangeRates:
        """Fetch units-per-USD rates.

        Raises:
            MarketDataError: If the provider cannot be reached or parsed
        """
        ...
