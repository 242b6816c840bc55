"""USD-based FX rate provider over HTTP."""

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional

import httpx

from integrations.exceptions import (
    MarketDataAPIError,
    MarketDataConnectionError,
    MarketDataResponseError,
)
from integrations.market_data_protocol import ExchangeRates

logger = logging.getLogger(__name__)


class ExchangeRateClient:
    """Fetches ``{currency: units per USD}`` from an exchangerate-api style endpoint.

    A single request, no retries; failures are raised as
    :class:`~integrations.exceptions.MarketDataError` subclasses.
    """

    def __init__(self, url: str, timeout: float = 30.0, client: Optional[httpx.Client] = None):
        self._url = url
        self._client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    @property
    def provider_name(self) -> str:
        return "exchangerate-api"

    def get_usd_rates(self) -> ExchangeRates:
        try:
            response = self._client.get(self._url)
        except httpx.TransportError as e:
            raise MarketDataConnectionError(
                f"Exchange rate request failed: {e}", self.provider_name
            ) from e

        if response.status_code != 200:
            raise MarketDataAPIError(
                f"Exchange rate API error: {response.status_code}",
                self.provider_name,
                status_code=response.status_code,
            )

        try:
            data = response.json()
            raw_rates = data["rates"]
            rates = {
                code: Decimal(str(value))
                for code, value in raw_rates.items()
                if value is not None
            }
        except (ValueError, KeyError, TypeError, AttributeError, InvalidOperation) as e:
            raise MarketDataResponseError(
                f"Malformed exchange rate response: {e}", self.provider_name
            ) from e

        logger.info("Fetched %d exchange rates from %s", len(rates), self.provider_name)
        return ExchangeRates(
            base=data.get("base", "USD"),
            rates=rates,
            fetched_at=datetime.now(timezone.utc),
        )
