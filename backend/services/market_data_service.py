"""Market data service: refreshes holding prices and FX rates from providers."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from config import settings
from integrations.market_data_protocol import ExchangeRateProvider, PriceProvider
from models import Asset
from services.asset_service import apply_derived_fields
from services.fx_rate_service import FXRateService, FXRefreshResult
from utils.reference_data import COMMODITIES, FIXED_INCOME, PUBLIC_EQUITY

logger = logging.getLogger(__name__)

REIT_STOCK = "REIT stock"
TASE_SUFFIX = ".TA"
# Option contracts (e.g. "O:SPY251219C00600000") have no Yahoo quote
OPTION_PREFIX = "O:"
# Tel Aviv listings are quoted in agorot
AGOROT_PER_SHEKEL = Decimal("100")


def is_price_refreshable(asset: Asset) -> bool:
    """Listed holdings whose ``isin`` field carries a market ticker."""
    if not asset.isin or not asset.isin.strip():
        return False
    if asset.isin.strip().upper().startswith(OPTION_PREFIX):
        return False
    if asset.asset_class in (PUBLIC_EQUITY, COMMODITIES):
        return True
    return asset.asset_class == FIXED_INCOME and asset.sub_class == REIT_STOCK


def is_tel_aviv_listing(asset: Asset) -> bool:
    return asset.isin.strip().upper().endswith(TASE_SUFFIX) or asset.origin_currency == "ILS"


@dataclass
class PriceRefreshResult:
    updated_count: int = 0
    updated_names: list[str] = field(default_factory=list)
    failed_symbols: list[str] = field(default_factory=list)


class MarketDataService:
    """Pulls prices and FX rates through pluggable providers."""

    def __init__(
        self,
        price_provider: Optional[PriceProvider] = None,
        fx_provider: Optional[ExchangeRateProvider] = None,
    ):
        """Initialize with optional providers for dependency injection.

        Args:
            price_provider: Ticker price feed. If None, a
                            YahooFinanceClient is created on first use.
            fx_provider: FX feed. If None, an ExchangeRateClient for
                         ``settings.EXCHANGE_RATE_API_URL`` is created on first use.
        """
        self._price_provider = price_provider
        self._fx_provider = fx_provider

    @property
    def price_provider(self) -> PriceProvider:
        if self._price_provider is None:
            from integrations.yahoo_finance_client import YahooFinanceClient

            self._price_provider = YahooFinanceClient()
        return self._price_provider

    @property
    def fx_provider(self) -> ExchangeRateProvider:
        if self._fx_provider is None:
            from integrations.exchange_rate_client import ExchangeRateClient

            self._fx_provider = ExchangeRateClient(settings.EXCHANGE_RATE_API_URL)
        return self._fx_provider

    def refresh_prices(self, db: Session) -> PriceRefreshResult:
        """Update the price of every listed holding from the latest close.

        Tickers are taken from ``isin``; every holding carrying a ticker
        gets the same new price, divided by 100 for Tel Aviv listings.
        """
        eligible = [a for a in db.query(Asset).all() if is_price_refreshable(a)]
        result = PriceRefreshResult()
        if not eligible:
            logger.info("No holdings with tickers to refresh")
            return result

        symbols = sorted({a.isin.strip() for a in eligible})
        quotes = self.price_provider.get_latest_prices(symbols)
        result.failed_symbols = [s for s in symbols if s not in quotes]

        names = set()
        for asset in eligible:
            quote = quotes.get(asset.isin.strip())
            if quote is None:
                continue
            price = quote.close_price
            if is_tel_aviv_listing(asset):
                price = price / AGOROT_PER_SHEKEL
            asset.price = price
            apply_derived_fields(asset)
            result.updated_count += 1
            names.add(asset.name)
        db.commit()

        result.updated_names = sorted(names)
        if result.failed_symbols:
            logger.warning("No price for: %s", ", ".join(result.failed_symbols))
        logger.info(
            "Price refresh: %d holdings updated across %d names",
            result.updated_count, len(names),
        )
        return result

    def refresh_fx_rates(self, db: Session) -> FXRefreshResult:
        return FXRateService.refresh_from_provider(db, self.fx_provider)
