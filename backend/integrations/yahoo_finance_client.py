"""Yahoo Finance price provider."""

import logging
from datetime import date, timedelta
from decimal import Decimal

import yfinance as yf

from integrations.market_data_protocol import PriceQuote

logger = logging.getLogger(__name__)

# Window searched for the most recent close, covering weekends and holidays
LOOKBACK_DAYS = 10


class YahooFinanceClient:
    """Latest closing prices via the yfinance library.

    Symbols are Yahoo tickers as stored in a holding's ``isin`` field,
    e.g. ``AAPL`` or ``TEVA.TA``.
    """

    @property
    def provider_name(self) -> str:
        return "yahoo"

    def get_latest_prices(
        self, symbols: list[str], as_of: date | None = None
    ) -> dict[str, PriceQuote]:
        """Fetch the most recent close on or before ``as_of`` for each symbol.

        Args:
            symbols: Yahoo ticker symbols.
            as_of: Last date to consider (default today).

        Returns:
            Dict of symbol -> PriceQuote. Symbols with no data are omitted.
        """
        if not symbols:
            return {}

        as_of = as_of or date.today()
        logger.info("Yahoo Finance: fetching latest prices for %d symbols", len(symbols))

        try:
            df = yf.download(
                tickers=symbols,
                start=(as_of - timedelta(days=LOOKBACK_DAYS)).isoformat(),
                # yfinance end is exclusive
                end=(as_of + timedelta(days=1)).isoformat(),
                auto_adjust=True,
                progress=False,
            )
        except Exception:
            logger.warning("yfinance download failed for %s", symbols, exc_info=True)
            return {}

        if df.empty:
            return {}

        quotes: dict[str, PriceQuote] = {}
        multi_symbol = len(symbols) > 1
        for symbol in symbols:
            column = ("Close", symbol) if multi_symbol else "Close"
            if column not in df.columns:
                continue
            closes = df[column].dropna()
            closes = closes[closes.index.date <= as_of]
            if closes.empty:
                continue
            quotes[symbol] = PriceQuote(
                symbol=symbol,
                price_date=closes.index[-1].date(),
                close_price=Decimal(str(round(float(closes.iloc[-1]), 6))),
                source=self.provider_name,
            )

        missing = len(symbols) - len(quotes)
        if missing:
            logger.warning("Yahoo Finance: no recent close for %d symbols", missing)
        return quotes
