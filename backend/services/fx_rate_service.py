"""FX rate service - the persisted rate table and its refresh jobs."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from integrations.market_data_protocol import ExchangeRateProvider
from models import FXRate
from services.valuation_types import FXRateEntry, FXRateTable
from utils.reference_data import CURRENCIES, PIVOT_CURRENCY

logger = logging.getLogger(__name__)

USD = "USD"
ONE = Decimal("1")

# (to_usd, to_ils) used until the first provider refresh
DEFAULT_RATES: dict[str, tuple[Decimal, Decimal]] = {
    "ILS": (Decimal("0.28"), Decimal("1.00")),
    "USD": (Decimal("1.00"), Decimal("3.60")),
    "EUR": (Decimal("1.05"), Decimal("3.78")),
    "CHF": (Decimal("1.10"), Decimal("3.96")),
    "CAD": (Decimal("0.72"), Decimal("2.59")),
    "HKD": (Decimal("0.13"), Decimal("0.47")),
}


@dataclass
class FXRefreshResult:
    updated: list[str] = field(default_factory=list)
    skipped_manual: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class FXRateService:
    """Service for the currency → (USD, ILS) rate table."""

    @staticmethod
    def list_rates(db: Session) -> list[FXRate]:
        return db.query(FXRate).order_by(FXRate.currency).all()

    @staticmethod
    def get_rate(db: Session, currency: str) -> Optional[FXRate]:
        return db.query(FXRate).filter(FXRate.currency == currency).first()

    @staticmethod
    def load_table(db: Session) -> FXRateTable:
        """Load the rate table in the shape the valuation engine consumes."""
        return {
            r.currency: FXRateEntry(
                to_usd=r.to_usd_rate, to_ils=r.to_ils_rate, last_updated=r.last_updated
            )
            for r in FXRateService.list_rates(db)
        }

    @staticmethod
    def seed_defaults(db: Session) -> int:
        """Insert default rates when the table is empty. Returns rows added."""
        if db.query(FXRate).count() > 0:
            return 0
        for currency, (to_usd, to_ils) in DEFAULT_RATES.items():
            db.add(FXRate(currency=currency, to_usd_rate=to_usd, to_ils_rate=to_ils, source="default"))
        db.commit()
        logger.info("Seeded %d default FX rates", len(DEFAULT_RATES))
        return len(DEFAULT_RATES)

    @staticmethod
    def _upsert(
        db: Session,
        currency: str,
        to_usd: Decimal,
        to_ils: Decimal,
        source: str,
        is_manual: bool,
    ) -> FXRate:
        row = FXRateService.get_rate(db, currency)
        if row is None:
            row = FXRate(currency=currency)
            db.add(row)
        row.to_usd_rate = to_usd
        row.to_ils_rate = to_ils
        row.source = source
        row.is_manual_override = is_manual
        row.last_updated = _now()
        return row

    @staticmethod
    def set_manual_rate(db: Session, currency: str, to_ils: Decimal) -> FXRate:
        """Pin a currency's ILS rate; ``to_usd`` is derived through USD's ILS rate.

        Raises:
            ValueError: On an unsupported currency or a non-positive rate
        """
        currency = currency.upper()
        if currency not in CURRENCIES:
            raise ValueError(f"Unsupported currency: {currency}")
        if to_ils <= 0:
            raise ValueError("Rate must be positive")
        if currency == PIVOT_CURRENCY and to_ils != ONE:
            raise ValueError(f"{PIVOT_CURRENCY} is the pivot currency and always converts at 1")

        if currency == USD:
            usd_to_ils = to_ils
        else:
            usd_row = FXRateService.get_rate(db, USD)
            usd_to_ils = usd_row.to_ils_rate if usd_row and usd_row.to_ils_rate else None
        if usd_to_ils is None:
            logger.warning("No USD rate stored; saving %s with to_usd=1", currency)
            to_usd = ONE
        else:
            to_usd = to_ils / usd_to_ils

        row = FXRateService._upsert(db, currency, to_usd, to_ils, "manual", True)
        db.commit()
        db.refresh(row)
        logger.info("Manual FX rate set: %s = %s ILS", currency, to_ils)
        return row

    @staticmethod
    def clear_manual_override(db: Session, currency: str) -> Optional[FXRate]:
        """Let the next provider refresh overwrite this currency again."""
        row = FXRateService.get_rate(db, currency.upper())
        if row is None:
            return None
        row.is_manual_override = False
        db.commit()
        db.refresh(row)
        logger.info("Cleared manual FX override for %s", row.currency)
        return row

    @staticmethod
    def refresh_from_provider(db: Session, provider: ExchangeRateProvider) -> FXRefreshResult:
        """Fetch USD-based quotes and upsert every supported currency.

        Provider quotes are units per USD, so one unit of X is
        ``1 / rate`` USD and ``usd_to_ils / rate`` ILS. Manually
        overridden rows are left alone.

        Raises:
            MarketDataError: If the provider fails
            ValueError: If the provider has no ILS quote
        """
        quotes = provider.get_usd_rates().rates
        usd_to_ils = quotes.get(PIVOT_CURRENCY)
        if not usd_to_ils:
            raise ValueError(f"Provider returned no {PIVOT_CURRENCY} rate")

        result = FXRefreshResult()
        for currency in CURRENCIES:
            row = FXRateService.get_rate(db, currency)
            if row is not None and row.is_manual_override:
                result.skipped_manual.append(currency)
                continue
            if currency == USD:
                to_usd, to_ils = ONE, usd_to_ils
            elif currency == PIVOT_CURRENCY:
                to_usd, to_ils = ONE / usd_to_ils, ONE
            else:
                rate = quotes.get(currency)
                if not rate:
                    result.missing.append(currency)
                    continue
                to_usd, to_ils = ONE / rate, usd_to_ils / rate
            FXRateService._upsert(db, currency, to_usd, to_ils, "api", False)
            result.updated.append(currency)

        db.commit()
        if result.missing:
            logger.warning("Provider had no quote for: %s", ", ".join(result.missing))
        logger.info(
            "FX refresh: %d updated, %d manual kept", len(result.updated), len(result.skipped_manual),
        )
        return result
