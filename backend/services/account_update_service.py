"""Account update tracker - when each (entity, bank) account was last reconciled."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import AccountUpdateStatus, Asset

logger = logging.getLogger(__name__)


@dataclass
class AccountStatus:
    account_entity: str
    account_bank: str
    last_updated: Optional[datetime]


class AccountUpdateService:
    """Tracks manual reconciliation per account."""

    @staticmethod
    def list_accounts(db: Session) -> list[tuple[str, str]]:
        """Distinct (entity, bank) pairs that hold at least one asset."""
        rows = (
            db.query(Asset.account_entity, Asset.account_bank)
            .distinct()
            .order_by(Asset.account_entity, Asset.account_bank)
            .all()
        )
        return [(entity, bank) for entity, bank in rows]

    @staticmethod
    def list_statuses(db: Session) -> list[AccountStatus]:
        """Every account with holdings or a tracker row, with its last update."""
        tracked = {
            (r.account_entity, r.account_bank): r.last_updated
            for r in db.query(AccountUpdateStatus).all()
        }
        keys = set(tracked) | set(AccountUpdateService.list_accounts(db))
        return [
            AccountStatus(account_entity=entity, account_bank=bank, last_updated=tracked.get((entity, bank)))
            for entity, bank in sorted(keys)
        ]

    @staticmethod
    def _get(db: Session, entity: str, bank: str) -> Optional[AccountUpdateStatus]:
        return (
            db.query(AccountUpdateStatus)
            .filter_by(account_entity=entity, account_bank=bank)
            .first()
        )

    @staticmethod
    def _upsert(db: Session, entity: str, bank: str, when: datetime) -> AccountUpdateStatus:
        row = AccountUpdateService._get(db, entity, bank)
        if row is None:
            row = AccountUpdateStatus(account_entity=entity, account_bank=bank)
            db.add(row)
        row.last_updated = when
        return row

    @staticmethod
    def mark_updated(db: Session, entity: str, bank: str) -> AccountUpdateStatus:
        """Record that an account was reconciled now."""
        row = AccountUpdateService._upsert(db, entity, bank, datetime.now(timezone.utc))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            row = AccountUpdateService._upsert(db, entity, bank, datetime.now(timezone.utc))
            db.commit()
        db.refresh(row)
        logger.info("Marked account updated: %s / %s", entity, bank)
        return row

    @staticmethod
    def mark_entity_updated(db: Session, entity: str) -> int:
        """Mark every account of an entity as reconciled. Returns accounts touched."""
        now = datetime.now(timezone.utc)
        banks = [b for e, b in AccountUpdateService.list_accounts(db) if e == entity]
        for bank in banks:
            AccountUpdateService._upsert(db, entity, bank, now)
        db.commit()
        logger.info("Marked %d accounts updated for %s", len(banks), entity)
        return len(banks)

    @staticmethod
    def clear_update(db: Session, entity: str, bank: str) -> bool:
        """Reset an account's last update. Returns False if it was never tracked."""
        row = AccountUpdateService._get(db, entity, bank)
        if row is None:
            return False
        row.last_updated = None
        db.commit()
        logger.info("Cleared account update: %s / %s", entity, bank)
        return True
