"""Pending asset service - expected assets that are not booked yet."""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from models import Asset, PendingAsset
from services.asset_service import normalize_name
from utils.reference_data import ASSET_CLASSES

logger = logging.getLogger(__name__)


class PendingAssetService:
    """CRUD for pending assets, listed by descending USD value."""

    @staticmethod
    def list_pending(db: Session) -> list[PendingAsset]:
        return db.query(PendingAsset).order_by(PendingAsset.value_usd.desc()).all()

    @staticmethod
    def total_value(items: list[PendingAsset]) -> Decimal:
        return sum((Decimal(str(p.value_usd)) for p in items), Decimal("0"))

    @staticmethod
    def similar_names(db: Session, name: str) -> list[str]:
        """Existing holding names that differ from ``name`` only in case/punctuation."""
        target = normalize_name(name)
        names = {n for (n,) in db.query(Asset.name).distinct().all() if n}
        return sorted(n for n in names if n != name and normalize_name(n) == target)

    @staticmethod
    def _validate(asset_class: str, value_usd: Decimal) -> None:
        if asset_class not in ASSET_CLASSES:
            raise ValueError(f"Unknown asset class: {asset_class}")
        if value_usd < 0:
            raise ValueError("Value must be non-negative")

    @staticmethod
    def create(db: Session, name: str, asset_class: str, value_usd: Decimal) -> PendingAsset:
        """Add a pending asset.

        Raises:
            ValueError: On an empty name, unknown class or negative value
        """
        name = name.strip()
        if not name:
            raise ValueError("Name is required")
        PendingAssetService._validate(asset_class, value_usd)
        item = PendingAsset(name=name, asset_class=asset_class, value_usd=value_usd)
        db.add(item)
        db.commit()
        db.refresh(item)
        logger.info("Created pending asset %s (id=%s)", name, item.id)
        return item

    @staticmethod
    def update(
        db: Session,
        item_id: str,
        asset_class: Optional[str] = None,
        value_usd: Optional[Decimal] = None,
    ) -> Optional[PendingAsset]:
        """Update class and/or value. Returns None if the item does not exist."""
        item = db.query(PendingAsset).filter_by(id=item_id).first()
        if item is None:
            return None
        PendingAssetService._validate(
            asset_class if asset_class is not None else item.asset_class,
            value_usd if value_usd is not None else Decimal(str(item.value_usd)),
        )
        if asset_class is not None:
            item.asset_class = asset_class
        if value_usd is not None:
            item.value_usd = value_usd
        db.commit()
        db.refresh(item)
        logger.info("Updated pending asset %s (id=%s)", item.name, item_id)
        return item

    @staticmethod
    def delete(db: Session, item_id: str) -> bool:
        item = db.query(PendingAsset).filter_by(id=item_id).first()
        if item is None:
            return False
        db.delete(item)
        db.commit()
        logger.info("Deleted pending asset %s (id=%s)", item.name, item_id)
        return True
