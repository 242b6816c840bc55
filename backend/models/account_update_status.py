"""AccountUpdateStatus model - when each (entity, bank) account was last reconciled."""

from sqlalchemy import Column, DateTime, String, UniqueConstraint

from database import Base
from models.utils import generate_uuid


class AccountUpdateStatus(Base):
    """Tracks the last manual reconciliation of one account."""

    __tablename__ = "account_update_tracker"
    __table_args__ = (
        UniqueConstraint(
            "account_entity", "account_bank", name="uix_account_entity_bank",
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_entity = Column(String, nullable=False)
    account_bank = Column(String, nullable=False)
    last_updated = Column(DateTime, nullable=True)  # None once cleared
