"""AppSession model - an opaque login token issued for the shared password."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String

from database import Base
from models.utils import generate_uuid


class AppSession(Base):
    """A time-limited session token."""

    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    session_token = Column(String(64), unique=True, index=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
