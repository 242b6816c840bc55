"""Shared-password login and opaque session tokens."""

import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from config import settings
from models import AppSession

logger = logging.getLogger(__name__)


class InvalidPasswordError(ValueError):
    """The supplied password does not match."""


class AuthNotConfiguredError(RuntimeError):
    """No application password is configured."""


@dataclass
class SessionInfo:
    """A validated session, passed explicitly to whoever needs it."""

    token: str
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite returns naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AuthService:
    """Exchanges the shared password for time-limited session tokens."""

    @staticmethod
    def login(
        db: Session,
        password: str,
        expected_password: Optional[str] = None,
        ttl_hours: Optional[int] = None,
    ) -> SessionInfo:
        """Issue a session token for the correct password.

        Expired sessions are purged first.

        Raises:
            AuthNotConfiguredError: If no password is configured
            InvalidPasswordError: If the password is wrong
        """
        expected = settings.APP_PASSWORD if expected_password is None else expected_password
        if not expected:
            raise AuthNotConfiguredError("APP_PASSWORD is not configured")

        AuthService.purge_expired(db)

        if not secrets.compare_digest(password.encode(), expected.encode()):
            logger.warning("Rejected login attempt")
            raise InvalidPasswordError("Invalid password")

        ttl = settings.SESSION_TTL_HOURS if ttl_hours is None else ttl_hours
        session = AppSession(
            session_token=str(uuid.uuid4()),
            expires_at=_utcnow() + timedelta(hours=ttl),
        )
        db.add(session)
        db.commit()
        db.refresh(session)
        logger.info("Session created, expires %s", session.expires_at)
        return SessionInfo(token=session.session_token, expires_at=_as_utc(session.expires_at))

    @staticmethod
    def validate_session(db: Session, token: Optional[str]) -> Optional[SessionInfo]:
        """Return the session for a live token, or None if missing/expired."""
        if not token:
            return None
        session = db.query(AppSession).filter(AppSession.session_token == token).first()
        if session is None:
            return None
        expires_at = _as_utc(session.expires_at)
        if expires_at <= _utcnow():
            return None
        return SessionInfo(token=session.session_token, expires_at=expires_at)

    @staticmethod
    def logout(db: Session, token: str) -> bool:
        """Revoke a token. Returns False if it did not exist."""
        session = db.query(AppSession).filter(AppSession.session_token == token).first()
        if session is None:
            return False
        db.delete(session)
        db.commit()
        logger.info("Session revoked")
        return True

    @staticmethod
    def purge_expired(db: Session) -> int:
        """Delete every expired session. Returns the number removed."""
        now = _utcnow()
        expired = [
            s for s in db.query(AppSession).all() if _as_utc(s.expires_at) <= now
        ]
        for session in expired:
            db.delete(session)
        if expired:
            db.commit()
            logger.info("Purged %d expired sessions", len(expired))
        return len(expired)
