"""Request-scoped dependencies shared by the API routers."""

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from services.auth_service import AuthService, SessionInfo

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-Session-Token"


def require_session(
    x_session_token: Optional[str] = Header(default=None, alias=SESSION_HEADER),
    db: Session = Depends(get_db),
) -> Optional[SessionInfo]:
    """Resolve the caller's session or reject the request with 401.

    Returns None when authentication is disabled.
    """
    if not settings.REQUIRE_AUTH:
        return None
    session = AuthService.validate_session(db, x_session_token)
    if session is None:
        logger.debug("Rejected request with missing or expired session token")
        raise HTTPException(status_code=401, detail="Session expired")
    return session
