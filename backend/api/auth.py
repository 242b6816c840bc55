"""Login/session API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.dependencies import require_session
from database import get_db
from schemas.auth import LoginRequest, SessionResponse
from services.auth_service import (
    AuthNotConfiguredError,
    AuthService,
    InvalidPasswordError,
    SessionInfo,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=SessionResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Exchange the shared password for a session token."""
    if not body.password:
        raise HTTPException(status_code=400, detail="Password is required")
    try:
        session = AuthService.login(db, body.password)
    except InvalidPasswordError:
        raise HTTPException(status_code=401, detail="Invalid password")
    except AuthNotConfiguredError:
        raise HTTPException(status_code=500, detail="Authentication is not configured")
    return SessionResponse(session_token=session.token, expires_at=session.expires_at)


@router.get("/session", response_model=SessionResponse | None)
def get_session(session: SessionInfo | None = Depends(require_session)):
    """Re-validate the current token."""
    if session is None:
        return None
    return SessionResponse(session_token=session.token, expires_at=session.expires_at)


@router.post("/logout", status_code=204)
def logout(
    session: SessionInfo | None = Depends(require_session),
    db: Session = Depends(get_db),
):
    """Revoke the current token."""
    if session is not None:
        AuthService.logout(db, session.token)
