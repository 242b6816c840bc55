"""Pydantic schemas for login sessions."""

from datetime import datetime

from pydantic import BaseModel


class LoginRequest(BaseModel):
    password: str


class SessionResponse(BaseModel):
    """A session token and when it stops working."""

    session_token: str
    expires_at: datetime
