"""Pydantic schemas for the account update tracker."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class AccountUpdateStatusResponse(BaseModel):
    account_entity: str
    account_bank: str
    last_updated: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AccountUpdateMark(BaseModel):
    """Mark one account, or every account of an entity when ``account_bank`` is omitted."""

    account_entity: str
    account_bank: Optional[str] = None


class AccountUpdateMarkResponse(BaseModel):
    updated_count: int
