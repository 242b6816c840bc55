"""Pydantic schemas for holdings."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class AssetBase(BaseModel):
    """Fields a client supplies for a holding.

    ``name`` may be omitted for Cash, where it is derived from the currency.
    """

    name: Optional[str] = None
    asset_class: str
    sub_class: str
    isin: Optional[str] = None
    account_entity: str
    account_bank: str
    origin_currency: str
    quantity: Decimal = Decimal("0")
    price: Optional[Decimal] = None
    factor: Optional[Decimal] = None
    maturity_date: Optional[date] = None
    ytw: Optional[Decimal] = None
    pe_company_value: Optional[Decimal] = None
    pe_holding_percentage: Optional[Decimal] = None


class AssetCreate(AssetBase):
    """Schema for creating a holding under a new name."""


class AssetExistingCreate(BaseModel):
    """Schema for adding a holding to an existing name group.

    Shared fields are copied from a sibling; only account-specific
    fields are accepted.
    """

    name: str
    account_entity: str
    account_bank: str
    quantity: Decimal = Decimal("0")
    price: Optional[Decimal] = None  # Private Equity / Real Estate only
    pe_holding_percentage: Optional[Decimal] = None


class AssetUpdate(BaseModel):
    """Schema for a partial update; unset fields are left alone."""

    name: Optional[str] = None
    asset_class: Optional[str] = None
    sub_class: Optional[str] = None
    isin: Optional[str] = None
    account_entity: Optional[str] = None
    account_bank: Optional[str] = None
    origin_currency: Optional[str] = None
    quantity: Optional[Decimal] = None
    price: Optional[Decimal] = None
    factor: Optional[Decimal] = None
    maturity_date: Optional[date] = None
    ytw: Optional[Decimal] = None
    pe_company_value: Optional[Decimal] = None
    pe_holding_percentage: Optional[Decimal] = None


class AssetResponse(BaseModel):
    """Schema for a holding in API responses."""

    id: str
    name: str
    asset_class: str
    sub_class: str
    isin: Optional[str] = None
    account_entity: str
    account_bank: str
    beneficiary: str
    origin_currency: str
    quantity: Decimal
    price: Optional[Decimal] = None
    factor: Optional[Decimal] = None
    maturity_date: Optional[date] = None
    ytw: Optional[Decimal] = None
    pe_company_value: Optional[Decimal] = None
    pe_holding_percentage: Optional[Decimal] = None
    is_cash_equivalent: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AssetWriteResponse(BaseModel):
    """A written holding plus any non-blocking validation warnings."""

    asset: AssetResponse
    warnings: list[str] = []
    edit_kind: Optional[str] = None  # "none" | "shared" | "account" | "both"
    affected_count: int = 1


class AssetValidateRequest(BaseModel):
    """Validate a holding without saving it."""

    asset: AssetUpdate
    asset_id: Optional[str] = None  # Set when validating an edit


class ValidationResponse(BaseModel):
    errors: list[str]
    warnings: list[str]
    is_valid: bool


class NameGroup(BaseModel):
    name: str
    asset_ids: list[str]


class NameGroupsResponse(BaseModel):
    """Holdings grouped by shared name."""

    groups: list[NameGroup]
