"""Pydantic schemas for portfolio views."""

from decimal import Decimal

from pydantic import BaseModel


class AssetValueResponse(BaseModel):
    """One holding's valuation in the reporting currency."""

    asset_id: str
    name: str
    asset_class: str
    sub_class: str
    account_entity: str
    account_bank: str
    beneficiary: str
    origin_currency: str
    raw_base_value: Decimal
    converted_value: Decimal
    display_value: Decimal
    potential_value: Decimal
    fx_rate: Decimal
    fx_rate_missing: bool
    percentage_of_scope: Decimal


class PortfolioValuesResponse(BaseModel):
    view_currency: str
    total_value: Decimal
    items: list[AssetValueResponse]
    class_totals: dict[str, Decimal]
    warnings: list[str] = []


class ClassSummaryResponse(BaseModel):
    asset_class: str
    count: int
    total_value: Decimal
    percentage: Decimal


class TopPositionResponse(BaseModel):
    asset_id: str
    name: str
    account_entity: str
    value: Decimal


class PortfolioSummaryResponse(BaseModel):
    view_currency: str
    total_value: Decimal
    by_class: list[ClassSummaryResponse]
    by_entity: dict[str, Decimal]
    top_positions: list[TopPositionResponse]
    fixed_income_ytw: Decimal  # Decimal fraction, 0.07 = 7%
    ytw_by_sub_class: dict[str, Decimal]
    warnings: list[str] = []


class AssetGroupResponse(BaseModel):
    key: str
    asset_ids: list[str]
    total_value: Decimal
    asset_count: int
    percentage_of_total: Decimal


class PortfolioGroupsResponse(BaseModel):
    view_currency: str
    fields: list[str]
    total_value: Decimal
    groups: list[AssetGroupResponse]
    warnings: list[str] = []


class NameTotalResponse(BaseModel):
    name: str
    total_value: Decimal


class SubClassTotalResponse(BaseModel):
    sub_class: str
    total_value: Decimal
    assets: list[NameTotalResponse]


class ClassTotalResponse(BaseModel):
    asset_class: str
    total_value: Decimal
    sub_classes: list[SubClassTotalResponse]


class HierarchyResponse(BaseModel):
    view_currency: str
    classes: list[ClassTotalResponse]
    grand_total: Decimal
    warnings: list[str] = []


class LiquidityMatrixResponse(BaseModel):
    """Liquidity category × beneficiary totals."""

    view_currency: str
    categories: list[str]
    beneficiaries: list[str]
    matrix: dict[str, dict[str, Decimal]]
    row_totals: dict[str, Decimal]
    column_totals: dict[str, Decimal]
    grand_total: Decimal
    excluded_count: int
    category_descriptions: dict[str, str]
    warnings: list[str] = []

