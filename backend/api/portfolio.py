"""Portfolio view API endpoints: values, summary, groups, hierarchy, liquidity, projection."""

import logging
from dataclasses import asdict
from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from api.dependencies import require_session
from api.helpers import fx_warnings
from config import settings
from database import get_db
from models import Asset
from schemas.portfolio import (
    AssetGroupResponse,
    AssetValueResponse,
    ClassSummaryResponse,
    ClassTotalResponse,
    HierarchyResponse,
    LiquidityMatrixResponse,
    PortfolioGroupsResponse,
    PortfolioSummaryResponse,
    PortfolioValuesResponse,
    TopPositionResponse,
)
from schemas.projection import (
    ProjectionBucketResponse,
    ProjectionRequest,
    ProjectionResponse,
    ProjectionSettings,
)
from services.aggregation_service import (
    AssetFilter,
    build_hierarchy,
    build_summary,
    calculate_class_totals,
    calculate_percentages,
    filter_assets,
    group_assets,
)
from services.asset_service import AssetService
from services.fx_rate_service import FXRateService
from services.liquidity_service import (
    LIQUIDITY_CATEGORIES,
    LIQUIDITY_CATEGORY_DESCRIPTIONS,
    LiquiditySettingsService,
    calculate_liquidity_matrix,
    validate_liquidation_year,
)
from services.projection_service import (
    ProjectionConfig,
    ProjectionSettingsService,
    ProjectionToggles,
    project_portfolio,
)
from services.valuation_service import calculate_asset_values, missing_fx_currencies
from utils.query_params import parse_csv, parse_view_currency
from utils.reference_data import BENEFICIARIES

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/portfolio",
    tags=["portfolio"],
    dependencies=[Depends(require_session)],
)


def get_asset_filter(
    asset_class: Optional[str] = Query(None, alias="class"),
    sub_class: Optional[str] = None,
    account_entity: Optional[str] = None,
    account_bank: Optional[str] = None,
    beneficiary: Optional[str] = None,
    origin_currency: Optional[str] = None,
    exclude_class: Optional[str] = None,
    exclude_sub_class: Optional[str] = None,
    exclude_account_entity: Optional[str] = None,
    exclude_account_bank: Optional[str] = None,
    exclude_beneficiary: Optional[str] = None,
    exclude_origin_currency: Optional[str] = None,
    cash_equivalent: Optional[bool] = None,
    maturity_date_from: Optional[date] = None,
    maturity_date_to: Optional[date] = None,
) -> AssetFilter:
    """Build an AssetFilter from comma-separated query parameters."""
    return AssetFilter(
        asset_class=parse_csv(asset_class) or [],
        sub_class=parse_csv(sub_class) or [],
        account_entity=parse_csv(account_entity) or [],
        account_bank=parse_csv(account_bank) or [],
        beneficiary=parse_csv(beneficiary) or [],
        origin_currency=parse_csv(origin_currency) or [],
        exclude_asset_class=parse_csv(exclude_class) or [],
        exclude_sub_class=parse_csv(exclude_sub_class) or [],
        exclude_account_entity=parse_csv(exclude_account_entity) or [],
        exclude_account_bank=parse_csv(exclude_account_bank) or [],
        exclude_beneficiary=parse_csv(exclude_beneficiary) or [],
        exclude_origin_currency=parse_csv(exclude_origin_currency) or [],
        cash_equivalent=cash_equivalent,
        maturity_date_from=maturity_date_from,
        maturity_date_to=maturity_date_to,
    )


def _load(db: Session, criteria: Optional[AssetFilter] = None) -> list[Asset]:
    return filter_assets(AssetService().list_assets(db), criteria)


@router.get("/values", response_model=PortfolioValuesResponse)
def get_values(
    currency: Optional[str] = None,
    criteria: AssetFilter = Depends(get_asset_filter),
    db: Session = Depends(get_db),
):
    """Per-holding values and percentage of the filtered total."""
    view_currency = parse_view_currency(currency, settings.DEFAULT_VIEW_CURRENCY)
    assets = _load(db, criteria)
    fx_rates = FXRateService.load_table(db)
    values = calculate_asset_values(assets, fx_rates, view_currency)
    calculate_percentages(assets, values)

    items = [
        AssetValueResponse(
            name=a.name,
            asset_class=a.asset_class,
            sub_class=a.sub_class,
            account_entity=a.account_entity,
            account_bank=a.account_bank,
            beneficiary=a.beneficiary,
            origin_currency=a.origin_currency,
            **asdict(values[a.id]),
        )
        for a in assets
    ]
    return PortfolioValuesResponse(
        view_currency=view_currency,
        total_value=sum((i.display_value for i in items), Decimal("0")),
        items=items,
        class_totals=calculate_class_totals(assets, values),
        warnings=fx_warnings(missing_fx_currencies(assets, fx_rates, view_currency)),
    )


@router.get("/summary", response_model=PortfolioSummaryResponse)
def get_summary(
    currency: Optional[str] = None,
    criteria: AssetFilter = Depends(get_asset_filter),
    db: Session = Depends(get_db),
):
    """Holdings by class and entity, top positions and Fixed Income yield."""
    view_currency = parse_view_currency(currency, settings.DEFAULT_VIEW_CURRENCY)
    assets = _load(db, criteria)
    fx_rates = FXRateService.load_table(db)
    values = calculate_asset_values(assets, fx_rates, view_currency)
    summary = build_summary(assets, values)
    by_id = {a.id: a for a in assets}

    return PortfolioSummaryResponse(
        view_currency=view_currency,
        total_value=summary.total_value,
        by_class=[ClassSummaryResponse(**asdict(c)) for c in summary.by_class],
        by_entity=summary.by_entity,
        top_positions=[
            TopPositionResponse(
                asset_id=asset_id,
                name=by_id[asset_id].name,
                account_entity=by_id[asset_id].account_entity,
                value=value,
            )
            for asset_id, value in summary.top_positions
        ],
        fixed_income_ytw=summary.fixed_income_ytw,
        ytw_by_sub_class=summary.ytw_by_sub_class,
        warnings=fx_warnings(missing_fx_currencies(assets, fx_rates, view_currency)),
    )


@router.get("/groups", response_model=PortfolioGroupsResponse)
def get_groups(
    fields: str = Query("asset_class", description="Comma-separated grouping fields"),
    sort: str = Query("value", pattern="^(value|key)$"),
    currency: Optional[str] = None,
    criteria: AssetFilter = Depends(get_asset_filter),
    db: Session = Depends(get_db),
):
    """Group holdings by one or more fields."""
    view_currency = parse_view_currency(currency, settings.DEFAULT_VIEW_CURRENCY)
    field_list = parse_csv(fields) or []
    assets = _load(db, criteria)
    fx_rates = FXRateService.load_table(db)
    values = calculate_asset_values(assets, fx_rates, view_currency)
    try:
        groups = group_assets(assets, values, field_list, sort=sort)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return PortfolioGroupsResponse(
        view_currency=view_currency,
        fields=field_list,
        total_value=sum((g.total_value for g in groups), Decimal("0")),
        groups=[AssetGroupResponse(**asdict(g)) for g in groups],
        warnings=fx_warnings(missing_fx_currencies(assets, fx_rates, view_currency)),
    )


@router.get("/hierarchy", response_model=HierarchyResponse)
def get_hierarchy(
    currency: Optional[str] = None,
    criteria: AssetFilter = Depends(get_asset_filter),
    db: Session = Depends(get_db),
):
    """Class → sub-class → name totals."""
    view_currency = parse_view_currency(currency, settings.DEFAULT_VIEW_CURRENCY)
    assets = _load(db, criteria)
    fx_rates = FXRateService.load_table(db)
    result = build_hierarchy(assets, fx_rates, view_currency)
    return HierarchyResponse(
        view_currency=view_currency,
        classes=[ClassTotalResponse(**asdict(c)) for c in result.classes],
        grand_total=result.grand_total,
        warnings=fx_warnings(missing_fx_currencies(assets, fx_rates, view_currency)),
    )


@router.get("/liquidity", response_model=LiquidityMatrixResponse)
def get_liquidity(
    currency: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Liquidity category × beneficiary matrix."""
    view_currency = parse_view_currency(currency, settings.DEFAULT_VIEW_CURRENCY)
    assets = _load(db)
    fx_rates = FXRateService.load_table(db)
    matrix = calculate_liquidity_matrix(
        assets,
        LiquiditySettingsService.list_limited(db),
        settings.FUNDS_ASSET_NAMES,
        fx_rates,
        view_currency,
    )
    warnings = fx_warnings(missing_fx_currencies(assets, fx_rates, view_currency))
    if matrix.excluded_count:
        warnings.append(f"{matrix.excluded_count} holdings matched no liquidity category")
    return LiquidityMatrixResponse(
        view_currency=view_currency,
        categories=LIQUIDITY_CATEGORIES,
        beneficiaries=BENEFICIARIES,
        matrix=matrix.matrix,
        row_totals=matrix.row_totals,
        column_totals=matrix.column_totals,
        grand_total=matrix.grand_total,
        excluded_count=matrix.excluded_count,
        category_descriptions=LIQUIDITY_CATEGORY_DESCRIPTIONS,
        warnings=warnings,
    )


@router.post("/projection", response_model=ProjectionResponse)
def run_projection(body: ProjectionRequest, db: Session = Depends(get_db)):
    """Project the portfolio over the current, +1, +2, +3 and later buckets."""
    view_currency = parse_view_currency(body.view_currency, settings.DEFAULT_VIEW_CURRENCY)
    years = LiquiditySettingsService.get_liquidation_years(db)
    if body.liquidation_years:
        try:
            years.update(
                {name: validate_liquidation_year(y) for name, y in body.liquidation_years.items()}
            )
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))

    config = ProjectionConfig(
        public_equity_irr=body.public_equity_irr,
        commodities_irr=body.commodities_irr,
        yearly_spending=body.yearly_spending,
        spending_currency=body.spending_currency,
        toggles=ProjectionToggles(
            classes=body.toggles.classes,
            sub_classes=body.toggles.sub_classes,
            names=body.toggles.names,
        ),
        liquidation_years=years,
        current_year=body.current_year,
    )
    assets = _load(db)
    fx_rates = FXRateService.load_table(db)
    result = project_portfolio(assets, fx_rates, view_currency, config)

    if body.save_settings:
        saved = ProjectionSettings(**body.model_dump(include=set(ProjectionSettings.model_fields)))
        ProjectionSettingsService.save(db, saved.model_dump(mode="json"))

    return ProjectionResponse(
        view_currency=view_currency,
        fixed_income_rate=result.fixed_income_rate,
        buckets=[
            ProjectionBucketResponse(**asdict(b), total=b.total) for b in result.buckets
        ],
        later_liquid_total=result.later_liquid_total,
        included_names=result.included_names,
        warnings=fx_warnings(missing_fx_currencies(assets, fx_rates, view_currency)),
    )
