"""Pydantic schemas for portfolio projections."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from config import settings


class ProjectionToggleSettings(BaseModel):
    """Real Estate / Private Equity inclusion switches.

    ``sub_classes`` keys are ``"<class>|<sub_class>"``.
    """

    classes: dict[str, bool] = {}
    sub_classes: dict[str, bool] = {}
    names: dict[str, bool] = {}


class ProjectionSettings(BaseModel):
    """Growth and spending assumptions, persisted as the last-used config."""

    public_equity_irr: Decimal = Field(
        default_factory=lambda: Decimal(str(settings.DEFAULT_EQUITY_IRR))
    )
    commodities_irr: Decimal = Field(
        default_factory=lambda: Decimal(str(settings.DEFAULT_COMMODITIES_IRR))
    )
    yearly_spending: Decimal = Field(default=Decimal("0"), ge=0)
    spending_currency: str = "USD"
    toggles: ProjectionToggleSettings = ProjectionToggleSettings()


class ProjectionRequest(ProjectionSettings):
    """Run a projection. Stored liquidation years apply unless overridden."""

    view_currency: Optional[str] = None
    current_year: Optional[int] = None
    liquidation_years: Optional[dict[str, str]] = None
    save_settings: bool = False


class ProjectionBucketResponse(BaseModel):
    label: str
    year: Optional[int] = None
    offset: int
    cash: Decimal
    fixed_income: Decimal
    public_equity: Decimal
    commodities: Decimal
    real_estate: Decimal
    private_equity_factored: Decimal
    private_equity_potential: Decimal
    spending: Decimal
    total: Decimal


class ProjectionResponse(BaseModel):
    view_currency: str
    fixed_income_rate: Decimal  # Percent
    buckets: list[ProjectionBucketResponse]
    later_liquid_total: Decimal
    included_names: list[str]
    warnings: list[str] = []
