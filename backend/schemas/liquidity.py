"""Pydantic schemas for liquidity settings."""

from pydantic import BaseModel, field_validator


class LimitedAssetRequest(BaseModel):
    asset_name: str


class LimitedAssetsResponse(BaseModel):
    """Flagged names plus the names that could be flagged."""

    asset_names: list[str]
    eligible_names: list[str]


class LiquidationYearUpdate(BaseModel):
    asset_name: str
    liquidation_year: str  # "2027" or "later"

    @field_validator("liquidation_year", mode="before")
    @classmethod
    def coerce_year(cls, v):
        """Accept bare integers such as 2027."""
        return str(v)


class LiquidationYearsResponse(BaseModel):
    years: dict[str, str]
