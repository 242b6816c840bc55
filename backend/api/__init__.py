"""API route handlers."""
from . import (
    account_updates,
    assets,
    auth,
    fx_rates,
    liquidity,
    market_data,
    pending_assets,
    portfolio,
    projection_settings,
    snapshots,
)

__all__ = [
    "account_updates",
    "assets",
    "auth",
    "fx_rates",
    "liquidity",
    "market_data",
    "pending_assets",
    "portfolio",
    "projection_settings",
    "snapshots",
]
