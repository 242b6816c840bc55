"""SQLAlchemy ORM models."""

from .account_update_status import AccountUpdateStatus
from .app_session import AppSession
from .asset import Asset
from .fx_rate import FXRate
from .liquidity_setting import AssetLiquidationSetting, LimitedLiquidityAsset
from .pending_asset import PendingAsset
from .portfolio_snapshot import PortfolioSnapshot
from .projection_setting import ProjectionSetting
from .utils import generate_uuid

__all__ = ["AccountUpdateStatus", "AppSession", "Asset", "AssetLiquidationSetting", "FXRate", "LimitedLiquidityAsset", "PendingAsset", "PortfolioSnapshot", "ProjectionSetting", "generate_uuid"]
