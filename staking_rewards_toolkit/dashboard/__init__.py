"""Dashboard core: wallet orchestration, derived views and the session facade."""

from .controller import DashboardController, DerivedViews, ViewParams
from .orchestrator import (
    RewardsStore,
    WalletDataOrchestrator,
    WalletState,
    WalletStatus,
)
from .session import StakingDashboard, WalletSelection

__all__ = [
    "StakingDashboard",
    "WalletSelection",
    "DashboardController",
    "DerivedViews",
    "ViewParams",
    "WalletDataOrchestrator",
    "RewardsStore",
    "WalletState",
    "WalletStatus",
]
