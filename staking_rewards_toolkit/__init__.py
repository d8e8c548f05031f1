"""Staking Rewards Toolkit - staking rewards and governance analytics for MultiversX wallets."""

__version__ = "1.0.0"

from .dashboard import StakingDashboard
from .governance import GovernanceVotesService
from .rewards import RewardsService
from .wallets import AddressResolver

__all__ = [
    "StakingDashboard",
    "RewardsService",
    "GovernanceVotesService",
    "AddressResolver",
]
