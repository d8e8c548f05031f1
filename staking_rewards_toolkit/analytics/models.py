"""Data models for reward summary statistics."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from staking_rewards_toolkit.rewards.models import Provider


@dataclass(frozen=True)
class WindowStats:
    """Average / min / max over the last N epochs."""

    avg: float = 0.0
    min: float = 0.0
    max: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"avg": self.avg, "min": self.min, "max": self.max}


@dataclass(frozen=True)
class GlobalStats:
    """Summary cards for the global dashboard."""

    total_rewards: float
    last_7: WindowStats
    last_30: WindowStats

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRewards": self.total_rewards,
            "avg7": self.last_7.avg,
            "minMax7": {"min": self.last_7.min, "max": self.last_7.max},
            "avg30": self.last_30.avg,
            "minMax30": {"min": self.last_30.min, "max": self.last_30.max},
        }


@dataclass(frozen=True)
class ProviderSummary:
    """Summary of one provider for the selected wallets."""

    provider: Provider
    total_rewards: float
    last_7: WindowStats
    last_30: WindowStats
    last_epoch: Optional[int]  # Most recent rewarded epoch
    currently_staked: bool  # Rewarded in the current or previous epoch

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider.provider_address,
            "owner": self.provider.owner_address,
            "name": self.provider.label,
            "totalRewards": self.total_rewards,
            "last7": self.last_7.to_dict(),
            "last30": self.last_30.to_dict(),
            "lastEpoch": self.last_epoch,
            "currentlyStaked": self.currently_staked,
        }
