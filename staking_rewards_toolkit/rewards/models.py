"""
Data models for staking rewards.

`RewardsResponse.from_dict` is the single place where a raw
``/user/rewards/{address}`` payload is validated and typed; everything
downstream works on these dataclasses.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from staking_rewards_toolkit.shared.exceptions import RewardsDataException
from staking_rewards_toolkit.shared.types import EpochRewardPayload, ProviderPayload
from staking_rewards_toolkit.utils.numeric import clamp_non_neg, to_number


class DisplayMode(Enum):
    """How reward series are accumulated before display."""

    DAILY = "daily"  # One value per epoch
    CUMULATIVE = "cumulative"  # Running sum since the first epoch


class Currency(Enum):
    """Unit of reward amounts."""

    NATIVE = "native"  # EGLD
    USD = "usd"  # USD value at payout time


class ViewMode(Enum):
    """Which quantity the dashboard charts."""

    REWARDS = "rewards"  # Flow: rewards earned per epoch
    STAKED = "staked"  # Stock: amount staked at each epoch


@dataclass(frozen=True)
class EpochReward:
    """
    Rewards for one (wallet, provider, epoch).

    user_reward is the wallet's staker share. owner_reward is the provider's
    owner bonus for that epoch, payable only to the provider owner, and is
    repeated on every staker's record.
    """

    epoch: int
    user_reward: float = 0.0
    owner_reward: float = 0.0
    staked: float = 0.0
    apr_pct: Optional[float] = None
    timestamp: Optional[int] = None
    user_reward_usd: float = 0.0
    owner_reward_usd: float = 0.0
    wallet_address: str = ""

    @classmethod
    def from_dict(
        cls, data: EpochRewardPayload, wallet_address: str = ""
    ) -> Optional["EpochReward"]:
        """Parse one epoch record; returns None when the epoch is unusable."""
        if not isinstance(data, dict):
            return None
        raw_epoch = data.get("epoch")
        if raw_epoch is None or isinstance(raw_epoch, bool):
            return None
        epoch = int(to_number(raw_epoch))
        if epoch < 0:
            return None

        apr = data.get("apr")
        timestamp = data.get("timestamp")
        return cls(
            epoch=epoch,
            user_reward=clamp_non_neg(data.get("epochUserRewards")),
            owner_reward=clamp_non_neg(data.get("ownerRewards")),
            staked=clamp_non_neg(data.get("totalStaked")),
            apr_pct=to_number(apr) if apr is not None else None,
            timestamp=int(to_number(timestamp))
            if timestamp is not None
            else None,
            user_reward_usd=clamp_non_neg(data.get("epochUserRewardsUsd")),
            owner_reward_usd=clamp_non_neg(data.get("epochOwnerRewardsUsd")),
            wallet_address=wallet_address,
        )


@dataclass(frozen=True)
class Provider:
    """A staking provider and the wallet entitled to its owner bonus."""

    provider_address: str
    owner_address: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    identity: Optional[str] = None
    apr: Optional[float] = None
    service_fee: Optional[float] = None

    @property
    def label(self) -> str:
        return self.display_name or self.identity or self.provider_address

    @classmethod
    def from_dict(cls, data: ProviderPayload) -> Optional["Provider"]:
        if not isinstance(data, dict):
            return None
        provider = data.get("provider")
        if not isinstance(provider, str) or not provider:
            return None
        owner = data.get("owner")
        info = data.get("identityInfo")
        info = info if isinstance(info, dict) else {}
        apr = data.get("apr")
        fee = data.get("serviceFee")
        return cls(
            provider_address=provider,
            owner_address=owner if isinstance(owner, str) else "",
            display_name=info.get("name") or None,
            avatar_url=info.get("avatar") or None,
            identity=data.get("identity") or None,
            apr=to_number(apr) if apr is not None else None,
            service_fee=to_number(fee) if fee is not None else None,
        )


@dataclass
class RewardsResponse:
    """Parsed body of the rewards endpoint for one wallet."""

    wallet_address: str
    current_epoch: int
    providers_rewards: Dict[str, List[EpochReward]]  # provider -> records
    total_rewards: float
    total_rewards_per_provider: Dict[str, float]
    providers: List[Provider] = field(default_factory=list)

    @property
    def provider_owners(self) -> Dict[str, str]:
        return {
            p.provider_address: p.owner_address
            for p in self.providers
            if p.owner_address
        }

    @classmethod
    def from_dict(
        cls, data: Any, wallet_address: str = ""
    ) -> "RewardsResponse":
        """
        Validate and parse a rewards payload.

        Raises:
            RewardsDataException: if the top-level structure is invalid
        """
        if not isinstance(data, dict):
            raise RewardsDataException("Invalid API response structure")

        full = data.get("providersFullRewardsData")
        total = data.get("totalRewards")
        per_provider = data.get("totalRewardsPerProvider")
        providers = data.get("providersWithIdentityInfo")
        if (
            not isinstance(full, dict)
            or isinstance(total, bool)
            or not isinstance(total, (int, float))
            or not isinstance(per_provider, dict)
            or not isinstance(providers, list)
        ):
            raise RewardsDataException("Invalid API response structure")

        providers_rewards: Dict[str, List[EpochReward]] = {}
        for provider_address, records in full.items():
            if not isinstance(records, list):
                continue
            parsed = [
                EpochReward.from_dict(r, wallet_address) for r in records
            ]
            providers_rewards[provider_address] = [
                r for r in parsed if r is not None
            ]

        parsed_providers = [Provider.from_dict(p) for p in providers]

        return cls(
            wallet_address=wallet_address,
            current_epoch=int(to_number(data.get("currentEpoch"))),
            providers_rewards=providers_rewards,
            total_rewards=to_number(total),
            total_rewards_per_provider={
                k: to_number(v) for k, v in per_provider.items()
            },
            providers=[p for p in parsed_providers if p is not None],
        )


@dataclass
class SeriesPoint:
    """One epoch (or bucket) of a per-wallet series."""

    epoch: int  # First epoch of the bucket
    values: Dict[str, float]  # wallet -> value, every tracked wallet present

    @property
    def total(self) -> float:
        return sum(self.values.values())

    def to_dict(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {"epoch": self.epoch}
        row.update(self.values)
        row["_total"] = self.total
        return row


@dataclass(frozen=True)
class EpochTotal:
    """Global aggregate for one epoch."""

    epoch: int
    total_reward: float


@dataclass(frozen=True)
class WalletShare:
    """A wallet's share of the displayed total."""

    address: str
    total: float
    percentage: float  # 0-100
