"""
Raw payload shapes returned by the external services.

These describe JSON as it arrives; the parsed, validated forms live in
``rewards.models`` and ``governance.models``.
"""

from typing import Dict, List, TypedDict, Union

# =============================================================================
# REWARDS SERVICE
# =============================================================================


class IdentityInfoPayload(TypedDict, total=False):
    """Provider identity metadata."""

    name: str  # Display name
    avatar: str  # Avatar URL
    description: str
    website: str


class ProviderPayload(TypedDict, total=False):
    """One entry of providersWithIdentityInfo."""

    provider: str  # Staking provider contract address
    owner: str  # Wallet entitled to the owner bonus
    identity: str  # Identity key
    identityInfo: IdentityInfoPayload
    apr: float
    serviceFee: float


class EpochRewardPayload(TypedDict, total=False):
    """One epoch of rewards for a (wallet, provider) pair."""

    epoch: int
    totalStaked: Union[float, str]  # Staked amount at that epoch
    epochUserRewards: Union[float, str]  # Staker share
    ownerRewards: Union[float, str]  # Owner bonus for the provider
    epochUserRewardsUsd: Union[float, str]
    epochOwnerRewardsUsd: Union[float, str]
    apr: Union[float, str]
    timestamp: int


class RewardsPayload(TypedDict):
    """Body of GET /user/rewards/{address}."""

    currentEpoch: int
    providersFullRewardsData: Dict[str, List[EpochRewardPayload]]
    totalRewards: float
    totalRewardsPerProvider: Dict[str, float]
    providersWithIdentityInfo: List[ProviderPayload]


# =============================================================================
# GOVERNANCE SERVICE
# =============================================================================


class VotePayload(TypedDict, total=False):
    """One voter in the governance snapshot."""

    address: str
    herotag: str
    vote: str  # Full-precision power as a string
    voteShort: float  # Power in native units
    share: float  # Share of own side, in percent
    shareTotal: float  # Share of all votes, in percent


class GovernanceVotesPayload(TypedDict):
    """Body of GET /scripts/governance-votes."""

    orderedGovernanceVotesByAddressYes: List[VotePayload]
    orderedGovernanceVotesByAddressNo: List[VotePayload]
    totalVotedYes: Union[float, str]
    totalVotedYesShort: Union[float, str]
    totalVotedNo: Union[float, str]
    totalVotedNoShort: Union[float, str]
    totalVoted: Union[float, str]
    totalVotedShort: Union[float, str]
