"""
Governance vote models and holder-category presets.

Powers are expressed in native units (the ``voteShort`` field of the votes
endpoint). Shares on VoteRecord are ratios in [0, 1]; concentration figures
are percentages in [0, 100], as they are displayed.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from staking_rewards_toolkit.utils.numeric import clamp_non_neg


class VoteMode(Enum):
    """Which weighting the governance view shows."""

    CURRENT = "current"  # Raw stake-weighted votes
    QUADRATIC = "quadratic"  # Square-root re-weighted simulation


@dataclass(frozen=True)
class VoteRecord:
    """One voter on one side of a proposal."""

    address: str
    power: float  # Voting power after any re-weighting
    bucket_share: float = 0.0  # Fraction of own side's power
    global_share: float = 0.0  # Fraction of YES + NO power
    display_name: Optional[str] = None  # Herotag, when known
    raw_power: Optional[float] = None  # Power before re-weighting

    @property
    def original_power(self) -> float:
        return self.power if self.raw_power is None else self.raw_power

    @classmethod
    def from_dict(cls, data: Any) -> Optional["VoteRecord"]:
        """Parse a vote payload; None when it has no usable address."""
        if not isinstance(data, dict):
            return None
        address = data.get("address")
        if not isinstance(address, str) or not address:
            return None
        herotag = data.get("herotag")
        return cls(
            address=address,
            power=clamp_non_neg(data.get("voteShort")),
            bucket_share=clamp_non_neg(data.get("share")) / 100.0,
            global_share=clamp_non_neg(data.get("shareTotal")) / 100.0,
            display_name=herotag if isinstance(herotag, str) and herotag else None,
        )


@dataclass(frozen=True)
class GovernanceSnapshot:
    """YES and NO votes plus their totals, in native units."""

    yes_votes: Tuple[VoteRecord, ...] = ()
    no_votes: Tuple[VoteRecord, ...] = ()
    total_yes: float = 0.0
    total_no: float = 0.0
    total: float = 0.0

    @property
    def voter_count(self) -> int:
        return len({v.address for v in self.yes_votes + self.no_votes})

    @classmethod
    def from_dict(cls, data: Any) -> "GovernanceSnapshot":
        """
        Build a snapshot from a votes payload.

        Malformed votes are skipped and missing totals read as zero; use the
        service for strict validation.
        """
        if not isinstance(data, dict):
            return cls()

        def votes(key: str) -> Tuple[VoteRecord, ...]:
            raw = data.get(key)
            if not isinstance(raw, list):
                return ()
            parsed = (VoteRecord.from_dict(v) for v in raw)
            return tuple(v for v in parsed if v is not None)

        return cls(
            yes_votes=votes("orderedGovernanceVotesByAddressYes"),
            no_votes=votes("orderedGovernanceVotesByAddressNo"),
            total_yes=clamp_non_neg(data.get("totalVotedYesShort")),
            total_no=clamp_non_neg(data.get("totalVotedNoShort")),
            total=clamp_non_neg(data.get("totalVotedShort")),
        )


@dataclass(frozen=True)
class HolderCategory:
    """Half-open power range [min_egld, max_egld)."""

    id: str
    label: str
    min_egld: float
    max_egld: float

    def contains(self, power: float) -> bool:
        return self.min_egld <= power < self.max_egld


LIVE_HOLDER_CATEGORIES: Tuple[HolderCategory, ...] = (
    HolderCategory("lt10", "< 10 EGLD", 0, 10),
    HolderCategory("10to100", "10 - < 100 EGLD", 10, 100),
    HolderCategory("100to1000", "100 - < 1,000 EGLD", 100, 1000),
    HolderCategory("1kto5k", "1,000 - < 5,000 EGLD", 1000, 5000),
    HolderCategory("5kto10k", "5,000 - < 10,000 EGLD", 5000, 10000),
    HolderCategory("10kto15k", "10,000 - < 15,000 EGLD", 10000, 15000),
    HolderCategory("15kto25k", "15,000 - < 25,000 EGLD", 15000, 25000),
    HolderCategory("25kto50k", "25,000 - < 50,000 EGLD", 25000, 50000),
    HolderCategory("gte50k", ">= 50,000 EGLD", 50000, math.inf),
)

# Square roots compress the range, so the simulation uses coarser buckets
SIMULATION_HOLDER_CATEGORIES: Tuple[HolderCategory, ...] = (
    HolderCategory("lt10", "< 10 EGLD", 0, 10),
    HolderCategory("10to100", "10 - < 100 EGLD", 10, 100),
    HolderCategory("100to1000", "100 - < 1,000 EGLD", 100, 1000),
    HolderCategory("1kto5k", "1,000 - < 5,000 EGLD", 1000, 5000),
    HolderCategory("5kto10k", "5,000 - < 10,000 EGLD", 5000, 10000),
    HolderCategory("gte10k", ">= 10,000 EGLD", 10000, math.inf),
)


def holder_categories_for(mode: VoteMode) -> Tuple[HolderCategory, ...]:
    if mode is VoteMode.QUADRATIC:
        return SIMULATION_HOLDER_CATEGORIES
    return LIVE_HOLDER_CATEGORIES


@dataclass(frozen=True)
class HolderCategoryStat:
    """Voters and power falling into one holder category. Shares are ratios."""

    category: HolderCategory
    yes_count: int = 0
    no_count: int = 0
    total_count: int = 0
    yes_power: float = 0.0
    no_power: float = 0.0
    total_power: float = 0.0
    share_yes_voters: float = 0.0
    share_no_voters: float = 0.0
    share_total_voters: float = 0.0
    share_yes_power: float = 0.0
    share_no_power: float = 0.0
    share_total_power: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.category.id,
            "label": self.category.label,
            "yesCount": self.yes_count,
            "noCount": self.no_count,
            "totalCount": self.total_count,
            "yesVotePower": self.yes_power,
            "noVotePower": self.no_power,
            "totalVotePower": self.total_power,
            "shareYesVoters": self.share_yes_voters,
            "shareNoVoters": self.share_no_voters,
            "shareTotalVoters": self.share_total_voters,
            "shareYesPower": self.share_yes_power,
            "shareNoPower": self.share_no_power,
            "shareTotalPower": self.share_total_power,
        }


@dataclass(frozen=True)
class VoteConcentration:
    """Top-K share of participation, in percent."""

    top_yes: float
    top_no: float
    others: float
    k: int = 10

    @property
    def top_share(self) -> float:
        return self.top_yes + self.top_no


@dataclass(frozen=True)
class AggregateStats:
    """Participation totals and each side's share of the total (ratios)."""

    total: float
    yes: float
    no: float
    yes_share: float
    no_share: float


@dataclass
class GovernanceReport:
    """Everything the governance view renders for one mode."""

    mode: VoteMode
    snapshot: GovernanceSnapshot  # Normalized for the mode
    aggregate: AggregateStats
    concentration: VoteConcentration
    categories: List[HolderCategoryStat] = field(default_factory=list)
