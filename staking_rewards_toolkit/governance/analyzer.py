"""
Governance snapshot analysis.

Normalization recomputes every total from the vote powers, so the shares
always close: bucket shares sum to 1 per non-empty side and global shares
sum to 1 across both sides. The quadratic simulation square-roots each
power and normalizes again; it never reuses the raw totals.

Nothing here raises on data. Non-finite or negative powers count as 0.
"""

import math
from dataclasses import replace
from typing import Dict, Iterable, List, Sequence, Tuple

from staking_rewards_toolkit.governance.models import (
    AggregateStats,
    GovernanceReport,
    GovernanceSnapshot,
    HolderCategory,
    HolderCategoryStat,
    VoteConcentration,
    VoteMode,
    VoteRecord,
    holder_categories_for,
)
from staking_rewards_toolkit.shared.constants import GovernanceConstants
from staking_rewards_toolkit.utils.numeric import clamp, clamp_non_neg, safe_divide


def _order(votes: Iterable[VoteRecord]) -> Tuple[VoteRecord, ...]:
    return tuple(sorted(votes, key=lambda v: (-v.power, v.address)))


def normalize(snapshot: GovernanceSnapshot) -> GovernanceSnapshot:
    """Recompute totals and shares from powers; sort each side by power."""
    yes = [replace(v, power=clamp_non_neg(v.power)) for v in snapshot.yes_votes]
    no = [replace(v, power=clamp_non_neg(v.power)) for v in snapshot.no_votes]

    total_yes = math.fsum(v.power for v in yes)
    total_no = math.fsum(v.power for v in no)
    total = total_yes + total_no

    def shares(votes: List[VoteRecord], bucket_total: float) -> Tuple[VoteRecord, ...]:
        return _order(
            replace(
                v,
                bucket_share=safe_divide(v.power, bucket_total),
                global_share=safe_divide(v.power, total),
            )
            for v in votes
        )

    return GovernanceSnapshot(
        yes_votes=shares(yes, total_yes),
        no_votes=shares(no, total_no),
        total_yes=total_yes,
        total_no=total_no,
        total=total,
    )


def quadratic_simulation(snapshot: GovernanceSnapshot) -> GovernanceSnapshot:
    """Re-weight every vote by sqrt(power), keeping the raw power, then normalize."""

    def reweight(votes: Sequence[VoteRecord]) -> Tuple[VoteRecord, ...]:
        return tuple(
            replace(
                v,
                power=math.sqrt(clamp_non_neg(v.power)),
                raw_power=clamp_non_neg(v.original_power),
            )
            for v in votes
        )

    return normalize(
        GovernanceSnapshot(
            yes_votes=reweight(snapshot.yes_votes),
            no_votes=reweight(snapshot.no_votes),
        )
    )


def vote_concentration(
    snapshot: GovernanceSnapshot, k: int = GovernanceConstants.TOP_K
) -> VoteConcentration:
    """
    Share of participation held by the top-K voters of each side.

    Expects a normalized snapshot (sides sorted by power).
    """
    top_yes = clamp(
        sum(v.global_share for v in snapshot.yes_votes[:k]) * 100.0, 0.0, 100.0
    )
    top_no = clamp(
        sum(v.global_share for v in snapshot.no_votes[:k]) * 100.0, 0.0, 100.0
    )
    return VoteConcentration(
        top_yes=top_yes,
        top_no=top_no,
        others=max(0.0, 100.0 - top_yes - top_no),
        k=k,
    )


def categorize(power: float, categories: Sequence[HolderCategory]) -> HolderCategory:
    """The category whose [min, max) holds `power`; 0 and bad values go first."""
    safe = clamp_non_neg(power)
    for category in categories:
        if category.contains(safe):
            return category
    return categories[-1]


def holder_category_stats(
    snapshot: GovernanceSnapshot,
    categories: Sequence[HolderCategory],
    omit_empty: bool = False,
) -> List[HolderCategoryStat]:
    """
    Distribution of voters and power across holder categories.

    Each address is placed once, by its combined YES + NO power, so the
    categories partition the voters: per-category total counts add up to
    the number of unique voters.
    A category's YES and NO power follow that combined placement, so an
    address voting on both sides adds both powers to the same category.
    """
    yes_power: Dict[str, float] = {}
    no_power: Dict[str, float] = {}
    for vote in snapshot.yes_votes:
        yes_power[vote.address] = yes_power.get(vote.address, 0.0) + clamp_non_neg(
            vote.power
        )
    for vote in snapshot.no_votes:
        no_power[vote.address] = no_power.get(vote.address, 0.0) + clamp_non_neg(
            vote.power
        )

    voters = list(dict.fromkeys(list(yes_power) + list(no_power)))
    total_yes_power = sum(yes_power.values())
    total_no_power = sum(no_power.values())
    total_power = total_yes_power + total_no_power

    buckets: Dict[str, List[str]] = {c.id: [] for c in categories}
    for address in voters:
        combined = yes_power.get(address, 0.0) + no_power.get(address, 0.0)
        buckets[categorize(combined, categories).id].append(address)

    stats = []
    for category in categories:
        members = buckets[category.id]
        yes_members = [a for a in members if a in yes_power]
        no_members = [a for a in members if a in no_power]
        cat_yes_power = sum(yes_power[a] for a in yes_members)
        cat_no_power = sum(no_power[a] for a in no_members)
        stat = HolderCategoryStat(
            category=category,
            yes_count=len(yes_members),
            no_count=len(no_members),
            total_count=len(members),
            yes_power=cat_yes_power,
            no_power=cat_no_power,
            total_power=cat_yes_power + cat_no_power,
            share_yes_voters=safe_divide(len(yes_members), len(yes_power)),
            share_no_voters=safe_divide(len(no_members), len(no_power)),
            share_total_voters=safe_divide(len(members), len(voters)),
            share_yes_power=safe_divide(cat_yes_power, total_yes_power),
            share_no_power=safe_divide(cat_no_power, total_no_power),
            share_total_power=safe_divide(cat_yes_power + cat_no_power, total_power),
        )
        if omit_empty and stat.total_count == 0:
            continue
        stats.append(stat)
    return stats


def aggregate_stats(snapshot: GovernanceSnapshot) -> AggregateStats:
    """YES and NO totals with their share of total participation."""
    yes = clamp_non_neg(snapshot.total_yes)
    no = clamp_non_neg(snapshot.total_no)
    total = clamp_non_neg(snapshot.total)
    return AggregateStats(
        total=total,
        yes=yes,
        no=no,
        yes_share=safe_divide(yes, total),
        no_share=safe_divide(no, total),
    )


def analyze(
    snapshot: GovernanceSnapshot, mode: VoteMode = VoteMode.CURRENT
) -> GovernanceReport:
    """
    Full governance view for a mode.

    The quadratic mode uses the coarser simulation categories and hides
    empty ones.
    """
    quadratic = mode is VoteMode.QUADRATIC
    dataset = quadratic_simulation(snapshot) if quadratic else normalize(snapshot)
    return GovernanceReport(
        mode=mode,
        snapshot=dataset,
        aggregate=aggregate_stats(dataset),
        concentration=vote_concentration(dataset),
        categories=holder_category_stats(
            dataset, holder_categories_for(mode), omit_empty=quadratic
        ),
    )
