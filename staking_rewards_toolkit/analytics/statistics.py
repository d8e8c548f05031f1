"""Windowed statistics over epoch series."""

from typing import Iterable, List, Optional, Sequence

from staking_rewards_toolkit.analytics.models import (
    GlobalStats,
    ProviderSummary,
    WindowStats,
)
from staking_rewards_toolkit.rewards.models import EpochReward, EpochTotal, Provider
from staking_rewards_toolkit.shared.constants import ChartConstants


def window_stats(values: Sequence[float], n: int) -> WindowStats:
    """
    Average, min and max over the last `n` values.

    Args:
        values: Values ordered by ascending epoch
        n: Window size; fewer values are used if the series is shorter

    Returns:
        WindowStats, all zeros for an empty window
    """
    if n < 1 or not values:
        return WindowStats()
    window = list(values[-n:])
    return WindowStats(
        avg=sum(window) / len(window),
        min=min(window),
        max=max(window),
    )


def _totals_ascending(totals: Iterable[EpochTotal]) -> List[float]:
    return [t.total_reward for t in sorted(totals, key=lambda t: t.epoch)]


def calculate_global_stats(totals: Sequence[EpochTotal]) -> GlobalStats:
    """Total rewards plus last-7 and last-30 epoch stats of the global aggregate."""
    values = _totals_ascending(totals)
    short_window, long_window = ChartConstants.STATS_WINDOWS
    return GlobalStats(
        total_rewards=sum(values),
        last_7=window_stats(values, short_window),
        last_30=window_stats(values, long_window),
    )


def last_rewarded_epoch(records: Iterable[EpochReward]) -> Optional[int]:
    epochs = [r.epoch for r in records]
    return max(epochs) if epochs else None


def is_currently_staked(
    last_epoch: Optional[int], current_epoch: Optional[int]
) -> bool:
    """True when the provider paid out in the current or previous epoch."""
    if last_epoch is None or not current_epoch:
        return False
    return last_epoch >= current_epoch - 1


def summarize_provider(
    provider: Provider,
    totals: Sequence[EpochTotal],
    records: Sequence[EpochReward],
    current_epoch: Optional[int],
) -> ProviderSummary:
    """
    Build the focus-provider summary.

    Args:
        provider: The focused provider
        totals: Per-epoch totals of that provider for the selected wallets
        records: The provider's selected records (for the last epoch)
        current_epoch: Network epoch, if known
    """
    values = _totals_ascending(totals)
    last_epoch = last_rewarded_epoch(records)
    short_window, long_window = ChartConstants.STATS_WINDOWS
    return ProviderSummary(
        provider=provider,
        total_rewards=sum(values),
        last_7=window_stats(values, short_window),
        last_30=window_stats(values, long_window),
        last_epoch=last_epoch,
        currently_staked=is_currently_staked(last_epoch, current_epoch),
    )
