"""
Series transforms applied after aggregation.

Each transform takes a list of SeriesPoint and returns a new list; inputs
are never mutated. Wallet columns keep summing to the point total.
"""

import math
from enum import Enum
from typing import Dict, List, Sequence, Tuple

from staking_rewards_toolkit.rewards.models import DisplayMode, SeriesPoint
from staking_rewards_toolkit.shared.constants import ChartConstants
from staking_rewards_toolkit.utils.numeric import round_preserving_zero


class ChunkMode(Enum):
    """How a chunk of points collapses into one."""

    SUM = "sum"  # Flows, daily granularity
    AVERAGE = "average"  # Flows, display downsampling
    LAST = "last"  # Stocks and cumulative series


def _wallet_order(series: Sequence[SeriesPoint]) -> List[str]:
    order: Dict[str, None] = {}
    for point in series:
        for wallet in point.values:
            order.setdefault(wallet, None)
    return list(order)


def _sorted(series: Sequence[SeriesPoint]) -> List[SeriesPoint]:
    return sorted(series, key=lambda p: p.epoch)


def cumulative(series: Sequence[SeriesPoint]) -> List[SeriesPoint]:
    """Running sum per wallet over ascending epochs. No rounding."""
    wallets = _wallet_order(series)
    running = {w: 0.0 for w in wallets}
    result = []
    for point in _sorted(series):
        for wallet in wallets:
            running[wallet] += point.values.get(wallet, 0.0)
        result.append(SeriesPoint(epoch=point.epoch, values=dict(running)))
    return result


def _collapse(
    chunk: Sequence[SeriesPoint], wallets: Sequence[str], mode: ChunkMode
) -> Dict[str, float]:
    if mode is ChunkMode.LAST:
        last = chunk[-1]
        return {w: last.values.get(w, 0.0) for w in wallets}
    sums = {w: sum(p.values.get(w, 0.0) for p in chunk) for w in wallets}
    if mode is ChunkMode.AVERAGE:
        return {w: v / len(chunk) for w, v in sums.items()}
    return sums


def _chunks(
    series: Sequence[SeriesPoint], size: int
) -> List[Tuple[SeriesPoint, ...]]:
    ordered = _sorted(series)
    return [tuple(ordered[i : i + size]) for i in range(0, len(ordered), size)]


def bucket_by_granularity(
    series: Sequence[SeriesPoint],
    granularity: int,
    mode: ChunkMode = ChunkMode.SUM,
) -> List[SeriesPoint]:
    """
    Merge contiguous runs of `granularity` points into one bucket.

    Buckets are labelled with their first epoch. SUM suits daily flows;
    LAST suits cumulative series and stocks such as staked amounts.
    Granularity 1 returns the series unchanged.
    """
    if granularity <= 1:
        return list(series)
    wallets = _wallet_order(series)
    return [
        SeriesPoint(epoch=chunk[0].epoch, values=_collapse(chunk, wallets, mode))
        for chunk in _chunks(series, granularity)
    ]


def downsample(
    series: Sequence[SeriesPoint],
    target_points: int = ChartConstants.TARGET_POINTS,
    mode: ChunkMode = ChunkMode.AVERAGE,
) -> List[SeriesPoint]:
    """
    Reduce to at most `target_points` points for display.

    Chunks of ceil(n / target_points) points are averaged (daily) or
    reduced to their last point (cumulative). Values are rounded to six
    decimals without ever turning a non-zero into zero.
    """
    if target_points < 1 or len(series) <= target_points:
        return list(series)

    step = math.ceil(len(series) / target_points)
    wallets = _wallet_order(series)
    result = []
    for chunk in _chunks(series, step):
        values = _collapse(chunk, wallets, mode)
        label = chunk[-1].epoch if mode is ChunkMode.LAST else chunk[0].epoch
        result.append(
            SeriesPoint(
                epoch=label,
                values={
                    w: round_preserving_zero(v, ChartConstants.DOWNSAMPLE_DECIMALS)
                    for w, v in values.items()
                },
            )
        )
    return result


def y_domain(
    series: Sequence[SeriesPoint], display_mode: DisplayMode
) -> Tuple[float, float]:
    """Chart Y-axis bounds: [0, max total plus a 10% or 20% buffer]."""
    if not series:
        return (0.0, 1.0)
    max_total = max(0.0, max(p.total for p in series))
    buffer = (
        ChartConstants.Y_DOMAIN_BUFFER_CUMULATIVE
        if display_mode is DisplayMode.CUMULATIVE
        else ChartConstants.Y_DOMAIN_BUFFER_DAILY
    )
    return (0.0, round(max_total * (1 + buffer), 4))
