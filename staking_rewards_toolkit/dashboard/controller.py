"""
DashboardController - derives dashboard views from the rewards store.

The derivation is a fixed chain of memoized stages:

    store + selection -> provider records (optionally one provider)
                      -> per-wallet series (rewards or staked)
                      -> cumulative (cumulative display only)
                      -> granularity buckets
                      -> display downsampling

Each stage caches its last inputs and output. A stage recomputes only when
one of its inputs changed (by identity for computed values, by equality for
parameters), and when nothing changed `views()` returns the very same
DerivedViews object.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from staking_rewards_toolkit.analytics.models import GlobalStats, ProviderSummary
from staking_rewards_toolkit.analytics.statistics import (
    calculate_global_stats,
    summarize_provider,
)
from staking_rewards_toolkit.rewards import aggregation, transforms
from staking_rewards_toolkit.rewards.models import (
    Currency,
    DisplayMode,
    EpochReward,
    EpochTotal,
    Provider,
    SeriesPoint,
    ViewMode,
    WalletShare,
)
from staking_rewards_toolkit.rewards.transforms import ChunkMode
from staking_rewards_toolkit.shared.constants import ChartConstants
from staking_rewards_toolkit.shared.logging import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class ViewParams:
    """
    User-chosen view parameters.

    Strings are accepted for the enum fields. Invalid values raise
    ValueError at construction.
    """

    display_mode: DisplayMode = DisplayMode.DAILY
    granularity: int = 1
    currency: Currency = Currency.NATIVE
    view_mode: ViewMode = ViewMode.REWARDS
    target_points: Optional[int] = ChartConstants.TARGET_POINTS  # None: no downsampling

    def __post_init__(self):
        object.__setattr__(self, "display_mode", DisplayMode(self.display_mode))
        object.__setattr__(self, "currency", Currency(self.currency))
        object.__setattr__(self, "view_mode", ViewMode(self.view_mode))
        if isinstance(self.granularity, bool) or not isinstance(self.granularity, int):
            raise ValueError(f"granularity must be an int, got {self.granularity!r}")
        if self.granularity not in ChartConstants.GRANULARITIES:
            raise ValueError(
                f"granularity must be one of {ChartConstants.GRANULARITIES}, "
                f"got {self.granularity}"
            )
        if self.target_points is not None and self.target_points < 1:
            raise ValueError("target_points must be >= 1")


@dataclass(frozen=True)
class DerivedViews:
    """Everything the presentation layer renders for the current inputs."""

    providers: List[Provider]  # Sorted by total reward, descending
    provider_owners: Dict[str, str]
    provider_totals: Dict[str, float]
    current_epoch: Optional[int]
    provider_data: Dict[str, List[EpochReward]]  # After the focus filter
    epoch_totals: List[EpochTotal]  # Global, or focused provider's
    series: List[SeriesPoint]  # Aggregated per wallet, per epoch
    transformed: List[SeriesPoint]  # After cumulative and bucketing
    display: List[SeriesPoint]  # After downsampling
    y_domain: Tuple[float, float]
    global_stats: GlobalStats
    provider_summary: Optional[ProviderSummary]
    distribution: List[WalletShare]
    params: "ViewParams" = field(default_factory=ViewParams)


_VALUE_TYPES = (str, int, float, bool, tuple, frozenset, Enum, ViewParams, type(None))


def _same(a: Any, b: Any) -> bool:
    if a is b:
        return True
    return isinstance(a, _VALUE_TYPES) and type(a) is type(b) and a == b


class Memo:
    """Single-slot cache for one derivation stage."""

    def __init__(self, name: str, fn: Callable[..., Any]):
        self.name = name
        self._fn = fn
        self._args: Optional[Tuple[Any, ...]] = None
        self._value: Any = None
        self.computations = 0

    def __call__(self, *args: Any) -> Any:
        if self._args is not None and len(args) == len(self._args) and all(
            _same(a, b) for a, b in zip(args, self._args)
        ):
            return self._value
        self._value = self._fn(*args)
        self._args = args
        self.computations += 1
        _logger.debug(f"Recomputed {self.name}")
        return self._value


def _bucket_mode(display_mode: DisplayMode, view_mode: ViewMode) -> ChunkMode:
    if view_mode is ViewMode.STAKED or display_mode is DisplayMode.CUMULATIVE:
        return ChunkMode.LAST
    return ChunkMode.SUM


def _downsample_mode(display_mode: DisplayMode, view_mode: ViewMode) -> ChunkMode:
    if view_mode is ViewMode.STAKED or display_mode is DisplayMode.CUMULATIVE:
        return ChunkMode.LAST
    return ChunkMode.AVERAGE


def _reward_series(
    data, owners, selected, focus, currency
) -> List[SeriesPoint]:
    if focus is not None:
        return aggregation.aggregate_provider_rewards_by_wallet(
            data, focus, owners, selected, currency
        )
    return aggregation.aggregate_rewards_by_wallet(data, owners, selected, currency)


def _accumulate(series, display_mode) -> List[SeriesPoint]:
    if display_mode is DisplayMode.CUMULATIVE:
        return transforms.cumulative(series)
    return series


def _bucket(series, granularity, display_mode, view_mode) -> List[SeriesPoint]:
    if granularity <= 1:
        return series
    return transforms.bucket_by_granularity(
        series, granularity, _bucket_mode(display_mode, view_mode)
    )


def _downsample(series, target_points, display_mode, view_mode) -> List[SeriesPoint]:
    if target_points is None:
        return series
    return transforms.downsample(
        series, target_points, _downsample_mode(display_mode, view_mode)
    )


def _provider_summary(focus, providers, totals, data, current_epoch):
    if focus is None:
        return None
    provider = next(
        (p for p in providers if p.provider_address == focus),
        Provider(provider_address=focus, owner_address=""),
    )
    return summarize_provider(provider, totals, data.get(focus, []), current_epoch)


class DashboardController:
    """
    Read-only consumer of the rewards store.

    Args:
        store: Anything with a ``responses()`` mapping wallet -> RewardsResponse
    """

    def __init__(self, store):
        self._store = store
        self._filtered: Optional[Dict[str, Any]] = None
        self.owners = Memo("owners", aggregation.collect_provider_owners)
        self.provider_totals = Memo("provider_totals", aggregation.merge_provider_totals)
        self.providers = Memo(
            "providers",
            lambda responses, selected, totals: aggregation.sort_providers(
                aggregation.collect_providers(responses, selected), totals
            ),
        )
        self.current_epoch = Memo("current_epoch", aggregation.current_epoch)
        self.global_data = Memo(
            "global_data",
            lambda responses, selected: aggregation.flatten_provider_rewards(
                responses, selected
            ),
        )
        self.provider_data = Memo(
            "provider_data",
            lambda global_data, focus: global_data
            if focus is None
            else {focus: global_data.get(focus, [])},
        )
        self.global_totals = Memo("global_totals", aggregation.aggregate_epoch_totals)
        self.epoch_totals = Memo("epoch_totals", aggregation.aggregate_epoch_totals)
        self.reward_series = Memo("reward_series", _reward_series)
        self.staked_series = Memo("staked_series", aggregation.aggregate_staked_by_wallet)
        self.accumulated = Memo("accumulated", _accumulate)
        self.bucketed = Memo("bucketed", _bucket)
        self.display = Memo("display", _downsample)
        self.y_domain = Memo("y_domain", transforms.y_domain)
        self.global_stats = Memo("global_stats", calculate_global_stats)
        self.provider_summary = Memo("provider_summary", _provider_summary)
        self.distribution = Memo(
            "distribution",
            lambda series: aggregation.wallet_distribution(
                aggregation.wallet_totals(series)
            ),
        )
        self._assemble = Memo("views", self._build_views)

    def _filter_responses(self, responses, selected) -> Dict[str, Any]:
        """Selected wallets' payloads; the previous dict when none changed."""
        filtered = {w: responses[w] for w in selected if w in responses}
        previous = self._filtered
        if (
            previous is not None
            and list(previous) == list(filtered)
            and all(previous[w] is filtered[w] for w in filtered)
        ):
            return previous
        self._filtered = filtered
        return filtered

    @staticmethod
    def _build_views(*parts) -> DerivedViews:
        return DerivedViews(*parts)

    def views(
        self,
        selected: Sequence[str],
        focus_provider: Optional[str] = None,
        params: Optional[ViewParams] = None,
    ) -> DerivedViews:
        """Derive every view for the current store, selection and params."""
        params = params or ViewParams()
        selected = tuple(dict.fromkeys(selected))
        responses = self._filter_responses(self._store.responses(), selected)

        owners = self.owners(responses, selected)
        totals = self.provider_totals(responses, selected)
        providers = self.providers(responses, selected, totals)
        current = self.current_epoch(responses, selected)

        global_data = self.global_data(responses, selected)
        data = self.provider_data(global_data, focus_provider)

        global_totals = self.global_totals(
            global_data, owners, selected, params.currency
        )
        epoch_totals = (
            global_totals
            if focus_provider is None
            else self.epoch_totals(data, owners, selected, params.currency)
        )

        rewards = self.reward_series(
            data, owners, selected, focus_provider, params.currency
        )
        if params.view_mode is ViewMode.STAKED:
            series = self.staked_series(data, selected)
        else:
            series = rewards

        accumulated = self.accumulated(series, params.display_mode)
        bucketed = self.bucketed(
            accumulated, params.granularity, params.display_mode, params.view_mode
        )
        display = self.display(
            bucketed, params.target_points, params.display_mode, params.view_mode
        )

        return self._assemble(
            providers,
            owners,
            totals,
            current,
            data,
            epoch_totals,
            series,
            bucketed,
            display,
            self.y_domain(display, params.display_mode),
            self.global_stats(global_totals),
            self.provider_summary(
                focus_provider, providers, epoch_totals, data, current
            ),
            self.distribution(rewards),
            params,
        )
