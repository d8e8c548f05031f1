"""
Unit tests for DashboardController: derived views and selective recompute.
"""

import pytest

from staking_rewards_toolkit.dashboard.controller import (
    DashboardController,
    ViewParams,
)
from staking_rewards_toolkit.rewards.models import (
    Currency,
    DisplayMode,
    RewardsResponse,
    ViewMode,
)
from tests.conftest import (
    OWNER,
    PROVIDER_1,
    PROVIDER_2,
    WALLET_A,
    WALLET_B,
    make_record,
    make_rewards_payload,
)


class FakeStore:
    def __init__(self, responses):
        self.data = responses

    def responses(self):
        return self.data


def build_responses():
    wallet_a = make_rewards_payload(
        {
            PROVIDER_1: [
                make_record(epoch, user=1.0, owner=0.5, staked=10)
                for epoch in range(100, 140)
            ],
            PROVIDER_2: [make_record(120, user=2.0, owner=0.2, staked=5)],
        },
        {PROVIDER_1: OWNER, PROVIDER_2: WALLET_B},
        current_epoch=140,
        names={PROVIDER_1: "Alpha", PROVIDER_2: "Beta"},
    )
    owner = make_rewards_payload(
        {PROVIDER_1: [make_record(110, user=3.0, owner=0.5, staked=30)]},
        {PROVIDER_1: OWNER},
        current_epoch=140,
        names={PROVIDER_1: "Alpha"},
    )
    return {
        WALLET_A: RewardsResponse.from_dict(wallet_a, WALLET_A),
        OWNER: RewardsResponse.from_dict(owner, OWNER),
    }


@pytest.fixture
def store():
    return FakeStore(build_responses())


@pytest.fixture
def controller(store):
    return DashboardController(store)


class TestViewParams:
    """Tests for parameter validation."""

    def test_defaults(self):
        params = ViewParams()

        assert params.display_mode is DisplayMode.DAILY
        assert params.granularity == 1
        assert params.currency is Currency.NATIVE
        assert params.view_mode is ViewMode.REWARDS

    def test_strings_coerced(self):
        params = ViewParams(display_mode="cumulative", currency="usd", view_mode="staked")

        assert params.display_mode is DisplayMode.CUMULATIVE
        assert params.currency is Currency.USD
        assert params.view_mode is ViewMode.STAKED

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"granularity": 3},
            {"granularity": "7"},
            {"granularity": True},
            {"display_mode": "weekly"},
            {"target_points": 0},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            ViewParams(**kwargs)


class TestDerivedViews:
    """Tests for the derived content."""

    def test_global_views(self, controller):
        views = controller.views([WALLET_A, OWNER])

        assert views.current_epoch == 140
        assert [p.label for p in views.providers] == ["Alpha", "Beta"]
        assert views.provider_owners == {PROVIDER_1: OWNER, PROVIDER_2: WALLET_B}
        assert views.provider_summary is None
        totals = {t.epoch: t.total_reward for t in views.epoch_totals}
        # Wallet A's record plus the owner bonus, plus the owner's own reward
        assert totals[110] == pytest.approx(1.0 + 0.5 + 3.0)
        for point in views.series:
            assert point.total == pytest.approx(totals[point.epoch])

    def test_focus_provider(self, controller):
        views = controller.views([WALLET_A], focus_provider=PROVIDER_2)

        assert list(views.provider_data) == [PROVIDER_2]
        assert [p.epoch for p in views.series] == [120]
        assert views.provider_summary.provider.label == "Beta"
        assert views.provider_summary.total_rewards == 2.0
        assert views.provider_summary.currently_staked is False
        # Global stats ignore the focus
        assert views.global_stats.total_rewards == pytest.approx(42.0)

    def test_staked_view(self, controller):
        params = ViewParams(view_mode=ViewMode.STAKED)

        views = controller.views([WALLET_A], params=params)

        by_epoch = {p.epoch: p.values[WALLET_A] for p in views.series}
        assert by_epoch[120] == 15
        # Distribution always describes rewards
        assert views.distribution[0].total == pytest.approx(42.0)

    def test_cumulative_weekly(self, controller):
        params = ViewParams(display_mode=DisplayMode.CUMULATIVE, granularity=7)

        views = controller.views([WALLET_A], params=params)

        assert [p.epoch for p in views.transformed] == list(range(100, 140, 7))
        assert views.transformed[-1].values[WALLET_A] == pytest.approx(42.0)
        assert views.y_domain == (0.0, pytest.approx(46.2))

    def test_downsampled_display(self, controller):
        params = ViewParams(target_points=10)

        views = controller.views([WALLET_A], params=params)

        assert len(views.series) == 40
        assert len(views.display) == 10

    def test_empty_selection(self, controller):
        views = controller.views([])

        assert views.series == []
        assert views.providers == []
        assert views.current_epoch is None
        assert views.y_domain == (0.0, 1.0)
        assert views.global_stats.total_rewards == 0

    def test_distribution(self, controller):
        views = controller.views([WALLET_A, OWNER])

        assert [s.address for s in views.distribution] == [WALLET_A, OWNER]
        assert sum(s.percentage for s in views.distribution) == pytest.approx(100)


class TestMemoization:
    """Views are recomputed only when their inputs change."""

    def test_unchanged_inputs_return_same_object(self, controller):
        first = controller.views([WALLET_A, OWNER])
        second = controller.views([WALLET_A, OWNER])

        assert second is first

    def test_new_dict_with_same_payloads_is_not_a_change(self, controller, store):
        first = controller.views([WALLET_A])
        store.data = dict(store.data)

        assert controller.views([WALLET_A]) is first

    def test_display_change_skips_aggregation(self, controller):
        first = controller.views([WALLET_A])
        series_runs = controller.reward_series.computations
        owner_runs = controller.owners.computations

        second = controller.views(
            [WALLET_A], params=ViewParams(display_mode=DisplayMode.CUMULATIVE)
        )

        assert second is not first
        assert second.series is first.series
        assert controller.reward_series.computations == series_runs
        assert controller.owners.computations == owner_runs
        assert controller.accumulated.computations == 2

    def test_granularity_change_keeps_cumulative(self, controller):
        params = ViewParams(display_mode=DisplayMode.CUMULATIVE)
        controller.views([WALLET_A], params=params)
        runs = controller.accumulated.computations

        controller.views([WALLET_A], params=ViewParams(
            display_mode=DisplayMode.CUMULATIVE, granularity=14
        ))

        assert controller.accumulated.computations == runs
        assert controller.bucketed.computations == 2

    def test_focus_change_keeps_store_derivations(self, controller):
        controller.views([WALLET_A])
        owners = controller.owners.computations
        global_totals = controller.global_totals.computations

        controller.views([WALLET_A], focus_provider=PROVIDER_1)

        assert controller.owners.computations == owners
        assert controller.global_totals.computations == global_totals
        assert controller.provider_data.computations == 2

    def test_selection_change_recomputes(self, controller):
        first = controller.views([WALLET_A])

        second = controller.views([WALLET_A, OWNER])

        assert second.series is not first.series
        assert controller.owners.computations == 2

    def test_duplicate_selection_is_same_selection(self, controller):
        first = controller.views([WALLET_A, OWNER])

        assert controller.views([WALLET_A, OWNER, WALLET_A]) is first

    def test_store_update_recomputes(self, controller, store):
        first = controller.views([WALLET_A])
        store.data = {**store.data, WALLET_A: build_responses()[WALLET_A]}

        second = controller.views([WALLET_A])

        assert second is not first
        assert controller.global_data.computations == 2
