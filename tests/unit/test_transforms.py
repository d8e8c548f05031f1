"""
Unit tests for cumulative, bucketing, downsampling and Y-domain transforms.
"""

import pytest

from staking_rewards_toolkit.rewards.models import DisplayMode, SeriesPoint
from staking_rewards_toolkit.rewards.transforms import (
    ChunkMode,
    bucket_by_granularity,
    cumulative,
    downsample,
    y_domain,
)

A = "wallet-a"
B = "wallet-b"


def make_series(n, start=100, a=lambda i: float(i % 3), b=lambda i: 0.5):
    return [
        SeriesPoint(epoch=start + i, values={A: a(i), B: b(i)}) for i in range(n)
    ]


def column(series, wallet):
    return [p.values[wallet] for p in series]


class TestCumulative:
    """Tests for running sums."""

    def test_running_sum(self):
        series = make_series(4)

        result = cumulative(series)

        assert column(result, A) == [0.0, 1.0, 3.0, 3.0]
        assert column(result, B) == [0.5, 1.0, 1.5, 2.0]

    def test_monotone_per_wallet(self):
        result = cumulative(make_series(50, a=lambda i: (i * 7) % 5))

        for wallet in (A, B):
            values = column(result, wallet)
            assert all(x <= y for x, y in zip(values, values[1:]))

    def test_unsorted_input_is_ordered(self):
        series = list(reversed(make_series(3)))

        result = cumulative(series)

        assert [p.epoch for p in result] == [100, 101, 102]

    def test_input_not_mutated(self):
        series = make_series(3)
        before = [dict(p.values) for p in series]

        cumulative(series)

        assert [p.values for p in series] == before

    def test_not_rounded(self):
        series = [SeriesPoint(epoch=1, values={A: 1e-9})]

        assert cumulative(series)[0].values[A] == 1e-9


class TestBucketing:
    """Tests for granularity bucketing."""

    @pytest.mark.parametrize("granularity", [7, 14, 30])
    def test_sum_law(self, granularity):
        series = make_series(95)

        buckets = bucket_by_granularity(series, granularity, ChunkMode.SUM)

        for wallet in (A, B):
            assert sum(column(buckets, wallet)) == pytest.approx(
                sum(column(series, wallet))
            )

    def test_buckets_labelled_with_first_epoch(self):
        buckets = bucket_by_granularity(make_series(10), 7)

        assert [p.epoch for p in buckets] == [100, 107]

    def test_granularity_one_is_identity(self):
        series = make_series(5)

        assert bucket_by_granularity(series, 1) == series

    @pytest.mark.parametrize("granularity", [7, 14, 30])
    def test_cumulative_bucketing_samples_bucket_ends(self, granularity):
        running = cumulative(make_series(64))

        buckets = bucket_by_granularity(running, granularity, ChunkMode.LAST)

        ends = [
            running[min(i + granularity, len(running)) - 1]
            for i in range(0, len(running), granularity)
        ]
        assert [p.values for p in buckets] == [p.values for p in ends]

    def test_wallet_columns_sum_to_total(self):
        buckets = bucket_by_granularity(make_series(20), 7)

        for point in buckets:
            assert point.total == pytest.approx(sum(point.values.values()))


class TestDownsample:
    """Tests for display downsampling."""

    def test_short_series_unchanged(self):
        series = make_series(10)

        assert downsample(series, 200) == series

    def test_bounded_point_count(self):
        result = downsample(make_series(1000), 200)

        assert len(result) <= 200
        assert [p.epoch for p in result[:2]] == [100, 105]

    def test_average_mode(self):
        series = make_series(4, a=lambda i: float(i))

        result = downsample(series, 2, ChunkMode.AVERAGE)

        assert column(result, A) == [0.5, 2.5]
        assert [p.epoch for p in result] == [100, 102]

    def test_last_mode_labels_with_last_epoch(self):
        series = make_series(4, a=lambda i: float(i))

        result = downsample(series, 2, ChunkMode.LAST)

        assert column(result, A) == [1.0, 3.0]
        assert [p.epoch for p in result] == [101, 103]

    def test_rounding_never_zeroes_tiny_values(self):
        series = make_series(4, a=lambda i: 1e-9, b=lambda i: 0.0)

        result = downsample(series, 2, ChunkMode.AVERAGE)

        assert all(v > 0 for v in column(result, A))
        assert column(result, B) == [0.0, 0.0]

    def test_rounds_to_six_decimals(self):
        series = make_series(2, a=lambda i: 1.0, b=lambda i: float(i) / 3)

        result = downsample(series, 1, ChunkMode.AVERAGE)

        assert result[0].values[B] == 0.166667


class TestYDomain:
    """Tests for chart bounds."""

    def test_empty_series(self):
        assert y_domain([], DisplayMode.DAILY) == (0.0, 1.0)

    def test_daily_buffer(self):
        series = [SeriesPoint(epoch=1, values={A: 10.0})]

        assert y_domain(series, DisplayMode.DAILY) == (0.0, 12.0)

    def test_cumulative_buffer(self):
        series = [SeriesPoint(epoch=1, values={A: 10.0})]

        assert y_domain(series, DisplayMode.CUMULATIVE) == (0.0, 11.0)

    def test_uses_max_total(self):
        series = [
            SeriesPoint(epoch=1, values={A: 1.0, B: 2.0}),
            SeriesPoint(epoch=2, values={A: 0.5, B: 0.5}),
        ]

        assert y_domain(series, DisplayMode.DAILY) == (0.0, 3.6)
