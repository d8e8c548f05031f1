"""
Unit tests for the epoch calendar.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from staking_rewards_toolkit.utils.epochs import (
    date_to_epoch,
    epoch_to_date,
    epoch_to_timestamp,
    format_epoch_date,
    timestamp_to_epoch,
)

GENESIS = 1596121200  # 2020-07-30 15:00 UTC


class TestEpochToTime:
    """Tests for epoch -> wall clock."""

    def test_epoch_zero_is_genesis(self):
        assert epoch_to_timestamp(0) == GENESIS
        assert epoch_to_date(0) == datetime(2020, 7, 30, 15, 0, tzinfo=timezone.utc)

    def test_epochs_are_one_day_apart(self):
        assert epoch_to_timestamp(10) - epoch_to_timestamp(9) == 86400

    def test_custom_genesis(self):
        assert epoch_to_timestamp(2, genesis=0) == 172800

    def test_format_epoch_date(self):
        assert format_epoch_date(1) == "2020-07-31"
        assert format_epoch_date(1, "%d/%m/%Y") == "31/07/2020"


class TestTimeToEpoch:
    """Tests for wall clock -> epoch."""

    @pytest.mark.parametrize("epoch", [0, 1, 365, 1500])
    def test_round_trip(self, epoch):
        assert timestamp_to_epoch(epoch_to_timestamp(epoch)) == epoch
        assert date_to_epoch(epoch_to_date(epoch)) == epoch

    def test_floor_within_epoch(self):
        start = epoch_to_timestamp(100)
        assert timestamp_to_epoch(start + 86399) == 100
        assert timestamp_to_epoch(start - 1) == 99

    def test_naive_datetime_is_utc(self):
        aware = epoch_to_date(42) + timedelta(hours=1)
        naive = aware.replace(tzinfo=None)
        assert date_to_epoch(naive) == date_to_epoch(aware) == 42

    def test_bare_date_means_midnight_utc(self):
        # Midnight precedes the 15:00 epoch boundary
        assert date_to_epoch(date(2020, 7, 31)) == 0
        assert date_to_epoch(date(2020, 8, 1)) == 1
