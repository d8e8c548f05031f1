"""Epoch calendar: epoch index <-> wall-clock time from a fixed genesis."""

from datetime import date, datetime, timezone
from typing import Optional, Union

from staking_rewards_toolkit.shared.constants import EpochConstants


def epoch_to_timestamp(
    epoch: int, genesis: Optional[int] = None
) -> int:
    """Unix timestamp (seconds) at which `epoch` starts."""
    start = EpochConstants.GENESIS_TIMESTAMP if genesis is None else genesis
    return start + int(epoch) * EpochConstants.EPOCH_DURATION_SECONDS


def epoch_to_date(epoch: int, genesis: Optional[int] = None) -> datetime:
    """UTC datetime at which `epoch` starts. No leap-second handling."""
    return datetime.fromtimestamp(
        epoch_to_timestamp(epoch, genesis), tz=timezone.utc
    )


def timestamp_to_epoch(timestamp: int, genesis: Optional[int] = None) -> int:
    """Epoch containing the given Unix timestamp (floor)."""
    start = EpochConstants.GENESIS_TIMESTAMP if genesis is None else genesis
    return (int(timestamp) - start) // EpochConstants.EPOCH_DURATION_SECONDS


def date_to_epoch(
    value: Union[date, datetime], genesis: Optional[int] = None
) -> int:
    """
    Epoch containing `value`.

    A naive datetime is read as UTC; a bare date means midnight UTC.
    """
    if isinstance(value, datetime):
        dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    else:
        dt = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return timestamp_to_epoch(int(dt.timestamp()), genesis)


def format_epoch_date(
    epoch: int, format_str: str = "%Y-%m-%d", genesis: Optional[int] = None
) -> str:
    """Format the start of an epoch as a date string."""
    return epoch_to_date(epoch, genesis).strftime(format_str)
