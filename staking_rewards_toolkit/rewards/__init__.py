"""Staking rewards: models, service, aggregation, transforms and colors."""

from .models import (
    Currency,
    DisplayMode,
    EpochReward,
    EpochTotal,
    Provider,
    RewardsResponse,
    SeriesPoint,
    ViewMode,
)
from .service import RewardsService

__all__ = [
    "RewardsService",
    "RewardsResponse",
    "Provider",
    "EpochReward",
    "EpochTotal",
    "SeriesPoint",
    "DisplayMode",
    "Currency",
    "ViewMode",
]
