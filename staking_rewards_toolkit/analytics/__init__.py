"""Analytics module: windowed statistics and provider summaries."""

from .models import GlobalStats, ProviderSummary, WindowStats
from .statistics import (
    calculate_global_stats,
    is_currently_staked,
    summarize_provider,
    window_stats,
)

__all__ = [
    "WindowStats",
    "GlobalStats",
    "ProviderSummary",
    "window_stats",
    "calculate_global_stats",
    "is_currently_staked",
    "summarize_provider",
]
