"""Governance votes: models, service and analyzer."""

from .analyzer import (
    analyze,
    holder_category_stats,
    normalize,
    quadratic_simulation,
    vote_concentration,
)
from .models import (
    LIVE_HOLDER_CATEGORIES,
    SIMULATION_HOLDER_CATEGORIES,
    GovernanceReport,
    GovernanceSnapshot,
    HolderCategory,
    VoteMode,
    VoteRecord,
)
from .service import GovernanceVotesService

__all__ = [
    "GovernanceVotesService",
    "GovernanceSnapshot",
    "GovernanceReport",
    "VoteRecord",
    "VoteMode",
    "HolderCategory",
    "LIVE_HOLDER_CATEGORIES",
    "SIMULATION_HOLDER_CATEGORIES",
    "analyze",
    "normalize",
    "quadratic_simulation",
    "vote_concentration",
    "holder_category_stats",
]
