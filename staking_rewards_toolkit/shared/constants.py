"""
Constants and environment-driven configuration for the toolkit.

A `.env` file in the working directory is loaded once at import time, then
each value can be overridden with an ``SRT_*`` environment variable.
"""

import os
from typing import Tuple

from dotenv import load_dotenv

from staking_rewards_toolkit.shared.exceptions import ConfigurationException

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationException(
            f"{name} must be an integer, got {raw!r}"
        ) from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationException(
            f"{name} must be a number, got {raw!r}"
        ) from e


class ApiConstants:
    """External service endpoints and HTTP client settings."""

    REWARDS_BASE_URL = os.getenv(
        "SRT_REWARDS_API_URL", "https://api.xoxno.com"
    ).rstrip("/")
    USERNAMES_BASE_URL = os.getenv(
        "SRT_USERNAMES_API_URL", "https://api.multiversx.com"
    ).rstrip("/")

    USER_REWARDS_PATH = "/user/rewards/{address}"
    GOVERNANCE_VOTES_PATH = "/scripts/governance-votes"
    USERNAME_PATH = "/usernames/{name}"

    MAX_ATTEMPTS = _env_int("SRT_HTTP_MAX_ATTEMPTS", 3)
    TIMEOUT_SECONDS = _env_float("SRT_HTTP_TIMEOUT", 15.0)
    CONNECT_TIMEOUT_SECONDS = _env_float("SRT_HTTP_CONNECT_TIMEOUT", 5.0)
    USER_AGENT = os.getenv("SRT_HTTP_UA", "staking-rewards-toolkit/1.x")


class EpochConstants:
    """Epoch calendar parameters."""

    # 2020-07-30T15:00:00Z
    GENESIS_TIMESTAMP = _env_int("SRT_GENESIS_TIMESTAMP", 1596121200)
    EPOCH_DURATION_SECONDS = 86400


class AddressConstants:
    """Native bech32 wallet address format."""

    NATIVE_PREFIX = "erd1"
    NATIVE_LENGTH = 62
    BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"


class ChartConstants:
    """Series shaping parameters."""

    TARGET_POINTS = 200
    GRANULARITIES: Tuple[int, ...] = (1, 7, 14, 30)
    STATS_WINDOWS: Tuple[int, ...] = (7, 30)
    ZERO_EPSILON = 1e-12
    DOWNSAMPLE_DECIMALS = 6
    Y_DOMAIN_BUFFER_CUMULATIVE = 0.1
    Y_DOMAIN_BUFFER_DAILY = 0.2


class GovernanceConstants:
    """Governance analyzer parameters."""

    TOP_K = 10


CATEGORICAL_PALETTE: Tuple[str, ...] = (
    "#0ea5e9",  # sky
    "#8b5cf6",  # violet
    "#10b981",  # emerald
    "#f59e0b",  # amber
    "#ef4444",  # red
    "#ec4899",  # pink
    "#06b6d4",  # cyan
    "#eab308",  # yellow
    "#f97316",  # orange
    "#14b8a6",  # teal
    "#6366f1",  # indigo
    "#a21caf",  # fuchsia
    "#f43f5e",  # rose
    "#22d3ee",  # light cyan
    "#84cc16",  # lime
)

NATIVE_SYMBOL = "EGLD"
