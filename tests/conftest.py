"""
Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests.
"""

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

# Native addresses: "erd1" + 58 bech32 characters
WALLET_A = "erd1" + "q" * 58
WALLET_B = "erd1" + "p" * 58
WALLET_C = "erd1" + "z" * 58
OWNER = "erd1" + "r" * 58
PROVIDER_1 = "erd1qqqqqqqqqqqqqpgq" + "y" * 43
PROVIDER_2 = "erd1qqqqqqqqqqqqqpgq" + "x" * 43


def make_record(
    epoch: int,
    user: float = 0.0,
    owner: float = 0.0,
    staked: float = 0.0,
    **extra: Any,
) -> Dict[str, Any]:
    """Build one epoch record as the rewards API returns it."""
    record = {
        "epoch": epoch,
        "epochUserRewards": user,
        "ownerRewards": owner,
        "totalStaked": staked,
        "apr": 7.5,
        "timestamp": 1596121200 + epoch * 86400,
        "epochUserRewardsUsd": user * 30,
        "epochOwnerRewardsUsd": owner * 30,
    }
    record.update(extra)
    return record


def make_rewards_payload(
    records: Dict[str, List[Dict[str, Any]]],
    owners: Dict[str, str],
    current_epoch: int = 1500,
    names: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Build a rewards API body from provider -> records and provider -> owner."""
    names = names or {}
    per_provider = {
        provider: sum(r["epochUserRewards"] for r in provider_records)
        for provider, provider_records in records.items()
    }
    return {
        "currentEpoch": current_epoch,
        "providersFullRewardsData": records,
        "totalRewards": sum(per_provider.values()),
        "totalRewardsPerProvider": per_provider,
        "providersWithIdentityInfo": [
            {
                "provider": provider,
                "owner": owner,
                "identity": names.get(provider, "").lower() or None,
                "identityInfo": {"name": names.get(provider, "")},
                "apr": "7.5",
                "serviceFee": 0.1,
            }
            for provider, owner in owners.items()
        ],
    }


def json_response(status_code: int, body: Any, url: str = "https://test") -> httpx.Response:
    """Real httpx.Response suitable for AsyncMock(return_value=...)."""
    return httpx.Response(
        status_code, json=body, request=httpx.Request("GET", url)
    )


@pytest.fixture
def wallet_a() -> str:
    return WALLET_A


@pytest.fixture
def wallet_b() -> str:
    return WALLET_B


@pytest.fixture
def owner_wallet() -> str:
    return OWNER


@pytest.fixture
def record_factory() -> Callable[..., Dict[str, Any]]:
    return make_record


@pytest.fixture
def payload_factory() -> Callable[..., Dict[str, Any]]:
    return make_rewards_payload


@pytest.fixture
def sample_rewards_payload() -> Dict[str, Any]:
    """One wallet staking with two providers over three epochs."""
    return make_rewards_payload(
        {
            PROVIDER_1: [
                make_record(100, user=1.0, owner=0.5, staked=10),
                make_record(101, user=1.5, owner=0.5, staked=10),
                make_record(102, user=2.0, owner=0.5, staked=12),
            ],
            PROVIDER_2: [make_record(101, user=0.25, owner=0.1, staked=5)],
        },
        {PROVIDER_1: OWNER, PROVIDER_2: WALLET_C},
        current_epoch=103,
        names={PROVIDER_1: "Alpha Staking", PROVIDER_2: "Beta Nodes"},
    )


@pytest.fixture
def sample_governance_payload() -> Dict[str, Any]:
    """Governance votes body: two YES voters, one NO voter."""
    return {
        "orderedGovernanceVotesByAddressYes": [
            {
                "address": WALLET_A,
                "vote": "yes",
                "voteShort": 100,
                "share": 50,
                "shareTotal": 25,
                "herotag": "alice",
            },
            {
                "address": WALLET_B,
                "vote": "yes",
                "voteShort": 100,
                "share": 50,
                "shareTotal": 25,
            },
        ],
        "orderedGovernanceVotesByAddressNo": [
            {
                "address": WALLET_C,
                "vote": "no",
                "voteShort": 200,
                "share": 100,
                "shareTotal": 50,
            }
        ],
        "totalVotedYes": "200000000000000000000",
        "totalVotedYesShort": 200,
        "totalVotedNo": "200000000000000000000",
        "totalVotedNoShort": 200,
        "totalVoted": "400000000000000000000",
        "totalVotedShort": 400,
    }


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow-running")
