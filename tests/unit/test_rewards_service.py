"""
Unit tests for RewardsService and rewards payload parsing.
"""

import copy
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from staking_rewards_toolkit.rewards.models import (
    EpochReward,
    Provider,
    RewardsResponse,
)
from staking_rewards_toolkit.rewards.service import RewardsService
from staking_rewards_toolkit.shared.exceptions import RewardsDataException
from staking_rewards_toolkit.shared.retry import NO_RETRY_CONFIG, RetryConfig
from tests.conftest import OWNER, PROVIDER_1, PROVIDER_2, WALLET_A, json_response

BASE_URL = "https://rewards.test"


def make_service(*responses, retry_config=NO_RETRY_CONFIG):
    client = MagicMock(spec=httpx.AsyncClient)
    client.get = AsyncMock(side_effect=list(responses))
    return (
        RewardsService(client=client, base_url=BASE_URL, retry_config=retry_config),
        client,
    )


class TestEpochReward:
    """Tests for epoch record parsing."""

    def test_parses_strings_and_clamps(self):
        record = EpochReward.from_dict(
            {
                "epoch": "150",
                "epochUserRewards": "1.25",
                "ownerRewards": -3,
                "totalStaked": None,
                "apr": "8.1",
            },
            WALLET_A,
        )

        assert record.epoch == 150
        assert record.user_reward == 1.25
        assert record.owner_reward == 0.0
        assert record.staked == 0.0
        assert record.apr_pct == 8.1
        assert record.timestamp is None
        assert record.wallet_address == WALLET_A

    @pytest.mark.parametrize("data", [{}, {"epoch": None}, {"epoch": -1}, "junk"])
    def test_unusable_epoch(self, data):
        assert EpochReward.from_dict(data) is None


class TestProvider:
    """Tests for provider parsing."""

    def test_label_fallbacks(self):
        named = Provider.from_dict(
            {"provider": "p", "owner": "o", "identityInfo": {"name": "Node"}}
        )
        identity = Provider.from_dict({"provider": "p", "identity": "node-id"})
        bare = Provider.from_dict({"provider": "p"})

        assert named.label == "Node"
        assert identity.label == "node-id"
        assert bare.label == "p"
        assert bare.owner_address == ""

    def test_missing_provider(self):
        assert Provider.from_dict({"owner": "o"}) is None


class TestRewardsResponse:
    """Tests for top-level validation."""

    def test_parse(self, sample_rewards_payload):
        response = RewardsResponse.from_dict(sample_rewards_payload, WALLET_A)

        assert response.current_epoch == 103
        assert len(response.providers_rewards[PROVIDER_1]) == 3
        assert response.provider_owners[PROVIDER_1] == OWNER
        assert response.total_rewards_per_provider[PROVIDER_2] == 0.25
        assert all(
            r.wallet_address == WALLET_A
            for records in response.providers_rewards.values()
            for r in records
        )

    @pytest.mark.parametrize(
        "key,value",
        [
            ("providersFullRewardsData", []),
            ("totalRewards", "12"),
            ("totalRewards", True),
            ("totalRewardsPerProvider", None),
            ("providersWithIdentityInfo", {}),
        ],
    )
    def test_invalid_structure(self, sample_rewards_payload, key, value):
        payload = copy.deepcopy(sample_rewards_payload)
        payload[key] = value

        with pytest.raises(RewardsDataException, match="Invalid API response structure"):
            RewardsResponse.from_dict(payload, WALLET_A)

    def test_bad_records_skipped(self, sample_rewards_payload):
        payload = copy.deepcopy(sample_rewards_payload)
        payload["providersFullRewardsData"][PROVIDER_1].append({"epoch": -5})
        payload["providersFullRewardsData"]["broken"] = "not-a-list"

        response = RewardsResponse.from_dict(payload, WALLET_A)

        assert len(response.providers_rewards[PROVIDER_1]) == 3
        assert "broken" not in response.providers_rewards


class TestGetUserRewards:
    """Tests for the rewards fetch."""

    @pytest.mark.asyncio
    async def test_success(self, sample_rewards_payload):
        service, client = make_service(json_response(200, sample_rewards_payload))

        result = await service.get_user_rewards(WALLET_A)

        assert result.success
        assert result.data.wallet_address == WALLET_A
        client.get.assert_awaited_once_with(
            f"{BASE_URL}/user/rewards/{WALLET_A}", params=None
        )

    @pytest.mark.asyncio
    async def test_not_found_is_not_retried(self):
        service, client = make_service(
            json_response(404, {}),
            retry_config=RetryConfig(max_attempts=3, base_delay=0),
        )

        result = await service.get_user_rewards(WALLET_A)

        assert not result.success
        assert result.message == "HTTP error 404: Not Found"
        assert result.errors[0].context == {
            "wallet": WALLET_A,
            "url": f"{BASE_URL}/user/rewards/{WALLET_A}",
            "kind": "http",
            "status_code": 404,
        }
        assert client.get.await_count == 1

    @pytest.mark.asyncio
    async def test_rate_limit_retried_then_reported(self):
        service, client = make_service(
            json_response(429, {}),
            json_response(429, {}),
            retry_config=RetryConfig(max_attempts=2, base_delay=0),
        )

        result = await service.get_user_rewards(WALLET_A)

        assert not result.success
        assert result.errors[0].context["status_code"] == 429
        assert client.get.await_count == 2

    @pytest.mark.asyncio
    async def test_invalid_structure(self):
        service, _ = make_service(json_response(200, {"foo": "bar"}))

        result = await service.get_user_rewards(WALLET_A)

        assert not result.success
        assert result.message == "Invalid API response structure"
        assert result.errors[0].context["kind"] == "parsing"

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        response = httpx.Response(
            200,
            content=b"<html>",
            request=httpx.Request("GET", BASE_URL),
        )
        service, _ = make_service(response)

        result = await service.get_user_rewards(WALLET_A)

        assert not result.success
        assert result.errors[0].context["kind"] == "parsing"

    @pytest.mark.asyncio
    async def test_network_error(self):
        service, _ = make_service(httpx.ReadTimeout("timed out"))

        result = await service.get_user_rewards(WALLET_A)

        assert not result.success
        assert result.errors[0].context["kind"] == "network"
        assert result.errors[0].exception is not None
