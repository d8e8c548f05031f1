"""
RewardsService - fetches per-wallet staking rewards from the rewards API.

Endpoint:
    GET {SRT_REWARDS_API_URL}/user/rewards/{address}

Failures come back as a failed Result whose error context carries
``kind`` ("network", "http" or "parsing"), ``status_code`` and ``wallet``.
Transient failures (transport errors, 5xx, 429) are retried first.
Cancellation propagates: ``asyncio.CancelledError`` is never caught here.
"""

from typing import Optional

import httpx

from staking_rewards_toolkit.rewards.models import RewardsResponse
from staking_rewards_toolkit.shared.constants import ApiConstants
from staking_rewards_toolkit.shared.exceptions import (
    APIException,
    RewardsDataException,
)
from staking_rewards_toolkit.shared.logging import get_logger
from staking_rewards_toolkit.shared.results import ErrorSeverity, Result
from staking_rewards_toolkit.shared.retry import HTTP_RETRY_CONFIG, RetryConfig
from staking_rewards_toolkit.shared.types import RewardsPayload
from staking_rewards_toolkit.shared.services.http_client import (
    get_async_client,
    get_json,
)

_logger = get_logger(__name__)

SOURCE = "rewards_service"


class RewardsService:
    """Client for the user rewards endpoint."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        self._client = client
        self.base_url = (base_url or ApiConstants.REWARDS_BASE_URL).rstrip("/")
        self._retry = retry_config or HTTP_RETRY_CONFIG

    async def _get_client(self) -> httpx.AsyncClient:
        """Get the injected client or the shared one."""
        if self._client is None:
            self._client = get_async_client()
        return self._client

    async def close(self):
        """Drop the client reference; the shared client is closed by its owner."""
        self._client = None

    def _build_url(self, address: str) -> str:
        return self.base_url + ApiConstants.USER_REWARDS_PATH.format(
            address=address
        )

    async def _fetch_payload(self, url: str) -> RewardsPayload:
        client = await self._get_client()
        return await get_json(client, url, RewardsDataException)

    async def get_user_rewards(self, address: str) -> Result[RewardsResponse]:
        """
        Fetch and validate rewards for one wallet.

        Args:
            address: Native wallet address (erd1...)

        Returns:
            Result with a RewardsResponse, or a failed Result describing the
            error kind
        """
        url = self._build_url(address)
        context = {"wallet": address, "url": url}

        try:
            payload = await self._retry.run(
                self._fetch_payload, url, operation_name="get_user_rewards"
            )
            response = RewardsResponse.from_dict(payload, address)
        except (APIException, RewardsDataException) as e:
            _logger.warning(f"Rewards fetch failed for {address}: {e.message}")
            return Result.fail_with_message(
                SOURCE,
                e.message,
                severity=ErrorSeverity.ERROR,
                context={**context, "kind": e.kind, "status_code": e.status_code},
                exception=e,
            )
        except httpx.HTTPError as e:
            message = str(e) or "An unknown network error occurred"
            _logger.warning(f"Rewards fetch failed for {address}: {message}")
            return Result.fail_with_message(
                SOURCE,
                message,
                severity=ErrorSeverity.ERROR,
                context={**context, "kind": "network", "status_code": None},
                exception=e,
            )

        return Result.ok(response)
