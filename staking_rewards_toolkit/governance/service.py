"""
GovernanceVotesService - fetches the governance vote distribution.

Endpoint:
    GET {SRT_REWARDS_API_URL}/scripts/governance-votes

The payload is validated strictly (every vote and every total) before it is
parsed into a GovernanceSnapshot whose powers are the ``voteShort`` values.
"""

from typing import Any, Optional

import httpx

from staking_rewards_toolkit.governance.models import GovernanceSnapshot
from staking_rewards_toolkit.shared.constants import ApiConstants
from staking_rewards_toolkit.shared.exceptions import (
    APIException,
    GovernanceDataException,
)
from staking_rewards_toolkit.shared.logging import get_logger
from staking_rewards_toolkit.shared.results import ErrorSeverity, Result
from staking_rewards_toolkit.shared.retry import HTTP_RETRY_CONFIG, RetryConfig
from staking_rewards_toolkit.shared.types import GovernanceVotesPayload
from staking_rewards_toolkit.shared.services.http_client import (
    get_async_client,
    get_json,
)

_logger = get_logger(__name__)

SOURCE = "governance_service"

_TOTAL_FIELDS = (
    "totalVotedYes",
    "totalVotedYesShort",
    "totalVotedNo",
    "totalVotedNoShort",
    "totalVoted",
    "totalVotedShort",
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_numeric_like(value: Any) -> bool:
    return _is_number(value) or (isinstance(value, str) and len(value) > 0)


def _is_vote(vote: Any) -> bool:
    return (
        isinstance(vote, dict)
        and isinstance(vote.get("address"), str)
        and isinstance(vote.get("vote"), str)
        and _is_number(vote.get("voteShort"))
        and _is_number(vote.get("share"))
        and _is_number(vote.get("shareTotal"))
    )


def is_valid_governance_payload(data: Any) -> bool:
    """Check the votes payload shape before parsing."""
    if not isinstance(data, dict):
        return False
    for key in (
        "orderedGovernanceVotesByAddressYes",
        "orderedGovernanceVotesByAddressNo",
    ):
        votes = data.get(key)
        if not isinstance(votes, list) or not all(_is_vote(v) for v in votes):
            return False
    return all(_is_numeric_like(data.get(key)) for key in _TOTAL_FIELDS)


class GovernanceVotesService:
    """Client for the governance votes endpoint."""

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
        if self._client is None:
            self._client = get_async_client()
        return self._client

    async def close(self):
        self._client = None

    async def _fetch_snapshot(self, url: str) -> GovernanceSnapshot:
        client = await self._get_client()
        payload: GovernanceVotesPayload = await get_json(
            client, url, GovernanceDataException
        )
        if not is_valid_governance_payload(payload):
            raise GovernanceDataException(
                "Invalid governance votes response structure"
            )
        return GovernanceSnapshot.from_dict(payload)

    async def get_votes(self) -> Result[GovernanceSnapshot]:
        """
        Fetch the current governance snapshot.

        Returns:
            Result with the raw (un-normalized) snapshot, or a failed Result
            whose context carries kind and status_code
        """
        url = self.base_url + ApiConstants.GOVERNANCE_VOTES_PATH
        try:
            snapshot = await self._retry.run(
                self._fetch_snapshot, url, operation_name="get_votes"
            )
        except (APIException, GovernanceDataException) as e:
            _logger.warning(f"Governance votes fetch failed: {e.message}")
            return Result.fail_with_message(
                SOURCE,
                e.message,
                severity=ErrorSeverity.ERROR,
                context={"url": url, "kind": e.kind, "status_code": e.status_code},
                exception=e,
            )
        except httpx.HTTPError as e:
            message = str(e) or "Unknown network error"
            _logger.warning(f"Governance votes fetch failed: {message}")
            return Result.fail_with_message(
                SOURCE,
                message,
                severity=ErrorSeverity.ERROR,
                context={"url": url, "kind": "network", "status_code": None},
                exception=e,
            )
        return Result.ok(snapshot)
