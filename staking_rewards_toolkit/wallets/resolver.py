"""
AddressResolver - turns user input into a native wallet address.

Native addresses pass through untouched; anything else is treated as a
herotag and looked up on the usernames API:

    GET {SRT_USERNAMES_API_URL}/usernames/{herotag}?withGuardianInfo=false

Errors are reported in the returned AddressResolution, never raised.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from staking_rewards_toolkit.shared.constants import ApiConstants
from staking_rewards_toolkit.shared.exceptions import (
    APIException,
    AddressValidationException,
)
from staking_rewards_toolkit.shared.logging import get_logger
from staking_rewards_toolkit.shared.retry import HTTP_RETRY_CONFIG, RetryConfig
from staking_rewards_toolkit.shared.services.http_client import (
    get_async_client,
    get_json,
)
from staking_rewards_toolkit.wallets.validation import is_native_address

_logger = get_logger(__name__)

EMPTY_INPUT_ERROR = "Input is empty"
CONNECTION_ERROR = "Error connecting to MultiversX API"


@dataclass(frozen=True)
class AddressResolution:
    """Outcome of resolving one input: exactly one field is set."""

    resolved_address: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.resolved_address is not None


def unresolvable_message(value: str) -> str:
    return (
        f'"{value}" is neither a valid MultiversX address '
        f"nor a resolvable herotag"
    )


class AddressResolver:
    """Resolve native addresses and herotags."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        self._client = client
        self.base_url = (base_url or ApiConstants.USERNAMES_BASE_URL).rstrip("/")
        self._retry = retry_config or HTTP_RETRY_CONFIG

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = get_async_client()
        return self._client

    async def close(self):
        self._client = None

    async def _lookup(self, herotag: str) -> Optional[str]:
        client = await self._get_client()
        url = self.base_url + ApiConstants.USERNAME_PATH.format(name=herotag)
        payload = await get_json(
            client,
            url,
            AddressValidationException,
            params={"withGuardianInfo": "false"},
        )
        address = payload.get("address") if isinstance(payload, dict) else None
        return address if isinstance(address, str) and address else None

    async def resolve(self, value: Optional[str]) -> AddressResolution:
        """
        Resolve user input to a native address.

        Args:
            value: A native address or a herotag, surrounding spaces allowed

        Returns:
            AddressResolution with either resolved_address or error
        """
        if value is None or not value.strip():
            return AddressResolution(error=EMPTY_INPUT_ERROR)

        trimmed = value.strip()
        if is_native_address(trimmed):
            return AddressResolution(resolved_address=trimmed)

        try:
            address = await self._retry.run(
                self._lookup, trimmed, operation_name="resolve_herotag"
            )
        except AddressValidationException as e:
            _logger.debug(f'Herotag "{trimmed}" not found: {e.message}')
            return AddressResolution(error=unresolvable_message(trimmed))
        except (APIException, httpx.HTTPError) as e:
            _logger.warning(f'Herotag "{trimmed}" lookup failed: {e}')
            return AddressResolution(error=CONNECTION_ERROR)

        if address is None or not is_native_address(address):
            return AddressResolution(error=unresolvable_message(trimmed))
        return AddressResolution(resolved_address=address)
