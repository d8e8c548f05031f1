"""
Shared HTTP client utilities for async operations.

Centralizes httpx client creation with sensible defaults, connection pooling,
timeouts, and a consistent User-Agent. Services accept an injected client and
fall back to the shared one.
"""

from __future__ import annotations

from typing import Any, Optional, Type

import httpx

from staking_rewards_toolkit.shared.constants import ApiConstants
from staking_rewards_toolkit.shared.exceptions import (
    APIException,
    NonRetryableException,
)

DEFAULT_TIMEOUT = ApiConstants.TIMEOUT_SECONDS
DEFAULT_CONNECT_TIMEOUT = ApiConstants.CONNECT_TIMEOUT_SECONDS
USER_AGENT = ApiConstants.USER_AGENT

_async_client: Optional[httpx.AsyncClient] = None


def _build_limits() -> httpx.Limits:
    return httpx.Limits(max_keepalive_connections=20, max_connections=100)


def _build_timeout() -> httpx.Timeout:
    return httpx.Timeout(DEFAULT_TIMEOUT, connect=DEFAULT_CONNECT_TIMEOUT)


def _default_headers() -> dict:
    return {"User-Agent": USER_AGENT, "Accept": "application/json"}


def get_async_client() -> httpx.AsyncClient:
    """Get a shared asynchronous httpx client."""
    global _async_client
    if _async_client is None or _async_client.is_closed:
        _async_client = httpx.AsyncClient(
            timeout=_build_timeout(),
            limits=_build_limits(),
            headers=_default_headers(),
        )
    return _async_client


async def aclose_async_client() -> None:
    global _async_client
    if _async_client is not None:
        await _async_client.aclose()
        _async_client = None


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    permanent_exception: Type[NonRetryableException],
    params: Optional[dict] = None,
) -> Any:
    """
    GET a URL and decode its JSON body, classifying failures.

    Raises:
        APIException: HTTP 5xx or 429 (kind="http"); retryable
        permanent_exception: other HTTP errors (kind="http") or a body that
            is not JSON (kind="parsing")
        httpx.TransportError: connection-level failures; retryable
    """
    response = await client.get(url, params=params)

    if response.status_code >= 400:
        message = f"HTTP error {response.status_code}: {response.reason_phrase}"
        if response.status_code >= 500 or response.status_code == 429:
            raise APIException(
                message, status_code=response.status_code, kind="http"
            )
        raise permanent_exception(
            message, status_code=response.status_code, kind="http"
        )

    try:
        return response.json()
    except ValueError as e:
        raise permanent_exception(
            f"Invalid JSON in response: {e}",
            status_code=response.status_code,
            kind="parsing",
        ) from e
