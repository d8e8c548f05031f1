"""
WalletDataOrchestrator - per-wallet request state machine.

States: idle -> loading -> ok(response) | error(message). Each wallet owns at
most one in-flight asyncio task. Starting a new request for a wallet cancels
the previous one, and removing a wallet cancels its request and drops its
entry. Every request carries a generation number that is unique for
the orchestrator's lifetime; an outcome is applied only if its generation is
still the wallet's current one, so a late response from a superseded or
removed request never reaches the store.

The store is mutated only here. Readers get a RewardsStore view.
"""

import asyncio
import itertools
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, List, Optional

from staking_rewards_toolkit.rewards.models import RewardsResponse
from staking_rewards_toolkit.shared.logging import get_logger
from staking_rewards_toolkit.shared.results import (
    ErrorSeverity,
    RefreshSummary,
    Result,
)

_logger = get_logger(__name__)

SOURCE = "orchestrator"


class WalletStatus(Enum):
    """Lifecycle of one wallet's rewards data."""

    IDLE = "idle"  # Tracked, no request issued yet
    LOADING = "loading"  # Request in flight (stale payload may be kept)
    OK = "ok"  # Last request succeeded
    ERROR = "error"  # Last request failed


@dataclass(frozen=True)
class WalletState:
    """Immutable snapshot of one wallet's state."""

    address: str
    status: WalletStatus = WalletStatus.IDLE
    response: Optional[RewardsResponse] = None
    error: Optional[str] = None
    generation: int = 0

    @property
    def is_loading(self) -> bool:
        return self.status is WalletStatus.LOADING


class RewardsStore:
    """
    Read-only view over the orchestrator's wallet states.

    `version` increases on every mutation; `responses()` returns the same
    dict object while the version is unchanged.
    """

    def __init__(self, orchestrator: "WalletDataOrchestrator"):
        self._orchestrator = orchestrator
        self._responses_version = -1
        self._responses: Dict[str, RewardsResponse] = {}

    @property
    def version(self) -> int:
        return self._orchestrator._version

    def __contains__(self, address: str) -> bool:
        return address in self._orchestrator._states

    def addresses(self) -> List[str]:
        return list(self._orchestrator._states)

    def state(self, address: str) -> Optional[WalletState]:
        return self._orchestrator._states.get(address)

    def get(self, address: str) -> Optional[RewardsResponse]:
        state = self.state(address)
        return state.response if state else None

    def responses(self) -> Dict[str, RewardsResponse]:
        """Wallets with a usable payload, including stale ones being refreshed."""
        if self._responses_version != self.version:
            self._responses = {
                address: state.response
                for address, state in self._orchestrator._states.items()
                if state.response is not None
            }
            self._responses_version = self.version
        return self._responses

    def errors(self) -> Dict[str, str]:
        return {
            address: state.error
            for address, state in self._orchestrator._states.items()
            if state.status is WalletStatus.ERROR and state.error
        }

    def loading(self) -> List[str]:
        return [
            address
            for address, state in self._orchestrator._states.items()
            if state.is_loading
        ]


class WalletDataOrchestrator:
    """
    Issues rewards requests per wallet and records their outcomes.

    The rewards service only needs an async ``get_user_rewards(address)``
    returning a Result. Methods that start requests must be called from a
    running event loop.
    """

    def __init__(
        self,
        service,
        on_change: Optional[Callable[[WalletState], None]] = None,
    ):
        self._service = service
        self._on_change = on_change
        self._states: Dict[str, WalletState] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self._version = 0
        # Shared across wallets so numbers never repeat after remove and re-add
        self._generations = itertools.count(1)
        self.store = RewardsStore(self)

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def add_wallet(self, address: str) -> Optional[asyncio.Task]:
        """Track a wallet and fetch it. No-op for a wallet already fetched."""
        state = self._states.get(address)
        if state is not None and state.status is not WalletStatus.IDLE:
            return self._tasks.get(address)
        if state is None:
            self._set_state(WalletState(address=address))
        return self._start(address)

    def refresh(self, address: str) -> Optional[asyncio.Task]:
        """
        Re-fetch a tracked wallet, keeping its last payload meanwhile.

        A refresh while a request is in flight cancels that request.
        Returns None for an untracked wallet.
        """
        if address not in self._states:
            _logger.debug(f"Ignoring refresh for untracked wallet {address}")
            return None
        return self._start(address)

    def remove_wallet(self, address: str) -> bool:
        """Stop tracking a wallet, cancelling any in-flight request."""
        task = self._tasks.pop(address, None)
        if task is not None and not task.done():
            task.cancel()
        if self._states.pop(address, None) is None:
            return False
        self._version += 1
        _logger.debug(f"Removed wallet {address}")
        return True

    async def refresh_all(self) -> RefreshSummary:
        """Refresh every tracked wallet concurrently; failures stay per wallet."""
        tasks = {}
        for address in list(self._states):
            task = self.refresh(address)
            if task is not None:
                tasks[address] = task

        summary = RefreshSummary()
        if not tasks:
            return summary

        await asyncio.gather(*tasks.values(), return_exceptions=True)
        for address, task in tasks.items():
            if task.cancelled():
                summary.record_cancelled(address)
                continue
            result = task.result()
            if result.success:
                summary.record_success(address)
            else:
                summary.record_failure(address, result)

        rate = summary.to_dict()["success_rate"]
        if summary.is_partial():
            _logger.warning(
                f"Refresh partially succeeded ({rate}); failed: "
                f"{', '.join(summary.failed_wallets)}"
            )
        else:
            _logger.info(f"Refresh finished ({rate})")
        return summary

    async def wait_idle(self) -> None:
        """Wait until no request is in flight."""
        while self._tasks:
            await asyncio.gather(
                *list(self._tasks.values()), return_exceptions=True
            )

    async def aclose(self) -> None:
        """Cancel every in-flight request."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    def state(self, address: str) -> Optional[WalletState]:
        return self._states.get(address)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _set_state(self, state: WalletState) -> None:
        self._states[state.address] = state
        self._version += 1
        if self._on_change is not None:
            self._on_change(state)

    def _start(self, address: str) -> asyncio.Task:
        previous = self._tasks.get(address)
        if previous is not None and not previous.done():
            _logger.debug(f"Cancelling superseded request for {address}")
            previous.cancel()

        state = self._states[address]
        generation = next(self._generations)
        self._set_state(
            replace(
                state,
                status=WalletStatus.LOADING,
                error=None,
                generation=generation,
            )
        )
        _logger.debug(f"{address}: {state.status.value} -> loading (#{generation})")

        task = asyncio.get_running_loop().create_task(
            self._run(address, generation)
        )
        self._tasks[address] = task
        task.add_done_callback(
            lambda done, addr=address: self._forget_task(addr, done)
        )
        return task

    def _forget_task(self, address: str, task: asyncio.Task) -> None:
        if self._tasks.get(address) is task:
            del self._tasks[address]

    async def _run(self, address: str, generation: int) -> Result[RewardsResponse]:
        try:
            result = await self._service.get_user_rewards(address)
        except asyncio.CancelledError:
            _logger.debug(f"Request #{generation} for {address} cancelled")
            raise
        except Exception as e:
            _logger.exception(f"Unexpected error fetching rewards for {address}")
            result = Result.fail_with_message(
                SOURCE,
                str(e) or type(e).__name__,
                severity=ErrorSeverity.ERROR,
                context={"wallet": address, "kind": "unexpected"},
                exception=e,
            )
        self._apply(address, generation, result)
        return result

    def _apply(
        self, address: str, generation: int, result: Result[RewardsResponse]
    ) -> bool:
        state = self._states.get(address)
        if state is None or state.generation != generation:
            _logger.debug(
                f"Discarding stale outcome #{generation} for {address}"
            )
            return False

        if result.success:
            new_state = replace(
                state, status=WalletStatus.OK, response=result.data, error=None
            )
        else:
            new_state = replace(
                state,
                status=WalletStatus.ERROR,
                response=None,
                error=result.message or "Unknown error",
            )
        _logger.debug(f"{address}: loading -> {new_state.status.value}")
        self._set_state(new_state)
        return True
