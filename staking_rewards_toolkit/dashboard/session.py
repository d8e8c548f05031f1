"""
StakingDashboard - the entry point a presentation layer drives.

Wires the resolver, the wallet-data orchestrator, the derivation controller,
the color registry and the governance service behind the dashboard actions:
add/remove wallets, change the selection or focus provider, change view
parameters, and refresh rewards or governance data.
"""

import asyncio
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from staking_rewards_toolkit.dashboard.controller import (
    DashboardController,
    DerivedViews,
    Memo,
    ViewParams,
)
from staking_rewards_toolkit.dashboard.orchestrator import (
    RewardsStore,
    WalletDataOrchestrator,
)
from staking_rewards_toolkit.governance.analyzer import analyze
from staking_rewards_toolkit.governance.models import (
    GovernanceReport,
    GovernanceSnapshot,
    VoteMode,
)
from staking_rewards_toolkit.governance.service import GovernanceVotesService
from staking_rewards_toolkit.rewards.colors import WalletColorRegistry
from staking_rewards_toolkit.rewards.service import RewardsService
from staking_rewards_toolkit.shared.constants import CATEGORICAL_PALETTE
from staking_rewards_toolkit.shared.logging import get_logger
from staking_rewards_toolkit.shared.results import (
    ErrorSeverity,
    RefreshSummary,
    Result,
)
from staking_rewards_toolkit.wallets.resolver import AddressResolver

_logger = get_logger(__name__)


class WalletSelection:
    """
    Tracked and selected wallets, both in insertion order.

    Every selected wallet is tracked, at every observable moment.
    """

    def __init__(self):
        self._added: List[str] = []
        self._selected: List[str] = []
        self.focus_provider: Optional[str] = None

    @property
    def added(self) -> List[str]:
        return list(self._added)

    @property
    def selected(self) -> List[str]:
        return list(self._selected)

    def is_tracked(self, address: str) -> bool:
        return address in self._added

    def add(self, address: str) -> bool:
        """
        Track and select a wallet.

        Returns False when it was already tracked (it is re-selected). A new
        wallet clears the focus provider.
        """
        if address in self._added:
            if address not in self._selected:
                self._selected.append(address)
            return False
        self._added.append(address)
        self._selected.append(address)
        self.focus_provider = None
        return True

    def remove(self, address: str) -> bool:
        if address not in self._added:
            return False
        self._added.remove(address)
        if address in self._selected:
            self._selected.remove(address)
        return True

    def toggle(self, address: str) -> bool:
        """Flip selection of a tracked wallet; untracked wallets are ignored."""
        if address not in self._added:
            return False
        if address in self._selected:
            self._selected.remove(address)
        else:
            self._selected.append(address)
        return True

    def set_selected(self, addresses: Sequence[str]) -> List[str]:
        """Replace the selection, dropping untracked and duplicate addresses."""
        self._selected = [
            a for a in dict.fromkeys(addresses) if a in self._added
        ]
        return self.selected


class StakingDashboard:
    """
    Facade over the staking dashboard core.

    Actions that start requests must be awaited (or called) inside a running
    event loop.
    """

    def __init__(
        self,
        rewards_service: Optional[RewardsService] = None,
        governance_service: Optional[GovernanceVotesService] = None,
        resolver: Optional[AddressResolver] = None,
        palette: Sequence[str] = CATEGORICAL_PALETTE,
    ):
        self._rewards_service = rewards_service or RewardsService()
        self._governance_service = governance_service or GovernanceVotesService()
        self._resolver = resolver or AddressResolver()

        self.selection = WalletSelection()
        self.colors = WalletColorRegistry(palette)
        self.orchestrator = WalletDataOrchestrator(self._rewards_service)
        self.controller = DashboardController(self.orchestrator.store)
        self.params = ViewParams()

        self._governance_task: Optional[asyncio.Task] = None
        self._governance_generation = 0
        self.governance_snapshot: Optional[GovernanceSnapshot] = None
        self.governance_error: Optional[str] = None
        self._governance_report = Memo("governance_report", self._build_report)

    @property
    def store(self) -> RewardsStore:
        return self.orchestrator.store

    # -------------------------------------------------------------------------
    # Wallet actions
    # -------------------------------------------------------------------------

    async def add_wallet(self, value: str) -> Result[str]:
        """
        Resolve user input and start tracking the wallet.

        Returns:
            Result with the resolved address, or a failed Result carrying the
            validation message (nothing is tracked in that case)
        """
        resolution = await self._resolver.resolve(value)
        if not resolution.ok:
            return Result.fail_with_message(
                "wallet_input",
                resolution.error,
                severity=ErrorSeverity.WARNING,
                context={"input": value, "kind": "validation"},
            )

        address = resolution.resolved_address
        if self.selection.add(address):
            self.colors.add(address)
            self.orchestrator.add_wallet(address)
            _logger.info(f"Tracking wallet {address}")
        return Result.ok(address)

    def remove_wallet(self, address: str) -> bool:
        removed = self.selection.remove(address)
        self.colors.remove(address)
        self.orchestrator.remove_wallet(address)
        return removed

    def toggle_selected(self, address: str) -> bool:
        return self.selection.toggle(address)

    def set_selected(self, addresses: Sequence[str]) -> List[str]:
        return self.selection.set_selected(addresses)

    def set_focus_provider(self, provider: Optional[str]) -> None:
        self.selection.focus_provider = provider

    def set_view(self, **changes) -> ViewParams:
        """Update view parameters; invalid values raise ValueError."""
        self.params = replace(self.params, **changes)
        return self.params

    def set_wallet_color(self, address: str, color: str) -> None:
        self.colors.set_color(address, color)

    def reset_wallet_colors(self) -> Dict[str, str]:
        return self.colors.reset()

    async def refresh_all(self) -> RefreshSummary:
        return await self.orchestrator.refresh_all()

    async def wait_idle(self) -> None:
        await self.orchestrator.wait_idle()

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def views(self) -> DerivedViews:
        return self.controller.views(
            self.selection.selected, self.selection.focus_provider, self.params
        )

    def wallet_errors(self) -> Dict[str, str]:
        return self.store.errors()

    # -------------------------------------------------------------------------
    # Governance
    # -------------------------------------------------------------------------

    async def refresh_governance(self) -> Result[GovernanceSnapshot]:
        """
        Fetch the governance snapshot.

        A newer call supersedes an in-flight one; the superseded call
        returns a failed Result with kind "cancelled" and applies nothing.
        """
        self._governance_generation += 1
        generation = self._governance_generation
        if self._governance_task is not None and not self._governance_task.done():
            self._governance_task.cancel()

        task = asyncio.get_running_loop().create_task(
            self._governance_service.get_votes()
        )
        self._governance_task = task
        try:
            result = await task
        except asyncio.CancelledError:
            if task.cancelled() and generation != self._governance_generation:
                return Result.fail_with_message(
                    "governance",
                    "Superseded by a newer request",
                    severity=ErrorSeverity.WARNING,
                    context={"kind": "cancelled"},
                )
            raise

        if generation != self._governance_generation:
            _logger.debug("Discarding stale governance snapshot")
            return result

        if result.success:
            self.governance_snapshot = result.data
            self.governance_error = None
        else:
            self.governance_error = result.message
        return result

    @staticmethod
    def _build_report(snapshot: GovernanceSnapshot, mode: VoteMode) -> GovernanceReport:
        return analyze(snapshot, mode)

    def governance_report(
        self, mode: VoteMode = VoteMode.CURRENT
    ) -> Optional[GovernanceReport]:
        """Analyzed governance view for a mode; None before the first snapshot."""
        if self.governance_snapshot is None:
            return None
        return self._governance_report(self.governance_snapshot, VoteMode(mode))

    async def aclose(self) -> None:
        await self.orchestrator.aclose()
        if self._governance_task is not None and not self._governance_task.done():
            self._governance_task.cancel()
            await asyncio.gather(self._governance_task, return_exceptions=True)
