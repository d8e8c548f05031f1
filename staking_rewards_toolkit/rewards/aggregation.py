"""
Reward aggregation across providers and selected wallets.

Attribution rules:
- A record's staker share goes to the record's wallet, only when that
  wallet is selected.
- The owner bonus belongs to the (provider, epoch), not to a record. It is
  counted at most once per (provider, epoch), credited to the provider's
  owner, and only when the owner is selected and the provider has at least
  one selected record for that epoch.
- When selected records of one (provider, epoch) disagree on the bonus, the
  owner's own record wins, otherwise the largest value.

Because the global total and the per-wallet series apply the same rules,
per-wallet values at an epoch always sum to that epoch's total.
"""

from collections import defaultdict
from dataclasses import replace
from typing import (
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from staking_rewards_toolkit.rewards.models import (
    Currency,
    EpochReward,
    EpochTotal,
    Provider,
    RewardsResponse,
    SeriesPoint,
    WalletShare,
)
from staking_rewards_toolkit.utils.numeric import safe_divide, snap_zero

ProviderData = Mapping[str, Sequence[EpochReward]]


# =============================================================================
# STORE -> PROVIDER RECORDS
# =============================================================================


def _selected_responses(
    responses: Mapping[str, RewardsResponse], selected: Sequence[str]
) -> List[Tuple[str, RewardsResponse]]:
    return [(w, responses[w]) for w in selected if w in responses]


def flatten_provider_rewards(
    responses: Mapping[str, RewardsResponse],
    selected: Sequence[str],
    focus_provider: Optional[str] = None,
) -> Dict[str, List[EpochReward]]:
    """
    Merge selected wallets' responses into provider -> records.

    Every record is tagged with the wallet it was fetched for. With a focus
    provider, only that provider's records are kept.
    """
    merged: Dict[str, List[EpochReward]] = {}
    for wallet, response in _selected_responses(responses, selected):
        for provider, records in response.providers_rewards.items():
            if focus_provider is not None and provider != focus_provider:
                continue
            bucket = merged.setdefault(provider, [])
            for record in records:
                if record.wallet_address != wallet:
                    record = replace(record, wallet_address=wallet)
                bucket.append(record)
    return merged


def collect_provider_owners(
    responses: Mapping[str, RewardsResponse], selected: Sequence[str]
) -> Dict[str, str]:
    """provider -> owner wallet; first occurrence wins."""
    owners: Dict[str, str] = {}
    for _, response in _selected_responses(responses, selected):
        for provider in response.providers:
            if provider.owner_address:
                owners.setdefault(provider.provider_address, provider.owner_address)
    return owners


def collect_providers(
    responses: Mapping[str, RewardsResponse], selected: Sequence[str]
) -> List[Provider]:
    """De-duplicated providers across selected wallets, first occurrence wins."""
    seen: Dict[str, Provider] = {}
    for _, response in _selected_responses(responses, selected):
        for provider in response.providers:
            seen.setdefault(provider.provider_address, provider)
    return list(seen.values())


def merge_provider_totals(
    responses: Mapping[str, RewardsResponse], selected: Sequence[str]
) -> Dict[str, float]:
    """Sum totalRewardsPerProvider across selected wallets."""
    totals: Dict[str, float] = defaultdict(float)
    for _, response in _selected_responses(responses, selected):
        for provider, amount in response.total_rewards_per_provider.items():
            totals[provider] += amount
    return dict(totals)


def sort_providers(
    providers: Iterable[Provider],
    totals: Mapping[str, float],
    descending: bool = True,
) -> List[Provider]:
    """Order providers by total reward, then by display label."""
    by_label = sorted(providers, key=lambda p: p.label.lower())
    return sorted(
        by_label,
        key=lambda p: totals.get(p.provider_address, 0.0),
        reverse=descending,
    )


def current_epoch(
    responses: Mapping[str, RewardsResponse], selected: Sequence[str]
) -> Optional[int]:
    """Network epoch as reported by the freshest selected response."""
    epochs = [r.current_epoch for _, r in _selected_responses(responses, selected)]
    return max(epochs) if epochs else None


# =============================================================================
# ATTRIBUTION
# =============================================================================


def _amounts(record: EpochReward, currency: Currency) -> Tuple[float, float]:
    if currency is Currency.USD:
        return snap_zero(record.user_reward_usd), snap_zero(record.owner_reward_usd)
    return snap_zero(record.user_reward), snap_zero(record.owner_reward)


def _owner_bonus_by_epoch(
    records: Sequence[EpochReward],
    owner: Optional[str],
    selected: frozenset,
    currency: Currency,
) -> Dict[int, float]:
    """Bonus owed to `owner` per epoch for a single provider."""
    if not owner or owner not in selected:
        return {}

    own: Dict[int, float] = {}
    largest: Dict[int, float] = {}
    for record in records:
        if record.wallet_address not in selected:
            continue
        _, bonus = _amounts(record, currency)
        if record.wallet_address == owner:
            own[record.epoch] = max(own.get(record.epoch, 0.0), bonus)
        largest[record.epoch] = max(largest.get(record.epoch, 0.0), bonus)

    return {epoch: own.get(epoch, value) for epoch, value in largest.items()}


def _attribute(
    provider_data: ProviderData,
    owner_of: Mapping[str, str],
    selected: Sequence[str],
    currency: Currency,
) -> Dict[int, Dict[str, float]]:
    """epoch -> wallet -> attributed reward, selected wallets only."""
    selected_set = frozenset(selected)
    by_epoch: Dict[int, Dict[str, float]] = defaultdict(lambda: defaultdict(float))

    for provider, records in provider_data.items():
        owner = owner_of.get(provider)
        for record in records:
            if record.wallet_address not in selected_set:
                continue
            user, _ = _amounts(record, currency)
            by_epoch[record.epoch][record.wallet_address] += user

        bonuses = _owner_bonus_by_epoch(records, owner, selected_set, currency)
        for epoch, bonus in bonuses.items():
            by_epoch[epoch][owner] += bonus

    return by_epoch


def _to_series(
    by_epoch: Mapping[int, Mapping[str, float]], selected: Sequence[str]
) -> List[SeriesPoint]:
    wallets = list(dict.fromkeys(selected))
    return [
        SeriesPoint(
            epoch=epoch,
            values={w: snap_zero(by_epoch[epoch].get(w, 0.0)) for w in wallets},
        )
        for epoch in sorted(by_epoch)
    ]


def aggregate_epoch_totals(
    provider_data: ProviderData,
    owner_of: Mapping[str, str],
    selected: Sequence[str],
    currency: Currency = Currency.NATIVE,
) -> List[EpochTotal]:
    """
    Global aggregate per epoch, ascending.

    total(e) = sum of selected staker shares at e plus, per provider, the
    owner bonus at e when the owner is selected.
    """
    selected_set = frozenset(selected)
    totals: Dict[int, float] = defaultdict(float)

    for provider, records in provider_data.items():
        for record in records:
            if record.wallet_address in selected_set:
                user, _ = _amounts(record, currency)
                totals[record.epoch] += user
        bonuses = _owner_bonus_by_epoch(
            records, owner_of.get(provider), selected_set, currency
        )
        for epoch, bonus in bonuses.items():
            totals[epoch] += bonus

    return [
        EpochTotal(epoch=epoch, total_reward=snap_zero(totals[epoch]))
        for epoch in sorted(totals)
    ]


def aggregate_rewards_by_wallet(
    provider_data: ProviderData,
    owner_of: Mapping[str, str],
    selected: Sequence[str],
    currency: Currency = Currency.NATIVE,
) -> List[SeriesPoint]:
    """Per-wallet per-epoch rewards; every selected wallet appears in every point."""
    by_epoch = _attribute(provider_data, owner_of, selected, currency)
    return _to_series(by_epoch, selected)


def aggregate_provider_rewards_by_wallet(
    provider_data: ProviderData,
    provider: str,
    owner_of: Mapping[str, str],
    selected: Sequence[str],
    currency: Currency = Currency.NATIVE,
) -> List[SeriesPoint]:
    """Same as aggregate_rewards_by_wallet, restricted to one provider."""
    restricted = {provider: provider_data.get(provider, [])}
    return aggregate_rewards_by_wallet(restricted, owner_of, selected, currency)


def aggregate_staked_by_wallet(
    provider_data: ProviderData, selected: Sequence[str]
) -> List[SeriesPoint]:
    """Per-wallet per-epoch staked amount, summed over providers."""
    selected_set = frozenset(selected)
    by_epoch: Dict[int, Dict[str, float]] = defaultdict(lambda: defaultdict(float))
    for records in provider_data.values():
        for record in records:
            if record.wallet_address in selected_set:
                by_epoch[record.epoch][record.wallet_address] += snap_zero(
                    record.staked
                )
    return _to_series(by_epoch, selected)


# =============================================================================
# DISTRIBUTION
# =============================================================================


def wallet_totals(series: Sequence[SeriesPoint]) -> Dict[str, float]:
    """Sum each wallet's values over a daily series."""
    totals: Dict[str, float] = defaultdict(float)
    for point in series:
        for wallet, value in point.values.items():
            totals[wallet] += value
    return dict(totals)


def wallet_distribution(
    totals: Mapping[str, float],
) -> List[WalletShare]:
    """Per-wallet totals with their percentage of the grand total, descending."""
    grand_total = sum(totals.values())
    shares = [
        WalletShare(
            address=wallet,
            total=total,
            percentage=safe_divide(total, grand_total) * 100.0,
        )
        for wallet, total in totals.items()
    ]
    return sorted(shares, key=lambda s: s.total, reverse=True)
