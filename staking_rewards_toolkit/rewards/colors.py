"""
Wallet color assignment from a fixed categorical palette.

Wallets keep their color for as long as they are tracked; new wallets take
the first free palette color, and once the palette is exhausted assignment
wraps to the first color.
"""

from typing import Dict, Iterable, Mapping, Optional, Sequence

from staking_rewards_toolkit.shared.constants import CATEGORICAL_PALETTE


def find_unused_color(used: Iterable[str], palette: Sequence[str]) -> str:
    """First palette color not in `used`, else the first palette color."""
    if not palette:
        raise ValueError("palette must not be empty")
    used_set = set(used)
    for color in palette:
        if color not in used_set:
            return color
    return palette[0]


def assign_wallet_colors(
    wallets: Sequence[str],
    palette: Sequence[str] = CATEGORICAL_PALETTE,
    existing: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Map each wallet to a color.

    Wallets covered by `existing` keep their color; wallets no longer in
    `wallets` are dropped, which frees their colors. Deterministic for the
    same inputs in the same order.
    """
    existing = existing or {}
    current = set(wallets)
    color_map: Dict[str, str] = {
        w: c for w, c in existing.items() if w in current
    }
    used = set(color_map.values())
    for wallet in wallets:
        if wallet not in color_map:
            color = find_unused_color(used, palette)
            color_map[wallet] = color
            used.add(color)
    return {w: color_map[w] for w in dict.fromkeys(wallets)}


class WalletColorRegistry:
    """
    Incrementally maintained wallet -> color map.

    Mutated only by the wallet list (add/remove) and by explicit user
    overrides; readers get copies.
    """

    def __init__(self, palette: Sequence[str] = CATEGORICAL_PALETTE):
        if not palette:
            raise ValueError("palette must not be empty")
        self._palette = tuple(palette)
        self._colors: Dict[str, str] = {}

    @property
    def palette(self) -> Sequence[str]:
        return self._palette

    def sync(self, wallets: Sequence[str]) -> Dict[str, str]:
        """Re-derive the map for the current wallet list, keeping prior colors."""
        self._colors = assign_wallet_colors(wallets, self._palette, self._colors)
        return dict(self._colors)

    def add(self, wallet: str) -> str:
        if wallet not in self._colors:
            self._colors[wallet] = find_unused_color(
                self._colors.values(), self._palette
            )
        return self._colors[wallet]

    def remove(self, wallet: str) -> None:
        self._colors.pop(wallet, None)

    def set_color(self, wallet: str, color: str) -> None:
        """Manual override; only tracked wallets can be recolored."""
        if wallet not in self._colors:
            raise KeyError(wallet)
        self._colors[wallet] = color

    def reset(self) -> Dict[str, str]:
        """Discard overrides and reassign colors in tracking order."""
        self._colors = assign_wallet_colors(list(self._colors), self._palette)
        return dict(self._colors)

    def get(self, wallet: str) -> Optional[str]:
        return self._colors.get(wallet)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._colors)
