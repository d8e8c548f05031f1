"""Native wallet address checks."""

from staking_rewards_toolkit.shared.constants import AddressConstants

_CHARSET = frozenset(AddressConstants.BECH32_CHARSET)


def is_native_address(value: str) -> bool:
    """
    True for a bech32 address with the native prefix and length.

    Comparison is exact: no trimming, no case folding.
    """
    if not isinstance(value, str):
        return False
    if len(value) != AddressConstants.NATIVE_LENGTH:
        return False
    if not value.startswith(AddressConstants.NATIVE_PREFIX):
        return False
    return all(ch in _CHARSET for ch in value[len(AddressConstants.NATIVE_PREFIX):])
