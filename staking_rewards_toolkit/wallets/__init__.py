"""Wallet address validation and herotag resolution."""

from .resolver import AddressResolution, AddressResolver
from .validation import is_native_address

__all__ = ["AddressResolver", "AddressResolution", "is_native_address"]
