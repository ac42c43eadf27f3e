"""Data models: address and amount types, ledger events, HTTP bodies."""

from lpengine.models.events import Approval, Burn, Event, LoggedEvent, Mint, Swap, Sync, Transfer
from lpengine.models.types import Address, Uint256, is_valid_address, normalize_address

__all__ = [
    # Types
    "Address",
    "Uint256",
    "is_valid_address",
    "normalize_address",
    # Events
    "Approval",
    "Burn",
    "Event",
    "LoggedEvent",
    "Mint",
    "Swap",
    "Sync",
    "Transfer",
]
