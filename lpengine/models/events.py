"""State-change events emitted by ledgers and the pool.

Events are appended to the host's event log inside the emitting
transaction, so a rolled-back call leaves no events behind.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Transfer:
    sender: str
    to: str
    amount: int


@dataclass(frozen=True)
class Approval:
    owner: str
    spender: str
    amount: int


@dataclass(frozen=True)
class Mint:
    """Shares issued against a deposit of both assets."""

    sender: str
    amount_base: int
    amount_quote: int


@dataclass(frozen=True)
class Burn:
    """Shares redeemed for a proportional slice of both reserves."""

    sender: str
    amount_base_out: int
    amount_quote_out: int
    to: str


@dataclass(frozen=True)
class Swap:
    sender: str
    amount_base_in: int
    amount_quote_in: int
    amount_base_out: int
    amount_quote_out: int
    to: str


@dataclass(frozen=True)
class Sync:
    """Reserves were resynchronised to the pool's actual balances."""

    reserve_base: int
    reserve_quote: int


Event = Transfer | Approval | Mint | Burn | Swap | Sync


@dataclass(frozen=True)
class LoggedEvent:
    """An event together with the address that emitted it."""

    emitter: str
    event: Event
