"""Ledger building blocks shared by the base asset, the tradable asset and pool shares."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from lpengine.constants import ZERO_ADDRESS
from lpengine.errors import (
    BalanceOverflow,
    InsufficientAllowance,
    InsufficientBalance,
    InvalidAmount,
)
from lpengine.models.events import Approval, Transfer
from lpengine.models.types import UINT256_MAX, normalize_address
from lpengine.safe_int import S

if TYPE_CHECKING:
    from lpengine.host import Host

# Called as hook(sender, amount) after funds land at the hooked account.
# Raising rejects the transfer; calling back into other components is allowed.
ReceiveHook = Callable[[str, int], None]


def require_amount(amount: int) -> int:
    """Validate a ledger amount.

    Raises:
        InvalidAmount: If amount is not an int in [0, 2^256-1]
    """
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise InvalidAmount(f"Amount must be an integer, got {type(amount).__name__}")
    if amount < 0 or amount > UINT256_MAX:
        raise InvalidAmount(f"Amount out of uint256 range: {amount}")
    return amount


class Ledger:
    """Balance book for one asset, journaled by the host.

    Reads from the writing thread see live balances; reads from any other
    thread see the balances of the last committed transaction.
    """

    def __init__(self, host: Host, address: str, *, symbol: str) -> None:
        self.host = host
        self.address = normalize_address(address)
        self.symbol = symbol
        self._balances: dict[str, int] = {}
        self._published_balances: dict[str, int] = {}
        self._hooks: dict[str, ReceiveHook] = {}
        host.register(self)

    def balance_of(self, account: str) -> int:
        balances = self.host.view(self._balances, self._published_balances)
        return balances.get(normalize_address(account), 0)

    def set_receive_hook(self, account: str, hook: ReceiveHook | None) -> None:
        """Install (or clear, with None) the callback run when `account` receives funds."""
        account = normalize_address(account)
        if hook is None:
            self._hooks.pop(account, None)
        else:
            self._hooks[account] = hook

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        """Move `amount` from sender to to.

        Raises:
            InvalidAmount: If amount is negative or not an int
            InsufficientBalance: If sender holds less than amount
        """
        with self.host.transaction():
            self._transfer(normalize_address(sender), normalize_address(to), require_amount(amount))
        return True

    def _transfer(self, sender: str, to: str, amount: int) -> None:
        received = self._move(sender, to, amount)
        hook = self._hooks.get(to)
        if hook is not None:
            hook(sender, received)

    def _move(self, sender: str, to: str, amount: int) -> int:
        """Debit sender and credit to. Returns the amount credited to `to`."""
        self._debit(sender, amount)
        self._credit(to, amount)
        self.host.emit(self.address, Transfer(sender=sender, to=to, amount=amount))
        return amount

    def _debit(self, account: str, amount: int) -> None:
        balance = self._balances.get(account, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"{self.symbol}: transfer amount {amount} exceeds balance {balance} of {account}"
            )
        self._balances[account] = balance - amount

    def _credit(self, account: str, amount: int) -> None:
        balance = self._balances.get(account, 0) + amount
        if balance > UINT256_MAX:
            raise BalanceOverflow(
                f"{self.symbol}: crediting {amount} overflows balance of {account}"
            )
        self._balances[account] = balance

    # --- Journal ---

    def snapshot(self) -> Any:
        return dict(self._balances)

    def restore(self, state: Any) -> None:
        self._balances = dict(state)

    def publish(self) -> None:
        self._published_balances = dict(self._balances)


class FungibleToken(Ledger):
    """Ledger with a tracked supply and spender allowances."""

    def __init__(
        self,
        host: Host,
        address: str,
        *,
        name: str,
        symbol: str,
        decimals: int = 18,
    ) -> None:
        self.name = name
        self.decimals = decimals
        self._total_supply = 0
        self._published_total_supply = 0
        self._allowances: dict[tuple[str, str], int] = {}
        self._published_allowances: dict[tuple[str, str], int] = {}
        super().__init__(host, address, symbol=symbol)

    @property
    def total_supply(self) -> int:
        return self.host.view(self._total_supply, self._published_total_supply)

    def allowance(self, owner: str, spender: str) -> int:
        allowances = self.host.view(self._allowances, self._published_allowances)
        return allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        """Let `spender` move up to `amount` of owner's balance."""
        owner, spender = normalize_address(owner), normalize_address(spender)
        with self.host.transaction():
            self._allowances[(owner, spender)] = require_amount(amount)
            self.host.emit(self.address, Approval(owner=owner, spender=spender, amount=amount))
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        """Move `amount` from owner to to on behalf of spender.

        An allowance of 2^256-1 is treated as unlimited and never decremented.

        Raises:
            InsufficientAllowance: If spender's allowance is below amount
            InsufficientBalance: If owner holds less than amount
        """
        spender, owner, to = (
            normalize_address(spender),
            normalize_address(owner),
            normalize_address(to),
        )
        require_amount(amount)
        with self.host.transaction():
            allowed = self._allowances.get((owner, spender), 0)
            if allowed < amount:
                raise InsufficientAllowance(
                    f"{self.symbol}: allowance {allowed} of {spender} below {amount}"
                )
            if allowed != UINT256_MAX:
                self._allowances[(owner, spender)] = allowed - amount
            self._transfer(owner, to, amount)
        return True

    def _mint(self, to: str, amount: int) -> None:
        supply = self._total_supply + amount
        if supply > UINT256_MAX:
            raise BalanceOverflow(f"{self.symbol}: minting {amount} overflows total supply")
        self._total_supply = supply
        self._credit(to, amount)
        self.host.emit(self.address, Transfer(sender=ZERO_ADDRESS, to=to, amount=amount))

    def _burn(self, account: str, amount: int) -> None:
        self._debit(account, amount)
        self._total_supply = (S(self._total_supply) - amount).value
        self.host.emit(self.address, Transfer(sender=account, to=ZERO_ADDRESS, amount=amount))

    # --- Journal ---

    def snapshot(self) -> Any:
        return (super().snapshot(), self._total_supply, dict(self._allowances))

    def restore(self, state: Any) -> None:
        balances, self._total_supply, allowances = state
        super().restore(balances)
        self._allowances = dict(allowances)

    def publish(self) -> None:
        super().publish()
        self._published_total_supply = self._total_supply
        self._published_allowances = dict(self._allowances)
