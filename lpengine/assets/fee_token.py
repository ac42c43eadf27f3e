"""Tradable asset with a switchable transfer tax.

While the tax flag is on, every transfer debits the sender the nominal
amount, pays `amount * tax_bps // 10000` to the treasury and credits the
remainder to the recipient. Counterparties that need the real amount must
read balances rather than trust the nominal figure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from lpengine.assets.base import FungibleToken, require_amount
from lpengine.constants import BPS_DENOMINATOR, TRANSFER_TAX_BPS
from lpengine.errors import Unauthorized
from lpengine.models.events import Transfer
from lpengine.models.types import normalize_address
from lpengine.safe_int import S

if TYPE_CHECKING:
    from lpengine.host import Host

logger = structlog.get_logger()


class FeeToken(FungibleToken):
    """Fungible token whose transfers may deduct a tax to a treasury.

    Args:
        host: Execution host
        manager: Only account allowed to toggle the tax
        treasury: Receives the initial supply and all collected tax
        initial_supply: Amount minted to the treasury at creation
        tax_bps: Tax rate in basis points (default 200 = 2%)
    """

    def __init__(
        self,
        host: Host,
        *,
        manager: str,
        treasury: str,
        initial_supply: int,
        tax_bps: int = TRANSFER_TAX_BPS,
        name: str = "Quote Token",
        symbol: str = "QTE",
    ) -> None:
        if not 0 <= tax_bps < BPS_DENOMINATOR:
            raise ValueError(f"tax_bps must be in [0, {BPS_DENOMINATOR}): {tax_bps}")
        self.manager = normalize_address(manager)
        self.treasury = normalize_address(treasury)
        self.tax_bps = tax_bps
        self._tax_active = False
        self._published_tax_active = False
        super().__init__(host, host.allocate_address(f"token:{symbol}"), name=name, symbol=symbol)
        with host.transaction():
            self._mint(self.treasury, require_amount(initial_supply))

    def is_tax_active(self) -> bool:
        return self.host.view(self._tax_active, self._published_tax_active)

    def enable_transfer_tax(self, caller: str) -> None:
        self._set_tax(caller, True)

    def disable_transfer_tax(self, caller: str) -> None:
        self._set_tax(caller, False)

    def _set_tax(self, caller: str, active: bool) -> None:
        if normalize_address(caller) != self.manager:
            raise Unauthorized(f"{caller} is not the token manager")
        with self.host.transaction():
            self._tax_active = active
        logger.info("transfer_tax_toggled", token=self.symbol, active=active)

    def tax_on(self, amount: int) -> int:
        """Tax that a transfer of `amount` would pay right now."""
        if not self.is_tax_active():
            return 0
        return ((S(amount) * self.tax_bps) // BPS_DENOMINATOR).value

    def _move(self, sender: str, to: str, amount: int) -> int:
        tax = self.tax_on(amount)
        if tax == 0:
            return super()._move(sender, to, amount)

        received = (S(amount) - tax).value
        self._debit(sender, amount)
        self._credit(self.treasury, tax)
        self._credit(to, received)
        self.host.emit(self.address, Transfer(sender=sender, to=self.treasury, amount=tax))
        self.host.emit(self.address, Transfer(sender=sender, to=to, amount=received))
        return received

    # --- Journal ---

    def snapshot(self) -> Any:
        return (super().snapshot(), self._tax_active)

    def restore(self, state: Any) -> None:
        token_state, self._tax_active = state
        super().restore(token_state)

    def publish(self) -> None:
        super().publish()
        self._published_tax_active = self._tax_active
