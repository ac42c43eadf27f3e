"""Liquidity share ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lpengine.assets.base import FungibleToken
from lpengine.constants import (
    SHARE_TOKEN_DECIMALS,
    SHARE_TOKEN_NAME,
    SHARE_TOKEN_SYMBOL,
    SINK_ADDRESS,
)
from lpengine.errors import InvalidRecipient, LockedSharesError

if TYPE_CHECKING:
    from lpengine.host import Host


class ShareToken(FungibleToken):
    """Fungible claim on a proportional slice of both reserves.

    The sink is a reserved account, not a holder: it is credited once with
    the locked minimum liquidity and can never be debited or named as a
    transfer recipient afterwards.
    """

    def __init__(self, host: Host, address: str) -> None:
        super().__init__(
            host,
            address,
            name=SHARE_TOKEN_NAME,
            symbol=SHARE_TOKEN_SYMBOL,
            decimals=SHARE_TOKEN_DECIMALS,
        )

    def lock_minimum(self, amount: int) -> None:
        """Mint the permanently locked minimum liquidity to the sink."""
        self._mint(SINK_ADDRESS, amount)

    def mint(self, to: str, amount: int) -> None:
        if to == SINK_ADDRESS:
            raise InvalidRecipient("Shares cannot be minted to the sink")
        self._mint(to, amount)

    def burn(self, account: str, amount: int) -> None:
        self._burn(account, amount)

    def _transfer(self, sender: str, to: str, amount: int) -> None:
        if to == SINK_ADDRESS:
            raise InvalidRecipient("Shares cannot be sent to the sink")
        super()._transfer(sender, to, amount)

    def _debit(self, account: str, amount: int) -> None:
        if account == SINK_ADDRESS:
            raise LockedSharesError()
        super()._debit(account, amount)
