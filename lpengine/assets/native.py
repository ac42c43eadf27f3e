"""Base asset ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from lpengine.assets.base import Ledger, require_amount
from lpengine.models.types import normalize_address

if TYPE_CHECKING:
    from lpengine.host import Host

logger = structlog.get_logger()


class NativeAsset(Ledger):
    """The host's native currency.

    Contracts receive it only as `value` attached to one of their entry
    points; their receive hooks reject anything else. User accounts accept
    it freely unless a hook says otherwise.
    """

    def __init__(self, host: Host, *, symbol: str = "ETH") -> None:
        super().__init__(host, host.allocate_address("native"), symbol=symbol)

    def credit(self, account: str, amount: int) -> None:
        """Create `amount` of the native asset at `account` (genesis / faucet)."""
        account = normalize_address(account)
        with self.host.transaction():
            self._credit(account, require_amount(amount))
        logger.debug("native_credited", account=account, amount=amount)
