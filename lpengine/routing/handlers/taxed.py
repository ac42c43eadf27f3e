"""Swap path for a quote token whose transfer tax is on."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lpengine.errors import MustBeTaxed
from lpengine.routing.handlers.base import BaseSwapPath
from lpengine.routing.types import SwapDirection, SwapOutcome
from lpengine.safe_int import S

if TYPE_CHECKING:
    from lpengine.routing.router import Router


class TaxedSwapPath(BaseSwapPath):
    """Exact-input swaps validated after the fact.

    The tax makes the amount that actually lands unpredictable from the
    nominal figure, so this path moves the nominal amount, prices the swap
    from what the pool really holds and checks the realized output once
    the recipient has been paid. A miss raises and the surrounding
    transaction rolls every transfer back.
    """

    taxed = True

    def _require_tax_state(self, tax_active: bool) -> None:
        if not tax_active:
            raise MustBeTaxed()

    def _base_to_quote(
        self,
        router: Router,
        amount_in: int,
        amount_out_min: int,
        to: str,
    ) -> SwapOutcome:
        direction = SwapDirection.BASE_TO_QUOTE
        amount_out = router.quote_swap(direction, amount_in)
        self._require_output(direction, amount_out)

        balance_before = router.token.balance_of(to)
        router.pool.swap(0, amount_out, to, sender=router.address, value=amount_in)
        realized = (S(router.token.balance_of(to)) - balance_before).value

        self._check_minimum(direction, realized, amount_out_min)
        return SwapOutcome(
            direction=direction,
            amount_in=amount_in,
            amount_received=amount_in,
            amount_out=realized,
            taxed=True,
        )

    def _quote_to_base(
        self,
        router: Router,
        amount_in: int,
        amount_out_min: int,
        to: str,
        sender: str,
    ) -> SwapOutcome:
        direction = SwapDirection.QUOTE_TO_BASE
        pool = router.pool
        _, reserve_quote = pool.get_reserves()

        router.token.transfer_from(router.address, sender, pool.address, amount_in)
        received = (S(router.token.balance_of(pool.address)) - reserve_quote).value
        amount_out = router.quote_swap(direction, received)
        self._require_output(direction, amount_out)

        balance_before = router.native.balance_of(to)
        pool.swap(amount_out, 0, to, sender=router.address)
        realized = (S(router.native.balance_of(to)) - balance_before).value

        self._check_minimum(direction, realized, amount_out_min)
        return SwapOutcome(
            direction=direction,
            amount_in=amount_in,
            amount_received=received,
            amount_out=realized,
            taxed=True,
        )
