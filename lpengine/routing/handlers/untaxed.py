"""Swap path for a quote token whose transfer tax is off."""

from __future__ import annotations

from typing import TYPE_CHECKING

from lpengine.errors import MustNotBeTaxed
from lpengine.routing.handlers.base import BaseSwapPath
from lpengine.routing.types import SwapDirection, SwapOutcome

if TYPE_CHECKING:
    from lpengine.routing.router import Router


class UntaxedSwapPath(BaseSwapPath):
    """Exact-input swaps priced up front.

    With no tax the pool receives exactly the nominal input, so the output
    is computed from the reserves and checked against the minimum before
    any asset moves.
    """

    taxed = False

    def _require_tax_state(self, tax_active: bool) -> None:
        if tax_active:
            raise MustNotBeTaxed()

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
        self._check_minimum(direction, amount_out, amount_out_min)

        router.pool.swap(0, amount_out, to, sender=router.address, value=amount_in)
        return SwapOutcome(
            direction=direction,
            amount_in=amount_in,
            amount_received=amount_in,
            amount_out=amount_out,
            taxed=False,
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
        amount_out = router.quote_swap(direction, amount_in)
        self._require_output(direction, amount_out)
        self._check_minimum(direction, amount_out, amount_out_min)

        router.token.transfer_from(router.address, sender, router.pool.address, amount_in)
        router.pool.swap(amount_out, 0, to, sender=router.address)
        return SwapOutcome(
            direction=direction,
            amount_in=amount_in,
            amount_received=amount_in,
            amount_out=amount_out,
            taxed=False,
        )
