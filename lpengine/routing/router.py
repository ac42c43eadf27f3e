"""Router: the caller-facing surface over a LiquidityPool.

The router moves assets into the pool on the caller's behalf, solves the
proportional deposit pair, enforces slippage bounds and dispatches swaps
to the taxed or untaxed path. It keeps no state of its own between calls;
every call runs inside one host transaction, so a failed bound unwinds
every transfer the call made.
"""

from __future__ import annotations

import structlog

from lpengine.amm.constant_product import ConstantProduct
from lpengine.amm.pool import LiquidityPool
from lpengine.assets.base import require_amount
from lpengine.errors import (
    BaseMinimumTooHigh,
    InsufficientBaseAmount,
    InsufficientLiquidity,
    InsufficientQuoteAmount,
    MustSendPositiveBase,
    NoSharesProvided,
    QuoteMinimumTooHigh,
    UnsolicitedTransfer,
)
from lpengine.models.types import normalize_address
from lpengine.routing.handlers import SwapPath, TaxedSwapPath, UntaxedSwapPath
from lpengine.routing.types import (
    LiquidityResult,
    SwapDirection,
    SwapOutcome,
    WithdrawalResult,
)

logger = structlog.get_logger()


class Router:
    """Liquidity and swap entry points for one pool.

    Base asset is attached to calls as `value`; quote and shares are pulled
    from the caller with `transfer_from`, so callers approve the router
    first.

    Args:
        pool: The pool to route through
        untaxed_path: Swap path used while the quote token's tax is off
        taxed_path: Swap path used while the quote token's tax is on
    """

    def __init__(
        self,
        pool: LiquidityPool,
        untaxed_path: SwapPath | None = None,
        taxed_path: SwapPath | None = None,
    ) -> None:
        self.pool = pool
        self.host = pool.host
        self.native = pool.native
        self.token = pool.token
        self.config = pool.config
        self.address = self.host.allocate_address("router")
        self._paths: dict[bool, SwapPath] = {
            False: untaxed_path if untaxed_path is not None else UntaxedSwapPath(),
            True: taxed_path if taxed_path is not None else TaxedSwapPath(),
        }
        self._accepting_base = False
        self.native.set_receive_hook(self.address, self._on_base_received)

    @property
    def amm(self) -> ConstantProduct:
        return self.pool.amm

    # --- Quotes ---

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Proportional amount of B for amount_a of A.

        Raises:
            InsufficientReserves: If either reserve is zero
        """
        return self.amm.quote(amount_a, reserve_a, reserve_b)

    def get_current_price(self) -> int:
        """Quote received for one price unit of base, net of the swap fee.

        Raises:
            InsufficientLiquidity: If the pool is empty
        """
        reserve_base, reserve_quote = self.pool.get_reserves()
        if reserve_base == 0 or reserve_quote == 0:
            raise InsufficientLiquidity()
        return self.amm.spot_price(
            reserve_base,
            reserve_quote,
            self.config.price_unit,
            self.config.fee_multiplier,
        )

    def quote_swap(self, direction: SwapDirection, amount_in: int) -> int:
        """Exact-input output at current reserves, ignoring any transfer tax."""
        reserve_base, reserve_quote = self.pool.get_reserves()
        if direction is SwapDirection.BASE_TO_QUOTE:
            reserve_in, reserve_out = reserve_base, reserve_quote
        else:
            reserve_in, reserve_out = reserve_quote, reserve_base
        return self.amm.get_amount_out(
            amount_in, reserve_in, reserve_out, self.config.fee_multiplier
        )

    # --- Liquidity ---

    def add_liquidity(
        self,
        quote_desired: int,
        to: str,
        *,
        sender: str,
        value: int,
        base_min: int = 0,
        quote_min: int = 0,
    ) -> LiquidityResult:
        """Deposit base (attached as `value`) and quote at the pool ratio.

        The first deposit sets the price and is taken as-is. Later deposits
        use all of one side and the proportional amount of the other; base
        beyond what the ratio needs is refunded to the sender.

        Raises:
            MustSendPositiveBase: No base attached, or none of it would reach the pool
            InsufficientQuoteAmount: Proportional quote is below quote_min
            InsufficientBaseAmount: Proportional base is below base_min
        """
        sender, to = normalize_address(sender), normalize_address(to)
        for amount in (quote_desired, value, base_min, quote_min):
            require_amount(amount)

        with self.host.transaction():
            if value == 0:
                raise MustSendPositiveBase()
            self._collect_base(sender, value)
            base_used, quote_used = self._optimal_amounts(value, quote_desired, base_min, quote_min)
            if base_used == 0:
                raise MustSendPositiveBase("Deposit would forward no base to the pool")

            if quote_used > 0:
                self.token.transfer_from(self.address, sender, self.pool.address, quote_used)
            shares = self.pool.mint(to, sender=self.address, value=base_used)

            refund = value - base_used
            if refund > 0:
                self.native.transfer(self.address, sender, refund)

        logger.info(
            "liquidity_added",
            sender=sender,
            to=to,
            base_used=base_used,
            quote_used=quote_used,
            shares=shares,
            refund=refund,
        )
        return LiquidityResult(base_used=base_used, quote_used=quote_used, shares=shares)

    def _optimal_amounts(
        self,
        base_desired: int,
        quote_desired: int,
        base_min: int,
        quote_min: int,
    ) -> tuple[int, int]:
        reserve_base, reserve_quote = self.pool.get_reserves()
        if reserve_base == 0 and reserve_quote == 0:
            return base_desired, quote_desired

        quote_optimal = self.quote(base_desired, reserve_base, reserve_quote)
        if quote_optimal <= quote_desired:
            if quote_optimal < quote_min:
                raise InsufficientQuoteAmount(
                    f"Proportional quote {quote_optimal} below minimum {quote_min}"
                )
            if base_desired < base_min:
                raise InsufficientBaseAmount(
                    f"Base sent {base_desired} below minimum {base_min}"
                )
            return base_desired, quote_optimal

        base_optimal = self.quote(quote_desired, reserve_quote, reserve_base)
        if base_optimal < base_min:
            raise InsufficientBaseAmount(
                f"Proportional base {base_optimal} below minimum {base_min}"
            )
        return base_optimal, quote_desired

    def remove_liquidity(
        self,
        shares: int,
        to: str,
        *,
        sender: str,
        base_min: int = 0,
        quote_min: int = 0,
    ) -> WithdrawalResult:
        """Redeem `shares` of the sender's liquidity, paying both assets to `to`.

        Raises:
            NoSharesProvided: shares is zero
            BaseMinimumTooHigh: Base payout below base_min
            QuoteMinimumTooHigh: Quote payout below quote_min
        """
        sender, to = normalize_address(sender), normalize_address(to)
        for amount in (shares, base_min, quote_min):
            require_amount(amount)
        if shares == 0:
            raise NoSharesProvided()

        with self.host.transaction():
            self.pool.transfer_from(self.address, sender, self.pool.address, shares)
            base_out, quote_out = self.pool.burn(to, sender=self.address)
            if base_out < base_min:
                raise BaseMinimumTooHigh(f"Base out {base_out} below minimum {base_min}")
            if quote_out < quote_min:
                raise QuoteMinimumTooHigh(f"Quote out {quote_out} below minimum {quote_min}")

        logger.info(
            "liquidity_removed",
            sender=sender,
            to=to,
            shares=shares,
            base_out=base_out,
            quote_out=quote_out,
        )
        return WithdrawalResult(base_out=base_out, quote_out=quote_out)

    # --- Swaps ---

    def swap_exact_base_for_quote(
        self, amount_out_min: int, to: str, *, sender: str, value: int
    ) -> SwapOutcome:
        """Swap the attached base for quote while the transfer tax is off."""
        return self._swap(
            self._paths[False], SwapDirection.BASE_TO_QUOTE, value, amount_out_min, to, sender
        )

    def swap_exact_base_for_quote_with_transfer_tax(
        self, amount_out_min: int, to: str, *, sender: str, value: int
    ) -> SwapOutcome:
        """Swap the attached base for quote while the transfer tax is on."""
        return self._swap(
            self._paths[True], SwapDirection.BASE_TO_QUOTE, value, amount_out_min, to, sender
        )

    def swap_exact_quote_for_base(
        self, amount_in: int, amount_out_min: int, to: str, *, sender: str
    ) -> SwapOutcome:
        """Swap quote pulled from the sender for base while the transfer tax is off."""
        return self._swap(
            self._paths[False], SwapDirection.QUOTE_TO_BASE, amount_in, amount_out_min, to, sender
        )

    def swap_exact_quote_with_transfer_tax_for_base(
        self, amount_in: int, amount_out_min: int, to: str, *, sender: str
    ) -> SwapOutcome:
        """Swap quote pulled from the sender for base while the transfer tax is on."""
        return self._swap(
            self._paths[True], SwapDirection.QUOTE_TO_BASE, amount_in, amount_out_min, to, sender
        )

    def swap_exact_in(
        self,
        direction: SwapDirection,
        amount_in: int,
        amount_out_min: int,
        to: str,
        *,
        sender: str,
    ) -> SwapOutcome:
        """Swap through whichever path matches the tax flag at call time.

        For BASE_TO_QUOTE, `amount_in` is the base attached to the call.
        """
        with self.host.transaction():
            path = self._paths[self.token.is_tax_active()]
            return self._swap(path, direction, amount_in, amount_out_min, to, sender)

    def _swap(
        self,
        path: SwapPath,
        direction: SwapDirection,
        amount_in: int,
        amount_out_min: int,
        to: str,
        sender: str,
    ) -> SwapOutcome:
        sender, to = normalize_address(sender), normalize_address(to)
        require_amount(amount_in)
        require_amount(amount_out_min)

        with self.host.transaction():
            if direction is SwapDirection.BASE_TO_QUOTE:
                self._collect_base(sender, amount_in)
            outcome = path.execute(self, direction, amount_in, amount_out_min, to, sender)

        logger.info(
            "swap_executed",
            sender=sender,
            to=to,
            direction=direction.value,
            taxed=outcome.taxed,
            amount_in=outcome.amount_in,
            amount_received=outcome.amount_received,
            amount_out=outcome.amount_out,
        )
        return outcome

    # --- Internals ---

    def _collect_base(self, sender: str, value: int) -> None:
        if value == 0:
            return
        self._accepting_base = True
        try:
            self.native.transfer(sender, self.address, value)
        finally:
            self._accepting_base = False

    def _on_base_received(self, sender: str, amount: int) -> None:
        if not self._accepting_base:
            raise UnsolicitedTransfer(f"Router rejected {amount} base from {sender}")
