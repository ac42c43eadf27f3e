"""Constant-product AMM math.

The pool keeps reserve_base * reserve_quote from decreasing across swaps,
with a fee charged on the input side:

    amount_out = (amount_in * fee * reserve_out) / (reserve_in * 10000 + amount_in * fee)

where fee = 10000 - swap_fee_bps (9900 for the default 1% fee). All
arithmetic is integer and rounds in the pool's favour.
"""

from __future__ import annotations

from lpengine.amm.base import AMM
from lpengine.constants import BPS_DENOMINATOR, SWAP_FEE_BPS
from lpengine.errors import (
    InsufficientInitialLiquidity,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InsufficientReserves,
    InvalidAmount,
)
from lpengine.safe_int import S

DEFAULT_FEE_MULTIPLIER = BPS_DENOMINATOR - SWAP_FEE_BPS


class ConstantProduct(AMM):
    """Constant-product math: swaps, quotes, share issuance and the fee-adjusted invariant."""

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_multiplier: int = DEFAULT_FEE_MULTIPLIER,
    ) -> int:
        """Calculate output amount using the constant product formula.

        Formula: amount_out = (in * fee * res_out) / (res_in * 10000 + in * fee)

        Args:
            amount_in: Input asset amount
            reserve_in: Reserve of input asset in pool
            reserve_out: Reserve of output asset in pool
            fee_multiplier: 10000 - fee in bps (default 9900 for 1%)

        Returns:
            Output asset amount, rounded down

        Raises:
            InsufficientInputAmount: If amount_in is zero
            InsufficientLiquidity: If either reserve is zero
        """
        if amount_in < 0:
            raise InvalidAmount(f"Negative input amount: {amount_in}")
        if amount_in == 0:
            raise InsufficientInputAmount()
        if reserve_in <= 0 or reserve_out <= 0:
            raise InsufficientLiquidity()

        amount_in_with_fee = S(amount_in) * fee_multiplier
        numerator = amount_in_with_fee * reserve_out
        denominator = S(reserve_in) * BPS_DENOMINATOR + amount_in_with_fee

        return (numerator // denominator).value

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Proportional counterpart of amount_a at the current reserve ratio.

        Raises:
            InsufficientReserves: If either reserve is zero
        """
        if reserve_a <= 0 or reserve_b <= 0:
            raise InsufficientReserves()
        return ((S(amount_a) * reserve_b) // reserve_a).value

    def initial_shares(self, amount_base: int, amount_quote: int, minimum_liquidity: int) -> int:
        """Shares for the first deposit: floor(sqrt(base * quote)) - minimum_liquidity.

        Raises:
            InsufficientInitialLiquidity: If the deposit does not exceed the locked minimum
        """
        root = (S(amount_base) * amount_quote).sqrt()
        if root <= minimum_liquidity:
            raise InsufficientInitialLiquidity(
                f"sqrt({amount_base} * {amount_quote}) = {root.value} "
                f"does not exceed minimum liquidity {minimum_liquidity}"
            )
        return (root - minimum_liquidity).value

    def proportional_shares(
        self,
        amount_base: int,
        amount_quote: int,
        reserve_base: int,
        reserve_quote: int,
        total_supply: int,
    ) -> int:
        """Shares for a later deposit, credited on the limiting side only.

        Whatever is deposited beyond the current ratio stays in the pool and
        accrues to existing holders.
        """
        by_base = (S(amount_base) * total_supply) // reserve_base
        by_quote = (S(amount_quote) * total_supply) // reserve_quote
        return by_base.min(by_quote).value

    def redemption_amounts(
        self,
        liquidity: int,
        balance_base: int,
        balance_quote: int,
        total_supply: int,
    ) -> tuple[int, int]:
        """Pro-rata slice of both balances for `liquidity` shares, rounded down."""
        amount_base = (S(liquidity) * balance_base) // total_supply
        amount_quote = (S(liquidity) * balance_quote) // total_supply
        return amount_base.value, amount_quote.value

    def invariant_holds(
        self,
        balance_base: int,
        balance_quote: int,
        amount_base_in: int,
        amount_quote_in: int,
        reserve_base: int,
        reserve_quote: int,
        fee_bps: int = SWAP_FEE_BPS,
    ) -> bool:
        """Check the fee-adjusted constant product after a swap.

        Each balance is scaled by 10000 and reduced by fee_bps per unit of
        input on that side, then compared with the pre-swap product on the
        same scale.
        """
        adjusted_base = S(balance_base) * BPS_DENOMINATOR - S(amount_base_in) * fee_bps
        adjusted_quote = S(balance_quote) * BPS_DENOMINATOR - S(amount_quote_in) * fee_bps
        k_before = S(reserve_base) * reserve_quote * BPS_DENOMINATOR * BPS_DENOMINATOR
        return adjusted_base * adjusted_quote >= k_before

    def spot_price(
        self,
        reserve_base: int,
        reserve_quote: int,
        price_unit: int,
        fee_multiplier: int = DEFAULT_FEE_MULTIPLIER,
    ) -> int:
        """Quote received for `price_unit` of base, net of the swap fee.

        Raises:
            InsufficientLiquidity: If either reserve is zero
        """
        if reserve_base <= 0 or reserve_quote <= 0:
            raise InsufficientLiquidity()
        return self.get_amount_out(price_unit, reserve_base, reserve_quote, fee_multiplier)


# Singleton instance for convenience
constant_product = ConstantProduct()
