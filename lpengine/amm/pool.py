"""Two-asset constant-product liquidity pool.

The pool is the sole source of truth for reserves. Callers deliver assets
first and then call an entry point, which reconciles against the pool's
actual balances:

- mint: deposit already delivered -> shares issued to the recipient
- burn: shares already transferred to the pool -> both assets paid out
- swap: output sent optimistically, input inferred from balances, then the
  fee-adjusted product is checked

Reading balances instead of trusting nominal amounts is what makes the
pool correct for a quote asset that deducts a transfer tax in transit.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from lpengine.amm.constant_product import ConstantProduct, constant_product
from lpengine.amm.guard import ReentrancyGuard
from lpengine.amm.shares import ShareToken
from lpengine.assets.base import require_amount
from lpengine.assets.fee_token import FeeToken
from lpengine.assets.native import NativeAsset
from lpengine.config import DEFAULT_POOL_CONFIG, PoolConfig
from lpengine.errors import (
    InsufficientInputAmount,
    InsufficientLiquidity,
    InvalidRecipient,
    KInvariantViolated,
    NotSingleSided,
    UnsolicitedTransfer,
    ZeroAmountBurned,
    ZeroLiquidityMinted,
)
from lpengine.host import Host
from lpengine.models.events import Burn, Mint, Swap, Sync
from lpengine.models.types import normalize_address
from lpengine.safe_int import S

logger = structlog.get_logger()


class LiquidityPool:
    """Constant-product pool over a base asset and a quote token.

    The pool is also the liquidity share token: share balances live in a
    ShareToken ledger at the pool's own address.

    Args:
        host: Execution host that journals every state change
        native: Base asset ledger
        token: Quote asset (may charge a transfer tax)
        config: Fee and minimum-liquidity parameters
        amm: Pricing math (defaults to the constant_product singleton)
    """

    def __init__(
        self,
        host: Host,
        native: NativeAsset,
        token: FeeToken,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
        amm: ConstantProduct | None = None,
    ) -> None:
        self.host = host
        self.native = native
        self.token = token
        self.config = config
        self.amm = amm if amm is not None else constant_product
        self.address = host.allocate_address("pool")
        self.shares = ShareToken(host, self.address)
        self._reserves: tuple[int, int] = (0, 0)
        self._published_reserves: tuple[int, int] = (0, 0)
        self._guard = ReentrancyGuard(f"pool {self.address}")
        self._accepting_base = False
        native.set_receive_hook(self.address, self._on_base_received)
        host.register(self)

    # --- Share token surface ---

    @property
    def name(self) -> str:
        return self.shares.name

    @property
    def symbol(self) -> str:
        return self.shares.symbol

    @property
    def decimals(self) -> int:
        return self.shares.decimals

    @property
    def total_supply(self) -> int:
        return self.shares.total_supply

    def balance_of(self, account: str) -> int:
        return self.shares.balance_of(account)

    def allowance(self, owner: str, spender: str) -> int:
        return self.shares.allowance(owner, spender)

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        return self.shares.transfer(sender, to, amount)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        return self.shares.approve(owner, spender, amount)

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        return self.shares.transfer_from(spender, owner, to, amount)

    # --- Reads ---

    def get_reserves(self) -> tuple[int, int]:
        """Return (reserve_base, reserve_quote).

        Outside the writing thread this is the last committed pair, never a
        half-updated one.
        """
        return self.host.view(self._reserves, self._published_reserves)

    @property
    def locked(self) -> bool:
        return self._guard.locked

    # --- Entry points ---

    def mint(self, to: str, *, sender: str, value: int = 0) -> int:
        """Issue shares for assets delivered since the last sync.

        Args:
            to: Recipient of the new shares
            sender: Calling account (recorded in the Mint event)
            value: Base asset attached to this call

        Returns:
            Number of shares issued to `to`

        Raises:
            InsufficientInitialLiquidity: First deposit does not exceed the locked minimum
            ZeroLiquidityMinted: Deposit is too small to earn a share
        """
        to, sender = normalize_address(to), normalize_address(sender)
        with self._locked():
            self._receive_base(sender, value)
            balance_base, balance_quote = self._balances()
            reserve_base, reserve_quote = self._reserves
            amount_base = (S(balance_base) - reserve_base).value
            amount_quote = (S(balance_quote) - reserve_quote).value

            total_supply = self.shares.total_supply
            if total_supply == 0:
                liquidity = self.amm.initial_shares(
                    amount_base, amount_quote, self.config.minimum_liquidity
                )
                self.shares.lock_minimum(self.config.minimum_liquidity)
            else:
                liquidity = self.amm.proportional_shares(
                    amount_base, amount_quote, reserve_base, reserve_quote, total_supply
                )
            if liquidity == 0:
                raise ZeroLiquidityMinted()

            self.shares.mint(to, liquidity)
            self.host.emit(
                self.address,
                Mint(sender=sender, amount_base=amount_base, amount_quote=amount_quote),
            )
            self._update(balance_base, balance_quote)

        logger.info(
            "pool_minted",
            to=to,
            amount_base=amount_base,
            amount_quote=amount_quote,
            shares=liquidity,
        )
        return liquidity

    def burn(self, to: str, *, sender: str) -> tuple[int, int]:
        """Redeem the shares held by the pool itself for both assets.

        Returns:
            (amount_base_out, amount_quote_out), nominal amounts sent to `to`

        Raises:
            ZeroAmountBurned: Either payout rounds down to zero
        """
        to, sender = normalize_address(to), normalize_address(sender)
        self._require_recipient(to)
        with self._locked():
            balance_base, balance_quote = self._balances()
            liquidity = self.shares.balance_of(self.address)
            total_supply = self.shares.total_supply
            if liquidity == 0:
                raise ZeroAmountBurned("No shares were transferred to the pool")

            amount_base, amount_quote = self.amm.redemption_amounts(
                liquidity, balance_base, balance_quote, total_supply
            )
            if amount_base == 0 or amount_quote == 0:
                raise ZeroAmountBurned()

            self.shares.burn(self.address, liquidity)
            self.native.transfer(self.address, to, amount_base)
            self.token.transfer(self.address, to, amount_quote)

            self.host.emit(
                self.address,
                Burn(
                    sender=sender,
                    amount_base_out=amount_base,
                    amount_quote_out=amount_quote,
                    to=to,
                ),
            )
            self._update(*self._balances())

        logger.info(
            "pool_burned",
            to=to,
            shares=liquidity,
            amount_base=amount_base,
            amount_quote=amount_quote,
        )
        return amount_base, amount_quote

    def swap(
        self,
        amount_base_out: int,
        amount_quote_out: int,
        to: str,
        *,
        sender: str,
        value: int = 0,
    ) -> None:
        """Pay out one asset, then require the fee-adjusted product not to drop.

        Exactly one of the two outputs must be nonzero. The output is sent
        before the input is known; the input is whatever the balances show
        beyond the post-payout reserves.

        Raises:
            NotSingleSided: Both or neither outputs requested
            InsufficientLiquidity: Requested output meets or exceeds its reserve
            InsufficientInputAmount: No input arrived
            KInvariantViolated: Input does not pay for the output plus fee
        """
        require_amount(amount_base_out)
        require_amount(amount_quote_out)
        if (amount_base_out > 0) == (amount_quote_out > 0):
            raise NotSingleSided()
        to, sender = normalize_address(to), normalize_address(sender)
        self._require_recipient(to)

        with self._locked():
            self._receive_base(sender, value)
            reserve_base, reserve_quote = self._reserves
            if amount_base_out >= reserve_base or amount_quote_out >= reserve_quote:
                raise InsufficientLiquidity()

            if amount_base_out > 0:
                self.native.transfer(self.address, to, amount_base_out)
            if amount_quote_out > 0:
                self.token.transfer(self.address, to, amount_quote_out)

            balance_base, balance_quote = self._balances()
            expected_base = reserve_base - amount_base_out
            expected_quote = reserve_quote - amount_quote_out
            amount_base_in = S(balance_base).saturating_sub(expected_base).value
            amount_quote_in = S(balance_quote).saturating_sub(expected_quote).value
            if amount_base_in == 0 and amount_quote_in == 0:
                raise InsufficientInputAmount()

            if not self.amm.invariant_holds(
                balance_base,
                balance_quote,
                amount_base_in,
                amount_quote_in,
                reserve_base,
                reserve_quote,
                self.config.swap_fee_bps,
            ):
                raise KInvariantViolated(
                    f"Balances ({balance_base}, {balance_quote}) with inputs "
                    f"({amount_base_in}, {amount_quote_in}) do not cover reserves "
                    f"({reserve_base}, {reserve_quote})"
                )

            self._update(balance_base, balance_quote)
            self.host.emit(
                self.address,
                Swap(
                    sender=sender,
                    amount_base_in=amount_base_in,
                    amount_quote_in=amount_quote_in,
                    amount_base_out=amount_base_out,
                    amount_quote_out=amount_quote_out,
                    to=to,
                ),
            )

        logger.info(
            "pool_swapped",
            to=to,
            amount_base_in=amount_base_in,
            amount_quote_in=amount_quote_in,
            amount_base_out=amount_base_out,
            amount_quote_out=amount_quote_out,
        )

    # --- Internals ---

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with self.host.transaction(), self._guard.hold():
            yield

    def _balances(self) -> tuple[int, int]:
        return self.native.balance_of(self.address), self.token.balance_of(self.address)

    def _receive_base(self, sender: str, value: int) -> None:
        if require_amount(value) == 0:
            return
        self._accepting_base = True
        try:
            self.native.transfer(sender, self.address, value)
        finally:
            self._accepting_base = False

    def _on_base_received(self, sender: str, amount: int) -> None:
        if not self._accepting_base:
            raise UnsolicitedTransfer(f"Pool rejected {amount} base from {sender}")

    def _require_recipient(self, to: str) -> None:
        if to == self.address:
            raise InvalidRecipient("Pool cannot pay itself")

    def _update(self, balance_base: int, balance_quote: int) -> None:
        self._reserves = (S(balance_base).to_uint256(), S(balance_quote).to_uint256())
        self.host.emit(
            self.address,
            Sync(reserve_base=self._reserves[0], reserve_quote=self._reserves[1]),
        )

    # --- Journal ---

    def snapshot(self) -> Any:
        return self._reserves

    def restore(self, state: Any) -> None:
        self._reserves = state

    def publish(self) -> None:
        self._published_reserves = self._reserves
