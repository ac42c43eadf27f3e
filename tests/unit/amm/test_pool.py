"""Tests for LiquidityPool entry points called directly (without the router)."""

import math

import pytest

from lpengine.constants import MINIMUM_LIQUIDITY, SINK_ADDRESS
from lpengine.errors import (
    InsufficientInitialLiquidity,
    InsufficientInputAmount,
    InsufficientLiquidity,
    InvalidRecipient,
    KInvariantViolated,
    LockedSharesError,
    NotSingleSided,
    ReentrancyError,
    UnsolicitedTransfer,
    ZeroAmountBurned,
    ZeroLiquidityMinted,
)
from lpengine.models.events import Burn, Mint, Swap, Sync
from lpengine.models.types import UINT256_MAX
from lpengine.routing.types import SwapDirection
from tests.helpers import ALICE, BOB, TREASURY, UNIT, deliver, fund


@pytest.fixture
def funded(deployment):
    """ALICE and BOB hold base and quote."""
    fund(deployment, ALICE)
    fund(deployment, BOB)
    return deployment


def direct_mint(deployment, base, quote, to=ALICE, sender=ALICE):
    deliver(deployment, TREASURY, quote)
    return deployment.pool.mint(to, sender=sender, value=base)


class TestShareTokenSurface:
    """The pool doubles as the liquidity share token."""

    def test_metadata(self, pool):
        assert pool.name == "Liquidity Pool Share"
        assert pool.symbol == "LPS"
        assert pool.decimals == 18
        assert pool.total_supply == 0

    def test_shares_are_transferable(self, funded):
        pool = funded.pool
        shares = direct_mint(funded, 5 * UNIT, 5 * UNIT)
        pool.transfer(ALICE, BOB, shares // 2)
        assert pool.balance_of(BOB) == shares // 2
        assert pool.balance_of(ALICE) == shares - shares // 2

    def test_transfer_from_uses_allowance(self, funded):
        pool = funded.pool
        direct_mint(funded, 5 * UNIT, 5 * UNIT)
        pool.approve(ALICE, BOB, 100)
        pool.transfer_from(BOB, ALICE, BOB, 60)
        assert pool.allowance(ALICE, BOB) == 40
        assert pool.balance_of(BOB) == 60


class TestMint:
    """Share issuance against delivered assets."""

    def test_first_mint(self, funded):
        """First deposit mints sqrt(base * quote) - 1000 and locks 1000 at the sink."""
        pool, host = funded.pool, funded.host
        base, quote = 2 * UNIT, 10 * UNIT

        shares = direct_mint(funded, base, quote)

        assert shares == math.isqrt(base * quote) - MINIMUM_LIQUIDITY
        assert pool.balance_of(ALICE) == shares
        assert pool.balance_of(SINK_ADDRESS) == MINIMUM_LIQUIDITY
        assert pool.total_supply == shares + MINIMUM_LIQUIDITY
        assert pool.get_reserves() == (base, quote)

        mints = host.events(emitter=pool.address, kind=Mint)
        assert [e.event for e in mints] == [Mint(sender=ALICE, amount_base=base, amount_quote=quote)]
        syncs = host.events(emitter=pool.address, kind=Sync)
        assert syncs[-1].event == Sync(reserve_base=base, reserve_quote=quote)

    def test_subsequent_mint_is_proportional(self, funded):
        """A second equal deposit doubles supply without touching the sink."""
        pool = funded.pool
        base, quote = 2 * UNIT, 10 * UNIT
        first = direct_mint(funded, base, quote)
        supply = pool.total_supply

        second = direct_mint(funded, base, quote)

        assert second == supply
        assert pool.balance_of(ALICE) == first + second
        assert pool.balance_of(SINK_ADDRESS) == MINIMUM_LIQUIDITY
        assert pool.get_reserves() == (2 * base, 2 * quote)

    def test_unbalanced_mint_credits_limiting_side(self, funded):
        pool = funded.pool
        direct_mint(funded, 10 * UNIT, 50 * UNIT)
        supply = pool.total_supply

        # 1 base needs 5 quote; 20 quote is excess and earns nothing
        shares = direct_mint(funded, UNIT, 20 * UNIT)

        assert shares == UNIT * supply // (10 * UNIT)

    def test_first_mint_too_small_rolls_back(self, funded):
        pool = funded.pool
        deliver(funded, TREASURY, 1000)
        with pytest.raises(InsufficientInitialLiquidity):
            pool.mint(ALICE, sender=ALICE, value=1000)
        assert pool.total_supply == 0
        assert pool.balance_of(SINK_ADDRESS) == 0
        assert funded.native.balance_of(pool.address) == 0

    def test_mint_without_deposit_raises(self, funded):
        direct_mint(funded, 10 * UNIT, 50 * UNIT)
        with pytest.raises(ZeroLiquidityMinted):
            funded.pool.mint(ALICE, sender=ALICE)

    def test_mint_to_sink_rejected(self, funded):
        deliver(funded, TREASURY, 5 * UNIT)
        with pytest.raises(InvalidRecipient):
            funded.pool.mint(SINK_ADDRESS, sender=ALICE, value=5 * UNIT)

    def test_mint_counts_taxed_quote_as_received(self, funded):
        """With the transfer tax on, the pool only credits what actually arrived."""
        pool, token = funded.pool, funded.token
        token.enable_transfer_tax(funded.manager)
        token.transfer(ALICE, pool.address, 50 * UNIT)

        pool.mint(ALICE, sender=ALICE, value=10 * UNIT)

        assert pool.get_reserves() == (10 * UNIT, 49 * UNIT)


class TestBurn:
    """Redemption of shares sent to the pool."""

    def test_burn_returns_everything_but_the_locked_minimum(self, funded):
        pool, native, token, host = funded.pool, funded.native, funded.token, funded.host
        shares = direct_mint(funded, 5 * UNIT, 5 * UNIT)
        assert shares == 5 * UNIT - MINIMUM_LIQUIDITY
        base_before, quote_before = native.balance_of(ALICE), token.balance_of(ALICE)

        pool.transfer(ALICE, pool.address, shares)
        amounts = pool.burn(ALICE, sender=BOB)

        expected = 5 * UNIT - MINIMUM_LIQUIDITY
        assert amounts == (expected, expected)
        assert pool.total_supply == MINIMUM_LIQUIDITY
        assert pool.balance_of(ALICE) == 0
        assert native.balance_of(pool.address) == MINIMUM_LIQUIDITY
        assert token.balance_of(pool.address) == MINIMUM_LIQUIDITY
        assert pool.get_reserves() == (MINIMUM_LIQUIDITY, MINIMUM_LIQUIDITY)
        assert native.balance_of(ALICE) == base_before + expected
        assert token.balance_of(ALICE) == quote_before + expected

        burns = host.events(emitter=pool.address, kind=Burn)
        assert burns[-1].event == Burn(
            sender=BOB, amount_base_out=expected, amount_quote_out=expected, to=ALICE
        )

    def test_burn_without_shares_raises(self, funded):
        direct_mint(funded, 5 * UNIT, 5 * UNIT)
        with pytest.raises(ZeroAmountBurned):
            funded.pool.burn(ALICE, sender=ALICE)

    def test_burn_dust_raises(self, funded):
        """A share too small to redeem either asset is rejected."""
        pool = funded.pool
        direct_mint(funded, UNIT, 1000 * UNIT)
        pool.transfer(ALICE, pool.address, 1)
        with pytest.raises(ZeroAmountBurned):
            pool.burn(ALICE, sender=ALICE)

    def test_burn_to_pool_rejected(self, funded):
        pool = funded.pool
        shares = direct_mint(funded, 5 * UNIT, 5 * UNIT)
        pool.transfer(ALICE, pool.address, shares)
        with pytest.raises(InvalidRecipient):
            pool.burn(pool.address, sender=ALICE)


class TestSwap:
    """Optimistic swaps checked against the fee-adjusted product."""

    @pytest.fixture
    def deep(self, funded):
        """Pool with reserves (100, 500)."""
        direct_mint(funded, 100 * UNIT, 500 * UNIT)
        return funded

    def test_swap_base_for_quote(self, deep):
        pool, host, token = deep.pool, deep.host, deep.token
        amount_out = 4_901_475_393_600_000_000
        quote_before = token.balance_of(ALICE)

        pool.swap(0, amount_out, ALICE, sender=BOB, value=UNIT)

        assert token.balance_of(ALICE) == quote_before + amount_out
        assert pool.get_reserves() == (101 * UNIT, 500 * UNIT - amount_out)
        swaps = host.events(emitter=pool.address, kind=Swap)
        assert swaps[-1].event == Swap(
            sender=BOB,
            amount_base_in=UNIT,
            amount_quote_in=0,
            amount_base_out=0,
            amount_quote_out=amount_out,
            to=ALICE,
        )

    def test_swap_quote_for_base(self, deep):
        pool, native = deep.pool, deep.native
        amount_out = deep.router.quote_swap(SwapDirection.QUOTE_TO_BASE, 5 * UNIT)
        base_before = native.balance_of(BOB)

        deliver(deep, BOB, 5 * UNIT)
        pool.swap(amount_out, 0, BOB, sender=BOB)

        assert native.balance_of(BOB) == base_before + amount_out
        assert pool.get_reserves() == (100 * UNIT - amount_out, 505 * UNIT)

    def test_swap_raises_product(self, deep):
        pool = deep.pool
        reserve_base, reserve_quote = pool.get_reserves()
        pool.swap(0, 4 * UNIT, ALICE, sender=BOB, value=UNIT)
        new_base, new_quote = pool.get_reserves()
        assert new_base * new_quote > reserve_base * reserve_quote

    @pytest.mark.parametrize("outputs", [(UNIT, UNIT), (0, 0)])
    def test_not_single_sided(self, deep, outputs):
        with pytest.raises(NotSingleSided) as exc_info:
            deep.pool.swap(*outputs, ALICE, sender=BOB, value=UNIT)
        assert str(exc_info.value) == "Only single-sided swaps allowed"

    def test_output_at_reserve_raises(self, deep):
        with pytest.raises(InsufficientLiquidity):
            deep.pool.swap(0, 500 * UNIT, ALICE, sender=BOB, value=UNIT)

    def test_no_input_raises_and_rolls_back(self, deep):
        pool, token = deep.pool, deep.token
        reserves = pool.get_reserves()
        quote_before = token.balance_of(ALICE)

        with pytest.raises(InsufficientInputAmount):
            pool.swap(0, UNIT, ALICE, sender=BOB)

        assert token.balance_of(ALICE) == quote_before
        assert pool.get_reserves() == reserves

    def test_overdrawn_output_violates_invariant(self, deep):
        """Asking for more than the fee allows is refused and fully unwound."""
        pool, native, token, host = deep.pool, deep.native, deep.token, deep.host
        reserves = pool.get_reserves()
        bob_base, alice_quote = native.balance_of(BOB), token.balance_of(ALICE)
        swap_count = len(host.events(kind=Swap))

        with pytest.raises(KInvariantViolated):
            pool.swap(0, 4_902 * 10**15, ALICE, sender=BOB, value=UNIT)

        assert pool.get_reserves() == reserves
        assert native.balance_of(BOB) == bob_base
        assert token.balance_of(ALICE) == alice_quote
        assert len(host.events(kind=Swap)) == swap_count

    def test_swap_to_pool_rejected(self, deep):
        with pytest.raises(InvalidRecipient):
            deep.pool.swap(0, UNIT, deep.pool.address, sender=BOB, value=UNIT)


class TestUnsolicitedBase:
    """Base only enters the pool through payable entry points."""

    def test_direct_base_transfer_rejected(self, funded):
        native, pool = funded.native, funded.pool
        before = native.balance_of(ALICE)
        with pytest.raises(UnsolicitedTransfer):
            native.transfer(ALICE, pool.address, UNIT)
        assert native.balance_of(ALICE) == before
        assert native.balance_of(pool.address) == 0


class TestSinkImmutability:
    """The locked minimum liquidity can never move."""

    def test_sink_cannot_send(self, funded):
        pool = funded.pool
        direct_mint(funded, 5 * UNIT, 5 * UNIT)
        with pytest.raises(LockedSharesError):
            pool.transfer(SINK_ADDRESS, ALICE, 1)

    def test_sink_cannot_be_pulled_from(self, funded):
        pool = funded.pool
        direct_mint(funded, 5 * UNIT, 5 * UNIT)
        pool.approve(SINK_ADDRESS, ALICE, UINT256_MAX)
        with pytest.raises(LockedSharesError):
            pool.transfer_from(ALICE, SINK_ADDRESS, ALICE, MINIMUM_LIQUIDITY)
        assert pool.balance_of(SINK_ADDRESS) == MINIMUM_LIQUIDITY

    def test_sink_cannot_receive(self, funded):
        pool = funded.pool
        direct_mint(funded, 5 * UNIT, 5 * UNIT)
        with pytest.raises(InvalidRecipient):
            pool.transfer(ALICE, SINK_ADDRESS, 1)
        assert pool.balance_of(SINK_ADDRESS) == MINIMUM_LIQUIDITY


class TestReentrancy:
    """Recipient hooks cannot re-enter a pool that is mid-call."""

    @pytest.fixture
    def ready(self, funded):
        direct_mint(funded, 10 * UNIT, 50 * UNIT)
        return funded

    def test_reentrant_mint_from_payout_hook(self, ready):
        pool, native, host = ready.pool, ready.native, ready.host
        reserves = pool.get_reserves()
        base_before = native.balance_of(BOB)
        seen_locked = []

        def reenter(sender, amount):
            seen_locked.append(pool.locked)
            pool.mint(BOB, sender=BOB)

        native.set_receive_hook(BOB, reenter)
        deliver(ready, BOB, 5 * UNIT)
        amount_out = ready.router.quote_swap(SwapDirection.QUOTE_TO_BASE, 5 * UNIT)

        with pytest.raises(ReentrancyError):
            pool.swap(amount_out, 0, BOB, sender=BOB)

        assert seen_locked == [True]
        assert not pool.locked
        assert pool.get_reserves() == reserves
        assert native.balance_of(BOB) == base_before
        assert host.events(kind=Swap) == []

    def test_reentrant_swap_from_quote_hook(self, ready):
        """A quote recipient calling back into swap is rejected too."""
        pool, token = ready.pool, ready.token

        def reenter(sender, amount):
            pool.swap(0, 1, BOB, sender=BOB, value=UNIT)

        token.set_receive_hook(ALICE, reenter)
        with pytest.raises(ReentrancyError):
            pool.swap(0, UNIT, ALICE, sender=BOB, value=UNIT)

    def test_pool_usable_after_rejected_reentry(self, ready):
        pool, native = ready.pool, ready.native

        native.set_receive_hook(BOB, lambda sender, amount: pool.burn(BOB, sender=BOB))
        deliver(ready, BOB, 5 * UNIT)
        with pytest.raises(ReentrancyError):
            pool.swap(UNIT // 2, 0, BOB, sender=BOB)

        native.set_receive_hook(BOB, None)
        pool.swap(UNIT // 2, 0, BOB, sender=BOB)
        assert pool.get_reserves()[0] == 10 * UNIT - UNIT // 2
