"""Run a scripted trading session against an in-memory pool.

Deploys the base asset, the quote token, the pool and the router on a
fresh host, seeds liquidity, runs a series of random exact-input swaps
(optionally switching the transfer tax on halfway) and withdraws the
provider's liquidity at the end.

Usage:
    python -m scripts.simulate --swaps 50 --seed 7 --tax-after 25
"""

import argparse
import random

import structlog

from lpengine import deploy
from lpengine.config import load_config_from_env
from lpengine.errors import AMMError
from lpengine.models.types import UINT256_MAX
from lpengine.routing.types import SwapDirection

logger = structlog.get_logger()

UNIT = 10**18

MANAGER = "0x" + "11" * 20
TREASURY = "0x" + "22" * 20
PROVIDER = "0x" + "33" * 20
TRADER = "0x" + "44" * 20


def run_session(
    *,
    seed_base: int,
    seed_quote: int,
    swaps: int,
    tax_after: int | None,
    seed: int,
) -> dict[str, int]:
    """Seed the pool, trade against it and withdraw.

    Returns:
        Summary counters and final balances
    """
    rng = random.Random(seed)
    deployment = deploy(manager=MANAGER, treasury=TREASURY, config=load_config_from_env())
    native, token, pool, router = (
        deployment.native,
        deployment.token,
        deployment.pool,
        deployment.router,
    )

    native.credit(PROVIDER, seed_base)
    native.credit(TRADER, seed_base)
    token.transfer(TREASURY, PROVIDER, seed_quote)
    token.transfer(TREASURY, TRADER, seed_quote)
    token.approve(PROVIDER, router.address, UINT256_MAX)
    token.approve(TRADER, router.address, UINT256_MAX)
    pool.approve(PROVIDER, router.address, UINT256_MAX)

    added = router.add_liquidity(seed_quote, PROVIDER, sender=PROVIDER, value=seed_base)

    executed = 0
    rejected = 0
    for i in range(swaps):
        if tax_after is not None and i == tax_after:
            token.enable_transfer_tax(MANAGER)

        direction = rng.choice(list(SwapDirection))
        if direction is SwapDirection.BASE_TO_QUOTE:
            balance = native.balance_of(TRADER)
        else:
            balance = token.balance_of(TRADER)
        amount_in = balance * rng.randint(1, 20) // 100
        try:
            router.swap_exact_in(direction, amount_in, 0, TRADER, sender=TRADER)
            executed += 1
        except AMMError as e:
            rejected += 1
            logger.warning("swap_rejected", step=i, code=e.code, detail=str(e))

    withdrawn = router.remove_liquidity(
        pool.balance_of(PROVIDER), PROVIDER, sender=PROVIDER
    )
    reserve_base, reserve_quote = pool.get_reserves()

    return {
        "shares_minted": added.shares,
        "swaps_executed": executed,
        "swaps_rejected": rejected,
        "provider_base_out": withdrawn.base_out,
        "provider_quote_out": withdrawn.quote_out,
        "trader_base": native.balance_of(TRADER),
        "trader_quote": token.balance_of(TRADER),
        "treasury_quote": token.balance_of(TREASURY),
        "reserve_base": reserve_base,
        "reserve_quote": reserve_quote,
        "events": len(deployment.host.events()),
    }


def main() -> None:
    """Entry point for the simulation script."""
    parser = argparse.ArgumentParser(description="Simulate trading against a liquidity pool")
    parser.add_argument(
        "--base",
        type=int,
        default=10,
        help="Whole base units seeded by the provider (and given to the trader)",
    )
    parser.add_argument(
        "--quote",
        type=int,
        default=50,
        help="Whole quote units seeded by the provider (and given to the trader)",
    )
    parser.add_argument("--swaps", type=int, default=20, help="Number of swaps to attempt")
    parser.add_argument(
        "--tax-after",
        type=int,
        default=None,
        help="Enable the transfer tax before this swap index",
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed")

    args = parser.parse_args()

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ]
    )

    summary = run_session(
        seed_base=args.base * UNIT,
        seed_quote=args.quote * UNIT,
        swaps=args.swaps,
        tax_after=args.tax_after,
        seed=args.seed,
    )

    print("\nSession summary")
    for key, value in summary.items():
        print(f"  {key:<20} {value}")


if __name__ == "__main__":
    main()
