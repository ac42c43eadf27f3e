"""Wiring of a complete pool deployment on one host."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from lpengine.amm.pool import LiquidityPool
from lpengine.assets.fee_token import FeeToken
from lpengine.assets.native import NativeAsset
from lpengine.config import DEFAULT_POOL_CONFIG, PoolConfig
from lpengine.host import Host
from lpengine.models.types import normalize_address
from lpengine.routing.router import Router

logger = structlog.get_logger()

# Supply minted to the treasury when none is given
DEFAULT_TOKEN_SUPPLY = 500_000 * 10**18


@dataclass
class Deployment:
    """Everything a caller needs to talk to one pool."""

    host: Host
    native: NativeAsset
    token: FeeToken
    pool: LiquidityPool
    router: Router
    config: PoolConfig

    @property
    def manager(self) -> str:
        return self.token.manager

    @property
    def treasury(self) -> str:
        return self.token.treasury


def deploy(
    *,
    manager: str,
    treasury: str,
    token_supply: int = DEFAULT_TOKEN_SUPPLY,
    config: PoolConfig = DEFAULT_POOL_CONFIG,
    host: Host | None = None,
) -> Deployment:
    """Create the base asset, the quote token, the pool and its router.

    Args:
        manager: Account allowed to toggle the quote token's transfer tax
        treasury: Receives the token supply and collected tax
        token_supply: Quote tokens minted to the treasury
        config: Pool and tax parameters
        host: Host to deploy on (a fresh one if None)

    Returns:
        The wired Deployment
    """
    host = host if host is not None else Host()
    native = NativeAsset(host)
    token = FeeToken(
        host,
        manager=normalize_address(manager, validate=True),
        treasury=normalize_address(treasury, validate=True),
        initial_supply=token_supply,
        tax_bps=config.transfer_tax_bps,
    )
    pool = LiquidityPool(host, native, token, config)
    router = Router(pool)

    logger.info(
        "deployment_created",
        token=token.address,
        pool=pool.address,
        router=router.address,
        swap_fee_bps=config.swap_fee_bps,
        transfer_tax_bps=config.transfer_tax_bps,
    )
    return Deployment(
        host=host,
        native=native,
        token=token,
        pool=pool,
        router=router,
        config=config,
    )
