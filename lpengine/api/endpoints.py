"""API endpoints for the liquidity pool service."""

import os
import threading

import structlog
from fastapi import APIRouter, Depends, Path, Query

from lpengine.config import load_config_from_env
from lpengine.deployment import Deployment, deploy
from lpengine.models.api import (
    AccountBalances,
    AddLiquidityRequest,
    AddLiquidityResponse,
    FundRequest,
    PoolState,
    PriceResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    SwapQuoteResponse,
    SwapRequest,
    SwapResponse,
    TaxToggleRequest,
)
from lpengine.models.types import UINT256_MAX
from lpengine.routing.types import SwapDirection, SwapOutcome

logger = structlog.get_logger()

router = APIRouter()

# Accounts of the default deployment
# Configurable via LPENGINE_MANAGER and LPENGINE_TREASURY
DEFAULT_MANAGER = os.environ.get("LPENGINE_MANAGER", "0x" + "11" * 20)
DEFAULT_TREASURY = os.environ.get("LPENGINE_TREASURY", "0x" + "22" * 20)

ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"

_default_deployment: Deployment | None = None
_default_lock = threading.Lock()


def get_deployment() -> Deployment:
    """Dependency provider for the deployment served by the API.

    Override this in tests to inject a seeded deployment:
        app.dependency_overrides[get_deployment] = lambda: deployment

    Returns:
        The process-wide deployment, created on first use.
    """
    global _default_deployment
    with _default_lock:
        if _default_deployment is None:
            _default_deployment = deploy(
                manager=DEFAULT_MANAGER,
                treasury=DEFAULT_TREASURY,
                config=load_config_from_env(),
            )
        return _default_deployment


def _swap_response(outcome: SwapOutcome) -> SwapResponse:
    return SwapResponse(
        direction=outcome.direction,
        taxed=outcome.taxed,
        amount_in=str(outcome.amount_in),
        amount_received=str(outcome.amount_received),
        amount_out=str(outcome.amount_out),
    )


@router.get("/pool")
def pool_state(deployment: Deployment = Depends(get_deployment)) -> PoolState:
    """Committed reserves, share supply and tax flag."""
    pool = deployment.pool
    reserve_base, reserve_quote = pool.get_reserves()
    return PoolState(
        pool=pool.address,
        token=deployment.token.address,
        router=deployment.router.address,
        reserve_base=str(reserve_base),
        reserve_quote=str(reserve_quote),
        total_shares=str(pool.total_supply),
        tax_active=deployment.token.is_tax_active(),
    )


@router.get("/price")
def price(deployment: Deployment = Depends(get_deployment)) -> PriceResponse:
    """Quote received for one price unit of base.

    Error Handling:
        - Empty pool: 409 with code "insufficient_liquidity"
    """
    return PriceResponse(
        price=str(deployment.router.get_current_price()),
        price_unit=str(deployment.config.price_unit),
    )


@router.get("/quote")
def quote(
    direction: SwapDirection,
    amount_in: int = Query(ge=0, le=UINT256_MAX),
    deployment: Deployment = Depends(get_deployment),
) -> SwapQuoteResponse:
    """Exact-input preview at current reserves, before any transfer tax."""
    amount_out = deployment.router.quote_swap(direction, amount_in)
    return SwapQuoteResponse(
        direction=direction, amount_in=str(amount_in), amount_out=str(amount_out)
    )


@router.get("/accounts/{address}")
def account(
    address: str = Path(pattern=ADDRESS_PATTERN),
    deployment: Deployment = Depends(get_deployment),
) -> AccountBalances:
    """Base, quote and share balances of one account."""
    return AccountBalances(
        address=address,
        base=str(deployment.native.balance_of(address)),
        quote=str(deployment.token.balance_of(address)),
        shares=str(deployment.pool.balance_of(address)),
    )


@router.post("/accounts/{address}/fund")
def fund(
    request: FundRequest,
    address: str = Path(pattern=ADDRESS_PATTERN),
    deployment: Deployment = Depends(get_deployment),
) -> AccountBalances:
    """Credit base from the faucet and send quote out of the treasury.

    Quote leaves the treasury as an ordinary transfer, so it is taxed while
    the transfer tax is on.
    """
    base, quote_amount = int(request.base), int(request.quote)
    with deployment.host.transaction():
        if base > 0:
            deployment.native.credit(address, base)
        if quote_amount > 0:
            deployment.token.transfer(deployment.treasury, address, quote_amount)
    logger.info("account_funded", address=address, base=base, quote=quote_amount)
    return account(address, deployment)


@router.post("/liquidity/add")
def add_liquidity(
    request: AddLiquidityRequest,
    deployment: Deployment = Depends(get_deployment),
) -> AddLiquidityResponse:
    """Deposit base and quote; the router allowance covers exactly this call."""
    lp_router = deployment.router
    quote_desired = int(request.quote_desired)
    with deployment.host.transaction():
        deployment.token.approve(request.sender, lp_router.address, quote_desired)
        result = lp_router.add_liquidity(
            quote_desired,
            request.to or request.sender,
            sender=request.sender,
            value=int(request.value),
            base_min=int(request.base_min),
            quote_min=int(request.quote_min),
        )
        deployment.token.approve(request.sender, lp_router.address, 0)
    return AddLiquidityResponse(
        base_used=str(result.base_used),
        quote_used=str(result.quote_used),
        shares=str(result.shares),
    )


@router.post("/liquidity/remove")
def remove_liquidity(
    request: RemoveLiquidityRequest,
    deployment: Deployment = Depends(get_deployment),
) -> RemoveLiquidityResponse:
    """Redeem shares for both assets."""
    lp_router = deployment.router
    shares = int(request.shares)
    with deployment.host.transaction():
        deployment.pool.approve(request.sender, lp_router.address, shares)
        result = lp_router.remove_liquidity(
            shares,
            request.to or request.sender,
            sender=request.sender,
            base_min=int(request.base_min),
            quote_min=int(request.quote_min),
        )
    return RemoveLiquidityResponse(base_out=str(result.base_out), quote_out=str(result.quote_out))


@router.post("/swap")
def swap(
    request: SwapRequest,
    deployment: Deployment = Depends(get_deployment),
) -> SwapResponse:
    """Exact-input swap.

    With `path="auto"` the router picks the path from the tax flag at call
    time; an explicit path that does not match the flag fails with 400.
    """
    lp_router = deployment.router
    amount_in, amount_out_min = int(request.amount_in), int(request.amount_out_min)
    to = request.to or request.sender
    base_in = request.direction is SwapDirection.BASE_TO_QUOTE

    with deployment.host.transaction():
        if not base_in:
            deployment.token.approve(request.sender, lp_router.address, amount_in)

        if request.path == "auto":
            outcome = lp_router.swap_exact_in(
                request.direction, amount_in, amount_out_min, to, sender=request.sender
            )
        elif base_in:
            swap_base = (
                lp_router.swap_exact_base_for_quote_with_transfer_tax
                if request.path == "taxed"
                else lp_router.swap_exact_base_for_quote
            )
            outcome = swap_base(amount_out_min, to, sender=request.sender, value=amount_in)
        else:
            swap_quote = (
                lp_router.swap_exact_quote_with_transfer_tax_for_base
                if request.path == "taxed"
                else lp_router.swap_exact_quote_for_base
            )
            outcome = swap_quote(amount_in, amount_out_min, to, sender=request.sender)

    return _swap_response(outcome)


@router.post("/token/tax")
def set_transfer_tax(
    request: TaxToggleRequest,
    deployment: Deployment = Depends(get_deployment),
) -> PoolState:
    """Turn the quote token's transfer tax on or off (manager only)."""
    if request.active:
        deployment.token.enable_transfer_tax(request.caller)
    else:
        deployment.token.disable_transfer_tax(request.caller)
    return pool_state(deployment)
