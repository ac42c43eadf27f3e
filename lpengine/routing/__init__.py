"""Routing layer over the liquidity pool.

Module structure:
- router.py: Router facade (liquidity, quotes, swaps)
- types.py: SwapDirection and result dataclasses
- handlers/: Taxed and untaxed swap paths sharing one result contract
"""

from lpengine.routing.handlers import SwapPath, TaxedSwapPath, UntaxedSwapPath
from lpengine.routing.router import Router
from lpengine.routing.types import (
    LiquidityResult,
    SwapDirection,
    SwapOutcome,
    WithdrawalResult,
)

__all__ = [
    "LiquidityResult",
    "Router",
    "SwapDirection",
    "SwapOutcome",
    "SwapPath",
    "TaxedSwapPath",
    "UntaxedSwapPath",
    "WithdrawalResult",
]
