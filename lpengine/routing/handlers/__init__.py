"""Swap path handlers.

- base.py: SwapPath protocol and BaseSwapPath shared plumbing
- untaxed.py: UntaxedSwapPath, priced and bounded before funds move
- taxed.py: TaxedSwapPath, validated on realized amounts
"""

from lpengine.routing.handlers.base import BaseSwapPath, SwapPath
from lpengine.routing.handlers.taxed import TaxedSwapPath
from lpengine.routing.handlers.untaxed import UntaxedSwapPath

__all__ = ["BaseSwapPath", "SwapPath", "TaxedSwapPath", "UntaxedSwapPath"]
