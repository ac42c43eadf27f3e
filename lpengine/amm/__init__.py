"""Pool accounting engine.

- base.py: AMM abstract base
- constant_product.py: ConstantProduct math and the constant_product singleton
- guard.py: ReentrancyGuard
- shares.py: ShareToken, the liquidity share ledger
- pool.py: LiquidityPool
"""

from lpengine.amm.base import AMM
from lpengine.amm.constant_product import ConstantProduct, constant_product
from lpengine.amm.guard import ReentrancyGuard
from lpengine.amm.pool import LiquidityPool
from lpengine.amm.shares import ShareToken

__all__ = [
    "AMM",
    "ConstantProduct",
    "LiquidityPool",
    "ReentrancyGuard",
    "ShareToken",
    "constant_product",
]
