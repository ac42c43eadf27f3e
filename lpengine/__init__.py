"""Constant-product liquidity pool engine."""

from lpengine.amm.pool import LiquidityPool
from lpengine.deployment import Deployment, deploy
from lpengine.routing.router import Router

__version__ = "0.1.0"
__all__ = ["Deployment", "LiquidityPool", "Router", "deploy", "__version__"]
