"""Type definitions for the routing layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SwapDirection(str, Enum):
    """Which asset goes into the pool."""

    BASE_TO_QUOTE = "base_to_quote"
    QUOTE_TO_BASE = "quote_to_base"


@dataclass(frozen=True)
class LiquidityResult:
    """Result of adding liquidity."""

    base_used: int
    quote_used: int
    shares: int


@dataclass(frozen=True)
class WithdrawalResult:
    """Result of removing liquidity (nominal amounts paid by the pool)."""

    base_out: int
    quote_out: int


@dataclass(frozen=True)
class SwapOutcome:
    """Result of an exact-input swap, identical in shape for both swap paths."""

    direction: SwapDirection
    amount_in: int  # Nominal amount the caller paid
    amount_received: int  # Amount the pool actually received
    amount_out: int  # Amount the recipient actually received
    taxed: bool


__all__ = ["LiquidityResult", "SwapDirection", "SwapOutcome", "WithdrawalResult"]
