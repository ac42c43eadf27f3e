"""Base class and protocol for swap path handlers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Protocol

import structlog

from lpengine.errors import BelowMinimumOut, InsufficientInputAmount, InsufficientOutputAmount
from lpengine.routing.types import SwapDirection, SwapOutcome

if TYPE_CHECKING:
    from lpengine.routing.router import Router

logger = structlog.get_logger()


class SwapPath(Protocol):
    """Protocol for exact-input swap paths.

    The router picks a path by reading the quote token's tax flag. Every
    path returns a SwapOutcome so callers can apply the same checks to
    either one.
    """

    taxed: ClassVar[bool]

    def execute(
        self,
        router: Router,
        direction: SwapDirection,
        amount_in: int,
        amount_out_min: int,
        to: str,
        sender: str,
    ) -> SwapOutcome:
        """Swap `amount_in` of the input asset for at least `amount_out_min` of the other.

        For BASE_TO_QUOTE the router already holds the base input.
        """
        ...


class BaseSwapPath(ABC):
    """Shared plumbing for swap paths.

    Subclasses set `taxed` and implement the two directions.
    """

    taxed: ClassVar[bool]

    def execute(
        self,
        router: Router,
        direction: SwapDirection,
        amount_in: int,
        amount_out_min: int,
        to: str,
        sender: str,
    ) -> SwapOutcome:
        self._require_tax_state(router.token.is_tax_active())
        if amount_in == 0:
            raise InsufficientInputAmount()
        if direction is SwapDirection.BASE_TO_QUOTE:
            return self._base_to_quote(router, amount_in, amount_out_min, to)
        return self._quote_to_base(router, amount_in, amount_out_min, to, sender)

    @abstractmethod
    def _require_tax_state(self, tax_active: bool) -> None:
        """Raise if this path may not run with the given tax flag."""
        ...

    @abstractmethod
    def _base_to_quote(
        self,
        router: Router,
        amount_in: int,
        amount_out_min: int,
        to: str,
    ) -> SwapOutcome:
        """Swap base already held by the router for quote paid to `to`."""
        ...

    @abstractmethod
    def _quote_to_base(
        self,
        router: Router,
        amount_in: int,
        amount_out_min: int,
        to: str,
        sender: str,
    ) -> SwapOutcome:
        """Swap quote pulled from `sender` for base paid to `to`."""
        ...

    def _require_output(self, direction: SwapDirection, amount_out: int) -> None:
        """Raise InsufficientOutputAmount if the input is too small to buy anything."""
        if amount_out == 0:
            raise InsufficientOutputAmount(f"Input too small for any output ({direction.value})")

    def _check_minimum(
        self,
        direction: SwapDirection,
        amount_out: int,
        amount_out_min: int,
    ) -> None:
        """Raise BelowMinimumOut if the output misses the caller's bound."""
        if amount_out < amount_out_min:
            logger.info(
                "swap_below_minimum",
                direction=direction.value,
                taxed=self.taxed,
                amount_out=amount_out,
                amount_out_min=amount_out_min,
            )
            raise BelowMinimumOut(
                f"Output {amount_out} below minimum {amount_out_min} ({direction.value})"
            )


__all__ = ["BaseSwapPath", "SwapPath"]
