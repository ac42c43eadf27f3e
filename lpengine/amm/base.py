"""Base class for AMM pricing math."""

from abc import ABC, abstractmethod


class AMM(ABC):
    """Abstract base class for AMM pricing math.

    Implementations may extend the base method signatures with additional
    optional parameters. For example, ConstantProduct adds a fee_multiplier
    parameter to get_amount_out() so pools with a different fee reuse the
    same math.
    """

    @abstractmethod
    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate output amount for a given input.

        Args:
            amount_in: Input asset amount
            reserve_in: Reserve of input asset in pool
            reserve_out: Reserve of output asset in pool

        Returns:
            Output asset amount
        """
        ...

    @abstractmethod
    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Amount of B worth `amount_a` of A at the current reserve ratio, fee-free."""
        ...
