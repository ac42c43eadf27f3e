"""Pool configuration."""

import os
from dataclasses import dataclass

from lpengine.constants import (
    BPS_DENOMINATOR,
    MINIMUM_LIQUIDITY,
    PRICE_UNIT,
    SWAP_FEE_BPS,
    TRANSFER_TAX_BPS,
)


@dataclass(frozen=True)
class PoolConfig:
    """Centralized configuration for a pool deployment.

    The swap fee and the transfer tax are independent knobs: the fee is
    kept by liquidity providers, the tax is taken by the tradable asset
    and paid to its treasury.

    Attributes:
        swap_fee_bps: Fee charged on swap input (default: 100 = 1%)
        minimum_liquidity: Shares locked at the sink on first mint (default: 1000)
        price_unit: Base amount used for price quotes (default: 1e18)
        transfer_tax_bps: Tax applied by the tradable asset while active (default: 200 = 2%)
    """

    swap_fee_bps: int = SWAP_FEE_BPS
    minimum_liquidity: int = MINIMUM_LIQUIDITY
    price_unit: int = PRICE_UNIT
    transfer_tax_bps: int = TRANSFER_TAX_BPS

    def __post_init__(self) -> None:
        if not 0 <= self.swap_fee_bps < BPS_DENOMINATOR:
            raise ValueError(f"swap_fee_bps must be in [0, {BPS_DENOMINATOR}): {self.swap_fee_bps}")
        if not 0 <= self.transfer_tax_bps < BPS_DENOMINATOR:
            raise ValueError(
                f"transfer_tax_bps must be in [0, {BPS_DENOMINATOR}): {self.transfer_tax_bps}"
            )
        if self.minimum_liquidity < 0:
            raise ValueError(f"minimum_liquidity cannot be negative: {self.minimum_liquidity}")
        if self.price_unit <= 0:
            raise ValueError(f"price_unit must be positive: {self.price_unit}")

    @property
    def fee_multiplier(self) -> int:
        """Fee multiplier for AMM math (10000 - swap_fee_bps).

        For 100 bps (1%), this returns 9900.
        """
        return BPS_DENOMINATOR - self.swap_fee_bps


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as err:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from err


def load_config_from_env() -> PoolConfig:
    """Build a PoolConfig from LPENGINE_* environment variables.

    Unset variables fall back to the protocol defaults.

    Raises:
        ValueError: If a variable is not an integer or is out of range
    """
    return PoolConfig(
        swap_fee_bps=_env_int("LPENGINE_SWAP_FEE_BPS", SWAP_FEE_BPS),
        minimum_liquidity=_env_int("LPENGINE_MINIMUM_LIQUIDITY", MINIMUM_LIQUIDITY),
        price_unit=_env_int("LPENGINE_PRICE_UNIT", PRICE_UNIT),
        transfer_tax_bps=_env_int("LPENGINE_TRANSFER_TAX_BPS", TRANSFER_TAX_BPS),
    )


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()
