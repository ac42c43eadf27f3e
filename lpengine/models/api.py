"""Pydantic models for the HTTP surface.

Amounts travel as decimal strings so uint256 values survive JSON.
"""

from typing import Literal

from pydantic import BaseModel, Field

from lpengine.models.types import Address, Uint256
from lpengine.routing.types import SwapDirection


class PoolState(BaseModel):
    """Committed pool state."""

    pool: Address
    token: Address
    router: Address
    reserve_base: Uint256
    reserve_quote: Uint256
    total_shares: Uint256
    tax_active: bool


class PriceResponse(BaseModel):
    price: Uint256 = Field(description="Quote received for price_unit of base, net of fee")
    price_unit: Uint256


class SwapQuoteResponse(BaseModel):
    direction: SwapDirection
    amount_in: Uint256
    amount_out: Uint256


class AccountBalances(BaseModel):
    address: Address
    base: Uint256
    quote: Uint256
    shares: Uint256


class FundRequest(BaseModel):
    """Credit an account with base and send it quote from the treasury."""

    base: Uint256 = "0"
    quote: Uint256 = "0"


class AddLiquidityRequest(BaseModel):
    sender: Address
    to: Address | None = Field(default=None, description="Share recipient (default: sender)")
    value: Uint256 = Field(description="Base amount attached to the call")
    quote_desired: Uint256
    base_min: Uint256 = "0"
    quote_min: Uint256 = "0"


class AddLiquidityResponse(BaseModel):
    base_used: Uint256
    quote_used: Uint256
    shares: Uint256


class RemoveLiquidityRequest(BaseModel):
    sender: Address
    to: Address | None = Field(default=None, description="Asset recipient (default: sender)")
    shares: Uint256
    base_min: Uint256 = "0"
    quote_min: Uint256 = "0"


class RemoveLiquidityResponse(BaseModel):
    base_out: Uint256
    quote_out: Uint256


class SwapRequest(BaseModel):
    sender: Address
    to: Address | None = Field(default=None, description="Output recipient (default: sender)")
    direction: SwapDirection
    amount_in: Uint256
    amount_out_min: Uint256 = "0"
    path: Literal["auto", "taxed", "untaxed"] = Field(
        default="auto",
        description="Swap path; 'auto' follows the token's tax flag at call time",
    )


class SwapResponse(BaseModel):
    direction: SwapDirection
    taxed: bool
    amount_in: Uint256
    amount_received: Uint256
    amount_out: Uint256


class TaxToggleRequest(BaseModel):
    caller: Address
    active: bool


class ErrorResponse(BaseModel):
    code: str
    category: str
    detail: str
