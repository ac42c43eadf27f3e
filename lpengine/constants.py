"""Protocol constants for the liquidity pool engine.

Centralizes reserved addresses and pool parameters.
"""

from lpengine.models.types import is_valid_address

# Fee arithmetic is done in basis points against this denominator
BPS_DENOMINATOR = 10_000

# Swap fee charged on the input side (100 bps = 1%)
SWAP_FEE_BPS = 100

# Tax the tradable asset deducts on transfers while its tax flag is on (200 bps = 2%)
TRANSFER_TAX_BPS = 200

# Shares permanently locked at the sink on the first mint
MINIMUM_LIQUIDITY = 1000

# One whole unit of an 18-decimal asset; reference size for price quotes
PRICE_UNIT = 10**18


def _validate_reserved_address(name: str, address: str) -> str:
    """Validate and return a reserved ledger address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Sender of mints and recipient of burns in Transfer events
ZERO_ADDRESS = _validate_reserved_address("zero", "0x" + "00" * 20)

# Holder of the locked minimum liquidity; never debited
SINK_ADDRESS = _validate_reserved_address("sink", "0xbaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaad")

# Liquidity share token metadata
SHARE_TOKEN_NAME = "Liquidity Pool Share"
SHARE_TOKEN_SYMBOL = "LPS"
SHARE_TOKEN_DECIMALS = 18
