"""Asset ledgers the pool settles against.

- base.py: Ledger and FungibleToken building blocks
- native.py: NativeAsset, the base asset attached to calls as `value`
- fee_token.py: FeeToken, the tradable asset with a switchable transfer tax
"""

from lpengine.assets.base import FungibleToken, Ledger, ReceiveHook
from lpengine.assets.fee_token import FeeToken
from lpengine.assets.native import NativeAsset

__all__ = ["FeeToken", "FungibleToken", "Ledger", "NativeAsset", "ReceiveHook"]
