"""Test helpers module for shared test utilities.

- constants: Account addresses and common amounts
- factories: Deployment builders and seeding helpers
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAROL,
    MANAGER,
    TREASURY,
    UNIT,
    USER_BASE,
    USER_QUOTE,
)
from tests.helpers.factories import deliver, fund, make_deployment, seed_pool

__all__ = [
    # Constants
    "ALICE",
    "BOB",
    "CAROL",
    "MANAGER",
    "TREASURY",
    "UNIT",
    "USER_BASE",
    "USER_QUOTE",
    # Factories
    "deliver",
    "fund",
    "make_deployment",
    "seed_pool",
]
