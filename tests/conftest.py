"""Pytest configuration and fixtures."""

import pytest

from lpengine import Deployment
from tests.helpers import ALICE, UNIT, fund, make_deployment, seed_pool


@pytest.fixture
def deployment() -> Deployment:
    """A fresh, empty pool with its router."""
    return make_deployment()


@pytest.fixture
def host(deployment):
    return deployment.host


@pytest.fixture
def native(deployment):
    return deployment.native


@pytest.fixture
def token(deployment):
    return deployment.token


@pytest.fixture
def pool(deployment):
    return deployment.pool


@pytest.fixture
def router(deployment):
    return deployment.router


@pytest.fixture
def seeded(deployment) -> Deployment:
    """Pool seeded by the treasury with 10 base / 50 quote, and a funded ALICE."""
    seed_pool(deployment, base=10 * UNIT, quote=50 * UNIT)
    fund(deployment, ALICE)
    return deployment
