"""Integration tests for the pool HTTP API."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from lpengine.api.endpoints import get_deployment
from lpengine.api.main import app
from lpengine.routing.types import SwapDirection
from tests.helpers import ALICE, BOB, MANAGER, UNIT, make_deployment


@pytest.fixture
def api_deployment():
    return make_deployment()


@pytest.fixture
def client(api_deployment) -> Iterator[TestClient]:
    """Test client serving a fresh deployment."""
    app.dependency_overrides[get_deployment] = lambda: api_deployment
    yield TestClient(app)
    app.dependency_overrides.clear()


def fund(client, account, base=100 * UNIT, quote=500 * UNIT):
    response = client.post(
        f"/accounts/{account}/fund", json={"base": str(base), "quote": str(quote)}
    )
    assert response.status_code == 200
    return response.json()


def add_liquidity(client, sender=ALICE, value=10 * UNIT, quote=50 * UNIT, **bounds):
    body = {"sender": sender, "value": str(value), "quote_desired": str(quote)}
    body.update({k: str(v) for k, v in bounds.items()})
    return client.post("/liquidity/add", json=body)


@pytest.fixture
def seeded_client(client):
    """ALICE funded and providing 10 base / 50 quote."""
    fund(client, ALICE)
    response = add_liquidity(client)
    assert response.status_code == 200
    return client


class TestReadEndpoints:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_empty_pool_state(self, client, api_deployment):
        response = client.get("/pool")
        assert response.status_code == 200
        data = response.json()
        assert data["reserve_base"] == "0"
        assert data["reserve_quote"] == "0"
        assert data["total_shares"] == "0"
        assert data["tax_active"] is False
        assert data["pool"] == api_deployment.pool.address
        assert data["router"] == api_deployment.router.address

    def test_price_on_empty_pool_is_conflict(self, client):
        response = client.get("/price")
        assert response.status_code == 409
        assert response.json() == {
            "code": "insufficient_liquidity",
            "category": "liquidity_state",
            "detail": "Not enough liquidity",
        }

    def test_price(self, seeded_client, api_deployment):
        response = seeded_client.get("/price")
        assert response.status_code == 200
        data = response.json()
        assert int(data["price"]) == api_deployment.router.get_current_price()
        assert data["price_unit"] == str(UNIT)

    def test_quote(self, seeded_client, api_deployment):
        response = seeded_client.get(
            "/quote", params={"direction": "base_to_quote", "amount_in": str(UNIT)}
        )
        assert response.status_code == 200
        data = response.json()
        expected = api_deployment.router.quote_swap(SwapDirection.BASE_TO_QUOTE, UNIT)
        assert data == {
            "direction": "base_to_quote",
            "amount_in": str(UNIT),
            "amount_out": str(expected),
        }

    def test_quote_rejects_bad_direction(self, seeded_client):
        response = seeded_client.get("/quote", params={"direction": "sideways", "amount_in": "1"})
        assert response.status_code == 422

    def test_account(self, seeded_client, api_deployment):
        response = seeded_client.get(f"/accounts/0x{ALICE[2:].upper()}")
        assert response.status_code == 200
        data = response.json()
        assert data["address"] == ALICE
        assert data["base"] == str(90 * UNIT)
        assert data["quote"] == str(450 * UNIT)
        assert int(data["shares"]) == api_deployment.pool.balance_of(ALICE)

    def test_account_rejects_bad_address(self, client):
        assert client.get("/accounts/0x1234").status_code == 422


class TestLiquidityEndpoints:
    def test_add_liquidity(self, client, api_deployment):
        fund(client, ALICE)
        response = add_liquidity(client)
        assert response.status_code == 200
        data = response.json()
        assert data["base_used"] == str(10 * UNIT)
        assert data["quote_used"] == str(50 * UNIT)
        assert int(data["shares"]) == api_deployment.pool.balance_of(ALICE)
        # The per-call allowance is cleared afterwards
        assert api_deployment.token.allowance(ALICE, api_deployment.router.address) == 0

    def test_add_liquidity_slippage_is_conflict(self, seeded_client):
        response = add_liquidity(seeded_client, quote=50 * UNIT, quote_min=1_000 * UNIT)
        assert response.status_code == 409
        assert response.json()["code"] == "insufficient_quote_amount"
        assert response.json()["category"] == "slippage"

    def test_add_liquidity_without_funds_is_bad_request(self, seeded_client):
        response = add_liquidity(seeded_client, sender=BOB)
        assert response.status_code == 400
        assert response.json()["category"] == "ledger"

    def test_remove_liquidity(self, seeded_client, api_deployment):
        shares = api_deployment.pool.balance_of(ALICE)
        response = seeded_client.post(
            "/liquidity/remove",
            json={"sender": ALICE, "to": BOB, "shares": str(shares)},
        )
        assert response.status_code == 200
        data = response.json()
        assert int(data["base_out"]) == api_deployment.native.balance_of(BOB)
        assert int(data["quote_out"]) == api_deployment.token.balance_of(BOB)

    def test_remove_zero_shares(self, seeded_client):
        response = seeded_client.post("/liquidity/remove", json={"sender": ALICE, "shares": "0"})
        assert response.status_code == 400
        assert response.json()["code"] == "no_shares_provided"

    def test_invalid_amount_is_unprocessable(self, seeded_client):
        response = seeded_client.post(
            "/liquidity/remove", json={"sender": ALICE, "shares": "-5"}
        )
        assert response.status_code == 422


class TestSwapEndpoint:
    def test_swap_auto(self, seeded_client, api_deployment):
        fund(seeded_client, BOB)
        expected = api_deployment.router.quote_swap(SwapDirection.QUOTE_TO_BASE, 5 * UNIT)
        response = seeded_client.post(
            "/swap",
            json={"sender": BOB, "direction": "quote_to_base", "amount_in": str(5 * UNIT)},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["taxed"] is False
        assert data["amount_out"] == str(expected)
        assert api_deployment.native.balance_of(BOB) == 100 * UNIT + expected

    def test_swap_below_minimum(self, seeded_client, api_deployment):
        fund(seeded_client, BOB)
        reserves = api_deployment.pool.get_reserves()
        response = seeded_client.post(
            "/swap",
            json={
                "sender": BOB,
                "direction": "base_to_quote",
                "amount_in": str(UNIT),
                "amount_out_min": str(5 * UNIT),
            },
        )
        assert response.status_code == 409
        assert response.json()["code"] == "below_minimum_out"
        assert api_deployment.pool.get_reserves() == reserves
        assert api_deployment.native.balance_of(BOB) == 100 * UNIT

    def test_explicit_path_must_match_tax_flag(self, seeded_client):
        fund(seeded_client, BOB)
        response = seeded_client.post(
            "/swap",
            json={
                "sender": BOB,
                "direction": "base_to_quote",
                "amount_in": str(UNIT),
                "path": "taxed",
            },
        )
        assert response.status_code == 400
        assert response.json()["code"] == "must_be_taxed"

    def test_taxed_swap_after_enabling_tax(self, seeded_client):
        fund(seeded_client, BOB)
        response = seeded_client.post("/token/tax", json={"caller": MANAGER, "active": True})
        assert response.status_code == 200
        assert response.json()["tax_active"] is True

        response = seeded_client.post(
            "/swap",
            json={
                "sender": BOB,
                "direction": "base_to_quote",
                "amount_in": str(UNIT),
                "path": "taxed",
            },
        )
        assert response.status_code == 200
        assert response.json()["taxed"] is True


class TestTaxEndpoint:
    def test_non_manager_is_rejected(self, client):
        response = client.post("/token/tax", json={"caller": ALICE, "active": True})
        assert response.status_code == 400
        assert response.json()["code"] == "unauthorized"

    def test_toggle_off(self, client):
        client.post("/token/tax", json={"caller": MANAGER, "active": True})
        response = client.post("/token/tax", json={"caller": MANAGER, "active": False})
        assert response.json()["tax_active"] is False
