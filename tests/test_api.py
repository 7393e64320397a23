"""Tests for the HTTP adapter: identity headers and error-to-status mapping."""

import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from conftest import make_item, put_cart
from shop_checkout.api.deps import get_cart_repo, get_observer, get_product_client
from shop_checkout.data.database import get_db
from shop_checkout.domain.errors import StorageFailure
from shop_checkout.main import create_app
from shop_checkout.services.observer import OrderObserver

USER_42 = {"X-User-Id": "42"}
USER_7 = {"X-User-Id": "7"}
ADMIN = {"X-User-Id": "1", "X-Is-Admin": "true"}


@pytest.fixture
def client(db, cart_repo, catalog):
    app = create_app()

    def override_db():
        yield db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_cart_repo] = lambda: cart_repo
    app.dependency_overrides[get_product_client] = lambda: catalog
    app.dependency_overrides[get_observer] = OrderObserver

    with TestClient(app) as c:
        yield c


def _checkout(client, cart_repo, headers=USER_42, owner_key="user:42"):
    put_cart(cart_repo, owner_key, [make_item("p-a", "10", 2), make_item("p-b", "5", 1)])
    resp = client.post("/orders/checkout", headers=headers)
    assert resp.status_code == 201
    return resp.json()


class TestIdentity:
    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"

    def test_missing_identity(self, client):
        assert client.get("/cart").status_code == 401

    def test_guest_session_owns_cart(self, client, cart_repo):
        client.post("/cart/items", json={"product_id": "p-a", "quantity": 1}, headers={"X-Session-Id": "s1"})
        assert cart_repo.get("guest:s1") is not None


class TestCartRoutes:
    def test_add_and_read(self, client):
        client.post("/cart/items", json={"product_id": "p-a", "quantity": 2, "size": "M"}, headers=USER_42)

        body = client.get("/cart", headers=USER_42).json()

        assert body["owner_key"] == "user:42"
        assert Decimal(body["total"]) == Decimal("20")
        assert Decimal(body["items"][0]["subtotal"]) == Decimal("20")

    def test_invalid_quantity_rejected_by_schema(self, client):
        resp = client.post("/cart/items", json={"product_id": "p-a", "quantity": 0}, headers=USER_42)
        assert resp.status_code == 422

    def test_unknown_product(self, client):
        resp = client.post("/cart/items", json={"product_id": "nope", "quantity": 1}, headers=USER_42)
        assert resp.status_code == 404

    def test_remove_and_clear(self, client, cart_repo):
        put_cart(cart_repo, "user:42", [make_item("p-a"), make_item("p-b")])

        body = client.delete("/cart/items/p-a", headers=USER_42).json()
        assert [i["product_id"] for i in body["items"]] == ["p-b"]

        assert client.delete("/cart", headers=USER_42).status_code == 204
        assert cart_repo.get("user:42") is None


class TestOrderRoutes:
    def test_checkout(self, client, cart_repo):
        order = _checkout(client, cart_repo)

        assert Decimal(order["total"]) == Decimal("25")
        assert order["status"] == "PENDING"
        assert len(order["items"]) == 2
        assert cart_repo.get("user:42") is None

    def test_checkout_empty_cart(self, client):
        assert client.post("/orders/checkout", headers=USER_42).status_code == 400

    def test_storage_failure_is_503(self, client, cart_repo, monkeypatch):
        def broken_get(owner_key):
            raise StorageFailure("redis down")

        monkeypatch.setattr(cart_repo, "get", broken_get)

        assert client.post("/orders/checkout", headers=USER_42).status_code == 503

    def test_list_my_orders(self, client, cart_repo):
        order = _checkout(client, cart_repo)
        _checkout(client, cart_repo, headers=USER_7, owner_key="user:7")

        body = client.get("/orders/me", headers=USER_42).json()

        assert [o["id"] for o in body] == [order["id"]]

    def test_get_order_visibility(self, client, cart_repo):
        order = _checkout(client, cart_repo)

        assert client.get(f"/orders/{order['id']}", headers=USER_42).status_code == 200
        assert client.get(f"/orders/{order['id']}", headers=USER_7).status_code == 403
        assert client.get(f"/orders/{order['id']}", headers=ADMIN).status_code == 200
        assert client.get(f"/orders/{uuid.uuid4()}", headers=USER_42).status_code == 404

    def test_admin_reads_order_without_identity(self, client, cart_repo):
        order = _checkout(client, cart_repo)
        url = f"/orders/{order['id']}"

        assert client.get(url, headers={"X-Is-Admin": "true"}).status_code == 200
        assert client.get(url).status_code == 401

    def test_cancel(self, client, cart_repo):
        order = _checkout(client, cart_repo)

        assert client.post(f"/orders/{order['id']}/cancel", headers=USER_7).status_code == 403
        resp = client.post(f"/orders/{order['id']}/cancel", headers=USER_42)

        assert resp.status_code == 200
        assert resp.json()["status"] == "CANCELLED"

    def test_admin_status_update(self, client, cart_repo):
        order = _checkout(client, cart_repo)
        url = f"/orders/{order['id']}/status"

        assert client.patch(url, json={"status": "shipped"}, headers=USER_42).status_code == 403
        assert client.patch(url, json={"status": "bogus"}, headers=ADMIN).status_code == 400
        assert client.patch(url, json={"status": "shipped", "total": "0"}, headers=ADMIN).status_code == 422

        resp = client.patch(url, json={"status": "shipped"}, headers=ADMIN)
        assert resp.json()["status"] == "SHIPPED"
        assert Decimal(resp.json()["total"]) == Decimal("25")

    def test_admin_delete(self, client, cart_repo):
        order = _checkout(client, cart_repo)

        assert client.delete(f"/orders/{order['id']}", headers=USER_42).status_code == 403
        assert client.delete(f"/orders/{order['id']}", headers=ADMIN).status_code == 204
        assert client.get(f"/orders/{order['id']}", headers=ADMIN).status_code == 404
