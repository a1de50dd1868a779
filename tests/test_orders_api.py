from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool

from storefront.data.database import Base, enable_sqlite_foreign_keys
from storefront.repos.cart_repo import CartRepo
from tests.conftest import add_to_cart, auth_headers, build_app, make_address, make_product, make_user


def test_create_order_requires_auth(client):
    resp = client.post("/api/orders/")
    assert resp.status_code == 401
    assert resp.json()["errorCode"] == 4001


def test_create_order_with_empty_cart(client, user_headers):
    resp = client.post("/api/orders/", headers=user_headers)

    assert resp.status_code == 200
    assert resp.json() == {"message": "cart is empty"}


def test_create_order_returns_order_with_line_items(client, db, user, user_headers):
    tea = make_product(db, name="Tea", price="10.00")
    cup = make_product(db, name="Cup", price="5.00")
    address = make_address(db, user)
    user.default_shipping_address_id = address.id
    db.commit()
    add_to_cart(db, user, tea, 2)
    add_to_cart(db, user, cup, 1)

    resp = client.post("/api/orders/", headers=user_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert Decimal(body["netAmount"]) == Decimal("25.00")
    assert body["status"] == "PENDING"
    assert body["address"] == "12 Tea Street, Kolkata, India-700001"
    assert sorted((p["productId"], p["quantity"]) for p in body["products"]) == sorted(
        [(tea.id, 2), (cup.id, 1)]
    )

    cart = client.get("/api/cart/", headers=user_headers)
    assert cart.json() == []


def test_store_failure_is_reported_as_internal_error(app, db, user, user_headers, monkeypatch):
    add_to_cart(db, user, make_product(db), 1)

    def broken_clear(self, user_id):
        raise RuntimeError("connection lost")

    monkeypatch.setattr(CartRepo, "clear", broken_clear)

    with TestClient(app, raise_server_exceptions=False) as c:
        resp = c.post("/api/orders/", headers=user_headers)
        assert resp.status_code == 500
        assert resp.json() == {"message": "Something went wrong", "errorCode": 3001, "errors": None}

        orders = c.get("/api/orders/", headers=user_headers)
        assert orders.json() == []


def test_checkout_in_progress_is_conflict(client, db, user, user_headers, lock_service):
    add_to_cart(db, user, make_product(db), 1)
    lock_service.held.add(user.id)

    resp = client.post("/api/orders/", headers=user_headers)

    assert resp.status_code == 409
    assert resp.json()["errorCode"] == 4002


def place_order(client, db, user, headers, price="10.00", quantity=1):
    add_to_cart(db, user, make_product(db, price=price), quantity)
    return client.post("/api/orders/", headers=headers).json()


def test_list_and_get_own_orders(client, db, user, user_headers):
    order = place_order(client, db, user, user_headers)

    listed = client.get("/api/orders/", headers=user_headers).json()
    assert [o["id"] for o in listed] == [order["id"]]

    detail = client.get(f"/api/orders/{order['id']}", headers=user_headers).json()
    assert detail["id"] == order["id"]
    assert [e["status"] for e in detail["events"]] == ["PENDING"]


def test_cannot_see_someone_elses_order(client, db, user, user_headers):
    order = place_order(client, db, user, user_headers)
    other = make_user(db, email="other@example.com")

    resp = client.get(f"/api/orders/{order['id']}", headers=auth_headers(other))

    assert resp.status_code == 404
    assert resp.json()["errorCode"] == 5003


def test_admin_can_see_any_order(client, db, user, user_headers, admin_headers):
    order = place_order(client, db, user, user_headers)

    resp = client.get(f"/api/orders/{order['id']}", headers=admin_headers)

    assert resp.status_code == 200


def test_cancel_order_appends_event(client, db, user, user_headers, notifier):
    order = place_order(client, db, user, user_headers)

    resp = client.put(f"/api/orders/{order['id']}/cancel", headers=user_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "CANCELLED"
    assert [e["status"] for e in body["events"]] == ["PENDING", "CANCELLED"]
    assert notifier.sent[-1] == (user.id, order["id"], "CANCELLED")


def test_cancel_twice_is_rejected(client, db, user, user_headers):
    order = place_order(client, db, user, user_headers)
    client.put(f"/api/orders/{order['id']}/cancel", headers=user_headers)

    resp = client.put(f"/api/orders/{order['id']}/cancel", headers=user_headers)

    assert resp.status_code == 400
    assert resp.json()["errorCode"] == 6001


def test_admin_changes_status(client, db, user, user_headers, admin_headers):
    order = place_order(client, db, user, user_headers)

    resp = client.put(
        f"/api/orders/{order['id']}/status",
        json={"status": "ACCEPTED"},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    assert resp.json()["status"] == "ACCEPTED"
    assert [e["status"] for e in resp.json()["events"]] == ["PENDING", "ACCEPTED"]


def test_delivered_order_cannot_be_cancelled(client, db, user, user_headers, admin_headers):
    order = place_order(client, db, user, user_headers)
    client.put(f"/api/orders/{order['id']}/status", json={"status": "DELIVERED"}, headers=admin_headers)

    resp = client.put(f"/api/orders/{order['id']}/cancel", headers=user_headers)

    assert resp.status_code == 400


def test_change_status_rejects_unknown_status(client, db, user, user_headers, admin_headers):
    order = place_order(client, db, user, user_headers)

    resp = client.put(f"/api/orders/{order['id']}/status", json={"status": "LOST"}, headers=admin_headers)

    assert resp.status_code == 422
    assert resp.json()["errorCode"] == 2001


def test_change_status_of_missing_order(client, admin_headers):
    resp = client.put("/api/orders/999/status", json={"status": "ACCEPTED"}, headers=admin_headers)
    assert resp.status_code == 404


def test_admin_routes_reject_regular_users(client, user, user_headers):
    assert client.get("/api/orders/index", headers=user_headers).status_code == 401
    assert client.get(f"/api/orders/users/{user.id}", headers=user_headers).status_code == 401
    assert client.put("/api/orders/1/status", json={"status": "ACCEPTED"}, headers=user_headers).status_code == 401


def test_admin_lists_orders_with_status_filter(client, db, user, user_headers, admin_headers):
    first = place_order(client, db, user, user_headers)
    second = place_order(client, db, user, user_headers)
    client.put(f"/api/orders/{second['id']}/cancel", headers=user_headers)

    all_orders = client.get("/api/orders/index", headers=admin_headers).json()
    assert [o["id"] for o in all_orders] == [first["id"], second["id"]]

    pending = client.get("/api/orders/index", params={"status": "PENDING"}, headers=admin_headers).json()
    assert [o["id"] for o in pending] == [first["id"]]

    of_user = client.get(
        f"/api/orders/users/{user.id}", params={"status": "CANCELLED"}, headers=admin_headers
    ).json()
    assert [o["id"] for o in of_user] == [second["id"]]


def test_checkout_fits_in_a_single_connection_pool(tmp_path, lock_service, notifier):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'one-connection.db'}",
        connect_args={"check_same_thread": False},
        poolclass=QueuePool,
        pool_size=1,
        max_overflow=0,
        pool_timeout=2,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    with factory() as s:
        user = make_user(s)
        add_to_cart(s, user, make_product(s), 2)
        headers = auth_headers(user)

    try:
        with TestClient(build_app(factory, lock_service, notifier)) as c:
            resp = c.post("/api/orders/", headers=headers)

            assert resp.status_code == 200
            assert resp.json()["status"] == "PENDING"
            assert c.get("/api/cart/", headers=headers).json() == []
    finally:
        engine.dispose()


def test_setting_the_current_status_again_is_rejected(client, db, user, user_headers, admin_headers, notifier):
    order = place_order(client, db, user, user_headers)
    sent_before = len(notifier.sent)

    resp = client.put(f"/api/orders/{order['id']}/status", json={"status": "PENDING"}, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["errorCode"] == 6001
    detail = client.get(f"/api/orders/{order['id']}", headers=user_headers).json()
    assert detail["status"] == "PENDING"
    assert [e["status"] for e in detail["events"]] == ["PENDING"]
    assert len(notifier.sent) == sent_before
