# test_checkout.py - turning a cart into an order

from sqlalchemy.exc import OperationalError, SQLAlchemyError

from app.crud import cart as crud_cart
from app.models.models import CartItem
from app.models.order import Order, OrderItem


def _fill_cart(client, headers, make_product):
    kettle = make_product(name="Kettle", price=1000.0, discount_price=800.0,
                          delivery_charge=50.0, category="Appliances", images=["kettle.png"])
    wire = make_product(name="Wire 1.5mm", price=500.0, category="Wires & Cables", images=["wire.png"])
    line_id = client.post("/api/cart/", json={"product_id": kettle.id}, headers=headers).json()["id"]
    client.post("/api/cart/", json={"product_id": wire.id}, headers=headers)
    client.patch(f"/api/cart/{line_id}", json={"delta": 1}, headers=headers)
    return kettle, wire


def test_checkout_end_to_end(client, db, user, user_headers, make_product, make_address, cart_events):
    """2 x Kettle at 800 (+50 delivery) and 1 x Wire at 500 totals 2150"""
    kettle, wire = _fill_cart(client, user_headers, make_product)
    address = make_address(user)

    response = client.post("/api/orders/", json={"address_id": address.id}, headers=user_headers)

    assert response.status_code == 201
    order = response.json()
    assert order["status"] == "Placed"
    assert order["total_amount"] == 2150.0
    assert order["address"]["city"] == "Pune"
    summary = {item["product_id"]: item for item in order["items_summary"]}
    assert summary[kettle.id]["price"] == 800.0
    assert summary[kettle.id]["quantity"] == 2
    assert summary[kettle.id]["image"] == "kettle.png"
    assert summary[wire.id]["price"] == 500.0

    items = db.query(OrderItem).filter(OrderItem.order_id == order["id"]).all()
    assert sorted((i.price_at_purchase, i.quantity) for i in items) == [(500.0, 1), (800.0, 2)]

    assert client.get("/api/cart/count", headers=user_headers).json() == {"count": 0}
    assert cart_events.events_for(user.id)[-1] == "cart_cleared"


def test_order_is_listed_and_detailed_for_its_owner(client, user, user_headers, make_product, make_address):
    _fill_cart(client, user_headers, make_product)
    address = make_address(user)
    order_id = client.post("/api/orders/", json={"address_id": address.id}, headers=user_headers).json()["id"]

    listed = client.get("/api/orders/", headers=user_headers).json()
    detail = client.get(f"/api/orders/{order_id}", headers=user_headers).json()

    assert [o["id"] for o in listed] == [order_id]
    assert len(detail["order_items"]) == 2


def test_orders_of_another_customer_are_hidden(client, user, user_headers, make_user, headers_for,
                                               make_product, make_order):
    other = make_user(name="Kiran")
    order = make_order(other, [(make_product(), 1)])

    assert client.get(f"/api/orders/{order.id}", headers=user_headers).status_code == 404
    assert client.get("/api/orders/", headers=user_headers).json() == []
    assert len(client.get("/api/orders/", headers=headers_for(other)).json()) == 1


def test_empty_cart_cannot_be_checked_out(client, db, user, user_headers, make_address):
    address = make_address(user)

    response = client.post("/api/orders/", json={"address_id": address.id}, headers=user_headers)

    assert response.status_code == 422
    assert response.json()["detail"] == "Your cart is empty"
    assert db.query(Order).count() == 0


def test_address_is_required(client, db, user_headers, make_product):
    _fill_cart(client, user_headers, make_product)

    response = client.post("/api/orders/", json={}, headers=user_headers)

    assert response.status_code == 422
    assert db.query(Order).count() == 0
    assert client.get("/api/cart/count", headers=user_headers).json() == {"count": 2}


def test_address_of_another_customer_is_rejected(client, db, user_headers, make_user, make_address, make_product):
    _fill_cart(client, user_headers, make_product)
    foreign = make_address(make_user(name="Kiran"))

    response = client.post("/api/orders/", json={"address_id": foreign.id}, headers=user_headers)

    assert response.status_code == 422
    assert db.query(Order).count() == 0


def test_repeated_submit_with_same_key_places_one_order(client, db, user, user_headers, make_product, make_address):
    _fill_cart(client, user_headers, make_product)
    address = make_address(user)
    headers = dict(user_headers, **{"Idempotency-Key": "checkout-1"})

    first = client.post("/api/orders/", json={"address_id": address.id}, headers=headers)
    second = client.post("/api/orders/", json={"address_id": address.id}, headers=headers)

    assert first.status_code == second.status_code == 201
    assert first.json()["id"] == second.json()["id"]
    assert db.query(Order).count() == 1


def test_key_in_body_is_honoured(client, db, user, user_headers, make_product, make_address):
    _fill_cart(client, user_headers, make_product)
    address = make_address(user)
    body = {"address_id": address.id, "idempotency_key": "checkout-2"}

    first = client.post("/api/orders/", json=body, headers=user_headers)
    second = client.post("/api/orders/", json=body, headers=user_headers)

    assert first.json()["id"] == second.json()["id"]
    assert db.query(Order).count() == 1


def test_failed_write_leaves_cart_untouched(client, db, user, user_headers, make_product, make_address,
                                            monkeypatch, cart_events):
    _fill_cart(client, user_headers, make_product)
    address = make_address(user)

    def broken_clear(db, user_id):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(crud_cart, "clear_cart", broken_clear)

    response = client.post("/api/orders/", json={"address_id": address.id}, headers=user_headers)

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to place order"
    assert db.query(Order).count() == 0
    assert db.query(OrderItem).count() == 0
    assert db.query(CartItem).filter(CartItem.user_id == user.id).count() == 2
    assert "cart_cleared" not in cart_events.events_for(user.id)


def test_transient_failure_is_retried(client, db, user, user_headers, make_product, make_address, monkeypatch):
    _fill_cart(client, user_headers, make_product)
    address = make_address(user)
    real_clear = crud_cart.clear_cart
    calls = {"n": 0}

    def flaky_clear(db, user_id):
        calls["n"] += 1
        if calls["n"] == 1:
            raise OperationalError("DELETE FROM cart_items", {}, Exception("database is locked"))
        return real_clear(db, user_id)

    monkeypatch.setattr(crud_cart, "clear_cart", flaky_clear)

    response = client.post("/api/orders/", json={"address_id": address.id}, headers=user_headers)

    assert response.status_code == 201
    assert calls["n"] == 2
    assert db.query(Order).count() == 1
    assert db.query(OrderItem).count() == 2
    assert db.query(CartItem).count() == 0


def test_order_snapshot_survives_catalog_changes(client, db, user, user_headers, admin_headers,
                                                 make_product, make_address):
    kettle, wire = _fill_cart(client, user_headers, make_product)
    address = make_address(user)
    order_id = client.post("/api/orders/", json={"address_id": address.id}, headers=user_headers).json()["id"]

    client.put(f"/api/products/{kettle.id}", json={"price": 5000.0, "discount_price": None}, headers=admin_headers)
    client.delete(f"/api/products/{wire.id}", headers=admin_headers)

    order = client.get(f"/api/orders/{order_id}", headers=user_headers).json()
    assert order["total_amount"] == 2150.0
    prices = {item["name"]: item["price"] for item in order["items_summary"]}
    assert prices == {"Kettle": 800.0, "Wire 1.5mm": 500.0}
    assert len(order["order_items"]) == 2


def test_sold_out_line_blocks_checkout(client, db, user, user_headers, make_product, make_address, cart_events):
    """A product that sold out after it was carted stops the order before any write"""
    kettle, wire = _fill_cart(client, user_headers, make_product)
    address = make_address(user)
    wire.stock_quantity = 0
    db.commit()

    response = client.post("/api/orders/", json={"address_id": address.id}, headers=user_headers)

    assert response.status_code == 422
    assert response.json()["detail"] == "Out of stock: Wire 1.5mm"
    assert db.query(Order).count() == 0
    assert db.query(OrderItem).count() == 0
    assert db.query(CartItem).filter(CartItem.user_id == user.id).count() == 2
    assert "cart_cleared" not in cart_events.events_for(user.id)
