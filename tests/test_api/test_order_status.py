# test_order_status.py - fulfillment flow, cancellation and stock updates

from types import SimpleNamespace

import pytest

from app.core.exceptions import InvalidTransition
from app.models.order import Order, OrderStatus
from app.models.product import Product
from app.services.order_service import OrderService


def _set_status(client, headers, order, status):
    return client.put(f"/api/admin/orders/{order.id}/status", json={"status": status}, headers=headers)


def _stock(db, product):
    db.expire_all()
    return db.query(Product.stock_quantity).filter(Product.id == product.id).scalar()


def _advance(client, headers, order, *statuses):
    for status in statuses:
        response = _set_status(client, headers, order, status)
        assert response.status_code == 200, response.json()
    return response


def test_full_flow_decrements_stock_on_delivery(client, db, user, admin_headers, make_product, make_order):
    product = make_product(stock_quantity=10)
    order = make_order(user, [(product, 3)])

    _advance(client, admin_headers, order, "Accepted", "Shipped")
    assert _stock(db, product) == 10

    response = _set_status(client, admin_headers, order, "Delivered")

    assert response.status_code == 200
    assert response.json()["status"] == "Delivered"
    assert _stock(db, product) == 7


def test_delivering_twice_decrements_once(client, db, user, admin_headers, make_product, make_order):
    product = make_product(stock_quantity=10)
    order = make_order(user, [(product, 3)])
    _advance(client, admin_headers, order, "Accepted", "Shipped", "Delivered")

    again = _set_status(client, admin_headers, order, "Delivered")

    assert again.status_code == 200
    assert again.json()["status"] == "Delivered"
    assert _stock(db, product) == 7


def test_stock_is_floored_at_zero(client, db, user, admin_headers, make_product, make_order):
    product = make_product(stock_quantity=2)
    order = make_order(user, [(product, 3)])

    _advance(client, admin_headers, order, "Accepted", "Shipped", "Delivered")

    assert _stock(db, product) == 0


def test_delivery_of_deleted_product_still_completes(client, db, user, admin_headers, make_product, make_order):
    kept = make_product(stock_quantity=5)
    gone = make_product(name="Discontinued", stock_quantity=5)
    order = make_order(user, [(kept, 1), (gone, 1)])
    client.delete(f"/api/products/{gone.id}", headers=admin_headers)

    response = _advance(client, admin_headers, order, "Accepted", "Shipped", "Delivered")

    assert response.json()["status"] == "Delivered"
    assert _stock(db, kept) == 4


def test_fulfillment_is_applied_once_per_order(db, user, make_product, make_order):
    """Even if a delivered order reaches Delivered again, stock moves once"""
    product = make_product(stock_quantity=10)
    order = make_order(user, [(product, 3)], status=OrderStatus.shipped)
    OrderService.update_status(db, order.id, OrderStatus.delivered)

    order.status = OrderStatus.shipped
    db.commit()
    OrderService.update_status(db, order.id, OrderStatus.delivered)

    assert _stock(db, product) == 7
    assert db.get(Order, order.id).fulfillment_applied is True


@pytest.mark.parametrize("start, target", [
    (OrderStatus.placed, "Shipped"),
    (OrderStatus.placed, "Delivered"),
    (OrderStatus.accepted, "Placed"),
    (OrderStatus.shipped, "Accepted"),
    (OrderStatus.shipped, "Cancelled"),
    (OrderStatus.delivered, "Cancelled"),
    (OrderStatus.cancelled, "Accepted"),
    (OrderStatus.cancelled, "Placed"),
])
def test_disallowed_transitions_are_rejected(client, db, user, admin_headers, make_product, make_order, start, target):
    product = make_product(stock_quantity=10)
    order = make_order(user, [(product, 3)], status=start)

    response = _set_status(client, admin_headers, order, target)

    assert response.status_code == 409
    db.expire_all()
    assert db.get(Order, order.id).status == start
    assert _stock(db, product) == 10


def test_unknown_status_value_is_rejected(client, user, admin_headers, make_product, make_order):
    order = make_order(user, [(make_product(), 1)])

    assert _set_status(client, admin_headers, order, "Lost").status_code == 422


def test_admin_can_cancel_accepted_order(client, user, admin_headers, make_product, make_order):
    order = make_order(user, [(make_product(), 1)], status=OrderStatus.accepted)

    response = _set_status(client, admin_headers, order, "Cancelled")

    assert response.status_code == 200
    assert response.json()["status"] == "Cancelled"


def test_unknown_order_is_not_found(client, admin_headers):
    response = client.put("/api/admin/orders/missing/status", json={"status": "Accepted"}, headers=admin_headers)

    assert response.status_code == 404


def test_customer_cannot_change_status_through_back_office(client, user, user_headers, make_product, make_order):
    order = make_order(user, [(make_product(), 1)])

    assert _set_status(client, user_headers, order, "Accepted").status_code == 403


def test_customer_cancels_placed_order(client, db, user, user_headers, make_product, make_order):
    product = make_product(stock_quantity=10)
    order = make_order(user, [(product, 2)])

    response = client.post(f"/api/orders/{order.id}/cancel", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "Cancelled"
    assert _stock(db, product) == 10


@pytest.mark.parametrize("status", [OrderStatus.accepted, OrderStatus.shipped, OrderStatus.delivered])
def test_customer_cannot_cancel_after_acceptance(client, db, user, user_headers, make_product, make_order, status):
    order = make_order(user, [(make_product(), 1)], status=status)

    response = client.post(f"/api/orders/{order.id}/cancel", headers=user_headers)

    assert response.status_code == 409
    db.expire_all()
    assert db.get(Order, order.id).status == status


def test_customer_cannot_cancel_someone_elses_order(client, user_headers, make_user, make_product, make_order):
    order = make_order(make_user(name="Kiran"), [(make_product(), 1)])

    assert client.post(f"/api/orders/{order.id}/cancel", headers=user_headers).status_code == 404


def test_stale_status_loses_to_concurrent_change(db, user, make_product, make_order):
    """A transition computed from an outdated status is refused"""
    order = make_order(user, [(make_product(), 1)])
    order.status = OrderStatus.cancelled
    db.commit()

    # An order as a second admin tab last saw it
    stale = SimpleNamespace(id=order.id, status=OrderStatus.placed)
    with pytest.raises(InvalidTransition):
        OrderService._transition(db, stale, OrderStatus.accepted)

    db.expire_all()
    assert db.get(Order, order.id).status == OrderStatus.cancelled
