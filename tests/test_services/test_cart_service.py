# test_cart_service.py - pricing of cart lines and the order snapshot

from app.models.models import CartItem
from app.models.product import Product
from app.services.cart_service import compute_totals, line_unit_price, snapshot_items


def _line(product_id, quantity, **product_fields):
    product = Product(id=product_id, name=product_fields.pop("name", product_id), **product_fields)
    return CartItem(product_id=product_id, product=product, quantity=quantity)


def test_discount_price_wins_over_base_price():
    """A set discount price is the unit price; otherwise the base price"""
    discounted = _line("a", 1, price=1000.0, discount_price=800.0)
    plain = _line("b", 1, price=500.0, discount_price=None)

    assert line_unit_price(discounted) == 800.0
    assert line_unit_price(plain) == 500.0


def test_totals_for_mixed_cart():
    """2 x 800 + 1 x 500 with one 50 delivery line comes to 2150"""
    lines = [
        _line("a", 2, price=1000.0, discount_price=800.0, delivery_charge=50.0),
        _line("b", 1, price=500.0, delivery_charge=0.0),
    ]

    totals = compute_totals(lines)

    assert totals == {"subtotal": 2100.0, "delivery": 50.0, "total": 2150.0}


def test_delivery_is_charged_per_line_not_per_unit():
    lines = [
        _line("a", 3, price=100.0, delivery_charge=50.0),
        _line("b", 1, price=100.0, delivery_charge=50.0),
    ]

    totals = compute_totals(lines)

    assert totals["delivery"] == 100.0
    assert totals["total"] == totals["subtotal"] + totals["delivery"]


def test_empty_cart_totals_are_zero():
    assert compute_totals([]) == {"subtotal": 0.0, "delivery": 0.0, "total": 0.0}


def test_snapshot_freezes_name_price_and_first_image():
    lines = [_line("a", 2, name="Ceiling Fan", price=2500.0, discount_price=2200.0,
                   images=["fan-front.png", "fan-side.png"])]

    summary = snapshot_items(lines)

    assert summary == [{
        "product_id": "a",
        "name": "Ceiling Fan",
        "price": 2200.0,
        "quantity": 2,
        "image": "fan-front.png",
    }]


def test_zero_discount_means_no_discount():
    line = _line("a", 2, price=500.0, discount_price=0.0)

    assert line_unit_price(line) == 500.0
    assert compute_totals([line])["subtotal"] == 1000.0
