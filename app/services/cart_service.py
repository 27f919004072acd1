# app/services/cart_service.py
"""
Cart pricing.

Unit price is the product's discount price when set, otherwise its base
price. Delivery is charged once per cart line (summed, not deduplicated per
shipment), so two lines of products with a delivery charge of 50 cost 100 to
deliver.
"""

from typing import Dict, Iterable, List

from app.models.models import CartItem


def line_unit_price(line: CartItem) -> float:
    return line.product.unit_price if line.product else 0.0


def compute_totals(lines: Iterable[CartItem]) -> Dict[str, float]:
    subtotal = 0.0
    delivery = 0.0
    for line in lines:
        subtotal += line_unit_price(line) * line.quantity
        if line.product:
            delivery += line.product.delivery_charge or 0.0
    return {
        "subtotal": subtotal,
        "delivery": delivery,
        "total": subtotal + delivery,
    }


def snapshot_items(lines: Iterable[CartItem]) -> List[Dict]:
    """Freeze the cart into the order's item summary"""
    summary = []
    for line in lines:
        product = line.product
        summary.append({
            "product_id": line.product_id,
            "name": product.name if product else "Product",
            "price": line_unit_price(line),
            "quantity": line.quantity,
            "image": product.primary_image if product else "",
        })
    return summary
