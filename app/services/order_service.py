# app/services/order_service.py
"""
Order Service
Checkout and fulfillment workflow for storefront orders

Features:
- Cart snapshot -> order placement in a single transaction
- Idempotent checkout via a per-attempt key
- Guarded status transitions (conditional UPDATE on the expected status)
- One-time stock decrement when an order is delivered
- Bounded retry with exponential backoff on transient backend errors
"""

import time
import logging
from typing import Callable, Optional, TypeVar

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.events import CartEvents
from app.core.exceptions import InvalidTransition, NotFound, OrderPlacementFailed, ValidationError
from app.crud import address as crud_address
from app.crud import cart as crud_cart
from app.crud import order as crud_order
from app.crud import product as crud_product
from app.models.models import Profile
from app.models.order import ORDER_TRANSITIONS, Order, OrderItem, OrderStatus
from app.schemas.order import OrderCreate
from app.services.cart_service import compute_totals, snapshot_items

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_with_retry(db: Session, operation: Callable[[], T], description: str) -> T:
    """Run a unit of work, retrying transient backend failures with backoff"""
    attempts = settings.BACKEND_MAX_RETRIES + 1
    for attempt in range(attempts):
        try:
            return operation()
        except OperationalError as e:
            db.rollback()
            if attempt == attempts - 1:
                raise
            delay = settings.BACKEND_RETRY_BASE_DELAY * (2 ** attempt)
            logger.warning(f"{description} failed ({e}); retry {attempt + 1}/{attempts - 1} in {delay:.2f}s")
            time.sleep(delay)


class OrderService:
    """Checkout and fulfillment for storefront orders"""

    @staticmethod
    def place_order(
        db: Session,
        user: Profile,
        data: OrderCreate,
        events: Optional[CartEvents] = None,
    ) -> Order:
        """
        Convert the user's cart into an order.
        Validation happens before any write; the order, its line items and
        the cart clear commit together or not at all.
        """
        key = data.idempotency_key
        if key:
            # A repeated submit gets the order the first one created
            existing = crud_order.get_order_by_idempotency_key(db, user.id, key)
            if existing:
                logger.info(f"Checkout retry for user {user.id} returned order {existing.id}")
                return existing

        lines = crud_cart.get_cart(db, user.id)
        if not lines:
            raise ValidationError("Your cart is empty")

        sold_out = [line.product.name for line in lines if line.product and line.product.stock_quantity <= 0]
        if sold_out:
            raise ValidationError(f"Out of stock: {', '.join(sold_out)}")

        address = None
        if data.address_id:
            address = crud_address.get_user_address(db, user.id, data.address_id)
        if not address:
            raise ValidationError("Please select a delivery address")

        summary = snapshot_items(lines)
        totals = compute_totals(lines)
        address_snapshot = address.snapshot()
        user_id = user.id

        def write_order() -> Order:
            order = Order(
                user_id=user_id,
                total_amount=totals["total"],
                status=OrderStatus.placed,
                address=address_snapshot,
                items_summary=summary,
                idempotency_key=key,
            )
            db.add(order)
            db.flush()  # order.id for the line items

            for entry in summary:
                db.add(OrderItem(
                    order_id=order.id,
                    product_id=entry["product_id"],
                    quantity=entry["quantity"],
                    price_at_purchase=entry["price"],
                ))

            crud_cart.clear_cart(db, user_id)
            db.commit()
            return order

        try:
            order = run_with_retry(db, write_order, f"Order placement for user {user_id}")
        except IntegrityError as e:
            db.rollback()
            if key:
                # A concurrent submit with the same key won
                existing = crud_order.get_order_by_idempotency_key(db, user_id, key)
                if existing:
                    return existing
            logger.error(f"Order placement failed for user {user_id}: {e}")
            raise OrderPlacementFailed()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Order placement failed for user {user_id}: {e}")
            raise OrderPlacementFailed()

        db.refresh(order)
        logger.info(f"Order {order.id} placed by user {user_id}: {len(summary)} items, total {order.total_amount}")

        if events:
            events.publish(user_id, "cart_cleared", order_id=order.id)
        return order

    @staticmethod
    def cancel_order(db: Session, user: Profile, order_id: str) -> Order:
        """Customer cancel, only while the order is still exactly Placed"""
        order = crud_order.get_user_order(db, user.id, order_id)
        if order.status != OrderStatus.placed:
            raise InvalidTransition("Only orders that have not been accepted yet can be cancelled")
        return OrderService._transition(db, order, OrderStatus.cancelled)

    @staticmethod
    def update_status(db: Session, order_id: str, new_status: OrderStatus) -> Order:
        """Back-office status change along the transition table"""
        order = crud_order.get_order(db, order_id)
        if not order:
            raise NotFound("Order not found")
        return OrderService._transition(db, order, new_status)

    @staticmethod
    def _transition(db: Session, order: Order, target: OrderStatus) -> Order:
        current = order.status
        if current == target:
            return order

        if target not in ORDER_TRANSITIONS[current]:
            raise InvalidTransition(f"Cannot change order from {current.value} to {target.value}")

        order_id = order.id

        def write_transition() -> bool:
            result = db.execute(
                update(Order)
                .where(Order.id == order_id, Order.status == current)
                .values(status=target)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.rollback()
                return False

            if target == OrderStatus.delivered:
                OrderService._apply_fulfillment(db, order_id)

            db.commit()
            return True

        if not run_with_retry(db, write_transition, f"Status change of order {order_id}"):
            raise InvalidTransition("Order was updated by someone else. Refresh and try again.")

        db.refresh(order)
        logger.info(f"Order {order_id}: {current.value} -> {target.value}")
        return order

    @staticmethod
    def _apply_fulfillment(db: Session, order_id: str) -> None:
        """Decrement stock for a delivered order; the flag flip makes it happen once"""
        flagged = db.execute(
            update(Order)
            .where(Order.id == order_id, Order.fulfillment_applied.is_(False))
            .values(fulfillment_applied=True)
            .execution_options(synchronize_session=False)
        )
        if flagged.rowcount == 0:
            logger.warning(f"Stock already decremented for order {order_id}")
            return

        summary = db.query(Order.items_summary).filter(Order.id == order_id).scalar() or []
        for item in summary:
            if not crud_product.decrement_stock(db, item["product_id"], int(item["quantity"])):
                logger.warning(f"Product {item['product_id']} from order {order_id} no longer exists")
        logger.info(f"Stock decremented for order {order_id} ({len(summary)} products)")
