from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from app.core.exceptions import NotFound
from app.models.order import Order

def get_orders_by_user(db: Session, user_id: str) -> List[Order]:
    return (
        db.query(Order)
        .filter(Order.user_id == user_id)
        .order_by(Order.created_at.desc())
        .all()
    )

def get_order(db: Session, order_id: str) -> Optional[Order]:
    return db.query(Order).filter(Order.id == order_id).first()

def get_user_order(db: Session, user_id: str, order_id: str) -> Order:
    order = (
        db.query(Order)
        .options(joinedload(Order.order_items))
        .filter(Order.id == order_id, Order.user_id == user_id)
        .first()
    )
    if not order:
        raise NotFound("Order not found")
    return order

def get_order_by_idempotency_key(db: Session, user_id: str, key: str) -> Optional[Order]:
    return db.query(Order).filter(Order.user_id == user_id, Order.idempotency_key == key).first()

def list_orders(db: Session) -> List[Order]:
    return (
        db.query(Order)
        .options(joinedload(Order.profile))
        .order_by(Order.created_at.desc())
        .all()
    )
