from typing import List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload
from app.core.exceptions import NotFound
from app.models.models import CartItem

def get_cart(db: Session, user_id: str) -> List[CartItem]:
    return (
        db.query(CartItem)
        .options(joinedload(CartItem.product))
        .filter(CartItem.user_id == user_id)
        .all()
    )

def count_cart(db: Session, user_id: str) -> int:
    return db.query(CartItem).filter(CartItem.user_id == user_id).count()

def add_to_cart(db: Session, user_id: str, product_id: str) -> CartItem:
    """Upsert on (user, product); adding from a listing always resets the line to 1"""
    item = db.query(CartItem).filter(
        CartItem.user_id == user_id, CartItem.product_id == product_id
    ).first()
    if item:
        item.quantity = 1
    else:
        item = CartItem(user_id=user_id, product_id=product_id, quantity=1)
        db.add(item)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent add inserted the same pair first
        db.rollback()
        item = db.query(CartItem).filter(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        ).first()
        item.quantity = 1
        db.commit()
    db.refresh(item)
    return item

def _get_line(db: Session, user_id: str, line_id: str) -> CartItem:
    item = db.query(CartItem).filter(CartItem.id == line_id, CartItem.user_id == user_id).first()
    if not item:
        raise NotFound("Cart item not found")
    return item

def change_quantity(db: Session, user_id: str, line_id: str, delta: int) -> CartItem:
    item = _get_line(db, user_id, line_id)
    item.quantity = max(1, item.quantity + delta)
    db.commit()
    db.refresh(item)
    return item

def remove_from_cart(db: Session, user_id: str, line_id: str) -> None:
    item = _get_line(db, user_id, line_id)
    db.delete(item)
    db.commit()

def clear_cart(db: Session, user_id: str) -> int:
    """Delete every line of the user's cart without committing"""
    return (
        db.query(CartItem)
        .filter(CartItem.user_id == user_id)
        .delete(synchronize_session=False)
    )
