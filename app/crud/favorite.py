from typing import List
from sqlalchemy.orm import Session, joinedload
from app.models.models import Favorite

def get_favorites(db: Session, user_id: str) -> List[Favorite]:
    return (
        db.query(Favorite)
        .options(joinedload(Favorite.product))
        .filter(Favorite.user_id == user_id)
        .order_by(Favorite.created_at.desc())
        .all()
    )

def is_favorite(db: Session, user_id: str, product_id: str) -> bool:
    return db.query(Favorite.id).filter(
        Favorite.user_id == user_id, Favorite.product_id == product_id
    ).first() is not None

def toggle_favorite(db: Session, user_id: str, product_id: str) -> bool:
    """Flip the favorite flag and return the new state"""
    existing = db.query(Favorite).filter(
        Favorite.user_id == user_id, Favorite.product_id == product_id
    ).first()
    if existing:
        db.delete(existing)
        db.commit()
        return False

    db.add(Favorite(user_id=user_id, product_id=product_id))
    db.commit()
    return True
