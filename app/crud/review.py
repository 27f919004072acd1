from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session, contains_eager, joinedload
from app.core.exceptions import Forbidden, NotFound, ValidationError
from app.models.models import Profile, Review
from app.models.order import Order, OrderStatus
from app.models.product import Product
from app.schemas.schemas import ReviewCreate

def get_product_reviews(db: Session, product_id: str) -> List[Review]:
    return (
        db.query(Review)
        .options(joinedload(Review.profile))
        .filter(Review.product_id == product_id)
        .order_by(Review.created_at.desc())
        .all()
    )

def has_received_product(db: Session, user_id: str, product_id: str) -> bool:
    """True when one of the user's delivered orders contains the product"""
    delivered = (
        db.query(Order.items_summary)
        .filter(Order.user_id == user_id, Order.status == OrderStatus.delivered)
        .all()
    )
    return any(
        item.get("product_id") == product_id
        for (summary,) in delivered
        for item in (summary or [])
    )

def create_review(db: Session, user_id: str, product_id: str, data: ReviewCreate) -> Review:
    if not data.comment.strip():
        raise ValidationError("Comment cannot be empty")
    if not has_received_product(db, user_id, product_id):
        raise Forbidden("Only customers who received this product can review it")

    review = Review(user_id=user_id, product_id=product_id, rating=data.rating, comment=data.comment)
    db.add(review)
    db.commit()
    db.refresh(review)
    return review

def list_reviews(db: Session, search: Optional[str] = None) -> List[Review]:
    query = (
        db.query(Review)
        .outerjoin(Review.profile)
        .outerjoin(Review.product)
        .options(contains_eager(Review.profile), contains_eager(Review.product))
    )
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                Review.comment.ilike(pattern),
                Product.name.ilike(pattern),
                Profile.name.ilike(pattern),
            )
        )
    return query.order_by(Review.created_at.desc()).all()

def delete_review(db: Session, review_id: str) -> None:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise NotFound("Review not found")
    db.delete(review)
    db.commit()
