from typing import Dict

from sqlalchemy.orm import Session

from app.models.models import Feedback, Profile, Review
from app.models.order import ACTIVE_STATUSES, Order, OrderStatus
from app.models.product import Product


def get_dashboard_stats(db: Session) -> Dict:
    """Back-office totals, reduced from full scans on every call"""
    orders = db.query(Order.total_amount, Order.status).all()
    ratings = [rating for (rating,) in db.query(Review.rating).all()]

    total_sales = sum(total for total, status in orders if status != OrderStatus.cancelled)
    pending = sum(1 for _, status in orders if status in ACTIVE_STATUSES)
    avg_rating = round(sum(ratings) / len(ratings), 1) if ratings else 0.0

    return {
        "total_sales": total_sales,
        "total_orders": len(orders),
        "pending_orders": pending,
        "total_users": db.query(Profile).count(),
        "active_products": db.query(Product).count(),
        "avg_rating": avg_rating,
        "total_feedback": db.query(Feedback).count(),
    }
