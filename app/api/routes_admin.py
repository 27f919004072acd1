from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
import time

from app.core.monitoring import monitoring
from app.crud import address as crud_address
from app.crud import cart as crud_cart
from app.crud import favorite as crud_favorite
from app.crud import feedback as crud_feedback
from app.crud import order as crud_order
from app.crud import review as crud_review
from app.crud import user as crud_user
from app.core.exceptions import NotFound
from app.db.deps import get_current_admin, get_db
from app.models.models import Profile
from app.models.order import ACTIVE_STATUSES
from app.schemas.admin import BanStatus, DashboardStats, UserDetails
from app.schemas.order import AdminOrderList, OrderOut, OrderStatusUpdate
from app.schemas.schemas import AdminFeedbackOut, AdminReviewOut, FeedbackOut, ProfileOut
from app.services.dashboard_service import get_dashboard_stats
from app.services.order_service import OrderService

router = APIRouter()

@router.get("/health")
def get_system_health(admin: Profile = Depends(get_current_admin)):
    """Request and backend-failure metrics"""
    return monitoring.get_health_status()

@router.get("/dashboard", response_model=DashboardStats)
def get_dashboard(
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    start_time = time.time()
    try:
        stats = get_dashboard_stats(db)
    except Exception:
        monitoring.record_request(success=False, response_time_ms=(time.time() - start_time) * 1000)
        raise
    monitoring.record_request(success=True, response_time_ms=(time.time() - start_time) * 1000)
    return stats

# 🔹 Orders
@router.get("/orders", response_model=AdminOrderList)
def list_orders(
    search: Optional[str] = Query(None, description="Order id or customer name"),
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    orders = crud_order.list_orders(db)
    if search:
        needle = search.lower()
        orders = [
            o for o in orders
            if needle in o.id.lower() or needle in (o.customer_name or "").lower()
        ]
    return {
        "active": [o for o in orders if o.status in ACTIVE_STATUSES],
        "past": [o for o in orders if o.status not in ACTIVE_STATUSES],
    }

@router.put("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: str,
    status_data: OrderStatusUpdate,
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    return OrderService.update_status(db, order_id, status_data.status)

# 🔹 Customers
@router.get("/users", response_model=List[ProfileOut])
def list_users(
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    return crud_user.list_users(db)

@router.get("/users/{user_id}/details", response_model=UserDetails)
def get_user_details(
    user_id: str,
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    if not crud_user.get_user(db, user_id):
        raise NotFound("User not found")
    return {
        "addresses": crud_address.get_addresses(db, user_id),
        "cart_items": crud_cart.get_cart(db, user_id),
        "favorites": crud_favorite.get_favorites(db, user_id),
    }

@router.post("/users/{user_id}/toggle-ban", response_model=BanStatus)
def toggle_user_ban(
    user_id: str,
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    return crud_user.toggle_ban(db, user_id)

@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    crud_user.delete_user(db, user_id)

# 🔹 Reviews
@router.get("/reviews", response_model=List[AdminReviewOut])
def list_reviews(
    search: Optional[str] = Query(None, description="Comment, product or reviewer name"),
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    return crud_review.list_reviews(db, search)

@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: str,
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    crud_review.delete_review(db, review_id)

# 🔹 Feedback
@router.get("/feedback", response_model=List[AdminFeedbackOut])
def list_feedback(
    type: Optional[str] = Query("All", description="All, Feedback or Complaint"),
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    return crud_feedback.list_feedback(db, type)

@router.post("/feedback/{feedback_id}/toggle", response_model=FeedbackOut)
def toggle_feedback_status(
    feedback_id: str,
    db: Session = Depends(get_db),
    admin: Profile = Depends(get_current_admin)
):
    return crud_feedback.toggle_status(db, feedback_id)
