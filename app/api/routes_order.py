from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.core.events import CartEvents
from app.crud import order as crud_order
from app.db.deps import get_cart_events, get_current_user, get_db
from app.models.models import Profile
from app.schemas.order import OrderCreate, OrderDetailOut, OrderOut
from app.services.order_service import OrderService

router = APIRouter()

@router.post("/", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def place_order(
    data: OrderCreate,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
    events: CartEvents = Depends(get_cart_events)
):
    """Cash-on-delivery checkout of the whole cart"""
    if idempotency_key and not data.idempotency_key:
        data.idempotency_key = idempotency_key
    return OrderService.place_order(db, user, data, events)

@router.get("/", response_model=List[OrderOut])
def list_my_orders(
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user)
):
    return crud_order.get_orders_by_user(db, user.id)

@router.get("/{order_id}", response_model=OrderDetailOut)
def get_my_order(
    order_id: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user)
):
    return crud_order.get_user_order(db, user.id, order_id)

@router.post("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user)
):
    return OrderService.cancel_order(db, user, order_id)
