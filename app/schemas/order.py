from pydantic import BaseModel
from typing import Any, Dict, List, Optional
from datetime import datetime
from app.models.order import OrderStatus

class OrderItemSummary(BaseModel):
    product_id: str
    name: str
    price: float
    quantity: int
    image: str = ""

class OrderCreate(BaseModel):
    address_id: Optional[str] = None
    idempotency_key: Optional[str] = None

class OrderItemOut(BaseModel):
    id: str
    product_id: str
    quantity: int
    price_at_purchase: float

    class Config:
        from_attributes = True

class OrderOut(BaseModel):
    id: str
    user_id: str
    total_amount: float
    status: OrderStatus
    address: Dict[str, Any]
    items_summary: List[OrderItemSummary]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class OrderDetailOut(OrderOut):
    order_items: List[OrderItemOut] = []

class AdminOrderOut(OrderOut):
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None

class AdminOrderList(BaseModel):
    active: List[AdminOrderOut]
    past: List[AdminOrderOut]

class OrderStatusUpdate(BaseModel):
    status: OrderStatus  # Placed, Accepted, Shipped, Delivered, Cancelled
