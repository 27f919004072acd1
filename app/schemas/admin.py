from pydantic import BaseModel
from typing import List

from app.schemas.schemas import AddressOut, CartLineOut, FavoriteOut

class DashboardStats(BaseModel):
    total_sales: float
    total_orders: int
    pending_orders: int
    total_users: int
    active_products: int
    avg_rating: float
    total_feedback: int

class UserDetails(BaseModel):
    addresses: List[AddressOut]
    cart_items: List[CartLineOut]
    favorites: List[FavoriteOut]

class BanStatus(BaseModel):
    id: str
    is_banned: bool

    class Config:
        from_attributes = True
