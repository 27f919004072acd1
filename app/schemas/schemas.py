from pydantic import BaseModel, EmailStr, Field
from typing import List, Literal, Optional
from datetime import datetime

from app.schemas.product import ProductOut

# ----------------------- Auth / profile -----------------------

class UserSignup(BaseModel):
    name: str
    email: EmailStr
    phone: str
    password: str = Field(..., min_length=1)
    confirm_password: str

class UserLogin(BaseModel):
    email: str
    password: str

class ProfileOut(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    role: str
    is_banned: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    profile: ProfileOut

class ProfileUpdate(BaseModel):
    name: str
    phone: str

class AddressCreate(BaseModel):
    name: str
    phone: str
    address_line: str
    city: str
    pincode: str
    state: str

class AddressOut(AddressCreate):
    id: str
    user_id: str
    is_default: bool

    class Config:
        from_attributes = True

# ----------------------- Cart -----------------------

class CartItemCreate(BaseModel):
    product_id: str

class CartQuantityUpdate(BaseModel):
    delta: int

class CartLineOut(BaseModel):
    id: str
    product_id: str
    quantity: int
    product: Optional[ProductOut] = None

    class Config:
        from_attributes = True

class CartTotals(BaseModel):
    subtotal: float
    delivery: float
    total: float

class CartOut(BaseModel):
    items: List[CartLineOut]
    totals: CartTotals

class CartCount(BaseModel):
    count: int

# ----------------------- Favorites -----------------------

class FavoriteOut(BaseModel):
    id: str
    product_id: str
    created_at: Optional[datetime] = None
    product: Optional[ProductOut] = None

    class Config:
        from_attributes = True

class FavoriteStatus(BaseModel):
    is_favorite: bool

# ----------------------- Reviews -----------------------

class ReviewCreate(BaseModel):
    rating: int = Field(5, ge=1, le=5)
    comment: str

class ReviewOut(BaseModel):
    id: str
    user_id: str
    product_id: str
    rating: int
    comment: str
    created_at: Optional[datetime] = None
    reviewer_name: Optional[str] = None

    class Config:
        from_attributes = True

class AdminReviewOut(ReviewOut):
    reviewer_phone: Optional[str] = None
    product_name: Optional[str] = None
    product_image: Optional[str] = None

class ReviewEligibility(BaseModel):
    can_review: bool

# ----------------------- Feedback -----------------------

FeedbackType = Literal["Feedback", "Complaint"]

class FeedbackCreate(BaseModel):
    type: FeedbackType = "Feedback"
    message: str

class FeedbackOut(BaseModel):
    id: str
    user_id: str
    type: FeedbackType
    message: str
    status: Literal["Pending", "Resolved"]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AdminFeedbackOut(FeedbackOut):
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
