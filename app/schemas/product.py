from pydantic import BaseModel, Field, computed_field
from typing import Dict, List, Optional
from datetime import datetime

from app.utils.s3 import get_image_url

# 👇 Base structure for a product (common fields)
class ProductBase(BaseModel):
    name: str
    description: str = ""
    price: float = Field(0.0, ge=0)
    discount_price: Optional[float] = Field(None, ge=0)
    category: str
    specs: Dict[str, str] = {}
    images: List[str] = []
    rating: float = Field(4.5, ge=0, le=5)
    stock_quantity: int = Field(0, ge=0)
    delivery_charge: float = Field(0.0, ge=0)
    delivery_days: int = Field(3, ge=0)

# 👇 This is what the admin sends to create a product
class ProductCreate(ProductBase):
    pass

# 👇 This is used for updating a product
class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    discount_price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None
    specs: Optional[Dict[str, str]] = None
    images: Optional[List[str]] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    stock_quantity: Optional[int] = Field(None, ge=0)
    delivery_charge: Optional[float] = Field(None, ge=0)
    delivery_days: Optional[int] = Field(None, ge=0)

# 👇 This is what the API returns when fetching products
class ProductOut(ProductBase):
    id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @computed_field
    @property
    def image_urls(self) -> List[str]:
        return [get_image_url(path) for path in self.images]

    @computed_field
    @property
    def unit_price(self) -> float:
        # 0 discount falls back to the base price, same as Product.unit_price
        return self.discount_price or self.price

class ImageUploadOut(BaseModel):
    paths: List[str]
    urls: List[str]
