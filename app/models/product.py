from sqlalchemy import Column, Integer, String, Text, Float, DateTime, JSON
from sqlalchemy.orm import relationship
from app.db.session import Base, generate_id, utcnow

class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Float, nullable=False, default=0.0)
    discount_price = Column(Float, nullable=True)
    category = Column(String, nullable=False, index=True)
    specs = Column(JSON, default=dict)   # ordered key -> value pairs
    images = Column(JSON, default=list)  # storage paths or absolute URLs
    rating = Column(Float, nullable=False, default=4.5)
    stock_quantity = Column(Integer, nullable=False, default=0)
    delivery_charge = Column(Float, nullable=False, default=0.0)
    delivery_days = Column(Integer, nullable=False, default=3)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Lines and reviews go with the product; orders keep their own snapshot
    cart_items = relationship("CartItem", back_populates="product", cascade="all, delete-orphan")
    favorites = relationship("Favorite", back_populates="product", cascade="all, delete-orphan")
    reviews = relationship("Review", back_populates="product", cascade="all, delete-orphan")

    @property
    def unit_price(self) -> float:
        """Price a customer pays: the discount price when one is set"""
        # A discount of 0 means no discount, not a free product
        if self.discount_price:
            return self.discount_price
        return self.price or 0.0

    @property
    def primary_image(self) -> str:
        return self.images[0] if self.images else ""
