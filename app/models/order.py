from sqlalchemy import Column, Integer, String, ForeignKey, Float, Enum, DateTime, Boolean, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.session import Base, generate_id, utcnow
import enum

class OrderStatus(str, enum.Enum):
    placed = "Placed"
    accepted = "Accepted"
    shipped = "Shipped"
    delivered = "Delivered"
    cancelled = "Cancelled"

# Allowed forward edges; Delivered and Cancelled are terminal
ORDER_TRANSITIONS = {
    OrderStatus.placed: {OrderStatus.accepted, OrderStatus.cancelled},
    OrderStatus.accepted: {OrderStatus.shipped, OrderStatus.cancelled},
    OrderStatus.shipped: {OrderStatus.delivered},
    OrderStatus.delivered: set(),
    OrderStatus.cancelled: set(),
}

ACTIVE_STATUSES = (OrderStatus.placed, OrderStatus.accepted, OrderStatus.shipped)
PAST_STATUSES = (OrderStatus.delivered, OrderStatus.cancelled)

class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    total_amount = Column(Float, nullable=False)
    status = Column(
        Enum(OrderStatus, name="order_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=OrderStatus.placed,
    )
    address = Column(JSON, nullable=False)        # frozen copy of the chosen address
    items_summary = Column(JSON, nullable=False)  # frozen [{product_id, name, price, quantity, image}]
    fulfillment_applied = Column(Boolean, nullable=False, default=False)
    idempotency_key = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    profile = relationship("Profile", back_populates="orders")
    order_items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("user_id", "idempotency_key", name="uq_orders_user_idempotency_key"),
    )

    @property
    def customer_name(self):
        return self.profile.name if self.profile else None

    @property
    def customer_email(self):
        return self.profile.email if self.profile else None

    @property
    def customer_phone(self):
        return self.profile.phone if self.profile else None

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=generate_id)
    product_id = Column(String(36), nullable=False)  # no FK: survives product deletion
    quantity = Column(Integer, nullable=False)
    price_at_purchase = Column(Float, nullable=False)

    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    order = relationship("Order", back_populates="order_items")
