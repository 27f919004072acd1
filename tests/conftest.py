# tests/conftest.py - shared fixtures for the storefront API tests

import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BACKEND_RETRY_BASE_DELAY"] = "0"
os.environ["STORAGE_PUBLIC_URL"] = "https://storage.example.com"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.monitoring import monitoring
from app.core.security import create_access_token, hash_password
from app.db.deps import get_cart_events, get_db
from app.db.session import Base
from app.main import app
from app.models.models import Address, Profile
from app.models.order import Order, OrderStatus
from app.models.product import Product

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"


class FakeCartEvents:
    """Records cart notifications instead of publishing them to redis"""

    def __init__(self):
        self.published = []

    def publish(self, user_id, event, **data):
        self.published.append((user_id, event, data))
        return True

    def events_for(self, user_id):
        return [event for uid, event, _ in self.published if uid == user_id]


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def cart_events():
    return FakeCartEvents()


@pytest.fixture
def client(db, cart_events):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cart_events] = lambda: cart_events
    monitoring.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(name="Asha", role="user", is_banned=False, email=None, password=PASSWORD):
        counter["n"] += 1
        profile = Profile(
            name=name,
            email=email or f"{name.lower()}{counter['n']}@example.com",
            phone="9876543210",
            password_hash=hash_password(password),
            role=role,
            is_banned=is_banned,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", role="admin")


def auth_headers(profile):
    return {"Authorization": f"Bearer {create_access_token(data={'sub': profile.id})}"}


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def user_headers(user):
    return auth_headers(user)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def make_product(db):
    def _make_product(**overrides):
        fields = {
            "name": "LED Bulb 9W",
            "description": "Cool daylight bulb",
            "price": 100.0,
            "category": "Lighting",
            "images": ["bulb.png"],
            "stock_quantity": 10,
            "delivery_charge": 0.0,
        }
        fields.update(overrides)
        product = Product(**fields)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make_product


@pytest.fixture
def make_address(db):
    def _make_address(profile, city="Pune"):
        address = Address(
            user_id=profile.id,
            name=profile.name,
            phone=profile.phone,
            address_line="12 MG Road",
            city=city,
            pincode="411001",
            state="Maharashtra",
            is_default=True,
        )
        db.add(address)
        db.commit()
        db.refresh(address)
        return address

    return _make_address


@pytest.fixture
def make_order(db):
    """Insert an order directly, bypassing checkout"""

    def _make_order(profile, items, status=OrderStatus.placed, total=None):
        summary = [
            {
                "product_id": product.id,
                "name": product.name,
                "price": product.unit_price,
                "quantity": quantity,
                "image": product.primary_image,
            }
            for product, quantity in items
        ]
        order = Order(
            user_id=profile.id,
            total_amount=total if total is not None else sum(i["price"] * i["quantity"] for i in summary),
            status=status,
            address={"city": "Pune"},
            items_summary=summary,
        )
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    return _make_order
