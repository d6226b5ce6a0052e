import os

# must be set before storefront.utils.settings is imported
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime, timezone
from decimal import Decimal
from itertools import count

import pytest
from fastapi.testclient import TestClient

from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import ProductModel, UserModel
from storefront.domain.schemas import OrderCreate
from storefront.main import create_app
from storefront.services.order_service import OrderService

FIXED_NOW = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)

_seq = count(1)


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(create_app()) as c:
        yield c


@pytest.fixture
def make_user(db):
    def _make(name: str = "Member", role: str = "member", is_active: bool = True) -> UserModel:
        user = UserModel(
            name=name,
            email=f"{name.lower()}{next(_seq)}@example.com",
            role=role,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_product(db):
    def _make(
        price: str = "100.00",
        name: str | None = None,
        discount_price: str | None = None,
        category_id: int | None = None,
    ) -> ProductModel:
        n = next(_seq)
        product = ProductModel(
            name=name or f"Product {n}",
            description="",
            price=Decimal(price),
            discount_price=Decimal(discount_price) if discount_price else None,
            stock=10,
            sku=f"SKU-{n}",
            category_id=category_id,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture
def order_payload():
    def _payload(items, **extra) -> dict:
        body = {
            "items": [{"productId": pid, "quantity": qty} for pid, qty in items],
            "paymentMethod": "card",
            "shippingFullName": "Jane Doe",
            "shippingAddressLine1": "1 Main Street",
            "shippingCity": "Springfield",
            "shippingZip": "12345",
            "shippingCountry": "US",
            "shippingPhone": "+1 555 0100",
            "shippingState": "IL",
        }
        body.update(extra)
        return body

    return _payload


@pytest.fixture
def order_service(db):
    return OrderService(db, clock=lambda: FIXED_NOW)


@pytest.fixture
def place_order(order_service, order_payload):
    def _place(user: UserModel, product: ProductModel, quantity: int = 1, **extra) -> dict:
        payload = OrderCreate.model_validate(order_payload([(product.id, quantity)], **extra))
        return order_service.create_order(user.id, payload)

    return _place
