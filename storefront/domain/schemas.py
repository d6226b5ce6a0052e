# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, model_validator
from pydantic.alias_generators import to_camel
from typing import Generic, List, TypeVar
from decimal import Decimal
from datetime import datetime

from storefront.domain.order_status import OrderStatus
from storefront.domain.roles import UserRole
from storefront.utils.settings import MAX_LINE_QUANTITY

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """Paginated listing."""

    items: List[T]
    total: int
    page: int
    page_size: int


# ---------------------------------------------------------------- users

class UserCreate(BaseModel):
    """Schema for registering a user."""

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    role: UserRole = UserRole.MEMBER


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- categories

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CategoryCreate(BaseModel):
    """Schema for adding a category."""

    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: str | None = None
    sort_order: int = Field(0, ge=0)
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    slug: str | None = Field(None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: str | None = None
    sort_order: int | None = Field(None, ge=0)
    is_active: bool | None = None


class CategoryRead(BaseModel):
    id: int
    name: str
    slug: str
    description: str | None = None
    sort_order: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- products

class ProductCreate(BaseModel):
    """Schema for adding a catalog entry."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    discount_price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(0, ge=0)
    sku: str = Field(..., min_length=1, max_length=64)
    category_id: int | None = Field(None, gt=0)
    is_active: bool = True


class ProductUpdate(BaseModel):
    """Partial update; fields left out are not touched."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    discount_price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: int | None = Field(None, ge=0)
    category_id: int | None = Field(None, gt=0)
    is_active: bool | None = None


class ProductRead(BaseModel):
    id: int
    name: str
    description: str
    price: Decimal
    discount_price: Decimal | None = None
    stock: int
    sku: str
    category_id: int | None = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- cart

class ItemIn(BaseModel):
    """Schema for adding a product to the cart."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0, le=MAX_LINE_QUANTITY)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ItemQuantityIn(BaseModel):
    quantity: int = Field(..., ge=1, le=MAX_LINE_QUANTITY)


class CartItemOut(BaseModel):
    id: int
    product_id: int
    product_name: str
    quantity: int
    price_snapshot: Decimal
    discount_snapshot: Decimal | None = None
    line_total: Decimal


class CartOut(BaseModel):
    """Schema for the cart (response). cart_id is None while the user has no cart."""

    cart_id: int | None
    user_id: int
    items: List[CartItemOut]
    total: Decimal


class CartCountOut(BaseModel):
    count: int


# ---------------------------------------------------------------- orders

class OrderItemIn(BaseModel):
    """One requested order line. There is deliberately no price field."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0, le=MAX_LINE_QUANTITY)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderCreate(BaseModel):
    """Schema for placing an order. Accepts camelCase or snake_case keys."""

    items: List[OrderItemIn] = Field(..., min_length=1)
    payment_method: str = Field(..., min_length=1)
    shipping_full_name: str = Field(..., min_length=1)
    shipping_address_line1: str = Field(..., min_length=1)
    shipping_address_line2: str | None = None
    shipping_city: str = Field(..., min_length=1)
    shipping_zip: str = Field(..., min_length=1)
    shipping_country: str = Field(..., min_length=1)
    shipping_phone: str = Field(..., min_length=1)
    shipping_state: str = Field(..., min_length=1)
    coupon_code: str | None = None
    discount_value: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    shipping_cost: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderUpdate(BaseModel):
    """Admin update of status and/or tracking number."""

    order_status: OrderStatus | None = None
    tracking_number: str | None = Field(None, min_length=1, max_length=100)

    @model_validator(mode="after")
    def _not_empty(self):
        if self.order_status is None and self.tracking_number is None:
            raise ValueError("order_status or tracking_number is required")
        return self


class OrderItemOut(BaseModel):
    id: int
    product_id: int | None
    product_name: str
    quantity: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema for an order (response)."""

    id: int
    order_number: str
    user_id: int
    subtotal: Decimal
    discount_value: Decimal
    coupon_code: str | None = None
    shipping_cost: Decimal
    total_price: Decimal
    payment_method: str
    order_status: OrderStatus
    shipping_full_name: str
    shipping_address_line1: str
    shipping_address_line2: str | None = None
    shipping_city: str
    shipping_zip: str
    shipping_country: str
    shipping_phone: str
    shipping_state: str
    tracking_number: str | None = None
    items: List[OrderItemOut]
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- address book

class AddressCreate(BaseModel):
    """Schema for saving a shipping address."""

    full_name: str = Field(..., min_length=1, max_length=200)
    address_line: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20)
    phone_number: str = Field(..., min_length=1, max_length=30)
    is_default: bool = False


class AddressUpdate(BaseModel):
    full_name: str | None = Field(None, min_length=1, max_length=200)
    address_line: str | None = Field(None, min_length=1, max_length=255)
    city: str | None = Field(None, min_length=1, max_length=100)
    state: str | None = Field(None, min_length=1, max_length=100)
    zip_code: str | None = Field(None, min_length=1, max_length=20)
    phone_number: str | None = Field(None, min_length=1, max_length=30)
    is_default: bool | None = None


class AddressRead(BaseModel):
    id: int
    user_id: int
    full_name: str
    address_line: str
    city: str
    state: str
    zip_code: str
    phone_number: str
    is_default: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- payment methods

EXPIRY_PATTERN = r"^(0[1-9]|1[0-2])/\d{2}$"


class PaymentMethodCreate(BaseModel):
    """Schema for saving a card. Only its last four digits are kept."""

    cardholder_name: str = Field(..., min_length=1, max_length=200)
    card_number: str = Field(..., pattern=r"^\d{16}$")
    expiry_date: str = Field(..., pattern=EXPIRY_PATTERN)
    is_default: bool = False


class PaymentMethodUpdate(BaseModel):
    """The card number itself cannot be changed; add a new method instead."""

    cardholder_name: str | None = Field(None, min_length=1, max_length=200)
    expiry_date: str | None = Field(None, pattern=EXPIRY_PATTERN)
    is_default: bool | None = None


class PaymentMethodRead(BaseModel):
    id: int
    user_id: int
    cardholder_name: str
    card_last4: str
    expiry_date: str
    is_default: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
