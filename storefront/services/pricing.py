# storefront/services/pricing.py
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Mapping, Protocol

from storefront.domain.errors import BadRequestError, NotFoundError
from storefront.utils.settings import MAX_LINE_QUANTITY

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# largest value a Numeric(10, 2) column holds
MAX_AMOUNT = Decimal("99999999.99")


class RequestedLine(Protocol):
    product_id: int
    quantity: int


def to_money(value) -> Decimal:
    """
    Convert to a two-place Decimal. Amounts with more precision, non-finite
    values and values a money column cannot store are rejected, never rounded.
    """
    if value is None:
        return ZERO
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise BadRequestError(f"Invalid amount: {value}")

    if not amount.is_finite():
        raise BadRequestError(f"Invalid amount: {value}")
    if abs(amount) > MAX_AMOUNT:
        raise BadRequestError(f"Amount {value} is out of range")
    if amount != amount.quantize(CENT):
        raise BadRequestError(f"Amount {value} has more than two decimal places")
    return amount.quantize(CENT)


@dataclass(frozen=True)
class PricedLine:
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return (self.unit_price * self.quantity).quantize(CENT)


@dataclass(frozen=True)
class OrderTotals:
    lines: tuple[PricedLine, ...]
    subtotal: Decimal
    discount_value: Decimal
    shipping_cost: Decimal
    total: Decimal


def compute_totals(
    items: Iterable[RequestedLine],
    products: Mapping[int, object],
    discount_value: Decimal | None = None,
    shipping_cost: Decimal | None = None,
) -> OrderTotals:
    """
    Price requested lines against the catalog.

    Unit prices always come from the product's current ``price``; the request
    only contributes product ids and quantities. One line is produced per
    requested line, in request order. Any unknown product fails the whole
    computation.
    """
    lines = []
    for item in items:
        if item.quantity < 1:
            raise BadRequestError(f"Quantity for product {item.product_id} must be at least 1")
        if item.quantity > MAX_LINE_QUANTITY:
            raise BadRequestError(
                f"Quantity for product {item.product_id} cannot exceed {MAX_LINE_QUANTITY}"
            )
        product = products.get(item.product_id)
        if product is None:
            raise NotFoundError(f"Product {item.product_id} not found")
        lines.append(
            PricedLine(
                product_id=product.id,
                product_name=product.name,
                quantity=item.quantity,
                unit_price=to_money(product.price),
            )
        )

    if not lines:
        raise BadRequestError("Order must contain at least one item")

    subtotal = sum((line.line_total for line in lines), ZERO)
    discount = to_money(discount_value)
    shipping = to_money(shipping_cost)

    if discount < ZERO:
        raise BadRequestError("Discount cannot be negative")
    if shipping < ZERO:
        raise BadRequestError("Shipping cost cannot be negative")
    if discount > subtotal:
        raise BadRequestError(f"Discount {discount} exceeds order subtotal {subtotal}")

    total = subtotal - discount + shipping
    if subtotal > MAX_AMOUNT or total > MAX_AMOUNT:
        raise BadRequestError("Order total is out of range")

    return OrderTotals(
        lines=tuple(lines),
        subtotal=subtotal,
        discount_value=discount,
        shipping_cost=shipping,
        total=total,
    )
