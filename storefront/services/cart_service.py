# storefront/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import BadRequestError, ForbiddenError, NotFoundError
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.pricing import ZERO, to_money
from storefront.utils.logging import get_logger
from storefront.utils.settings import MAX_LINE_QUANTITY

logger = get_logger(__name__)


class CartService:
    """
    Cart use cases, CQRS style:
    commands (add, update quantity, remove) modify state,
    queries (get, count) only read.
    A user has at most one cart; it is created on the first add and removed
    when its contents become an order.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    # query
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)

        if not cart:
            return {"cart_id": None, "user_id": user_id, "items": [], "total": ZERO}

        items = self.repo.get_cart_items(cart.id)
        lines = [
            {
                "id": i.id,
                "product_id": i.product_id,
                "product_name": i.product.name,
                "quantity": i.quantity,
                "price_snapshot": i.price_snapshot,
                "discount_snapshot": i.discount_snapshot,
                "line_total": (Decimal(i.price_snapshot) * i.quantity).quantize(Decimal("0.01")),
            }
            for i in items
        ]

        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "items": lines,
            "total": sum((line["line_total"] for line in lines), ZERO),
        }

    def item_count(self, user_id: int) -> Dict[str, int]:
        return {"count": int(self.repo.count_items(user_id))}

    # commands
    def add_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise BadRequestError("Quantity must be greater than 0")
        if quantity > MAX_LINE_QUANTITY:
            raise BadRequestError(f"Quantity cannot exceed {MAX_LINE_QUANTITY}")

        product = self.products.get_product(product_id)
        if not product or not product.is_orderable:
            raise NotFoundError("Product not found")

        price = to_money(product.price)
        discount = to_money(product.discount_price) if product.discount_price is not None else None

        try:
            cart = self.repo.get_or_create_cart(user_id)

            # same product again bumps the quantity instead of adding a row
            existing_item = self.repo.get_cart_item(cart.id, product_id)
            if existing_item:
                if existing_item.quantity + quantity > MAX_LINE_QUANTITY:
                    raise BadRequestError(f"Quantity cannot exceed {MAX_LINE_QUANTITY}")
                logger.info(
                    f"Product {product_id} already in cart {cart.id}, quantity "
                    f"{existing_item.quantity} -> {existing_item.quantity + quantity}"
                )
                existing_item.quantity += quantity
                existing_item.price_snapshot = price
                existing_item.discount_snapshot = discount
                self.repo.add_cart_item(existing_item)
            else:
                logger.info(f"Adding product {product_id} to cart {cart.id}")
                self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        product_id=product_id,
                        quantity=quantity,
                        price_snapshot=price,
                        discount_snapshot=discount,
                    )
                )

            self.repo.commit()
        except Exception as e:
            logger.error(f"Failed to add product {product_id} for user {user_id}: {e}")
            self.repo.rollback()
            raise

        return self.get_cart(user_id)

    def update_item_quantity(self, user_id: int, item_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise BadRequestError("Quantity must be at least 1")
        if quantity > MAX_LINE_QUANTITY:
            raise BadRequestError(f"Quantity cannot exceed {MAX_LINE_QUANTITY}")

        item = self._owned_item(user_id, item_id)
        item.quantity = quantity
        self.repo.commit()

        logger.info(f"Cart item {item_id} quantity set to {quantity}")
        return self.get_cart(user_id)

    def remove_item(self, user_id: int, item_id: int) -> Dict[str, Any]:
        item = self._owned_item(user_id, item_id)
        self.repo.delete_cart_item(item)
        self.repo.commit()

        logger.info(f"Cart item {item_id} removed for user {user_id}")
        return self.get_cart(user_id)

    def _owned_item(self, user_id: int, item_id: int) -> CartItemModel:
        item = self.repo.get_item_by_id(item_id)
        if not item:
            raise NotFoundError("Cart item not found")
        if item.cart.user_id != user_id:
            raise ForbiddenError("Access denied")
        return item
