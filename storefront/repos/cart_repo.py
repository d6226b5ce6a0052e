# storefront/repos/cart_repo.py
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartRepo:
    """
    Data access for carts. Nothing here commits except commit() itself,
    so callers decide the transaction boundary.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def get_or_create_cart(self, user_id: int) -> CartModel:
        """
        Must be the first write of the transaction: losing the insert race on
        carts.user_id rolls the transaction back and re-reads the winner's cart.
        """
        cart = self.get_cart_by_user(user_id)
        if cart:
            return cart

        try:
            cart = CartModel(user_id=user_id)
            self.db.add(cart)
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            logger.info(f"Cart for user {user_id} was created concurrently, reusing it")
            cart = self.get_cart_by_user(user_id)
            if cart is None:
                raise
        return cart

    def get_cart_items(self, cart_id: int) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.id)
            ).scalars().all()
        )

    def get_cart_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_item_by_id(self, item_id: int) -> CartItemModel | None:
        return self.db.get(CartItemModel, item_id)

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def count_items(self, user_id: int) -> int:
        return self.db.execute(
            select(func.coalesce(func.sum(CartItemModel.quantity), 0))
            .select_from(CartItemModel)
            .join(CartModel, CartModel.id == CartItemModel.cart_id)
            .where(CartModel.user_id == user_id)
        ).scalar_one()

    def drain_cart(self, user_id: int) -> bool:
        """Delete the user's cart and its items inside the current transaction."""
        cart = self.get_cart_by_user(user_id)
        if cart is None:
            return False

        # items go with the cart through the delete-orphan cascade;
        # items were added by cart_id, so reload the collection first
        self.db.expire(cart, ["items"])
        self.db.delete(cart)
        self.db.flush()
        return True

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
