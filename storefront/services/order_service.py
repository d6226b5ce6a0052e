# storefront/services/order_service.py
from datetime import datetime
from typing import Any, Callable, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.user import UserModel
from storefront.domain.errors import ConflictError, ForbiddenError, NotFoundError, OrderNumberTaken
from storefront.domain.order_status import OrderStatus, can_transition, is_terminal
from storefront.domain.roles import is_admin
from storefront.domain.schemas import OrderCreate, OrderUpdate
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.order_numbers import OrderNumberGenerator, utcnow
from storefront.services.pricing import compute_totals
from storefront.utils.logging import get_logger
from storefront.utils.retry import order_number_retry

logger = get_logger(__name__)


def _is_order_number_clash(exc: IntegrityError) -> bool:
    return "order_number" in str(exc.orig)


def serialize_order(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "order_number": order.order_number,
        "user_id": order.user_id,
        "subtotal": order.subtotal,
        "discount_value": order.discount_value,
        "coupon_code": order.coupon_code,
        "shipping_cost": order.shipping_cost,
        "total_price": order.total_price,
        "payment_method": order.payment_method,
        "order_status": order.order_status,
        "shipping_full_name": order.shipping_full_name,
        "shipping_address_line1": order.shipping_address_line1,
        "shipping_address_line2": order.shipping_address_line2,
        "shipping_city": order.shipping_city,
        "shipping_zip": order.shipping_zip,
        "shipping_country": order.shipping_country,
        "shipping_phone": order.shipping_phone,
        "shipping_state": order.shipping_state,
        "tracking_number": order.tracking_number,
        "items": [
            {
                "id": i.id,
                "product_id": i.product_id,
                "product_name": i.product_name,
                "quantity": i.quantity,
                "price": i.price,
            }
            for i in order.items
        ],
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


class OrderService:
    """
    Order use cases: placing an order from requested lines (draining the
    user's cart in the same transaction), reading and listing orders, and the
    status lifecycle with ownership checks.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.repo = OrderRepo(db)
        self.users = UserRepo(db)
        self.products = ProductRepo(db)
        self.carts = CartRepo(db)
        self.numbers = OrderNumberGenerator(db, clock=clock)

    # commands
    def create_order(self, user_id: int, payload: OrderCreate) -> Dict[str, Any]:
        """
        Use Case: place an order.

        1. user must exist and be active
        2. every product must exist (no partial orders)
        3. totals from live catalog prices
        4. order number for today
        5-6. order + order items
        7. drain the user's cart
        All in one transaction; a lost race on the order number retries the
        whole unit with a fresh read.
        """
        try:
            return self._create_order_attempt(user_id, payload)
        except OrderNumberTaken as e:
            logger.error(f"Giving up on order number for user {user_id}: {e}")
            raise ConflictError("Could not allocate an order number, please retry") from e

    @order_number_retry()
    def _create_order_attempt(self, user_id: int, payload: OrderCreate) -> Dict[str, Any]:
        user = self.users.get_user(user_id)
        if not user or not user.is_active:
            raise NotFoundError("User not found")

        products = self.products.get_orderable_by_ids(i.product_id for i in payload.items)
        totals = compute_totals(
            payload.items,
            products,
            discount_value=payload.discount_value,
            shipping_cost=payload.shipping_cost,
        )

        order_number = self.numbers.next_number()

        order = OrderModel(
            order_number=order_number,
            user_id=user_id,
            subtotal=totals.subtotal,
            discount_value=totals.discount_value,
            coupon_code=payload.coupon_code,
            shipping_cost=totals.shipping_cost,
            total_price=totals.total,
            payment_method=payload.payment_method,
            order_status=OrderStatus.PENDING.value,
            shipping_full_name=payload.shipping_full_name,
            shipping_address_line1=payload.shipping_address_line1,
            shipping_address_line2=payload.shipping_address_line2,
            shipping_city=payload.shipping_city,
            shipping_zip=payload.shipping_zip,
            shipping_country=payload.shipping_country,
            shipping_phone=payload.shipping_phone,
            shipping_state=payload.shipping_state,
        )
        items = [
            OrderItemModel(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity,
                price=line.unit_price,
            )
            for line in totals.lines
        ]

        try:
            self.repo.add_order(order, items)
            drained = self.carts.drain_cart(user_id)
            self.repo.commit()
        except IntegrityError as e:
            self.repo.rollback()
            if _is_order_number_clash(e):
                logger.warning(f"Order number {order_number} taken, retrying")
                raise OrderNumberTaken(order_number) from e
            raise
        except Exception:
            logger.exception(f"Creating order {order_number} for user {user_id} failed, rolled back")
            self.repo.rollback()
            raise

        logger.info(
            f"Order {order.order_number} created for user {user_id}: "
            f"{len(items)} items, total {order.total_price}, cart drained: {drained}"
        )
        return serialize_order(order)

    def cancel_order(self, order_id: int, requester: UserModel) -> Dict[str, Any]:
        """
        Use Case: cancel an order. Owners and admins only; terminal orders
        cannot be cancelled.
        """
        order = self._get_visible_order(order_id, requester)
        current = OrderStatus(order.order_status)

        if current == OrderStatus.CANCELLED:
            raise ConflictError(f"Order {order.order_number} is already cancelled")
        if is_terminal(current):
            raise ConflictError(f"Order {order.order_number} is {current.value} and cannot be cancelled")

        order.order_status = OrderStatus.CANCELLED.value
        self.repo.commit()

        logger.info(f"Order {order.order_number} cancelled by user {requester.id}")
        return serialize_order(order)

    def update_order(self, order_id: int, payload: OrderUpdate, requester: UserModel) -> Dict[str, Any]:
        """
        Use Case: admin status / tracking update. The transition graph applies
        to admins as well; re-setting the current status is a no-op.
        """
        if not is_admin(requester):
            raise ForbiddenError("Only admins can update orders")

        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        if payload.order_status is not None:
            current = OrderStatus(order.order_status)
            target = payload.order_status
            if target != current and not can_transition(current, target):
                raise ConflictError(
                    f"Order {order.order_number} cannot move from {current.value} to {target.value}"
                )
            order.order_status = target.value

        if payload.tracking_number is not None:
            order.tracking_number = payload.tracking_number

        self.repo.commit()

        logger.info(
            f"Order {order.order_number} updated by admin {requester.id}: "
            f"status={order.order_status}, tracking={order.tracking_number}"
        )
        return serialize_order(order)

    # queries
    def get_order(self, order_id: int, requester: UserModel) -> Dict[str, Any]:
        """
        Use Case: read an order (Query).
        """
        return serialize_order(self._get_visible_order(order_id, requester))

    def list_orders(self, requester: UserModel, page: int, page_size: int) -> Dict[str, Any]:
        rows, total = self.repo.list_user_orders(requester.id, (page - 1) * page_size, page_size)
        return {
            "items": [serialize_order(o) for o in rows],
            "total": total,
            "page": page,
            "page_size": page_size,
        }

    def list_all_orders(
        self,
        requester: UserModel,
        page: int,
        page_size: int,
        search: str | None = None,
        status: OrderStatus | None = None,
    ) -> Dict[str, Any]:
        if not is_admin(requester):
            raise ForbiddenError("Only admins can list all orders")

        rows, total = self.repo.list_orders(
            (page - 1) * page_size,
            page_size,
            search=search,
            status=status.value if status else None,
        )
        return {
            "items": [serialize_order(o) for o in rows],
            "total": total,
            "page": page,
            "page_size": page_size,
        }

    def _get_visible_order(self, order_id: int, requester: UserModel) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        if order.user_id != requester.id and not is_admin(requester):
            logger.warning(f"User {requester.id} denied access to order {order_id}")
            raise ForbiddenError("You cannot access this order")
        return order
