# storefront/repos/order_repo.py
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.user import UserModel
from storefront.domain.order_status import OrderStatus


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel, items: list[OrderItemModel]) -> OrderModel:
        """Stage the order with its lines and flush; committing is up to the caller."""
        order.items = items
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def latest_order_number(self, prefix: str) -> str | None:
        # length first, so ...1000 sorts after ...999
        return self.db.execute(
            select(OrderModel.order_number)
            .where(OrderModel.order_number.startswith(prefix, autoescape=True))
            .order_by(func.length(OrderModel.order_number).desc(), OrderModel.order_number.desc())
            .limit(1)
        ).scalar_one_or_none()

    def list_user_orders(self, user_id: int, offset: int, limit: int) -> tuple[list[OrderModel], int]:
        conditions = [
            OrderModel.user_id == user_id,
            OrderModel.order_status != OrderStatus.CANCELLED.value,
        ]
        return self._page(conditions, offset, limit)

    def list_orders(
        self,
        offset: int,
        limit: int,
        search: str | None = None,
        status: str | None = None,
    ) -> tuple[list[OrderModel], int]:
        conditions = []
        if status:
            conditions.append(OrderModel.order_status == status)
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(
                    OrderModel.order_number.ilike(pattern),
                    OrderModel.shipping_full_name.ilike(pattern),
                    OrderModel.user_id.in_(select(UserModel.id).where(UserModel.email.ilike(pattern))),
                )
            )
        return self._page(conditions, offset, limit)

    def _page(self, conditions, offset: int, limit: int) -> tuple[list[OrderModel], int]:
        total = self.db.execute(
            select(func.count()).select_from(OrderModel).where(*conditions)
        ).scalar_one()
        rows = self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(*conditions)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .offset(offset)
            .limit(limit)
        ).scalars().all()
        return list(rows), total

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
