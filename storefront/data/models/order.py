from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.domain.order_status import OrderStatus


def _utcnow():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    order_number = Column(String(32), nullable=False, unique=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    subtotal = Column(Numeric(10, 2), nullable=False)
    discount_value = Column(Numeric(10, 2), nullable=False, default=0)
    coupon_code = Column(String(64), nullable=True)
    shipping_cost = Column(Numeric(10, 2), nullable=False, default=0)
    total_price = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(64), nullable=False)

    # pending, paid, shipped, delivered, cancelled
    order_status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)

    shipping_full_name = Column(String(200), nullable=False)
    shipping_address_line1 = Column(String(255), nullable=False)
    shipping_address_line2 = Column(String(255), nullable=True)
    shipping_city = Column(String(100), nullable=False)
    shipping_zip = Column(String(20), nullable=False)
    shipping_country = Column(String(100), nullable=False)
    shipping_phone = Column(String(40), nullable=False)
    shipping_state = Column(String(100), nullable=False)
    tracking_number = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
