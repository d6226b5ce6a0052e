# storefront/data/models/payment_method.py
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from storefront.data.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class PaymentMethodModel(Base):
    __tablename__ = "payment_methods"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    cardholder_name = Column(String(200), nullable=False)
    # only the last four digits are stored
    card_last4 = Column(String(4), nullable=False)
    expiry_date = Column(String(5), nullable=False)  # MM/YY

    is_default = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
