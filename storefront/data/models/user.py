from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from storefront.data.database import Base
from storefront.domain.roles import UserRole


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    role = Column(String(20), nullable=False, default=UserRole.MEMBER.value)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
