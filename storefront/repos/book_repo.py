# storefront/repos/book_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.data.models.payment_method import PaymentMethodModel


class UserBookRepo:
    """
    Data access for per-user records that carry an ``is_default`` flag
    (address book, saved payment methods). Nothing commits except commit().
    """

    model = None

    def __init__(self, db: Session):
        self.db = db

    def get(self, record_id: int):
        return self.db.get(self.model, record_id)

    def list_for_user(self, user_id: int) -> list:
        # default first, then newest
        return list(
            self.db.execute(
                select(self.model)
                .where(self.model.user_id == user_id)
                .order_by(self.model.is_default.desc(), self.model.created_at.desc(), self.model.id.desc())
            ).scalars().all()
        )

    def clear_defaults(self, user_id: int) -> None:
        self.db.execute(
            update(self.model)
            .where(self.model.user_id == user_id, self.model.is_default.is_(True))
            .values(is_default=False)
            .execution_options(synchronize_session="fetch")
        )

    def add(self, record):
        self.db.add(record)
        self.db.flush()
        return record

    def delete(self, record) -> None:
        self.db.delete(record)
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()


class AddressRepo(UserBookRepo):
    model = AddressModel


class PaymentMethodRepo(UserBookRepo):
    model = PaymentMethodModel
