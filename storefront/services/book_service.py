# storefront/services/book_service.py
from typing import Any, Dict, List

from pydantic import BaseModel
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.data.models.payment_method import PaymentMethodModel
from storefront.domain.errors import ForbiddenError, NotFoundError
from storefront.domain.schemas import (
    AddressCreate,
    AddressRead,
    AddressUpdate,
    PaymentMethodCreate,
    PaymentMethodRead,
    PaymentMethodUpdate,
)
from storefront.repos.book_repo import AddressRepo, PaymentMethodRepo, UserBookRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserBookService:
    """
    Shared use cases for a user's saved records with a default entry.

    Invariant: a user has at most one default record. Whenever a record
    becomes the default, the user's other defaults are cleared in the same
    transaction, so a failure leaves the previous default in place.
    """

    label = "record"
    read_schema: type[BaseModel]
    repo: UserBookRepo

    def list_records(self, user_id: int) -> List[Dict[str, Any]]:
        return [self._read(r) for r in self.repo.list_for_user(user_id)]

    def get_record(self, user_id: int, record_id: int) -> Dict[str, Any]:
        return self._read(self._owned(user_id, record_id))

    def set_default(self, user_id: int, record_id: int) -> Dict[str, Any]:
        record = self._owned(user_id, record_id)
        self._write(user_id, record, {"is_default": True})
        logger.info(f"{self.label.capitalize()} {record_id} is now the default for user {user_id}")
        return self._read(record)

    def delete_record(self, user_id: int, record_id: int) -> None:
        record = self._owned(user_id, record_id)
        try:
            self.repo.delete(record)
            self.repo.commit()
        except Exception as e:
            logger.error(f"Failed to delete {self.label} {record_id}: {e}")
            self.repo.rollback()
            raise
        logger.info(f"{self.label.capitalize()} {record_id} deleted for user {user_id}")

    def _create(self, user_id: int, record) -> Dict[str, Any]:
        record.user_id = user_id
        self._write(user_id, record, {}, new=True)
        logger.info(f"{self.label.capitalize()} {record.id} saved for user {user_id}")
        return self._read(record)

    def _update(self, user_id: int, record_id: int, payload: BaseModel) -> Dict[str, Any]:
        record = self._owned(user_id, record_id)
        changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
        self._write(user_id, record, changes)
        logger.info(f"{self.label.capitalize()} {record_id} updated: {sorted(changes)}")
        return self._read(record)

    def _write(self, user_id: int, record, changes: Dict[str, Any], new: bool = False) -> None:
        """Apply changes and commit once, clearing other defaults first when needed."""
        try:
            if changes.get("is_default") or (new and record.is_default):
                self.repo.clear_defaults(user_id)
            for field, value in changes.items():
                setattr(record, field, value)
            if new:
                self.repo.add(record)
            self.repo.commit()
        except Exception as e:
            logger.error(f"Failed to save {self.label} for user {user_id}: {e}")
            self.repo.rollback()
            raise

    def _owned(self, user_id: int, record_id: int):
        record = self.repo.get(record_id)
        if not record:
            raise NotFoundError(f"{self.label.capitalize()} not found")
        if record.user_id != user_id:
            raise ForbiddenError("Access denied")
        return record

    def _read(self, record) -> Dict[str, Any]:
        return self.read_schema.model_validate(record).model_dump()


class AddressService(UserBookService):
    """Address book."""

    label = "address"
    read_schema = AddressRead

    def __init__(self, db: Session):
        self.repo = AddressRepo(db)

    def create_address(self, user_id: int, payload: AddressCreate) -> Dict[str, Any]:
        return self._create(user_id, AddressModel(**payload.model_dump()))

    def update_address(self, user_id: int, address_id: int, payload: AddressUpdate) -> Dict[str, Any]:
        return self._update(user_id, address_id, payload)


class PaymentMethodService(UserBookService):
    """Saved cards. The full card number is never stored."""

    label = "payment method"
    read_schema = PaymentMethodRead

    def __init__(self, db: Session):
        self.repo = PaymentMethodRepo(db)

    def create_payment_method(self, user_id: int, payload: PaymentMethodCreate) -> Dict[str, Any]:
        record = PaymentMethodModel(
            cardholder_name=payload.cardholder_name,
            card_last4=payload.card_number[-4:],
            expiry_date=payload.expiry_date,
            is_default=payload.is_default,
        )
        return self._create(user_id, record)

    def update_payment_method(self, user_id: int, method_id: int, payload: PaymentMethodUpdate) -> Dict[str, Any]:
        return self._update(user_id, method_id, payload)
