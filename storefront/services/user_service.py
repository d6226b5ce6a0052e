from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import ConflictError, NotFoundError
from storefront.domain.schemas import UserCreate, UserRead
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        if self.repo.get_by_email(payload.email):
            raise ConflictError("Email is already in use")

        user = UserModel(name=payload.name, email=payload.email, role=payload.role.value)
        created = self.repo.create_user(user)
        logger.info(f"Registered user {created.id} ({created.role})")
        return UserRead.model_validate(created)

    def get_active_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user or not user.is_active:
            raise NotFoundError("User not found")
        return user

    def get_user(self, user_id: int) -> UserRead:
        return UserRead.model_validate(self.get_active_user(user_id))
