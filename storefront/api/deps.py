# storefront/api/deps.py
from fastapi import Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError
from storefront.domain.roles import is_admin
from storefront.services.user_service import UserService
from storefront.utils.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


def get_current_user(
    user_id: int = Query(..., gt=0, description="Calling user"),
    db: Session = Depends(get_db),
) -> UserModel:
    try:
        return UserService(db).get_active_user(user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if not is_admin(user):
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


class Pagination:
    def __init__(
        self,
        page: int = Query(1, ge=1),
        page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    ):
        self.page = page
        self.page_size = page_size
