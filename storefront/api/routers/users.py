from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import ShopError
from storefront.domain.schemas import UserCreate, UserRead
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, db: Session = Depends(get_db)):
    try:
        return UserService(db).create_user(payload)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: int, db: Session = Depends(get_db)):
    try:
        return UserService(db).get_user(user_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
