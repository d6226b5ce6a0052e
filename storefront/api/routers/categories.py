# storefront/api/routers/categories.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import ShopError
from storefront.domain.schemas import CategoryCreate, CategoryRead, CategoryUpdate
from storefront.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


def get_service(db: Session):
    return CategoryService(db)


@router.get("/", response_model=List[CategoryRead])
def list_active_categories(db: Session = Depends(get_db)):
    return get_service(db).list_active()


# declared before /{category_id}
@router.get("/all", response_model=List[CategoryRead])
def list_all_categories(admin: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    return get_service(db).list_all()


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(category_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_category(category_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/", response_model=CategoryRead, status_code=201)
def create_category(
    payload: CategoryCreate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.create_category(payload)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{category_id}", response_model=CategoryRead)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_category(category_id, payload)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: int,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.delete_category(category_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(status_code=204)
