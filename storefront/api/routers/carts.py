# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import ShopError
from storefront.domain.schemas import CartCountOut, CartOut, ItemIn, ItemQuantityIn
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("/", response_model=CartOut)
def get_cart(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_service(db).get_cart(user.id)


@router.get("/count", response_model=CartCountOut)
def get_item_count(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_service(db).item_count(user.id)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_item(user.id, payload.product_id, payload.quantity)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/items/{item_id}", response_model=CartOut)
def update_item_quantity(
    item_id: int,
    payload: ItemQuantityIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_item_quantity(user.id, item_id, payload.quantity)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_item(user.id, item_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
