# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.deps import Pagination, get_current_user, require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import ShopError
from storefront.domain.order_status import OrderStatus
from storefront.domain.schemas import OrderCreate, OrderOut, OrderUpdate, Page
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("/", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Places an order priced from the live catalog and drains the caller's cart.
    """
    svc = get_service(db)
    try:
        return svc.create_order(user.id, payload)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/", response_model=Page[OrderOut])
def list_my_orders(
    pagination: Pagination = Depends(),
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).list_orders(user, pagination.page, pagination.page_size)


# declared before /{order_id} so "admin" is not parsed as an id
@router.get("/admin", response_model=Page[OrderOut])
def list_all_orders(
    pagination: Pagination = Depends(),
    search: str | None = Query(None, max_length=100),
    status: OrderStatus | None = Query(None),
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.list_all_orders(admin, pagination.page, pagination.page_size, search=search, status=status)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.get_order(order_id, user)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{order_id}", response_model=OrderOut)
def update_order(
    order_id: int,
    payload: OrderUpdate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_order(order_id, payload, admin)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.cancel_order(order_id, user)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
