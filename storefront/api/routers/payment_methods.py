# storefront/api/routers/payment_methods.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import ShopError
from storefront.domain.schemas import PaymentMethodCreate, PaymentMethodRead, PaymentMethodUpdate
from storefront.services.book_service import PaymentMethodService

router = APIRouter(prefix="/payment-methods", tags=["payment-methods"])


def get_service(db: Session):
    return PaymentMethodService(db)


@router.get("/", response_model=List[PaymentMethodRead])
def list_payment_methods(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_service(db).list_records(user.id)


@router.post("/", response_model=PaymentMethodRead, status_code=201)
def create_payment_method(
    payload: PaymentMethodCreate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).create_payment_method(user.id, payload)


@router.get("/{method_id}", response_model=PaymentMethodRead)
def get_payment_method(
    method_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.get_record(user.id, method_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{method_id}", response_model=PaymentMethodRead)
def update_payment_method(
    method_id: int,
    payload: PaymentMethodUpdate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_payment_method(user.id, method_id, payload)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{method_id}/default", response_model=PaymentMethodRead)
def set_default_payment_method(
    method_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.set_default(user.id, method_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{method_id}", status_code=204)
def delete_payment_method(
    method_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.delete_record(user.id, method_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(status_code=204)
