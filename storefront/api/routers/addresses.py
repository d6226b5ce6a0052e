# storefront/api/routers/addresses.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import ShopError
from storefront.domain.schemas import AddressCreate, AddressRead, AddressUpdate
from storefront.services.book_service import AddressService

router = APIRouter(prefix="/addresses", tags=["addresses"])


def get_service(db: Session):
    return AddressService(db)


@router.get("/", response_model=List[AddressRead])
def list_addresses(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    The caller's addresses, default first.
    """
    return get_service(db).list_records(user.id)


@router.post("/", response_model=AddressRead, status_code=201)
def create_address(
    payload: AddressCreate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).create_address(user.id, payload)


@router.get("/{address_id}", response_model=AddressRead)
def get_address(
    address_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.get_record(user.id, address_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{address_id}", response_model=AddressRead)
def update_address(
    address_id: int,
    payload: AddressUpdate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_address(user.id, address_id, payload)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{address_id}/default", response_model=AddressRead)
def set_default_address(
    address_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.set_default(user.id, address_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{address_id}", status_code=204)
def delete_address(
    address_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.delete_record(user.id, address_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(status_code=204)
