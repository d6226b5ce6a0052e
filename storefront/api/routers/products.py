# storefront/api/routers/products.py
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storefront.api.deps import Pagination, require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import ShopError
from storefront.domain.schemas import Page, ProductCreate, ProductRead, ProductUpdate
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])

PriceSort = Literal["lowest", "highest"]


def get_service(db: Session):
    return ProductService(db)


@router.get("/", response_model=Page[ProductRead])
def list_products(
    pagination: Pagination = Depends(),
    search: str | None = Query(None, max_length=100),
    category: str | None = Query(None, max_length=100, description="Category slug"),
    sort: PriceSort | None = Query(None),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.list_products(pagination.page, pagination.page_size, search, category, sort)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/category/{slug}", response_model=Page[ProductRead])
def list_products_by_category(
    slug: str,
    pagination: Pagination = Depends(),
    search: str | None = Query(None, max_length=100),
    sort: PriceSort | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    Products of one active category, optionally sorted by price.
    """
    svc = get_service(db)
    try:
        return svc.list_products(pagination.page, pagination.page_size, search, slug, sort)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_product(product_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/", response_model=ProductRead, status_code=201)
def create_product(
    payload: ProductCreate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.create_product(payload)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_product(product_id, payload)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: int,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.delete_product(product_id)
    except ShopError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(status_code=204)
