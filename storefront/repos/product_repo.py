# storefront/repos/product_repo.py
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_by_sku(self, sku: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.sku == sku)
        ).scalar_one_or_none()

    def get_orderable_by_ids(self, product_ids: Iterable[int]) -> dict[int, ProductModel]:
        """Active, non-deleted products keyed by id; unknown ids are simply absent."""
        ids = set(product_ids)
        if not ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(
                ProductModel.id.in_(ids),
                ProductModel.is_active.is_(True),
                ProductModel.deleted_at.is_(None),
            )
        ).scalars().all()
        return {p.id: p for p in rows}

    def list_products(
        self,
        offset: int,
        limit: int,
        search: str | None = None,
        category_id: int | None = None,
        sort: str | None = None,
    ) -> tuple[list[ProductModel], int]:
        conditions = [ProductModel.is_active.is_(True), ProductModel.deleted_at.is_(None)]
        if search:
            conditions.append(ProductModel.name.ilike(f"%{search}%"))
        if category_id is not None:
            conditions.append(ProductModel.category_id == category_id)

        order = {
            "lowest": (ProductModel.price.asc(), ProductModel.id),
            "highest": (ProductModel.price.desc(), ProductModel.id),
        }.get(sort, (ProductModel.id,))

        total = self.db.execute(
            select(func.count()).select_from(ProductModel).where(*conditions)
        ).scalar_one()
        rows = self.db.execute(
            select(ProductModel)
            .where(*conditions)
            .order_by(*order)
            .offset(offset)
            .limit(limit)
        ).scalars().all()
        return list(rows), total

    def save(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def rollback(self):
        self.db.rollback()
