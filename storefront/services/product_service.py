# storefront/services/product_service.py
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import ConflictError, NotFoundError
from storefront.domain.schemas import ProductCreate, ProductRead, ProductUpdate
from storefront.repos.product_repo import ProductRepo
from storefront.services.category_service import CategoryService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# fields that an explicit null clears
CLEARABLE = {"discount_price", "category_id"}


class ProductService:
    """
    Catalog maintenance. Price edits only affect carts and orders created
    afterwards; placed orders keep their own price snapshot.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.categories = CategoryService(db)

    def create_product(self, payload: ProductCreate) -> ProductRead:
        if self.repo.get_by_sku(payload.sku):
            raise ConflictError(f"SKU {payload.sku} already exists")
        if payload.category_id is not None:
            self.categories.get_live(payload.category_id)

        try:
            product = self.repo.save(ProductModel(**payload.model_dump()))
        except IntegrityError:
            self.repo.rollback()
            logger.warning(f"SKU {payload.sku} was taken concurrently")
            raise ConflictError(f"SKU {payload.sku} already exists")

        logger.info(f"Product {product.id} ({product.sku}) created at {product.price}")
        return ProductRead.model_validate(product)

    def get_product(self, product_id: int) -> ProductRead:
        return ProductRead.model_validate(self._get_live(product_id))

    def list_products(
        self,
        page: int,
        page_size: int,
        search: str | None = None,
        category: str | None = None,
        sort: str | None = None,
    ) -> Dict[str, Any]:
        category_id = self.categories.get_visible_by_slug(category).id if category else None
        rows, total = self.repo.list_products((page - 1) * page_size, page_size, search, category_id, sort)
        return {
            "items": [ProductRead.model_validate(p) for p in rows],
            "total": total,
            "page": page,
            "page_size": page_size,
        }

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductRead:
        product = self._get_live(product_id)
        changes = {
            k: v
            for k, v in payload.model_dump(exclude_unset=True).items()
            if v is not None or k in CLEARABLE
        }
        if changes.get("category_id") is not None:
            self.categories.get_live(changes["category_id"])

        for field, value in changes.items():
            setattr(product, field, value)

        product = self.repo.save(product)
        logger.info(f"Product {product_id} updated: {sorted(changes)}")
        return ProductRead.model_validate(product)

    def delete_product(self, product_id: int) -> None:
        product = self._get_live(product_id)
        product.is_active = False
        product.deleted_at = datetime.now(timezone.utc)
        self.repo.save(product)
        logger.info(f"Product {product_id} soft-deleted")

    def _get_live(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product or product.deleted_at is not None:
            raise NotFoundError("Product not found")
        return product
