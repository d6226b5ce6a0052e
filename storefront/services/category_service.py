# storefront/services/category_service.py
from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.domain.errors import ConflictError, NotFoundError
from storefront.domain.schemas import CategoryCreate, CategoryRead, CategoryUpdate
from storefront.repos.category_repo import CategoryRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CategoryService:
    """
    Catalog categories. Deleting a category is a soft delete; its products
    stay in the catalog and simply stop being listed under it.
    """

    def __init__(self, db: Session):
        self.repo = CategoryRepo(db)

    def list_active(self) -> List[CategoryRead]:
        return [CategoryRead.model_validate(c) for c in self.repo.list_categories()]

    def list_all(self) -> List[CategoryRead]:
        """Admin view, inactive and deleted categories included."""
        return [CategoryRead.model_validate(c) for c in self.repo.list_categories(include_hidden=True)]

    def get_category(self, category_id: int) -> CategoryRead:
        return CategoryRead.model_validate(self.get_live(category_id))

    def get_visible_by_slug(self, slug: str) -> CategoryModel:
        category = self.repo.get_by_slug(slug)
        if not category or not category.is_visible:
            raise NotFoundError(f"Category {slug} not found")
        return category

    def create_category(self, payload: CategoryCreate) -> CategoryRead:
        self._ensure_unique(payload.name, payload.slug)
        category = self._save(CategoryModel(**payload.model_dump()))
        logger.info(f"Category {category.id} ({category.slug}) created")
        return CategoryRead.model_validate(category)

    def update_category(self, category_id: int, payload: CategoryUpdate) -> CategoryRead:
        category = self.get_live(category_id)
        changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None or k == "description"}
        self._ensure_unique(changes.get("name"), changes.get("slug"), exclude_id=category_id)

        for field, value in changes.items():
            setattr(category, field, value)
        category = self._save(category)

        logger.info(f"Category {category_id} updated: {sorted(changes)}")
        return CategoryRead.model_validate(category)

    def delete_category(self, category_id: int) -> None:
        category = self.get_live(category_id)
        category.deleted_at = datetime.now(timezone.utc)
        self.repo.save(category)
        logger.info(f"Category {category_id} soft-deleted")

    def get_live(self, category_id: int) -> CategoryModel:
        category = self.repo.get_category(category_id)
        if not category or category.deleted_at is not None:
            raise NotFoundError("Category not found")
        return category

    def _ensure_unique(self, name: str | None, slug: str | None, exclude_id: int | None = None) -> None:
        if self.repo.find_clash(name, slug, exclude_id):
            raise ConflictError("Category name or slug already exists")

    def _save(self, category: CategoryModel) -> CategoryModel:
        try:
            return self.repo.save(category)
        except IntegrityError:
            # lost a race with a concurrent create/rename
            self.repo.rollback()
            raise ConflictError("Category name or slug already exists")
