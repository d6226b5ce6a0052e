from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_by_slug(self, slug: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.slug == slug)
        ).scalar_one_or_none()

    def find_clash(self, name: str | None, slug: str | None, exclude_id: int | None = None) -> CategoryModel | None:
        """Another category already using the given name or slug."""
        conditions = []
        if name is not None:
            conditions.append(CategoryModel.name == name)
        if slug is not None:
            conditions.append(CategoryModel.slug == slug)
        if not conditions:
            return None

        stmt = select(CategoryModel).where(or_(*conditions))
        if exclude_id is not None:
            stmt = stmt.where(CategoryModel.id != exclude_id)
        return self.db.execute(stmt.limit(1)).scalar_one_or_none()

    def list_categories(self, include_hidden: bool = False) -> list[CategoryModel]:
        stmt = select(CategoryModel).order_by(CategoryModel.sort_order, CategoryModel.id)
        if not include_hidden:
            stmt = stmt.where(CategoryModel.is_active.is_(True), CategoryModel.deleted_at.is_(None))
        return list(self.db.execute(stmt).scalars().all())

    def save(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def rollback(self):
        self.db.rollback()
