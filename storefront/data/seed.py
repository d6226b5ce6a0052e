# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal, init_db
from storefront.data.models import CategoryModel, ProductModel, UserModel
from storefront.domain.roles import UserRole
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORIES = [
    {"name": "Peripherals", "slug": "peripherals", "sort_order": 1},
    {"name": "Displays", "slug": "displays", "sort_order": 2},
]

PRODUCTS = [
    {"name": "Keyboard", "sku": "KB-001", "price": Decimal("199.99"), "stock": 25, "category": "peripherals"},
    {"name": "Mouse", "sku": "MS-001", "price": Decimal("49.50"), "discount_price": Decimal("39.90"), "stock": 80, "category": "peripherals"},
    {"name": "Monitor", "sku": "MN-001", "price": Decimal("899.00"), "stock": 10, "category": "displays"},
]


def seed():
    init_db()
    db = SessionLocal()
    try:
        # only seed if empty
        if db.query(UserModel).first():
            logger.info("Database already seeded")
            return
        db.add(UserModel(name="Admin", email="admin@example.com", role=UserRole.ADMIN.value))
        db.add(UserModel(name="Member", email="member@example.com", role=UserRole.MEMBER.value))

        categories = {c["slug"]: CategoryModel(**c) for c in CATEGORIES}
        db.add_all(categories.values())
        db.flush()

        for p in PRODUCTS:
            data = dict(p)
            category = categories[data.pop("category")]
            db.add(ProductModel(category_id=category.id, **data))
        db.commit()
        logger.info(f"Seeded 2 users, {len(CATEGORIES)} categories and {len(PRODUCTS)} products")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
