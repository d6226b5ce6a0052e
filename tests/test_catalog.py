from decimal import Decimal

import pytest

from storefront.domain.errors import ConflictError, NotFoundError
from storefront.domain.schemas import CategoryCreate, CategoryUpdate, ProductCreate, ProductUpdate
from storefront.services.category_service import CategoryService
from storefront.services.product_service import ProductService


@pytest.fixture
def categories(db):
    return CategoryService(db)


@pytest.fixture
def products(db):
    return ProductService(db)


@pytest.fixture
def admin(make_user):
    return make_user("Admin", role="admin")


def _category(categories, name="Bedroom", slug="bedroom", **extra):
    return categories.create_category(CategoryCreate(name=name, slug=slug, **extra))


def test_category_names_and_slugs_are_unique(categories):
    _category(categories)

    with pytest.raises(ConflictError):
        _category(categories, name="Bedroom", slug="bedroom-2")
    with pytest.raises(ConflictError):
        _category(categories, name="Sleeping", slug="bedroom")


def test_rename_to_taken_slug_is_a_conflict(categories):
    _category(categories)
    kitchen = _category(categories, name="Kitchen", slug="kitchen")

    with pytest.raises(ConflictError):
        categories.update_category(kitchen.id, CategoryUpdate(slug="bedroom"))

    # keeping its own slug is not a clash
    updated = categories.update_category(kitchen.id, CategoryUpdate(slug="kitchen", sort_order=3))
    assert updated.sort_order == 3


def test_active_listing_hides_inactive_and_deleted(categories):
    a = _category(categories, name="A", slug="a", sort_order=2)
    b = _category(categories, name="B", slug="b", sort_order=1)
    _category(categories, name="C", slug="c", is_active=False)
    d = _category(categories, name="D", slug="d")
    categories.delete_category(d.id)

    assert [c.id for c in categories.list_active()] == [b.id, a.id]
    assert len(categories.list_all()) == 4

    with pytest.raises(NotFoundError):
        categories.get_category(d.id)


def test_products_by_category(categories, products, make_product):
    bedroom = _category(categories)
    kitchen = _category(categories, name="Kitchen", slug="kitchen")
    cheap = make_product(price="10.00", category_id=bedroom.id)
    dear = make_product(price="90.00", category_id=bedroom.id)
    make_product(category_id=kitchen.id)

    listing = products.list_products(1, 10, category="bedroom", sort="highest")
    assert [p.id for p in listing["items"]] == [dear.id, cheap.id]
    assert listing["total"] == 2

    ascending = products.list_products(1, 10, category="bedroom", sort="lowest")
    assert [p.id for p in ascending["items"]] == [cheap.id, dear.id]


def test_unknown_or_deleted_category_lookup(categories, products):
    with pytest.raises(NotFoundError):
        products.list_products(1, 10, category="nowhere")

    gone = _category(categories)
    categories.delete_category(gone.id)
    with pytest.raises(NotFoundError):
        products.list_products(1, 10, category="bedroom")


def test_product_category_must_exist(categories, products):
    with pytest.raises(NotFoundError):
        products.create_product(ProductCreate(name="Lamp", price=Decimal("5.00"), sku="LMP", category_id=99))

    bedroom = _category(categories)
    lamp = products.create_product(ProductCreate(name="Lamp", price=Decimal("5.00"), sku="LMP", category_id=bedroom.id))
    assert lamp.category_id == bedroom.id

    cleared = products.update_product(lamp.id, ProductUpdate(category_id=None))
    assert cleared.category_id is None


def test_concurrent_sku_is_a_conflict(db, products, make_product):
    taken = make_product()
    # the duplicate check misses, as if the other insert had not committed yet
    products.repo.get_by_sku = lambda sku: None

    with pytest.raises(ConflictError):
        products.create_product(ProductCreate(name="Copy", price=Decimal("1.00"), sku=taken.sku))

    # the session is usable again after the rollback
    assert products.get_product(taken.id).sku == taken.sku


def test_category_endpoints(client, admin, make_user, make_product):
    member = make_user("Member")
    body = {"name": "Office", "slug": "office"}

    assert client.post("/categories/", params={"user_id": member.id}, json=body).status_code == 403
    resp = client.post("/categories/", params={"user_id": admin.id}, json=body)
    assert resp.status_code == 201
    category_id = resp.json()["id"]

    assert client.post("/categories/", params={"user_id": admin.id}, json=body).status_code == 409
    assert client.post("/categories/", params={"user_id": admin.id}, json={"name": "X", "slug": "Bad Slug"}).status_code == 422

    product = make_product(category_id=category_id)
    make_product()

    assert [c["slug"] for c in client.get("/categories/").json()] == ["office"]
    by_slug = client.get("/products/category/office").json()
    assert [p["id"] for p in by_slug["items"]] == [product.id]
    assert client.get("/products/", params={"category": "office"}).json()["total"] == 1
    assert client.get("/products/category/attic").status_code == 404

    assert client.delete(f"/categories/{category_id}", params={"user_id": admin.id}).status_code == 204
    assert client.get(f"/categories/{category_id}").status_code == 404
    assert client.get("/categories/all", params={"user_id": admin.id}).json()[0]["id"] == category_id
