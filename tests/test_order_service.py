from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from storefront.data.models import CartItemModel, CartModel, OrderItemModel, OrderModel
from storefront.domain.errors import BadRequestError, ConflictError, NotFoundError
from storefront.domain.schemas import OrderCreate, ProductUpdate
from storefront.services.cart_service import CartService
from storefront.services.product_service import ProductService


def _payload(order_payload, items, **extra):
    return OrderCreate.model_validate(order_payload(items, **extra))


def test_cart_to_order_scenario(db, make_user, make_product, order_service, order_payload):
    user = make_user()
    product = make_product(price="100.00")
    CartService(db).add_item(user.id, product.id, 2)

    order = order_service.create_order(
        user.id,
        _payload(order_payload, [(product.id, 2)], discountValue="10", shippingCost="20"),
    )

    assert order["subtotal"] == Decimal("200.00")
    assert order["discount_value"] == Decimal("10.00")
    assert order["shipping_cost"] == Decimal("20.00")
    assert order["total_price"] == Decimal("210.00")
    assert order["order_status"] == "pending"
    assert order["order_number"] == "ORD20250115001"
    assert len(order["items"]) == 1
    item = order["items"][0]
    assert (item["product_id"], item["quantity"], item["price"]) == (product.id, 2, Decimal("100.00"))

    assert db.query(CartModel).count() == 0
    assert db.query(CartItemModel).count() == 0
    assert CartService(db).get_cart(user.id)["cart_id"] is None


def test_one_order_item_per_input_line(db, make_user, make_product, order_service, order_payload):
    user = make_user()
    a, b = make_product(price="3.50"), make_product(price="1.25")

    order = order_service.create_order(user.id, _payload(order_payload, [(a.id, 1), (b.id, 4), (a.id, 2)]))

    assert [i["quantity"] for i in order["items"]] == [1, 4, 2]
    assert order["subtotal"] == Decimal("15.50")
    assert db.query(OrderItemModel).filter_by(order_id=order["id"]).count() == 3


def test_price_snapshot_survives_catalog_changes(db, make_user, make_product, order_service, order_payload):
    user = make_user()
    product = make_product(price="100.00", name="Keyboard")
    order = order_service.create_order(user.id, _payload(order_payload, [(product.id, 1)]))

    products = ProductService(db)
    products.update_product(product.id, ProductUpdate(price=Decimal("150.00"), name="Keyboard v2"))
    products.delete_product(product.id)

    db.expire_all()
    stored = db.get(OrderModel, order["id"])
    assert stored.items[0].price == Decimal("100.00")
    assert stored.items[0].product_name == "Keyboard"
    assert stored.total_price == Decimal("100.00")


def test_sequential_orders_increment_counter(make_user, make_product, place_order):
    user = make_user()
    product = make_product()

    first = place_order(user, product)
    second = place_order(user, product)

    assert first["order_number"] == "ORD20250115001"
    assert second["order_number"] == "ORD20250115002"
    assert first["order_number"][:-3] == second["order_number"][:-3]


def test_missing_product_leaves_cart_intact(db, make_user, make_product, order_service, order_payload):
    user = make_user()
    product = make_product()
    CartService(db).add_item(user.id, product.id, 1)

    with pytest.raises(NotFoundError):
        order_service.create_order(user.id, _payload(order_payload, [(product.id, 1), (9999, 1)]))

    assert db.query(OrderModel).count() == 0
    assert db.query(OrderItemModel).count() == 0
    cart = CartService(db).get_cart(user.id)
    assert cart["cart_id"] is not None
    assert [i["product_id"] for i in cart["items"]] == [product.id]


def test_deleted_product_cannot_be_ordered(db, make_user, make_product, order_service, order_payload):
    user = make_user()
    product = make_product()
    ProductService(db).delete_product(product.id)

    with pytest.raises(NotFoundError):
        order_service.create_order(user.id, _payload(order_payload, [(product.id, 1)]))


def test_unknown_or_inactive_user(make_user, make_product, order_service, order_payload):
    product = make_product()
    with pytest.raises(NotFoundError):
        order_service.create_order(4242, _payload(order_payload, [(product.id, 1)]))

    inactive = make_user(is_active=False)
    with pytest.raises(NotFoundError):
        order_service.create_order(inactive.id, _payload(order_payload, [(product.id, 1)]))


def test_over_discount_is_rejected_before_any_write(db, make_user, make_product, order_service, order_payload):
    user = make_user()
    product = make_product(price="10.00")

    with pytest.raises(BadRequestError):
        order_service.create_order(user.id, _payload(order_payload, [(product.id, 1)], discountValue="25"))

    assert db.query(OrderModel).count() == 0


def test_user_without_cart_can_order(db, make_user, make_product, place_order):
    user = make_user()
    order = place_order(user, make_product())
    assert order["id"] is not None
    assert db.query(CartModel).count() == 0


def test_only_the_buyers_cart_is_drained(db, make_user, make_product, place_order):
    buyer, other = make_user("Buyer"), make_user("Other")
    product = make_product()
    carts = CartService(db)
    carts.add_item(buyer.id, product.id, 1)
    carts.add_item(other.id, product.id, 3)

    place_order(buyer, product)

    assert carts.get_cart(buyer.id)["cart_id"] is None
    assert carts.item_count(other.id) == {"count": 3}


def test_storage_failure_during_drain_rolls_back_order(
    db, make_user, make_product, order_service, order_payload, monkeypatch
):
    user = make_user()
    product = make_product()
    CartService(db).add_item(user.id, product.id, 2)

    def broken_drain(user_id):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(order_service.carts, "drain_cart", broken_drain)

    with pytest.raises(SQLAlchemyError):
        order_service.create_order(user.id, _payload(order_payload, [(product.id, 2)]))

    assert db.query(OrderModel).count() == 0
    assert db.query(OrderItemModel).count() == 0
    assert CartService(db).item_count(user.id) == {"count": 2}


def test_lost_order_number_race_is_retried(db, make_user, make_product, order_service, order_payload):
    user = make_user()
    product = make_product()
    taken = order_service.create_order(user.id, _payload(order_payload, [(product.id, 1)]))["order_number"]

    # first proposal simulates a concurrent writer having read the same "latest" number
    proposals = iter([taken, "ORD20250115002"])
    calls = []

    def next_number():
        calls.append(1)
        return next(proposals)

    order_service.numbers.next_number = next_number

    order = order_service.create_order(user.id, _payload(order_payload, [(product.id, 1)]))

    assert len(calls) == 2
    assert order["order_number"] == "ORD20250115002"
    assert db.query(OrderModel).count() == 2


def test_order_number_race_gives_conflict_after_retries(
    db, make_user, make_product, order_service, order_payload
):
    user = make_user()
    product = make_product()
    taken = order_service.create_order(user.id, _payload(order_payload, [(product.id, 1)]))["order_number"]
    CartService(db).add_item(user.id, product.id, 1)

    order_service.numbers.next_number = lambda: taken

    with pytest.raises(ConflictError):
        order_service.create_order(user.id, _payload(order_payload, [(product.id, 1)]))

    assert db.query(OrderModel).count() == 1
    assert CartService(db).item_count(user.id) == {"count": 1}


def test_coupon_and_shipping_fields_are_stored(make_user, make_product, place_order):
    user = make_user()
    order = place_order(
        user,
        make_product(),
        couponCode="WELCOME10",
        shippingAddressLine2="Apt 4",
    )

    assert order["coupon_code"] == "WELCOME10"
    assert order["shipping_address_line2"] == "Apt 4"
    assert order["shipping_state"] == "IL"
    assert order["shipping_phone"] == "+1 555 0100"
    assert order["payment_method"] == "card"
