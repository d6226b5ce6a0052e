from datetime import datetime, timedelta, timezone
from decimal import Decimal

from storefront.data.models import OrderModel
from storefront.services.order_numbers import (
    OrderNumberGenerator,
    format_order_number,
    next_sequence,
)

JAN_15 = datetime(2025, 1, 15, 23, 59, tzinfo=timezone.utc)


def _insert_order(db, user, number):
    db.add(
        OrderModel(
            order_number=number,
            user_id=user.id,
            subtotal=Decimal("1.00"),
            discount_value=Decimal("0"),
            shipping_cost=Decimal("0"),
            total_price=Decimal("1.00"),
            payment_method="card",
            shipping_full_name="Jane Doe",
            shipping_address_line1="1 Main Street",
            shipping_city="Springfield",
            shipping_zip="12345",
            shipping_country="US",
            shipping_phone="555",
            shipping_state="IL",
        )
    )
    db.commit()


def test_format_pads_to_three_digits():
    assert format_order_number("ORD20250115", 7) == "ORD20250115007"
    assert format_order_number("ORD20250115", 1000) == "ORD202501151000"


def test_next_sequence():
    assert next_sequence("ORD20250115", None) == 1
    assert next_sequence("ORD20250115", "ORD20250115007") == 8
    assert next_sequence("ORD20250115", "ORD202501151000") == 1001


def test_first_order_of_the_day(db):
    gen = OrderNumberGenerator(db, clock=lambda: JAN_15)
    assert gen.next_number() == "ORD20250115001"


def test_increments_latest_number_of_the_day(db, make_user):
    user = make_user()
    _insert_order(db, user, "ORD20250115001")
    _insert_order(db, user, "ORD20250115002")

    gen = OrderNumberGenerator(db, clock=lambda: JAN_15)
    assert gen.next_number() == "ORD20250115003"


def test_other_days_do_not_count(db, make_user):
    user = make_user()
    _insert_order(db, user, "ORD20250114041")
    _insert_order(db, user, "ORD20250116001")

    gen = OrderNumberGenerator(db, clock=lambda: JAN_15)
    assert gen.next_number() == "ORD20250115001"


def test_date_prefix_uses_utc(db):
    # 23:30 on the 14th in UTC-5 is already the 15th in UTC
    local = datetime(2025, 1, 14, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    gen = OrderNumberGenerator(db, clock=lambda: local)
    assert gen.date_prefix() == "ORD20250115"


def test_overflow_past_999_keeps_counting(db, make_user):
    user = make_user()
    _insert_order(db, user, "ORD20250115999")
    gen = OrderNumberGenerator(db, clock=lambda: JAN_15)
    assert gen.next_number() == "ORD202501151000"

    _insert_order(db, user, "ORD202501151000")
    assert gen.next_number() == "ORD202501151001"
