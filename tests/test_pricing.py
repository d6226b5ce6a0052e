from decimal import Decimal
from types import SimpleNamespace

import pytest

from storefront.domain.errors import BadRequestError, NotFoundError
from storefront.services.pricing import compute_totals


def _product(pid, price, name=None):
    return SimpleNamespace(id=pid, name=name or f"P{pid}", price=Decimal(price))


def _line(pid, qty):
    return SimpleNamespace(product_id=pid, quantity=qty)


def test_scenario_subtotal_discount_shipping():
    totals = compute_totals(
        [_line(5, 2)],
        {5: _product(5, "100.00")},
        discount_value=Decimal("10"),
        shipping_cost=Decimal("20"),
    )

    assert totals.subtotal == Decimal("200.00")
    assert totals.total == Decimal("210.00")
    assert len(totals.lines) == 1
    assert totals.lines[0].unit_price == Decimal("100.00")
    assert totals.lines[0].quantity == 2


def test_defaults_to_no_discount_and_free_shipping():
    totals = compute_totals([_line(1, 3)], {1: _product(1, "19.99")})

    assert totals.discount_value == Decimal("0.00")
    assert totals.shipping_cost == Decimal("0.00")
    assert totals.subtotal == totals.total == Decimal("59.97")


def test_decimal_arithmetic_has_no_float_drift():
    products = {i: _product(i, "0.10") for i in range(1, 11)}
    totals = compute_totals(
        [_line(i, 3) for i in range(1, 11)],
        products,
        discount_value=Decimal("0.01"),
        shipping_cost=Decimal("0.02"),
    )

    assert totals.subtotal == Decimal("3.00")
    assert totals.total == Decimal("3.01")
    assert totals.total == totals.subtotal - totals.discount_value + totals.shipping_cost


def test_one_line_per_requested_line_even_for_repeated_product():
    totals = compute_totals([_line(1, 1), _line(1, 2)], {1: _product(1, "5.00")})

    assert [line.quantity for line in totals.lines] == [1, 2]
    assert totals.subtotal == Decimal("15.00")


def test_snapshot_carries_product_name():
    totals = compute_totals([_line(7, 1)], {7: _product(7, "1.00", name="Mouse")})
    assert totals.lines[0].product_name == "Mouse"


def test_missing_product_fails_whole_computation():
    with pytest.raises(NotFoundError, match="Product 2 not found"):
        compute_totals([_line(1, 1), _line(2, 1)], {1: _product(1, "1.00")})


def test_discount_above_subtotal_is_rejected():
    with pytest.raises(BadRequestError):
        compute_totals([_line(1, 1)], {1: _product(1, "10.00")}, discount_value=Decimal("10.01"))


def test_discount_equal_to_subtotal_leaves_shipping():
    totals = compute_totals(
        [_line(1, 1)],
        {1: _product(1, "10.00")},
        discount_value=Decimal("10.00"),
        shipping_cost=Decimal("4.50"),
    )
    assert totals.total == Decimal("4.50")


@pytest.mark.parametrize("field", ["discount_value", "shipping_cost"])
def test_negative_adjustments_are_rejected(field):
    with pytest.raises(BadRequestError):
        compute_totals([_line(1, 1)], {1: _product(1, "10.00")}, **{field: Decimal("-1")})


def test_empty_order_is_rejected():
    with pytest.raises(BadRequestError):
        compute_totals([], {})


def test_zero_quantity_is_rejected():
    with pytest.raises(BadRequestError):
        compute_totals([_line(1, 0)], {1: _product(1, "10.00")})


@pytest.mark.parametrize("amount", ["1e30", "Infinity", "NaN", "100000000.00"])
def test_unrepresentable_amounts_are_rejected(amount):
    with pytest.raises(BadRequestError):
        compute_totals([_line(1, 1)], {1: _product(1, "10.00")}, shipping_cost=Decimal(amount))


@pytest.mark.parametrize("field,amount", [("discount_value", "1.005"), ("shipping_cost", "0.004")])
def test_sub_cent_amounts_are_rejected_not_rounded(field, amount):
    with pytest.raises(BadRequestError, match="more than two decimal places"):
        compute_totals([_line(1, 1)], {1: _product(1, "10.00")}, **{field: Decimal(amount)})


def test_trailing_zeros_are_not_extra_precision():
    totals = compute_totals([_line(1, 1)], {1: _product(1, "10.00")}, shipping_cost=Decimal("2.5000"))
    assert totals.shipping_cost == Decimal("2.50")


def test_quantity_above_limit_is_rejected():
    with pytest.raises(BadRequestError, match="cannot exceed"):
        compute_totals([_line(1, 10_000)], {1: _product(1, "1.00")})


def test_total_outside_money_column_is_rejected():
    with pytest.raises(BadRequestError, match="out of range"):
        compute_totals([_line(1, 2)], {1: _product(1, "99999999.99")})
