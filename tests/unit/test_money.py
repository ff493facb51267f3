"""Unit tests for money arithmetic"""

import math
import pytest
from invoice_service.domain.money import (
    money_add,
    money_equals,
    money_greater_than_or_equal,
    money_less_than,
    money_multiply,
    money_subtract,
    round_money,
    round_percentage,
)


@pytest.mark.parametrize(
    "amount, expected",
    [
        (1.005, 1.01),  # half-up on the cent boundary
        (2.675, 2.68),
        (-1.005, -1.01),  # symmetric for negatives
        (-2.675, -2.68),
        (0.1 + 0.2, 0.3),
        (9.036, 9.04),
        (12.344, 12.34),
        (100, 100.0),
    ],
)
def test_round_money(amount, expected):
    assert round_money(amount) == expected


def test_round_money_never_returns_negative_zero():
    """Tiny negative values round to a plain zero"""
    result = round_money(-0.001)
    assert result == 0.0
    assert math.copysign(1, result) == 1


@pytest.mark.parametrize(
    "amount",
    [0.0, 0.125, 1.005, 19.999, -3.335, 123456.789, 1e-9, 0.1 + 0.7, 1e26, 1e27, -1e30, 1.7e308],
)
def test_round_money_idempotent(amount):
    assert round_money(round_money(amount)) == round_money(amount)


def test_non_finite_values_propagate():
    """NaN and infinities pass through instead of raising"""
    assert math.isnan(round_money(float("nan")))
    assert round_money(float("inf")) == float("inf")
    assert money_add(float("-inf"), 1) == float("-inf")
    assert math.isnan(money_multiply(float("nan"), 2))


def test_money_operations_round_each_result():
    assert money_add(0.1, 0.2) == 0.3
    assert money_subtract(0.3, 0.1) == 0.2
    assert money_multiply(3, 0.1) == 0.3
    assert money_multiply(112.95, 0.08) == 9.04


def test_chained_additions_do_not_drift():
    """Ten additions of 0.1 land exactly on 1.0"""
    total = 0.0
    for _ in range(10):
        total = money_add(total, 0.1)
    assert total == 1.0


def test_money_comparisons():
    assert money_equals(10.001, 10.0)
    assert not money_equals(10.01, 10.0)

    assert money_greater_than_or_equal(99.999, 100)  # rounds to 100.00
    assert money_greater_than_or_equal(100.01, 100)
    assert not money_greater_than_or_equal(99.99, 100)

    assert money_less_than(99.99, 100)
    assert not money_less_than(99.999, 100)


@pytest.mark.parametrize(
    "value, expected",
    [
        (66.66666666666667, 67),
        (12.5, 13),
        (-12.5, -13),
        (2.4999, 2),
        (0, 0),
    ],
)
def test_round_percentage(value, expected):
    assert round_percentage(value) == expected


@pytest.mark.parametrize("amount", [1e26, 1e30, -4.2e100, 1.7e308])
def test_round_money_large_values_pass_through(amount):
    """Floats this large carry no cent digits, so rounding leaves them as-is"""
    assert round_money(amount) == amount
    assert money_add(amount, 0.01) == amount


def test_round_percentage_large_values():
    assert round_percentage(1e30) == 10**30
    assert round_percentage(-1e30) == -(10**30)
