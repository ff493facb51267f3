"""Unit tests for invoice totals calculation"""

from invoice_service.domain.models import DiscountConfig, DiscountType, LineItem
from invoice_service.domain.totals import calculate_invoice_totals, line_item_amount, resolve_discount


def _items(*amounts: float) -> list[LineItem]:
    return [
        LineItem(description=f"Item {i}", quantity=1, rate=amount, amount=amount, order=i)
        for i, amount in enumerate(amounts)
    ]


def test_calculate_totals_end_to_end():
    """2 x 50.00 + 1 x 25.50, 10% discount, 8% tax"""
    items = [
        LineItem(description="Design work", quantity=2, rate=50.00, amount=line_item_amount(2, 50.00), order=0),
        LineItem(description="Hosting", quantity=1, rate=25.50, amount=line_item_amount(1, 25.50), order=1),
    ]

    totals = calculate_invoice_totals(items, tax_rate=8, discount=DiscountConfig(DiscountType.PERCENTAGE, 10))

    assert totals.subtotal == 125.50
    assert totals.discount_amount == 12.55
    assert totals.after_discount == 112.95
    assert totals.tax_amount == 9.04  # 9.036 rounded
    assert totals.total == 121.99


def test_line_item_amount_rounds_to_cents():
    assert line_item_amount(2, 50.0) == 100.0
    assert line_item_amount(3, 0.1) == 0.3
    assert line_item_amount(3, 33.333) == 100.0  # 99.999


def test_subtotal_of_repeated_small_amounts():
    """Three 0.1 lines sum to exactly 0.30, not 0.30000000000000004"""
    items = [
        LineItem(description="Widget", quantity=1, rate=0.1, amount=line_item_amount(1, 0.1), order=i)
        for i in range(3)
    ]

    totals = calculate_invoice_totals(items)

    assert totals.subtotal == 0.3
    assert totals.total == 0.3


def test_no_discount_is_always_zero():
    items = _items(80.0, 20.0)

    assert calculate_invoice_totals(items, discount=DiscountConfig(DiscountType.NONE, 50)).discount_amount == 0
    assert calculate_invoice_totals(items, discount=None).discount_amount == 0
    assert resolve_discount(100.0, None) == 0


def test_full_percentage_discount_equals_subtotal():
    totals = calculate_invoice_totals(_items(125.5), tax_rate=20, discount=DiscountConfig(DiscountType.PERCENTAGE, 100))

    assert totals.discount_amount == totals.subtotal
    assert totals.after_discount == 0
    assert totals.tax_amount == 0
    assert totals.total == 0


def test_fixed_discount_is_rounded():
    assert resolve_discount(100.0, DiscountConfig(DiscountType.FIXED, 10.005)) == 10.01


def test_tax_applies_after_discount():
    """100 subtotal, 10 fixed discount, 10% tax -> 99, not 100"""
    items = _items(100.0)

    discounted = calculate_invoice_totals(items, tax_rate=10, discount=DiscountConfig(DiscountType.FIXED, 10))
    undiscounted = calculate_invoice_totals(items, tax_rate=10)

    assert discounted.subtotal == 100
    assert discounted.discount_amount == 10
    assert discounted.after_discount == 90
    assert discounted.tax_amount == 9
    assert discounted.total == 99
    assert undiscounted.total == 110
    # Tax shrinks along with the base, so the gap exceeds the discount itself
    assert undiscounted.total - discounted.total > discounted.discount_amount


def test_fixed_discount_above_subtotal_goes_negative():
    """Oversized fixed discounts are not clamped: base, tax and total all go negative"""
    totals = calculate_invoice_totals(_items(50.0), tax_rate=10, discount=DiscountConfig(DiscountType.FIXED, 80))

    assert totals.subtotal == 50
    assert totals.discount_amount == 80
    assert totals.after_discount == -30
    assert totals.tax_amount == -3
    assert totals.total == -33


def test_empty_items_yield_zero_totals():
    totals = calculate_invoice_totals([], tax_rate=8, discount=DiscountConfig(DiscountType.PERCENTAGE, 10))

    assert totals.subtotal == 0
    assert totals.discount_amount == 0
    assert totals.tax_amount == 0
    assert totals.total == 0


def test_repeated_calls_are_identical():
    """Live preview and save must agree exactly for the same input"""
    items = _items(19.99, 5.01, 0.35)
    discount = DiscountConfig(DiscountType.PERCENTAGE, 12.5)

    first = calculate_invoice_totals(items, tax_rate=7.25, discount=discount)
    second = calculate_invoice_totals(items, tax_rate=7.25, discount=discount)

    assert first == second
