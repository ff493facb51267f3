"""Invoice totals engine - subtotal, discount, tax and grand total"""

from typing import Iterable, Optional

from invoice_service.domain.models import DiscountConfig, DiscountType, InvoiceTotals, LineItem
from invoice_service.domain.money import money_add, money_multiply, money_subtract, round_money


def line_item_amount(quantity: float, rate: float) -> float:
    """Amount of a single line: quantity x rate rounded to cents"""
    return money_multiply(quantity, rate)


def resolve_discount(subtotal: float, discount: Optional[DiscountConfig]) -> float:
    """
    Resolve the discount amount against the subtotal.

    - percentage: subtotal x value / 100
    - fixed: the value itself, rounded to cents
    - none (or no config): 0

    Inputs are trusted to be validated (percentage capped at 100 upstream).
    """
    if discount is None or discount.type == DiscountType.NONE:
        return 0.0
    if discount.type == DiscountType.PERCENTAGE:
        return money_multiply(subtotal, discount.value / 100)
    return round_money(discount.value)


def calculate_invoice_totals(
    items: Iterable[LineItem],
    tax_rate: float = 0.0,
    discount: Optional[DiscountConfig] = None,
) -> InvoiceTotals:
    """
    Derive subtotal, discount, tax and total for an invoice.

    Every step is rounded to cents immediately:
    1. subtotal = round(sum of line amounts)
    2. discount resolved against the subtotal
    3. after_discount = subtotal - discount
    4. tax = after_discount x tax_rate / 100
    5. total = after_discount + tax

    A fixed discount larger than the subtotal yields a negative base, and
    therefore negative tax and total. That is kept as-is.

    Example:
        items 100.00 + 25.50, 10% discount, 8% tax
        -> subtotal 125.50, discount 12.55, tax 9.04, total 121.99
    """
    subtotal = round_money(sum(item.amount for item in items))
    discount_amount = resolve_discount(subtotal, discount)
    after_discount = money_subtract(subtotal, discount_amount)
    tax_amount = money_multiply(after_discount, tax_rate / 100)
    total = money_add(after_discount, tax_amount)

    return InvoiceTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        after_discount=after_discount,
        tax_amount=tax_amount,
        total=total,
    )
