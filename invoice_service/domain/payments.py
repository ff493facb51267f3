"""Payment ledger - keeps amount paid and invoice status in step with payments"""

from invoice_service.domain.models import InvoiceStatus, PaymentOutcome
from invoice_service.domain.money import money_add, money_greater_than_or_equal, money_less_than, money_subtract


def apply_payment(total: float, amount_paid: float, status: InvoiceStatus, amount: float) -> PaymentOutcome:
    """
    Record a payment against an invoice.

    The invoice flips to paid once the amount paid covers the total;
    otherwise its current status is kept (a partial payment on an overdue
    invoice leaves it overdue).
    """
    new_amount_paid = money_add(amount_paid, amount)
    is_paid = money_greater_than_or_equal(new_amount_paid, total)

    return PaymentOutcome(
        amount_paid=new_amount_paid,
        status=InvoiceStatus.PAID if is_paid else status,
    )


def revert_payment(total: float, amount_paid: float, amount: float) -> PaymentOutcome:
    """Remove a payment; amount paid never drops below zero"""
    new_amount_paid = max(0.0, money_subtract(amount_paid, amount))

    return PaymentOutcome(
        amount_paid=new_amount_paid,
        status=InvoiceStatus.SENT if money_less_than(new_amount_paid, total) else InvoiceStatus.PAID,
    )
