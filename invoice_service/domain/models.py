"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Union


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class DiscountType(str, Enum):
    NONE = "none"
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CHECK = "check"
    BANK_TRANSFER = "bank_transfer"
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"
    STRIPE = "stripe"
    OTHER = "other"


@dataclass
class LineItem:
    """Single billable line on an invoice"""

    description: str
    quantity: float
    rate: float
    amount: float  # quantity x rate, rounded to cents
    order: int = 0


@dataclass
class DiscountConfig:
    """Discount applied to the subtotal before tax"""

    type: DiscountType = DiscountType.NONE
    value: float = 0.0


@dataclass
class InvoiceTotals:
    """Canonical four-number summary of an invoice"""

    subtotal: float
    discount_amount: float
    after_discount: float
    tax_amount: float
    total: float


@dataclass
class InvoiceSnapshot:
    """Invoice fields needed for dashboard aggregation"""

    total: float
    amount_paid: float
    status: InvoiceStatus
    issue_date: datetime
    due_date: Optional[datetime] = None


@dataclass
class Period:
    """Inclusive time window"""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


@dataclass
class PeriodStats:
    """Aggregated invoice metrics for one time window"""

    total_revenue: float = 0.0
    outstanding_amount: float = 0.0
    overdue_amount: float = 0.0
    paid_invoices_count: int = 0
    overdue_invoices_count: int = 0
    total_invoices_in_period: int = 0
    payment_rate: int = 0
    overdue_percentage: int = 0


@dataclass
class Trend:
    """Change of a metric against the previous comparable period"""

    percentage: int
    # Money metrics carry a float delta, counts and percentages an int
    absolute_delta: Union[int, float]


@dataclass
class DashboardStats:
    """Month-to-date stats compared with the same span of the previous month"""

    current: PeriodStats
    previous: PeriodStats
    current_period: Period
    previous_period: Period
    trends: Dict[str, Trend] = field(default_factory=dict)


@dataclass
class OverallStats:
    """All-time invoice counters"""

    total_revenue: float
    outstanding_amount: float
    total_invoices: int
    paid_invoices_count: int
    unpaid_invoices_count: int
    overdue_invoices_count: int
    draft_invoices_count: int


@dataclass
class MonthlyRevenue:
    month: str  # "Oct 2026"
    revenue: float


@dataclass
class StatusBucket:
    status: InvoiceStatus
    count: int
    total: float


@dataclass
class ClientBalance:
    """Unpaid overdue invoice rolled into a per-client balance"""

    client_id: str
    client_name: str
    total: float
    amount_paid: float
    due_date: datetime


@dataclass
class OverdueClient:
    client_id: str
    client_name: str
    outstanding_amount: float
    overdue_invoices_count: int
    days_overdue: int


@dataclass
class PaymentOutcome:
    """Invoice state after a payment is applied or reverted"""

    amount_paid: float
    status: InvoiceStatus
