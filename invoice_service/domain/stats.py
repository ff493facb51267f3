"""Dashboard statistics - month-to-date aggregation and period-over-period trends"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from invoice_service.domain.models import (
    ClientBalance,
    DashboardStats,
    InvoiceSnapshot,
    InvoiceStatus,
    MonthlyRevenue,
    OverallStats,
    OverdueClient,
    Period,
    PeriodStats,
    StatusBucket,
    Trend,
)
from invoice_service.domain.money import money_add, money_subtract, round_money, round_percentage
from invoice_service.utils.date_utils import (
    days_between,
    end_of_day,
    last_n_month_starts,
    month_key,
    start_of_month,
    subtract_months,
    utc_now,
)

# Metrics reported with a monetary absolute delta; the rest are integer counts/percentages
MONEY_METRICS = ("total_revenue", "outstanding_amount", "overdue_amount")
COUNT_METRICS = (
    "paid_invoices_count",
    "overdue_invoices_count",
    "total_invoices_in_period",
    "payment_rate",
)

UNSETTLED_EXCLUDED = (InvoiceStatus.PAID, InvoiceStatus.CANCELLED)


def current_period(now: datetime) -> Period:
    """Month-to-date: first day of this month through the end of today"""
    return Period(start=start_of_month(now), end=end_of_day(now))


def previous_period(now: datetime) -> Period:
    """
    Same span one month earlier: first day of last month through the same
    day-of-month last month.

    Queried on the 17th, this is the 1st-17th of the previous month, not the
    full previous month. Days missing from a shorter month clamp to its last
    day (Mar 31 compares against Feb 1-28).
    """
    same_day_last_month = subtract_months(now, 1)
    return Period(start=start_of_month(same_day_last_month), end=end_of_day(same_day_last_month))


def _percentage(numerator: float, denominator: float) -> int:
    if denominator == 0:
        return 0
    return round_percentage(100 * numerator / denominator)


def _balance(invoice: InvoiceSnapshot) -> float:
    return (invoice.total or 0) - (invoice.amount_paid or 0)


def calculate_period_stats(invoices: Iterable[InvoiceSnapshot]) -> PeriodStats:
    """
    Aggregate the invoices of a single window.

    - revenue: sum of totals of paid invoices
    - outstanding: unpaid balance of everything not paid or cancelled
    - overdue: unpaid balance of overdue invoices
    - payment rate: paid / non-cancelled invoices, 0 when there are none
    - overdue percentage: overdue / outstanding, 0 when nothing is outstanding
    """
    invoices = list(invoices)

    paid = [inv for inv in invoices if inv.status == InvoiceStatus.PAID]
    unsettled = [inv for inv in invoices if inv.status not in UNSETTLED_EXCLUDED]
    overdue = [inv for inv in invoices if inv.status == InvoiceStatus.OVERDUE]
    not_cancelled = [inv for inv in invoices if inv.status != InvoiceStatus.CANCELLED]

    total_revenue = round_money(sum(inv.total or 0 for inv in paid))
    outstanding_amount = round_money(sum(_balance(inv) for inv in unsettled))
    overdue_amount = round_money(sum(_balance(inv) for inv in overdue))

    return PeriodStats(
        total_revenue=total_revenue,
        outstanding_amount=outstanding_amount,
        overdue_amount=overdue_amount,
        paid_invoices_count=len(paid),
        overdue_invoices_count=len(overdue),
        total_invoices_in_period=len(invoices),
        payment_rate=_percentage(len(paid), len(not_cancelled)),
        overdue_percentage=_percentage(overdue_amount, outstanding_amount),
    )


def calculate_trend(current: float, previous: float) -> int:
    """
    Percentage change from previous to current.

    previous == 0 maps to 100 when current grew above zero, otherwise 0.
    """
    if previous == 0:
        return 100 if current > 0 else 0
    return round_percentage(100 * (current - previous) / previous)


def calculate_trends(current: PeriodStats, previous: PeriodStats) -> Dict[str, Trend]:
    trends: Dict[str, Trend] = {}

    for metric in MONEY_METRICS:
        now_value = getattr(current, metric)
        then_value = getattr(previous, metric)
        trends[metric] = Trend(
            percentage=calculate_trend(now_value, then_value),
            absolute_delta=money_subtract(now_value, then_value),
        )

    for metric in COUNT_METRICS:
        now_value = getattr(current, metric)
        then_value = getattr(previous, metric)
        trends[metric] = Trend(
            percentage=calculate_trend(now_value, then_value),
            absolute_delta=now_value - then_value,
        )

    return trends


def calculate_dashboard_stats(
    invoices: Iterable[InvoiceSnapshot],
    now: Optional[datetime] = None,
) -> DashboardStats:
    """
    Main entry point: current month-to-date stats plus trends against the
    comparable span of the previous month.

    An empty snapshot is a valid state and yields all zeros.
    """
    if now is None:
        now = utc_now()

    invoices = list(invoices)
    this_period = current_period(now)
    last_period = previous_period(now)

    current = calculate_period_stats(inv for inv in invoices if this_period.contains(inv.issue_date))
    previous = calculate_period_stats(inv for inv in invoices if last_period.contains(inv.issue_date))

    return DashboardStats(
        current=current,
        previous=previous,
        current_period=this_period,
        previous_period=last_period,
        trends=calculate_trends(current, previous),
    )


def calculate_overall_stats(invoices: Iterable[InvoiceSnapshot]) -> OverallStats:
    """All-time counters, no windowing"""
    invoices = list(invoices)
    stats = calculate_period_stats(invoices)

    return OverallStats(
        total_revenue=stats.total_revenue,
        outstanding_amount=stats.outstanding_amount,
        total_invoices=len(invoices),
        paid_invoices_count=stats.paid_invoices_count,
        unpaid_invoices_count=sum(1 for inv in invoices if inv.status not in UNSETTLED_EXCLUDED),
        overdue_invoices_count=stats.overdue_invoices_count,
        draft_invoices_count=sum(1 for inv in invoices if inv.status == InvoiceStatus.DRAFT),
    )


def calculate_revenue_over_time(
    invoices: Iterable[InvoiceSnapshot],
    months: int = 6,
    now: Optional[datetime] = None,
) -> List[MonthlyRevenue]:
    """Paid revenue per calendar month for the last `months` months, oldest first"""
    if now is None:
        now = utc_now()

    month_starts = last_n_month_starts(now, months)
    window_start = month_starts[0]

    revenue_by_month: Dict[str, float] = {}
    for invoice in invoices:
        if invoice.status != InvoiceStatus.PAID or invoice.issue_date < window_start:
            continue
        key = month_key(invoice.issue_date)
        revenue_by_month[key] = money_add(revenue_by_month.get(key, 0.0), invoice.total or 0)

    return [
        MonthlyRevenue(month=month_key(start), revenue=revenue_by_month.get(month_key(start), 0.0))
        for start in month_starts
    ]


def calculate_status_distribution(invoices: Iterable[InvoiceSnapshot]) -> List[StatusBucket]:
    """Count and total per status, in status declaration order, empty statuses omitted"""
    counts: Dict[InvoiceStatus, int] = {}
    totals: Dict[InvoiceStatus, float] = {}

    for invoice in invoices:
        counts[invoice.status] = counts.get(invoice.status, 0) + 1
        totals[invoice.status] = totals.get(invoice.status, 0.0) + (invoice.total or 0)

    return [
        StatusBucket(status=status, count=counts[status], total=round_money(totals[status]))
        for status in InvoiceStatus
        if status in counts
    ]


def rank_overdue_clients(
    balances: Iterable[ClientBalance],
    now: Optional[datetime] = None,
    limit: int = 5,
) -> List[OverdueClient]:
    """
    Roll overdue invoices up per client and rank by outstanding balance.

    Days overdue are counted from the oldest due date of the client's overdue
    invoices; ties on balance go to the longer overdue client.
    """
    if now is None:
        now = utc_now()

    by_client: Dict[str, List[ClientBalance]] = {}
    for balance in balances:
        by_client.setdefault(balance.client_id, []).append(balance)

    ranked = []
    for client_id, rows in by_client.items():
        outstanding = 0.0
        for row in rows:
            outstanding = money_add(outstanding, money_subtract(row.total, row.amount_paid))
        if outstanding <= 0:
            continue

        oldest_due = min(row.due_date for row in rows)
        ranked.append(
            OverdueClient(
                client_id=client_id,
                client_name=rows[0].client_name,
                outstanding_amount=outstanding,
                overdue_invoices_count=len(rows),
                days_overdue=max(days_between(oldest_due, now), 0),
            )
        )

    ranked.sort(key=lambda c: (c.outstanding_amount, c.days_overdue), reverse=True)
    return ranked[:limit]
