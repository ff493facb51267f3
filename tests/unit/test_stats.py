"""Unit tests for dashboard statistics"""

from datetime import datetime, time
from invoice_service.domain.models import ClientBalance, InvoiceSnapshot, InvoiceStatus
from invoice_service.domain.stats import (
    calculate_dashboard_stats,
    calculate_overall_stats,
    calculate_period_stats,
    calculate_revenue_over_time,
    calculate_status_distribution,
    calculate_trend,
    current_period,
    previous_period,
    rank_overdue_clients,
)


def _snapshot(total, status, issue_date, amount_paid=0.0):
    return InvoiceSnapshot(total=total, amount_paid=amount_paid, status=status, issue_date=issue_date)


def test_current_period_is_month_to_date(now):
    period = current_period(now)

    assert period.start == datetime(2026, 10, 1)
    assert period.end == datetime.combine(now.date(), time.max)


def test_previous_period_stops_at_same_day_of_month(now):
    """Queried on the 17th: Sep 1-17, not the whole of September"""
    period = previous_period(now)

    assert period.start == datetime(2026, 9, 1)
    assert period.end == datetime(2026, 9, 17, 23, 59, 59, 999999)
    assert not period.contains(datetime(2026, 9, 20))


def test_previous_period_clamps_to_shorter_month():
    assert previous_period(datetime(2026, 3, 31, 9)).end.date() == datetime(2026, 2, 28).date()
    assert previous_period(datetime(2028, 3, 31, 9)).end.date() == datetime(2028, 2, 29).date()


def test_previous_period_crosses_year_boundary():
    period = previous_period(datetime(2027, 1, 15, 12))

    assert period.start == datetime(2026, 12, 1)
    assert period.end.date() == datetime(2026, 12, 15).date()


def test_calculate_trend():
    assert calculate_trend(500, 400) == 25
    assert calculate_trend(300, 400) == -25
    assert calculate_trend(1, 3) == -67
    # Nothing last period
    assert calculate_trend(50, 0) == 100
    assert calculate_trend(0, 0) == 0


def test_period_stats_payment_rate_excludes_cancelled():
    day = datetime(2026, 10, 3)
    stats = calculate_period_stats(
        [
            _snapshot(100.0, InvoiceStatus.PAID, day, amount_paid=100.0),
            _snapshot(100.0, InvoiceStatus.CANCELLED, day),
            _snapshot(80.0, InvoiceStatus.SENT, day, amount_paid=30.0),
        ]
    )

    assert stats.payment_rate == 50
    assert stats.outstanding_amount == 50.0
    assert stats.total_invoices_in_period == 3
    assert stats.overdue_percentage == 0


def test_period_stats_with_no_invoices():
    stats = calculate_period_stats([])

    assert stats.total_invoices_in_period == 0
    assert stats.payment_rate == 0
    assert stats.overdue_percentage == 0
    assert stats.total_revenue == 0


def test_period_stats_only_cancelled_invoices():
    """Denominator without cancelled invoices is zero: rate stays 0"""
    stats = calculate_period_stats([_snapshot(100.0, InvoiceStatus.CANCELLED, datetime(2026, 10, 3))])

    assert stats.payment_rate == 0
    assert stats.total_invoices_in_period == 1


def test_period_stats_rounds_sums():
    day = datetime(2026, 10, 3)
    stats = calculate_period_stats(
        [_snapshot(0.1, InvoiceStatus.PAID, day, amount_paid=0.1) for _ in range(3)]
    )

    assert stats.total_revenue == 0.3


def test_dashboard_scenario(dashboard_snapshot, now):
    stats = calculate_dashboard_stats(dashboard_snapshot, now=now)

    assert stats.current.total_revenue == 500
    assert stats.current.outstanding_amount == 150
    assert stats.current.overdue_amount == 150
    assert stats.current.paid_invoices_count == 2
    assert stats.current.overdue_invoices_count == 1
    assert stats.current.total_invoices_in_period == 3
    assert stats.current.payment_rate == 67
    assert stats.current.overdue_percentage == 100

    assert stats.previous.total_revenue == 400
    assert stats.previous.payment_rate == 100

    assert stats.trends["total_revenue"].percentage == 25
    assert stats.trends["total_revenue"].absolute_delta == 100
    assert stats.trends["outstanding_amount"].percentage == 100
    assert stats.trends["outstanding_amount"].absolute_delta == 150
    assert stats.trends["paid_invoices_count"].percentage == 100
    assert stats.trends["paid_invoices_count"].absolute_delta == 1
    assert stats.trends["payment_rate"].percentage == -33
    assert stats.trends["payment_rate"].absolute_delta == -33


def test_dashboard_ignores_invoices_outside_windows(dashboard_snapshot, now):
    late_last_month = _snapshot(999.0, InvoiceStatus.PAID, datetime(2026, 9, 25), amount_paid=999.0)
    later_this_month = _snapshot(999.0, InvoiceStatus.PAID, datetime(2026, 10, 18), amount_paid=999.0)

    stats = calculate_dashboard_stats(dashboard_snapshot + [late_last_month, later_this_month], now=now)

    assert stats.current.total_revenue == 500
    assert stats.previous.total_revenue == 400


def test_dashboard_with_empty_snapshot(now):
    stats = calculate_dashboard_stats([], now=now)

    assert stats.current.total_invoices_in_period == 0
    assert stats.current.payment_rate == 0
    assert all(trend.percentage == 0 for trend in stats.trends.values())
    assert all(trend.absolute_delta == 0 for trend in stats.trends.values())


def test_dashboard_is_repeatable(dashboard_snapshot, now):
    assert calculate_dashboard_stats(dashboard_snapshot, now=now) == calculate_dashboard_stats(dashboard_snapshot, now=now)


def test_revenue_over_time(now):
    invoices = [
        _snapshot(100.0, InvoiceStatus.PAID, datetime(2026, 8, 5)),
        _snapshot(50.25, InvoiceStatus.PAID, datetime(2026, 8, 20)),
        _snapshot(10.0, InvoiceStatus.PAID, datetime(2026, 10, 1)),
        _snapshot(70.0, InvoiceStatus.SENT, datetime(2026, 10, 2)),
        _snapshot(500.0, InvoiceStatus.PAID, datetime(2026, 7, 31)),  # before the window
    ]

    revenue = calculate_revenue_over_time(invoices, months=3, now=now)

    assert [row.month for row in revenue] == ["Aug 2026", "Sep 2026", "Oct 2026"]
    assert [row.revenue for row in revenue] == [150.25, 0.0, 10.0]


def test_revenue_over_time_crosses_year():
    revenue = calculate_revenue_over_time([], months=2, now=datetime(2027, 1, 10))

    assert [row.month for row in revenue] == ["Dec 2026", "Jan 2027"]


def test_status_distribution():
    day = datetime(2026, 10, 3)
    buckets = calculate_status_distribution(
        [
            _snapshot(0.1, InvoiceStatus.PAID, day),
            _snapshot(0.2, InvoiceStatus.PAID, day),
            _snapshot(40.0, InvoiceStatus.DRAFT, day),
        ]
    )

    assert [(b.status, b.count, b.total) for b in buckets] == [
        (InvoiceStatus.DRAFT, 1, 40.0),
        (InvoiceStatus.PAID, 2, 0.3),
    ]


def test_overall_stats(dashboard_snapshot):
    day = datetime(2026, 10, 3)
    stats = calculate_overall_stats(dashboard_snapshot + [_snapshot(75.0, InvoiceStatus.DRAFT, day)])

    assert stats.total_revenue == 900
    assert stats.outstanding_amount == 225
    assert stats.total_invoices == 5
    assert stats.paid_invoices_count == 3
    assert stats.unpaid_invoices_count == 2
    assert stats.overdue_invoices_count == 1
    assert stats.draft_invoices_count == 1


def test_rank_overdue_clients(now):
    balances = [
        ClientBalance("a", "Acme", total=500.0, amount_paid=100.0, due_date=datetime(2026, 9, 1)),
        ClientBalance("a", "Acme", total=200.0, amount_paid=0.0, due_date=datetime(2026, 10, 1)),
        ClientBalance("b", "Bolt", total=300.0, amount_paid=0.0, due_date=datetime(2026, 10, 10)),
        ClientBalance("c", "Crate", total=100.0, amount_paid=100.0, due_date=datetime(2026, 8, 1)),
    ]

    ranked = rank_overdue_clients(balances, now=now, limit=5)

    assert [c.client_id for c in ranked] == ["a", "b"]
    assert ranked[0].outstanding_amount == 600
    assert ranked[0].overdue_invoices_count == 2
    assert ranked[0].days_overdue == 46
    assert ranked[1].days_overdue == 7

    assert len(rank_overdue_clients(balances, now=now, limit=1)) == 1


def test_calculate_trend_with_very_large_values():
    assert calculate_trend(1e27, 1.0) == 10**29


def test_count_deltas_stay_integers(dashboard_snapshot, now):
    stats = calculate_dashboard_stats(dashboard_snapshot, now=now)

    for metric in ("paid_invoices_count", "overdue_invoices_count", "total_invoices_in_period", "payment_rate"):
        assert isinstance(stats.trends[metric].absolute_delta, int)
    assert isinstance(stats.trends["total_revenue"].absolute_delta, float)
