"""Dashboard endpoints - month-to-date stats, trends and activity feeds"""

import time
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from invoice_service.api.v1.schemas import (
    DashboardStatsResponse,
    MonthlyRevenueSchema,
    OverdueClientSchema,
    OverviewResponse,
    RecentActivityItem,
    StatusBucketSchema,
)
from invoice_service.api.dependencies import get_request_id, get_user_id
from invoice_service.config import settings
from invoice_service.utils.date_utils import utc_now
from invoice_service.infrastructure.database.session import get_db
from invoice_service.infrastructure.database.repositories import InvoiceRepository
from invoice_service.domain.stats import (
    calculate_dashboard_stats,
    calculate_overall_stats,
    calculate_revenue_over_time,
    calculate_status_distribution,
    rank_overdue_clients,
)
from invoice_service.infrastructure.observability.metrics import dashboard_latency_histogram
from invoice_service.infrastructure.observability.logging import log_stats_computed

router = APIRouter()


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
def get_dashboard_stats(request: Request, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    """
    Month-to-date statistics with trends.

    Compares the 1st of this month through today against the 1st of last
    month through the same day last month. Recomputed on every call.
    """
    start_time = time.time()

    snapshots = InvoiceRepository(db).get_snapshots(user_id)
    with dashboard_latency_histogram.time():
        stats = calculate_dashboard_stats(snapshots, now=utc_now())

    duration_ms = (time.time() - start_time) * 1000
    log_stats_computed(get_request_id(request), user_id, len(snapshots), duration_ms)

    return DashboardStatsResponse.model_validate(stats)


@router.get("/dashboard/overview", response_model=OverviewResponse)
def get_overview(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    """All-time totals and counts"""
    return OverviewResponse.model_validate(calculate_overall_stats(InvoiceRepository(db).get_snapshots(user_id)))


@router.get("/dashboard/revenue", response_model=List[MonthlyRevenueSchema])
def get_revenue_over_time(
    months: Optional[int] = Query(None, ge=1, le=24, description="Number of months, current month included"),
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    snapshots = InvoiceRepository(db).get_snapshots(user_id)
    revenue = calculate_revenue_over_time(
        snapshots,
        months=months or settings.revenue_default_months,
        now=utc_now(),
    )
    return [MonthlyRevenueSchema.model_validate(row) for row in revenue]


@router.get("/dashboard/status-distribution", response_model=List[StatusBucketSchema])
def get_status_distribution(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    buckets = calculate_status_distribution(InvoiceRepository(db).get_snapshots(user_id))
    return [StatusBucketSchema.model_validate(bucket) for bucket in buckets]


@router.get("/dashboard/recent-activity", response_model=List[RecentActivityItem])
def get_recent_activity(
    limit: Optional[int] = Query(None, ge=1, le=20),
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Most recently updated invoices with their client name"""
    invoices = InvoiceRepository(db).get_recent_invoices(user_id, limit or settings.recent_activity_default_limit)

    return [
        RecentActivityItem(
            id=inv.id,
            invoice_number=inv.invoice_number,
            status=inv.status,
            total=inv.total,
            issue_date=inv.issue_date,
            updated_at=inv.updated_at,
            client_name=inv.client.name if inv.client else None,
        )
        for inv in invoices
    ]


@router.get("/dashboard/overdue-clients", response_model=List[OverdueClientSchema])
def get_most_overdue_clients(
    limit: Optional[int] = Query(None, ge=1, le=20),
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    balances = InvoiceRepository(db).get_overdue_balances(user_id)
    ranked = rank_overdue_clients(
        balances,
        now=utc_now(),
        limit=limit or settings.overdue_clients_default_limit,
    )
    return [OverdueClientSchema.model_validate(client) for client in ranked]
