"""Prometheus metrics for invoice volume, payments and dashboard latency"""

from prometheus_client import Counter, Histogram

# Invoice metrics
invoices_saved_counter = Counter(
    "invoice_saved_total",
    "Invoices persisted",
    ["operation"],  # create | update
)

invoice_total_histogram = Histogram(
    "invoice_total_amount",
    "Grand total of persisted invoices",
    buckets=[0, 100, 500, 1_000, 5_000, 10_000, 50_000, 100_000],
)

negative_total_counter = Counter(
    "invoice_negative_total_saved",
    "Invoices saved with a negative total (fixed discount above subtotal)",
)

# Payment metrics
payments_counter = Counter(
    "invoice_payments_total",
    "Payments recorded or removed",
    ["action"],  # recorded | deleted
)

# Dashboard metrics
dashboard_latency_histogram = Histogram(
    "dashboard_stats_seconds",
    "Time spent aggregating dashboard statistics",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_invoice_saved(operation: str, total: float) -> None:
    """Record invoice volume and total distribution"""
    invoices_saved_counter.labels(operation=operation).inc()
    invoice_total_histogram.observe(total)

    if total < 0:
        negative_total_counter.inc()
