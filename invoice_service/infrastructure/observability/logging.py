"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from invoice_service.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_invoice_saved(
    request_id: str,
    user_id: str,
    invoice_number: str,
    operation: str,
    total: float,
    duration_ms: float,
) -> None:
    """Log invoice create/update with the authoritative total"""
    logging.info(
        "Invoice saved",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": f"invoice_{operation}",
            "invoice_number": invoice_number,
            "total": total,
            "duration_ms": duration_ms,
        },
    )


def log_payment_recorded(
    request_id: str,
    user_id: str,
    invoice_number: str,
    amount: float,
    amount_paid: float,
    status: str,
) -> None:
    """Log payment outcome and the resulting invoice status"""
    logging.info(
        "Payment recorded",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "payment_recorded",
            "invoice_number": invoice_number,
            "amount": amount,
            "amount_paid": amount_paid,
            "invoice_status": status,
        },
    )


def log_stats_computed(request_id: str, user_id: str, invoice_count: int, duration_ms: float) -> None:
    logging.info(
        "Dashboard stats computed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "dashboard_stats",
            "invoice_count": invoice_count,
            "duration_ms": duration_ms,
        },
    )
