"""Payment endpoints - record and remove payments against invoices"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from invoice_service.api.v1.schemas import PaymentRequest, PaymentResponse, PaymentResultResponse
from invoice_service.api.dependencies import get_request_id, get_user_id, parse_uuid
from invoice_service.infrastructure.database.session import get_db
from invoice_service.infrastructure.database.repositories import InvoiceRepository, PaymentRepository
from invoice_service.domain.models import InvoiceStatus
from invoice_service.domain.payments import apply_payment, revert_payment
from invoice_service.domain.exceptions import InvoiceNotFoundError, PaymentNotFoundError
from invoice_service.infrastructure.observability.metrics import payments_counter
from invoice_service.infrastructure.observability.logging import log_payment_recorded

router = APIRouter()


@router.get("/invoices/{invoice_id}/payments", response_model=List[PaymentResponse])
def list_payments(invoice_id: str, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    invoice_uuid = parse_uuid(invoice_id, "invoice")

    try:
        InvoiceRepository(db).get_invoice(user_id, invoice_uuid)
    except InvoiceNotFoundError:
        raise HTTPException(status_code=404, detail="Invoice not found")

    return [PaymentResponse.model_validate(p) for p in PaymentRepository(db).get_payments_by_invoice(invoice_uuid)]


@router.post("/invoices/{invoice_id}/payments", response_model=PaymentResultResponse, status_code=201)
def record_payment(
    invoice_id: str,
    request_body: PaymentRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """
    Record a payment and roll it into the invoice.

    The invoice is marked paid once the amount paid reaches its total.
    """
    request_id = get_request_id(request)
    invoice_uuid = parse_uuid(invoice_id, "invoice")

    try:
        invoice_repo = InvoiceRepository(db)
        db_invoice = invoice_repo.get_invoice(user_id, invoice_uuid)

        db_payment = PaymentRepository(db).create_payment(
            invoice_id=db_invoice.id,
            amount=request_body.amount,
            payment_date=request_body.payment_date,
            payment_method=request_body.payment_method.value,
            reference=request_body.reference,
            notes=request_body.notes,
        )

        outcome = apply_payment(
            total=db_invoice.total,
            amount_paid=db_invoice.amount_paid,
            status=InvoiceStatus(db_invoice.status),
            amount=request_body.amount,
        )
        invoice_repo.apply_payment_outcome(db_invoice, outcome)
        db.commit()
        db.refresh(db_payment)

    except InvoiceNotFoundError as e:
        db.rollback()
        logging.warning(f"Invoice not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Invoice not found")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    payments_counter.labels(action="recorded").inc()
    log_payment_recorded(
        request_id,
        user_id,
        db_invoice.invoice_number,
        request_body.amount,
        outcome.amount_paid,
        outcome.status.value,
    )

    return PaymentResultResponse(
        payment=PaymentResponse.model_validate(db_payment),
        invoice_amount_paid=outcome.amount_paid,
        invoice_status=outcome.status,
    )


@router.delete("/payments/{payment_id}", status_code=204)
def delete_payment(
    payment_id: str,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Remove a payment and take it back out of the invoice's amount paid"""
    request_id = get_request_id(request)
    payment_uuid = parse_uuid(payment_id, "payment")

    try:
        payment_repo = PaymentRepository(db)
        db_payment = payment_repo.get_payment(user_id, payment_uuid)
        db_invoice = db_payment.invoice

        outcome = revert_payment(
            total=db_invoice.total,
            amount_paid=db_invoice.amount_paid,
            amount=db_payment.amount,
        )
        payment_repo.delete_payment(db_payment)
        InvoiceRepository(db).apply_payment_outcome(db_invoice, outcome)
        db.commit()

    except PaymentNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Payment not found")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    payments_counter.labels(action="deleted").inc()
    return Response(status_code=204)
