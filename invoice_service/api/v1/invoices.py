"""Invoice endpoints - totals preview, CRUD and status changes"""

import time
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from invoice_service.api.v1.schemas import (
    CalculateTotalsRequest,
    InvoiceRequest,
    InvoiceResponse,
    InvoiceSummaryResponse,
    NextNumberResponse,
    StatusUpdateRequest,
    TotalsResponse,
)
from invoice_service.api.dependencies import get_request_id, get_user_id, parse_uuid
from invoice_service.infrastructure.database.session import get_db
from invoice_service.infrastructure.database.repositories import ClientRepository, InvoiceRepository
from invoice_service.domain.models import DiscountType, InvoiceStatus, LineItem
from invoice_service.domain.totals import calculate_invoice_totals, line_item_amount
from invoice_service.domain.numbering import next_invoice_number
from invoice_service.domain.exceptions import ClientNotFoundError, InvoiceNotFoundError
from invoice_service.infrastructure.observability.metrics import record_invoice_saved
from invoice_service.infrastructure.observability.logging import log_invoice_saved

router = APIRouter()


def _authoritative_items(request_body: InvoiceRequest) -> List[LineItem]:
    """Line items as persisted: amount recomputed from quantity x rate"""
    items = []
    for item in request_body.items:
        line = item.to_domain()
        line.amount = line_item_amount(line.quantity, line.rate)
        items.append(line)
    return items


def _invoice_fields(request_body: InvoiceRequest) -> dict:
    return {
        "client_id": request_body.client_id,
        "issue_date": request_body.issue_date,
        "due_date": request_body.due_date,
        "status": request_body.status.value,
        "tax_rate": request_body.tax_rate,
        "discount_type": (request_body.discount_type or DiscountType.NONE).value,
        "discount_value": request_body.discount_value,
        "notes": request_body.notes,
        "terms": request_body.terms,
    }


@router.post("/invoices/calculate", response_model=TotalsResponse)
def calculate_totals(request_body: CalculateTotalsRequest, user_id: str = Depends(get_user_id)):
    """
    Live totals preview for the invoice form.

    Uses the line amounts exactly as the form shows them; saving the invoice
    runs the same calculation on the same inputs.
    """
    totals = calculate_invoice_totals(
        [item.to_domain() for item in request_body.items],
        tax_rate=request_body.tax_rate,
        discount=request_body.discount_config(),
    )
    return TotalsResponse.model_validate(totals)


@router.get("/invoices/next-number", response_model=NextNumberResponse)
def get_next_invoice_number(user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    invoice_repo = InvoiceRepository(db)
    return NextNumberResponse(invoice_number=next_invoice_number(invoice_repo.get_invoice_numbers(user_id)))


@router.get("/invoices", response_model=List[InvoiceSummaryResponse])
def list_invoices(
    status: Optional[InvoiceStatus] = Query(None, description="Filter by status"),
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    invoice_repo = InvoiceRepository(db)
    return [InvoiceSummaryResponse.model_validate(inv) for inv in invoice_repo.get_invoices_by_user(user_id, status)]


@router.post("/invoices", response_model=InvoiceResponse, status_code=201)
def create_invoice(
    request_body: InvoiceRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """
    Create an invoice.

    Flow:
    1. Verify the client belongs to the user
    2. Recompute line amounts and the authoritative totals
    3. Assign the next invoice number
    4. Persist invoice + items
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        ClientRepository(db).get_client(user_id, request_body.client_id)

        items = _authoritative_items(request_body)
        totals = calculate_invoice_totals(items, request_body.tax_rate, request_body.discount_config())

        invoice_repo = InvoiceRepository(db)
        invoice_number = next_invoice_number(invoice_repo.get_invoice_numbers(user_id))
        db_invoice = invoice_repo.create_invoice(
            user_id=user_id,
            invoice_number=invoice_number,
            fields=_invoice_fields(request_body),
            items=items,
            totals=totals,
        )
        db.commit()
        db.refresh(db_invoice)

        duration_ms = (time.time() - start_time) * 1000
        record_invoice_saved("create", totals.total)
        log_invoice_saved(request_id, user_id, invoice_number, "create", totals.total, duration_ms)

        return InvoiceResponse.model_validate(db_invoice)

    except ClientNotFoundError as e:
        db.rollback()
        logging.warning(f"Client not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Client not found")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/invoices/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(invoice_id: str, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    invoice_uuid = parse_uuid(invoice_id, "invoice")

    try:
        db_invoice = InvoiceRepository(db).get_invoice(user_id, invoice_uuid)
    except InvoiceNotFoundError:
        raise HTTPException(status_code=404, detail="Invoice not found")

    return InvoiceResponse.model_validate(db_invoice)


@router.put("/invoices/{invoice_id}", response_model=InvoiceResponse)
def update_invoice(
    invoice_id: str,
    request_body: InvoiceRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Replace header and line items, recomputing stored totals"""
    start_time = time.time()
    request_id = get_request_id(request)
    invoice_uuid = parse_uuid(invoice_id, "invoice")

    try:
        ClientRepository(db).get_client(user_id, request_body.client_id)

        items = _authoritative_items(request_body)
        totals = calculate_invoice_totals(items, request_body.tax_rate, request_body.discount_config())

        db_invoice = InvoiceRepository(db).update_invoice(
            user_id=user_id,
            invoice_id=invoice_uuid,
            fields=_invoice_fields(request_body),
            items=items,
            totals=totals,
        )
        db.commit()
        db.refresh(db_invoice)

        duration_ms = (time.time() - start_time) * 1000
        record_invoice_saved("update", totals.total)
        log_invoice_saved(request_id, user_id, db_invoice.invoice_number, "update", totals.total, duration_ms)

        return InvoiceResponse.model_validate(db_invoice)

    except InvoiceNotFoundError as e:
        db.rollback()
        logging.warning(f"Invoice not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Invoice not found")

    except ClientNotFoundError as e:
        db.rollback()
        logging.warning(f"Client not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Client not found")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.patch("/invoices/{invoice_id}/status", response_model=InvoiceSummaryResponse)
def update_invoice_status(
    invoice_id: str,
    request_body: StatusUpdateRequest,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    invoice_uuid = parse_uuid(invoice_id, "invoice")

    try:
        db_invoice = InvoiceRepository(db).update_status(user_id, invoice_uuid, request_body.status)
        db.commit()
    except InvoiceNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Invoice not found")

    return InvoiceSummaryResponse.model_validate(db_invoice)


@router.delete("/invoices/{invoice_id}", status_code=204)
def delete_invoice(invoice_id: str, user_id: str = Depends(get_user_id), db: Session = Depends(get_db)):
    """Delete an invoice together with its items and payments"""
    invoice_uuid = parse_uuid(invoice_id, "invoice")

    try:
        InvoiceRepository(db).delete_invoice(user_id, invoice_uuid)
        db.commit()
    except InvoiceNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Invoice not found")

    return Response(status_code=204)
