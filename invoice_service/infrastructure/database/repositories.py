"""Data access layer for clients, invoices and payments"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from invoice_service.infrastructure.database.models import Client, Invoice, InvoiceItem, Payment
from invoice_service.domain.models import (
    ClientBalance,
    InvoiceSnapshot,
    InvoiceStatus,
    InvoiceTotals,
    LineItem,
    PaymentOutcome,
)
from invoice_service.domain.exceptions import (
    ClientInUseError,
    ClientNotFoundError,
    InvoiceNotFoundError,
    PaymentNotFoundError,
)


class ClientRepository:
    """Repository for clients"""

    def __init__(self, db: Session):
        self.db = db

    def create_client(self, user_id: str, fields: Dict[str, Any]) -> Client:
        db_client = Client(user_id=user_id, **fields)
        self.db.add(db_client)
        self.db.flush()
        return db_client

    def get_clients_by_user(self, user_id: str) -> List[Client]:
        return (
            self.db.query(Client)
            .filter(Client.user_id == user_id)
            .order_by(Client.created_at.desc(), Client.name)
            .all()
        )

    def get_client(self, user_id: str, client_id: uuid.UUID) -> Client:
        """Fetch a client owned by the user or raise ClientNotFoundError"""
        db_client = (
            self.db.query(Client)
            .filter(Client.id == client_id, Client.user_id == user_id)
            .first()
        )
        if not db_client:
            raise ClientNotFoundError(f"Client {client_id} not found")
        return db_client

    def update_client(self, user_id: str, client_id: uuid.UUID, fields: Dict[str, Any]) -> Client:
        db_client = self.get_client(user_id, client_id)
        for name, value in fields.items():
            setattr(db_client, name, value)
        self.db.flush()
        return db_client

    def delete_client(self, user_id: str, client_id: uuid.UUID) -> None:
        """Delete a client; clients with invoices are kept"""
        db_client = self.get_client(user_id, client_id)
        invoice_count = self.db.query(Invoice).filter(Invoice.client_id == db_client.id).count()
        if invoice_count:
            raise ClientInUseError(f"Client {client_id} has {invoice_count} invoice(s)")
        self.db.delete(db_client)
        self.db.flush()


class InvoiceRepository:
    """Repository for invoices and their line items"""

    def __init__(self, db: Session):
        self.db = db

    def create_invoice(
        self,
        user_id: str,
        invoice_number: str,
        fields: Dict[str, Any],
        items: List[LineItem],
        totals: InvoiceTotals,
    ) -> Invoice:
        """Persist invoice header, computed totals and line items"""
        db_invoice = Invoice(user_id=user_id, invoice_number=invoice_number, **fields)
        self._apply_totals(db_invoice, totals)
        self.db.add(db_invoice)
        self.db.flush()  # Get ID without committing

        self._add_items(db_invoice, items)
        self.db.flush()
        return db_invoice

    def update_invoice(
        self,
        user_id: str,
        invoice_id: uuid.UUID,
        fields: Dict[str, Any],
        items: List[LineItem],
        totals: InvoiceTotals,
    ) -> Invoice:
        """Overwrite header and totals, replacing every line item"""
        db_invoice = self.get_invoice(user_id, invoice_id)
        for name, value in fields.items():
            setattr(db_invoice, name, value)
        self._apply_totals(db_invoice, totals)

        db_invoice.items.clear()
        self.db.flush()
        self._add_items(db_invoice, items)
        self.db.flush()
        return db_invoice

    def update_status(self, user_id: str, invoice_id: uuid.UUID, status: InvoiceStatus) -> Invoice:
        db_invoice = self.get_invoice(user_id, invoice_id)
        db_invoice.status = status.value
        self.db.flush()
        return db_invoice

    def apply_payment_outcome(self, db_invoice: Invoice, outcome: PaymentOutcome) -> Invoice:
        db_invoice.amount_paid = outcome.amount_paid
        db_invoice.status = outcome.status.value
        self.db.flush()
        return db_invoice

    def delete_invoice(self, user_id: str, invoice_id: uuid.UUID) -> None:
        """Delete invoice; items and payments cascade"""
        db_invoice = self.get_invoice(user_id, invoice_id)
        self.db.delete(db_invoice)
        self.db.flush()

    def get_invoice(self, user_id: str, invoice_id: uuid.UUID) -> Invoice:
        """Fetch an invoice owned by the user or raise InvoiceNotFoundError"""
        db_invoice = (
            self.db.query(Invoice)
            .filter(Invoice.id == invoice_id, Invoice.user_id == user_id)
            .first()
        )
        if not db_invoice:
            raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")
        return db_invoice

    def get_invoices_by_user(self, user_id: str, status: Optional[InvoiceStatus] = None) -> List[Invoice]:
        query = self.db.query(Invoice).filter(Invoice.user_id == user_id)
        if status is not None:
            query = query.filter(Invoice.status == status.value)
        return query.order_by(Invoice.created_at.desc(), Invoice.invoice_number.desc()).all()

    def get_recent_invoices(self, user_id: str, limit: int = 10) -> List[Invoice]:
        return (
            self.db.query(Invoice)
            .filter(Invoice.user_id == user_id)
            .order_by(Invoice.updated_at.desc(), Invoice.invoice_number.desc())
            .limit(limit)
            .all()
        )

    def get_invoice_numbers(self, user_id: str) -> List[str]:
        rows = self.db.query(Invoice.invoice_number).filter(Invoice.user_id == user_id).all()
        return [row.invoice_number for row in rows]

    def get_snapshots(self, user_id: str) -> List[InvoiceSnapshot]:
        """Read the fields dashboard aggregation works on"""
        rows = (
            self.db.query(Invoice.total, Invoice.amount_paid, Invoice.status, Invoice.issue_date, Invoice.due_date)
            .filter(Invoice.user_id == user_id)
            .all()
        )
        return [
            InvoiceSnapshot(
                total=row.total or 0.0,
                amount_paid=row.amount_paid or 0.0,
                status=InvoiceStatus(row.status),
                issue_date=row.issue_date,
                due_date=row.due_date,
            )
            for row in rows
        ]

    def get_overdue_balances(self, user_id: str) -> List[ClientBalance]:
        """Overdue invoices joined with their client"""
        rows = (
            self.db.query(Invoice.client_id, Client.name, Invoice.total, Invoice.amount_paid, Invoice.due_date)
            .join(Client, Invoice.client_id == Client.id)
            .filter(Invoice.user_id == user_id, Invoice.status == InvoiceStatus.OVERDUE.value)
            .all()
        )
        return [
            ClientBalance(
                client_id=str(row.client_id),
                client_name=row.name,
                total=row.total or 0.0,
                amount_paid=row.amount_paid or 0.0,
                due_date=row.due_date,
            )
            for row in rows
        ]

    def _apply_totals(self, db_invoice: Invoice, totals: InvoiceTotals) -> None:
        db_invoice.subtotal = totals.subtotal
        db_invoice.discount_amount = totals.discount_amount
        db_invoice.tax_amount = totals.tax_amount
        db_invoice.total = totals.total

    def _add_items(self, db_invoice: Invoice, items: List[LineItem]) -> None:
        for item in items:
            db_invoice.items.append(
                InvoiceItem(
                    description=item.description,
                    quantity=item.quantity,
                    rate=item.rate,
                    amount=item.amount,
                    order=item.order,
                )
            )


class PaymentRepository:
    """Repository for payments"""

    def __init__(self, db: Session):
        self.db = db

    def create_payment(
        self,
        invoice_id: uuid.UUID,
        amount: float,
        payment_date: datetime,
        payment_method: str,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Payment:
        db_payment = Payment(
            invoice_id=invoice_id,
            amount=amount,
            payment_date=payment_date,
            payment_method=payment_method,
            reference=reference,
            notes=notes,
        )
        self.db.add(db_payment)
        self.db.flush()
        return db_payment

    def get_payments_by_invoice(self, invoice_id: uuid.UUID) -> List[Payment]:
        return (
            self.db.query(Payment)
            .filter(Payment.invoice_id == invoice_id)
            .order_by(Payment.payment_date.desc())
            .all()
        )

    def get_payment(self, user_id: str, payment_id: uuid.UUID) -> Payment:
        """Fetch a payment whose invoice is owned by the user or raise PaymentNotFoundError"""
        db_payment = (
            self.db.query(Payment)
            .join(Invoice, Payment.invoice_id == Invoice.id)
            .filter(Payment.id == payment_id, Invoice.user_id == user_id)
            .first()
        )
        if not db_payment:
            raise PaymentNotFoundError(f"Payment {payment_id} not found")
        return db_payment

    def delete_payment(self, db_payment: Payment) -> None:
        self.db.delete(db_payment)
        self.db.flush()
