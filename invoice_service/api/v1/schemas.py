"""Pydantic schemas for API request/response validation"""

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from invoice_service.domain.models import (
    DiscountConfig,
    DiscountType,
    InvoiceStatus,
    LineItem,
    PaymentMethod,
)

MAX_AMOUNT = 100_000_000


def _strip(value):
    return value.strip() if isinstance(value, str) else value


def _to_naive_utc(value: datetime) -> datetime:
    """Stored timestamps are naive UTC"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------


class LineItemSchema(BaseModel):
    """Single line item on an invoice form"""

    description: str = Field(..., min_length=3, max_length=500)
    quantity: float = Field(..., ge=0.01, le=1_000_000, allow_inf_nan=False)
    rate: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    amount: float = Field(..., ge=0, allow_inf_nan=False, description="quantity x rate as shown in the form")
    order: int = Field(0, ge=0)

    @field_validator("description", mode="before")
    @classmethod
    def trim_description(cls, value):
        return _strip(value)

    def to_domain(self) -> LineItem:
        return LineItem(
            description=self.description,
            quantity=self.quantity,
            rate=self.rate,
            amount=self.amount,
            order=self.order,
        )


class PricingFields(BaseModel):
    """Tax and discount settings shared by the preview and the write path"""

    tax_rate: float = Field(0, ge=0, le=100, allow_inf_nan=False)
    discount_type: Optional[DiscountType] = Field(None, description="Absent means no discount")
    discount_value: float = Field(0, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)

    @model_validator(mode="after")
    def check_percentage_discount(self):
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValueError("Percentage discount cannot exceed 100%")
        return self

    def discount_config(self) -> DiscountConfig:
        return DiscountConfig(type=self.discount_type or DiscountType.NONE, value=self.discount_value)


class CalculateTotalsRequest(PricingFields):
    """Request body for POST /v1/invoices/calculate"""

    items: List[LineItemSchema] = Field(default_factory=list, max_length=100)


class TotalsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    subtotal: float
    discount_amount: float
    after_discount: float
    tax_amount: float
    total: float


class InvoiceRequest(PricingFields):
    """Request body for creating or replacing an invoice"""

    client_id: uuid.UUID
    issue_date: datetime
    due_date: datetime
    status: InvoiceStatus = InvoiceStatus.DRAFT
    notes: Optional[str] = Field(None, max_length=5000)
    terms: Optional[str] = Field(None, max_length=5000)
    items: List[LineItemSchema] = Field(..., min_length=1, max_length=100)

    @field_validator("notes", "terms", mode="before")
    @classmethod
    def trim_text(cls, value):
        return _strip(value)

    @field_validator("issue_date", "due_date")
    @classmethod
    def normalize_timezone(cls, value: datetime) -> datetime:
        return _to_naive_utc(value)

    @model_validator(mode="after")
    def check_due_date(self):
        if self.due_date < self.issue_date:
            raise ValueError("Due date must be on or after the issue date")
        return self


class StatusUpdateRequest(BaseModel):
    status: InvoiceStatus


class InvoiceItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    description: str
    quantity: float
    rate: float
    amount: float
    order: int


class InvoiceSummaryResponse(BaseModel):
    """Invoice row for list views"""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    invoice_number: str
    status: InvoiceStatus
    client_id: uuid.UUID
    issue_date: datetime
    due_date: datetime
    total: float
    amount_paid: float


class InvoiceResponse(InvoiceSummaryResponse):
    """Invoice with stored totals and line items"""

    tax_rate: float
    discount_type: DiscountType
    discount_value: float
    subtotal: float
    discount_amount: float
    tax_amount: float
    notes: Optional[str] = None
    terms: Optional[str] = None
    items: List[InvoiceItemResponse]


class NextNumberResponse(BaseModel):
    invoice_number: str


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


class ClientRequest(BaseModel):
    """Request body for creating or updating a client"""

    name: str = Field(..., min_length=2, max_length=100, pattern=r"^[A-Za-z\s'-]+$")
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50, pattern=r"^[\d\s\-+()]*$")
    company: Optional[str] = Field(None, max_length=200)
    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    tax_id: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=5000)

    @field_validator(
        "name", "email", "phone", "company", "address", "city", "state", "country", "postal_code", "tax_id", "notes",
        mode="before",
    )
    @classmethod
    def trim_fields(cls, value):
        return _strip(value)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    tax_id: Optional[str] = None
    notes: Optional[str] = None


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------


class PaymentRequest(BaseModel):
    """Request body for POST /v1/invoices/{invoice_id}/payments"""

    amount: float = Field(..., ge=0.01, le=MAX_AMOUNT, allow_inf_nan=False)
    payment_date: datetime
    payment_method: PaymentMethod
    reference: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = Field(None, max_length=5000)

    @field_validator("payment_date")
    @classmethod
    def normalize_timezone(cls, value: datetime) -> datetime:
        return _to_naive_utc(value)


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    invoice_id: uuid.UUID
    amount: float
    payment_date: datetime
    payment_method: PaymentMethod
    reference: Optional[str] = None
    notes: Optional[str] = None


class PaymentResultResponse(BaseModel):
    """Recorded payment plus the invoice state it produced"""

    payment: PaymentResponse
    invoice_amount_paid: float
    invoice_status: InvoiceStatus


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


class PeriodSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start: datetime
    end: datetime


class PeriodStatsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_revenue: float
    outstanding_amount: float
    overdue_amount: float
    paid_invoices_count: int
    overdue_invoices_count: int
    total_invoices_in_period: int
    payment_rate: int
    overdue_percentage: int


class TrendSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    percentage: int
    absolute_delta: Union[int, float]


class DashboardStatsResponse(BaseModel):
    """Response for GET /v1/dashboard/stats"""

    model_config = ConfigDict(from_attributes=True)

    current: PeriodStatsSchema
    previous: PeriodStatsSchema
    current_period: PeriodSchema
    previous_period: PeriodSchema
    trends: Dict[str, TrendSchema]


class OverviewResponse(BaseModel):
    """Response for GET /v1/dashboard/overview"""

    model_config = ConfigDict(from_attributes=True)

    total_revenue: float
    outstanding_amount: float
    total_invoices: int
    paid_invoices_count: int
    unpaid_invoices_count: int
    overdue_invoices_count: int
    draft_invoices_count: int


class MonthlyRevenueSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: str
    revenue: float


class StatusBucketSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: InvoiceStatus
    count: int
    total: float


class RecentActivityItem(BaseModel):
    id: uuid.UUID
    invoice_number: str
    status: InvoiceStatus
    total: float
    issue_date: datetime
    updated_at: datetime
    client_name: Optional[str] = None


class OverdueClientSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    client_id: str
    client_name: str
    outstanding_amount: float
    overdue_invoices_count: int
    days_overdue: int
