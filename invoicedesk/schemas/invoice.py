"""Pydantic schemas for invoices."""

import datetime as dt

from pydantic import Field, field_validator

from invoicedesk.schemas.common import CamelModel, DocumentFields, LineItem, required_text


class InvoiceData(DocumentFields):
    """Invoice content without id and timestamps (create / full update body)."""
    invoice_number: str = Field(..., max_length=50)
    date: dt.date = Field(default_factory=dt.date.today)
    advance: float = Field(0.0, ge=0)
    remaining_balance: float = 0.0
    payment_terms: str = ""

    @field_validator("invoice_number")
    @classmethod
    def _number_required(cls, v: str) -> str:
        return required_text(v)


class InvoiceOut(InvoiceData):
    id: str
    source_quotation_id: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime


class InvoiceSummary(CamelModel):
    """Dashboard figures across all invoices."""
    invoice_count: int
    total_revenue: float
    total_outstanding: float
    total_paid: float


class InvoiceTemplate(CamelModel):
    """Pre-filled, not yet valid form data for a new invoice."""
    invoice_number: str
    date: dt.date
    client_name: str = ""
    client_contact: str = ""
    client_address: str = ""
    items: list[LineItem]
    total: float = 0.0
    advance: float = 0.0
    remaining_balance: float = 0.0
    payment_terms: str = ""
    terms_and_conditions: str = ""
    bank_account_details: str = ""
