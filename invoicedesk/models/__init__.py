"""Aggregate model imports for Alembic auto-detection."""

from invoicedesk.models.company import CompanyInfo  # noqa: F401
from invoicedesk.models.invoice import Invoice, InvoiceItem  # noqa: F401
from invoicedesk.models.quotation import Quotation, QuotationItem, QuotationStatus  # noqa: F401

__all__ = [
    "CompanyInfo",
    "Invoice", "InvoiceItem",
    "Quotation", "QuotationItem", "QuotationStatus",
]
