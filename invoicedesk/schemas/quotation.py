"""Pydantic schemas for quotations."""

import datetime as dt

from pydantic import Field, computed_field, field_validator, model_validator

from invoicedesk.config import settings
from invoicedesk.models.quotation import QuotationStatus
from invoicedesk.schemas.common import CamelModel, DocumentFields, LineItem, required_text
from invoicedesk.utils.status import can_convert, can_edit


class QuotationData(DocumentFields):
    """Quotation content without id and timestamps.

    `status` is optional on input: omitted means "leave unchanged" on update
    and "draft" on create. Expiry defaults to the configured validity period
    after the quotation date.
    """
    quotation_number: str = Field(..., max_length=50)
    date: dt.date = Field(default_factory=dt.date.today)
    expiry_date: dt.date | None = None
    status: QuotationStatus | None = None
    quotation_terms: str = ""

    @field_validator("quotation_number")
    @classmethod
    def _number_required(cls, v: str) -> str:
        return required_text(v)

    @model_validator(mode="after")
    def _default_expiry(self) -> "QuotationData":
        if self.expiry_date is None:
            self.expiry_date = self.date + dt.timedelta(days=settings.quotation_validity_days)
        return self


class QuotationOut(QuotationData):
    id: str
    status: QuotationStatus
    created_at: dt.datetime
    updated_at: dt.datetime

    @computed_field(alias="canEdit")
    @property
    def can_edit(self) -> bool:
        return can_edit(self.status)

    @computed_field(alias="canConvert")
    @property
    def can_convert(self) -> bool:
        return can_convert(self.status)


class ConvertRequest(CamelModel):
    """Optional overrides for the invoice produced by a conversion."""
    invoice_number: str | None = Field(None, max_length=50)
    date: dt.date | None = None


class QuotationTemplate(CamelModel):
    """Pre-filled, not yet valid form data for a new quotation."""
    quotation_number: str
    date: dt.date
    expiry_date: dt.date
    status: QuotationStatus = QuotationStatus.DRAFT
    client_name: str = ""
    client_contact: str = ""
    client_address: str = ""
    items: list[LineItem]
    total: float = 0.0
    quotation_terms: str = ""
    terms_and_conditions: str = ""
    bank_account_details: str = ""
