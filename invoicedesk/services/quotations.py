"""Quotation lifecycle: status changes and conversion into an invoice.

Conversion runs three sequential steps inside the caller's transaction:

  1. build the invoice from the quotation (items copied by value,
     advance 0, remaining balance = total, payment terms = quotation terms)
  2. create the invoice through the invoice gateway
  3. mark the quotation `converted`

Step 3 only runs once step 2 has succeeded, and both commit together. An
invoice already linked to the quotation (from an interrupted earlier run)
is reused instead of creating a second one.
"""

import datetime as dt
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from invoicedesk.middleware.exceptions import DocumentLockedError, ResourceNotFoundError
from invoicedesk.models.quotation import QuotationStatus
from invoicedesk.schemas.invoice import InvoiceData, InvoiceOut
from invoicedesk.schemas.quotation import ConvertRequest, QuotationData, QuotationOut
from invoicedesk.services.documents import InvoiceGateway, QuotationGateway
from invoicedesk.utils.numbering import generate_document_number
from invoicedesk.utils.status import can_convert, can_edit, ensure_transition

logger = logging.getLogger("invoicedesk.quotations")


def build_invoice_from_quotation(
    quotation: QuotationOut,
    invoice_number: str,
    invoice_date: dt.date,
) -> InvoiceData:
    """Derive a new invoice document from a quotation (step 1)."""
    return InvoiceData(
        invoice_number=invoice_number,
        date=invoice_date,
        client_name=quotation.client_name,
        client_contact=quotation.client_contact,
        client_address=quotation.client_address,
        items=[item.model_copy(update={"id": None}) for item in quotation.items],
        total=quotation.total,
        advance=0.0,
        remaining_balance=quotation.total,
        payment_terms=quotation.quotation_terms,
        terms_and_conditions=quotation.terms_and_conditions,
        bank_account_details=quotation.bank_account_details,
    )


class QuotationService:
    def __init__(
        self,
        db: AsyncSession,
        quotations: QuotationGateway | None = None,
        invoices: InvoiceGateway | None = None,
    ):
        self.db = db
        self.quotations = quotations or QuotationGateway(db)
        self.invoices = invoices or InvoiceGateway(db)

    async def _get_or_404(self, quotation_id: str) -> QuotationOut:
        quotation = await self.quotations.get_by_id(quotation_id)
        if quotation is None:
            raise ResourceNotFoundError("Quotation", quotation_id)
        return quotation

    # ── Create / edit ───────────────────────────────────────

    async def create(self, data: QuotationData) -> QuotationOut:
        """New quotations always start as drafts."""
        return await self.quotations.create(
            data.model_copy(update={"status": QuotationStatus.DRAFT})
        )

    async def update(self, quotation_id: str, data: QuotationData) -> QuotationOut:
        current = await self._get_or_404(quotation_id)
        if not can_edit(current.status):
            raise DocumentLockedError(
                f"Quotation {current.quotation_number} has been converted and can no longer be edited"
            )
        if data.status is not None:
            ensure_transition(current.status, data.status)
        return await self.quotations.update(quotation_id, data)

    # ── Status ──────────────────────────────────────────────

    async def change_status(self, quotation_id: str, status: QuotationStatus) -> QuotationOut:
        current = await self._get_or_404(quotation_id)
        ensure_transition(current.status, status)
        if current.status == status:
            return current
        return await self.quotations.set_status(quotation_id, status.value)

    async def mark_sent(self, quotation_id: str) -> QuotationOut:
        return await self.change_status(quotation_id, QuotationStatus.SENT)

    async def mark_accepted(self, quotation_id: str) -> QuotationOut:
        return await self.change_status(quotation_id, QuotationStatus.ACCEPTED)

    async def mark_rejected(self, quotation_id: str) -> QuotationOut:
        return await self.change_status(quotation_id, QuotationStatus.REJECTED)

    # ── Conversion ──────────────────────────────────────────

    async def convert_to_invoice(
        self,
        quotation_id: str,
        overrides: ConvertRequest | None = None,
    ) -> InvoiceOut:
        overrides = overrides or ConvertRequest()
        quotation = await self._get_or_404(quotation_id)
        if not can_convert(quotation.status):
            raise DocumentLockedError(
                f"Quotation {quotation.quotation_number} cannot be converted "
                f"while it is {quotation.status.value}"
            )

        invoice = await self.invoices.get_by_source_quotation(quotation_id)
        if invoice is not None:
            logger.warning(
                "Quotation %s already has invoice %s; reusing it",
                quotation.quotation_number, invoice.invoice_number,
            )
        else:
            number = overrides.invoice_number or await generate_document_number(self.db, "invoice")
            data = build_invoice_from_quotation(
                quotation, number, overrides.date or dt.date.today()
            )
            invoice = await self.invoices.create(data, source_quotation_id=quotation_id)

        await self.quotations.set_status(quotation_id, QuotationStatus.CONVERTED.value)
        logger.info(
            "Converted quotation %s into invoice %s",
            quotation.quotation_number, invoice.invoice_number,
        )
        return invoice
