"""Persistence gateway for invoices, quotations and their line items.

Each gateway is built around an injected AsyncSession and translates
between the document schemas (camelCase on the wire, snake_case
attributes) and the parent/item rows. Writes are issued as ordered steps:

  create   parent row → flush (id) → item rows → re-fetch
  update   parent columns → delete item rows → insert item rows → re-fetch
  delete   item rows → parent row

The gateway never commits. The session boundary (get_db / unit_of_work)
commits or rolls back every step of a call together, so a failure after the
parent insert cannot leave an orphaned row behind.
"""

import logging
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from invoicedesk.models.base import utcnow
from invoicedesk.models.company import CompanyInfo
from invoicedesk.models.invoice import Invoice, InvoiceItem
from invoicedesk.models.quotation import Quotation, QuotationItem
from invoicedesk.schemas.common import LineItem
from invoicedesk.schemas.company import CompanyIn, CompanyOut
from invoicedesk.schemas.invoice import InvoiceData, InvoiceOut, InvoiceSummary
from invoicedesk.schemas.quotation import QuotationData, QuotationOut
from invoicedesk.services.totals import normalize_invoice, normalize_quotation

logger = logging.getLogger(__name__)

DataT = TypeVar("DataT", bound=BaseModel)
OutT = TypeVar("OutT", bound=BaseModel)

# Columns the database assigns; never taken from a document
GENERATED_COLUMNS = frozenset({"id", "created_at", "updated_at"})


class DocumentGateway(Generic[DataT, OutT]):
    """CRUD for one document kind. Subclasses bind the models and schemas."""

    kind: str
    model: type
    item_model: type
    parent_key: str
    number_field: str
    out_schema: type[OutT]

    def __init__(self, db: AsyncSession):
        self.db = db

    # ── Mapping ─────────────────────────────────────────────

    @classmethod
    def writable_columns(cls) -> set[str]:
        return set(cls.model.__table__.columns.keys()) - GENERATED_COLUMNS

    def _row_values(self, data: DataT) -> dict:
        """Parent-row values present in `data`, keyed by column name."""
        values = data.model_dump(
            include=self.writable_columns(), exclude_none=True, exclude={"items"}
        )
        return {
            key: value.value if isinstance(value, Enum) else value
            for key, value in values.items()
        }

    def _item_rows(self, parent_id: str, items: list[LineItem]) -> list:
        return [
            self.item_model(
                **{self.parent_key: parent_id},
                position=position,
                description=item.description,
                quantity=item.quantity,
                rate=item.rate,
                amount=item.amount,
            )
            for position, item in enumerate(items)
        ]

    def prepare(self, data: DataT) -> DataT:
        """Hook applied to every document before it is written."""
        return data

    # ── Reads ───────────────────────────────────────────────

    async def _load(self, document_id: str):
        result = await self.db.execute(
            select(self.model)
            .where(self.model.id == document_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list(self, search: str | None = None) -> list[OutT]:
        """All documents with their items, newest first."""
        stmt = select(self.model)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(or_(
                self.model.client_name.ilike(pattern),
                getattr(self.model, self.number_field).ilike(pattern),
            ))
        stmt = stmt.order_by(self.model.created_at.desc())
        result = await self.db.execute(stmt)
        return [self.out_schema.model_validate(row) for row in result.scalars().all()]

    async def get_by_id(self, document_id: str) -> OutT | None:
        """The full document, or None when it does not exist."""
        row = await self._load(document_id)
        if row is None:
            return None
        return self.out_schema.model_validate(row)

    # ── Writes ──────────────────────────────────────────────

    async def create(self, data: DataT, **extra) -> OutT:
        data = self.prepare(data)
        row = self.model(**self._row_values(data), **extra)
        self.db.add(row)
        await self.db.flush()  # populate row.id

        self.db.add_all(self._item_rows(row.id, data.items))
        await self.db.flush()

        logger.info(
            "Created %s %s with %d item(s)",
            self.kind, getattr(row, self.number_field), len(data.items),
        )
        return await self.get_by_id(row.id)

    async def update(self, document_id: str, data: DataT) -> OutT | None:
        """Replace the document's fields and its entire item set."""
        row = await self._load(document_id)
        if row is None:
            return None

        data = self.prepare(data)
        for key, value in self._row_values(data).items():
            setattr(row, key, value)
        row.updated_at = utcnow()
        await self.db.flush()

        await self.db.execute(
            delete(self.item_model).where(
                getattr(self.item_model, self.parent_key) == document_id
            )
        )
        self.db.add_all(self._item_rows(document_id, data.items))
        await self.db.flush()

        logger.info(
            "Updated %s %s (%d item(s))",
            self.kind, getattr(row, self.number_field), len(data.items),
        )
        return await self.get_by_id(document_id)

    async def delete(self, document_id: str) -> bool:
        """Delete items, then the document. False when it did not exist."""
        row = await self._load(document_id)
        if row is None:
            return False
        number = getattr(row, self.number_field)

        await self.db.execute(
            delete(self.item_model).where(
                getattr(self.item_model, self.parent_key) == document_id
            )
        )
        await self.db.execute(delete(self.model).where(self.model.id == document_id))
        await self.db.flush()

        logger.info("Deleted %s %s", self.kind, number)
        return True


class InvoiceGateway(DocumentGateway[InvoiceData, InvoiceOut]):
    kind = "invoice"
    model = Invoice
    item_model = InvoiceItem
    parent_key = "invoice_id"
    number_field = "invoice_number"
    out_schema = InvoiceOut

    def prepare(self, data: InvoiceData) -> InvoiceData:
        return normalize_invoice(data)

    async def get_by_source_quotation(self, quotation_id: str) -> InvoiceOut | None:
        result = await self.db.execute(
            select(Invoice).where(Invoice.source_quotation_id == quotation_id).limit(1)
        )
        row = result.scalar_one_or_none()
        return InvoiceOut.model_validate(row) if row else None

    async def summary(self) -> InvoiceSummary:
        """Counts and money totals for the dashboard."""
        result = await self.db.execute(
            select(
                func.count(Invoice.id),
                func.coalesce(func.sum(Invoice.total), 0.0),
                func.coalesce(func.sum(Invoice.remaining_balance), 0.0),
            )
        )
        count, revenue, outstanding = result.one()
        revenue, outstanding = float(revenue), float(outstanding)
        return InvoiceSummary(
            invoice_count=count,
            total_revenue=round(revenue, 2),
            total_outstanding=round(outstanding, 2),
            total_paid=round(revenue - outstanding, 2),
        )


class QuotationGateway(DocumentGateway[QuotationData, QuotationOut]):
    kind = "quotation"
    model = Quotation
    item_model = QuotationItem
    parent_key = "quotation_id"
    number_field = "quotation_number"
    out_schema = QuotationOut

    def prepare(self, data: QuotationData) -> QuotationData:
        return normalize_quotation(data)

    async def set_status(self, quotation_id: str, status: str) -> QuotationOut | None:
        """Change only the status column."""
        row = await self._load(quotation_id)
        if row is None:
            return None
        previous = row.status
        row.status = status
        row.updated_at = utcnow()
        await self.db.flush()

        logger.info(
            "Quotation %s status %s → %s", row.quotation_number, previous, status
        )
        return await self.get_by_id(quotation_id)


class CompanyGateway:
    """The single company_info row."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _load(self) -> CompanyInfo | None:
        result = await self.db.execute(
            select(CompanyInfo).order_by(CompanyInfo.created_at).limit(1)
        )
        return result.scalar_one_or_none()

    async def get(self) -> CompanyOut | None:
        row = await self._load()
        return CompanyOut.model_validate(row) if row else None

    async def save(self, data: CompanyIn) -> CompanyOut:
        """Create the row on first save, overwrite it afterwards."""
        row = await self._load()
        if row is None:
            row = CompanyInfo(**data.model_dump())
            self.db.add(row)
        else:
            for key, value in data.model_dump().items():
                setattr(row, key, value)
            row.updated_at = utcnow()
        await self.db.flush()
        await self.db.refresh(row)
        return CompanyOut.model_validate(row)
