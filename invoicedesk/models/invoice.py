"""Invoice and InvoiceItem: billed documents and their line entries.

Items are owned by exactly one invoice; they have no lifecycle of their
own and are replaced wholesale on every update.
"""

import datetime as dt
import uuid

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoicedesk.database import Base
from invoicedesk.models.base import utcnow


class Invoice(Base):
    __tablename__ = "invoices"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    invoice_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)

    # ── Client ───────────────────────────────────────────────
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_contact: Mapped[str] = mapped_column(String(255), default="")
    client_address: Mapped[str] = mapped_column(Text, default="")

    # ── Amounts ──────────────────────────────────────────────
    total: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    advance: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    remaining_balance: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # ── Texts printed on the document ────────────────────────
    payment_terms: Mapped[str] = mapped_column(Text, default="")
    terms_and_conditions: Mapped[str] = mapped_column(Text, default="")
    bank_account_details: Mapped[str] = mapped_column(Text, default="")

    # ── Origin ───────────────────────────────────────────────
    # Set when the invoice was materialized from a quotation
    source_quotation_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("quotations.id", ondelete="SET NULL"), index=True
    )

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False, index=True
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    items: Mapped[list["InvoiceItem"]] = relationship(
        back_populates="invoice",
        order_by="InvoiceItem.position",
        lazy="selectin",
        passive_deletes=True,
    )


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    invoice_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("invoices.id"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    invoice: Mapped[Invoice] = relationship(back_populates="items")
