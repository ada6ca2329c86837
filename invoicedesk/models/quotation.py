"""Quotation and QuotationItem: priced offers sent to a client.

Lifecycle:  draft → sent → accepted | rejected
            draft | sent | accepted → converted (terminal, via conversion)
"""

import datetime as dt
import enum
import uuid

from sqlalchemy import CheckConstraint, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invoicedesk.database import Base
from invoicedesk.models.base import utcnow


class QuotationStatus(str, enum.Enum):
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CONVERTED = "converted"


class Quotation(Base):
    __tablename__ = "quotations"
    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'sent', 'accepted', 'rejected', 'converted')",
            name="ck_quotations_status",
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    quotation_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    expiry_date: Mapped[dt.date] = mapped_column(Date, nullable=False)

    # ── Status ───────────────────────────────────────────────
    # draft | sent | accepted | rejected | converted
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=QuotationStatus.DRAFT.value, index=True
    )

    # ── Client ───────────────────────────────────────────────
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    client_contact: Mapped[str] = mapped_column(String(255), default="")
    client_address: Mapped[str] = mapped_column(Text, default="")

    total: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # ── Texts printed on the document ────────────────────────
    quotation_terms: Mapped[str] = mapped_column(Text, default="")
    terms_and_conditions: Mapped[str] = mapped_column(Text, default="")
    bank_account_details: Mapped[str] = mapped_column(Text, default="")

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False, index=True
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    items: Mapped[list["QuotationItem"]] = relationship(
        back_populates="quotation",
        order_by="QuotationItem.position",
        lazy="selectin",
        passive_deletes=True,
    )


class QuotationItem(Base):
    __tablename__ = "quotation_items"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    quotation_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("quotations.id"), nullable=False, index=True
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

    quotation: Mapped[Quotation] = relationship(back_populates="items")
