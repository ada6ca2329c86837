"""Initial schema: invoices, quotations, their items, company info.

Revision ID: 0001
Revises: (none)
Create Date: 2026-10-19
"""

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

from alembic import op
import sqlalchemy as sa


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def _item_columns() -> list[sa.Column]:
    return [
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("rate", sa.Float(), nullable=False, server_default="0"),
        sa.Column("amount", sa.Float(), nullable=False, server_default="0"),
    ]


def upgrade() -> None:
    # ── Company letterhead (single row) ──────────────────────
    op.create_table(
        "company_info",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("phone", sa.String(50)),
        sa.Column("email", sa.String(255)),
        *_timestamps(),
    )

    # ── Quotations ───────────────────────────────────────────
    op.create_table(
        "quotations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("quotation_number", sa.String(50), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("expiry_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("client_name", sa.String(255), nullable=False),
        sa.Column("client_contact", sa.String(255), server_default=""),
        sa.Column("client_address", sa.Text(), server_default=""),
        sa.Column("total", sa.Float(), nullable=False, server_default="0"),
        sa.Column("quotation_terms", sa.Text(), server_default=""),
        sa.Column("terms_and_conditions", sa.Text(), server_default=""),
        sa.Column("bank_account_details", sa.Text(), server_default=""),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('draft', 'sent', 'accepted', 'rejected', 'converted')",
            name="ck_quotations_status",
        ),
    )
    op.create_index("ix_quotations_quotation_number", "quotations", ["quotation_number"], unique=True)
    op.create_index("ix_quotations_status", "quotations", ["status"])
    op.create_index("ix_quotations_created_at", "quotations", ["created_at"])

    op.create_table(
        "quotation_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("quotation_id", sa.String(36), sa.ForeignKey("quotations.id"), nullable=False),
        *_item_columns(),
        *_timestamps(),
    )
    op.create_index("ix_quotation_items_quotation_id", "quotation_items", ["quotation_id"])

    # ── Invoices ─────────────────────────────────────────────
    op.create_table(
        "invoices",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("invoice_number", sa.String(50), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("client_name", sa.String(255), nullable=False),
        sa.Column("client_contact", sa.String(255), server_default=""),
        sa.Column("client_address", sa.Text(), server_default=""),
        sa.Column("total", sa.Float(), nullable=False, server_default="0"),
        sa.Column("advance", sa.Float(), nullable=False, server_default="0"),
        sa.Column("remaining_balance", sa.Float(), nullable=False, server_default="0"),
        sa.Column("payment_terms", sa.Text(), server_default=""),
        sa.Column("terms_and_conditions", sa.Text(), server_default=""),
        sa.Column("bank_account_details", sa.Text(), server_default=""),
        sa.Column(
            "source_quotation_id",
            sa.String(36),
            sa.ForeignKey("quotations.id", ondelete="SET NULL"),
        ),
        *_timestamps(),
    )
    op.create_index("ix_invoices_invoice_number", "invoices", ["invoice_number"], unique=True)
    op.create_index("ix_invoices_source_quotation_id", "invoices", ["source_quotation_id"])
    op.create_index("ix_invoices_created_at", "invoices", ["created_at"])

    op.create_table(
        "invoice_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("invoice_id", sa.String(36), sa.ForeignKey("invoices.id"), nullable=False),
        *_item_columns(),
        *_timestamps(),
    )
    op.create_index("ix_invoice_items_invoice_id", "invoice_items", ["invoice_id"])


def downgrade() -> None:
    op.drop_table("invoice_items")
    op.drop_table("invoices")
    op.drop_table("quotation_items")
    op.drop_table("quotations")
    op.drop_table("company_info")
