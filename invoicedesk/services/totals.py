"""Line-item totals engine.

Pure functions over item lists: nothing here touches the database and no
input is mutated. Every call returns fresh values, so the same inputs always
give the same result.

    amount            = quantity * rate          (per item)
    total             = sum(item.amount)
    remaining_balance = total - advance          (invoices only)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from invoicedesk.middleware.exceptions import BusinessLogicError
from invoicedesk.schemas.common import LineItem
from invoicedesk.schemas.invoice import InvoiceData
from invoicedesk.schemas.quotation import QuotationData


@dataclass(frozen=True)
class Totals:
    items: list[LineItem]
    total: float
    remaining_balance: float | None = None


def item_amount(quantity: int, rate: float) -> float:
    return quantity * rate


def recompute_items(items: Sequence[LineItem]) -> list[LineItem]:
    """Return copies of `items` with every amount set to quantity * rate."""
    return [
        item.model_copy(update={"amount": item_amount(item.quantity, item.rate)})
        for item in items
    ]


def document_total(items: Sequence[LineItem]) -> float:
    return sum(item.amount for item in items)


def remaining_balance(total: float, advance: float) -> float:
    return total - advance


def recompute_totals(items: Sequence[LineItem], advance: float | None = None) -> Totals:
    """Recompute amounts and the total; the balance too when `advance` is given."""
    items = recompute_items(items)
    total = document_total(items)
    balance = remaining_balance(total, advance) if advance is not None else None
    return Totals(items=items, total=total, remaining_balance=balance)


# ── Editing operations ──────────────────────────────────────

def _check_index(items: Sequence[LineItem], index: int) -> None:
    if not 0 <= index < len(items):
        raise BusinessLogicError(
            f"Item index {index} out of range", error_code="INVALID_ITEM_INDEX"
        )


def set_item_quantity_rate(
    items: Sequence[LineItem],
    index: int,
    quantity: int,
    rate: float,
    advance: float | None = None,
) -> Totals:
    """Change one item's quantity and rate, then recompute everything."""
    _check_index(items, index)
    updated = list(items)
    updated[index] = updated[index].model_copy(update={"quantity": quantity, "rate": rate})
    return recompute_totals(updated, advance)


def add_item(items: Sequence[LineItem], advance: float | None = None) -> Totals:
    """Append an empty line (quantity 1, rate 0)."""
    return recompute_totals([*items, LineItem(quantity=1, rate=0.0, amount=0.0)], advance)


def remove_item(items: Sequence[LineItem], index: int, advance: float | None = None) -> Totals:
    """Drop the item at `index`; a document keeps at least one item."""
    _check_index(items, index)
    if len(items) <= 1:
        return recompute_totals(items, advance)
    return recompute_totals([it for i, it in enumerate(items) if i != index], advance)


def set_advance(total: float, advance: float) -> float:
    """Remaining balance after an advance edit; items are untouched."""
    return remaining_balance(total, advance)


def validate_advance(total: float, advance: float) -> None:
    """Reject advances that are negative or larger than the total."""
    if advance < 0:
        raise BusinessLogicError(
            "Advance cannot be negative", error_code="NEGATIVE_ADVANCE"
        )
    if advance > total:
        raise BusinessLogicError(
            f"Advance {advance:.2f} exceeds invoice total {total:.2f}",
            error_code="ADVANCE_EXCEEDS_TOTAL",
        )


# ── Normalization before writes ─────────────────────────────

def normalize_invoice(data: InvoiceData) -> InvoiceData:
    """Return `data` with amounts, total and balance derived from the items."""
    totals = recompute_totals(data.items, data.advance)
    validate_advance(totals.total, data.advance)
    return data.model_copy(update={
        "items": totals.items,
        "total": totals.total,
        "remaining_balance": totals.remaining_balance,
    })


def normalize_quotation(data: QuotationData) -> QuotationData:
    totals = recompute_totals(data.items)
    return data.model_copy(update={"items": totals.items, "total": totals.total})
