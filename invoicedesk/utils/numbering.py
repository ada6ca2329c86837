"""Sequential document numbers.

The next number is one past the largest numeric value among existing
numbers of the same kind, zero padded:

    ["0004", "0006", "abc"]  →  "0007"
    []                       →  "0001"

Non-numeric numbers count as 0, so they never block numbering. The value
is advisory; the unique constraint on the number column rejects a
colliding insert if two documents are created concurrently.
"""

import re
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from invoicedesk.config import settings
from invoicedesk.models.invoice import Invoice
from invoicedesk.models.quotation import Quotation

# Map document kinds to their number column
NUMBER_COLUMN_MAP = {
    "invoice": Invoice.invoice_number,
    "quotation": Quotation.quotation_number,
}

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_leading_int(value: str | None) -> int:
    """Parse the leading integer of `value` ("12abc" → 12); 0 if there is none."""
    if not value:
        return 0
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def next_number(existing: Iterable[str | None], width: int | None = None) -> str:
    """Return the number following the highest existing one."""
    width = width or settings.document_number_width
    highest = max((parse_leading_int(n) for n in existing), default=0)
    return f"{max(highest, 0) + 1:0{width}d}"


async def generate_document_number(db: AsyncSession, kind: str) -> str:
    """Compute the next number for `kind` ("invoice" or "quotation").

    Loading errors propagate; there is no fallback number.
    """
    column = NUMBER_COLUMN_MAP[kind]
    result = await db.execute(select(column))
    return next_number(result.scalars().all())
