"""Quotation status rules: which transitions and actions are allowed.

The check functions answer without raising; the caller (service) decides
whether to block the request. `ensure_transition` is the raising variant
used right before a status write.
"""

from __future__ import annotations

from invoicedesk.middleware.exceptions import InvalidStatusTransitionError
from invoicedesk.models.quotation import QuotationStatus

# Transitions reachable through a plain status change. `converted` is only
# reached through conversion, which also creates the invoice.
ALLOWED_TRANSITIONS: dict[QuotationStatus, frozenset[QuotationStatus]] = {
    QuotationStatus.DRAFT: frozenset({QuotationStatus.SENT}),
    QuotationStatus.SENT: frozenset({QuotationStatus.ACCEPTED, QuotationStatus.REJECTED}),
    QuotationStatus.ACCEPTED: frozenset(),
    QuotationStatus.REJECTED: frozenset(),
    QuotationStatus.CONVERTED: frozenset(),
}

CONVERTIBLE = frozenset({
    QuotationStatus.DRAFT,
    QuotationStatus.SENT,
    QuotationStatus.ACCEPTED,
})


def can_transition(current: str, requested: str) -> bool:
    """True if `current` may move to `requested` (staying put always may)."""
    current, requested = QuotationStatus(current), QuotationStatus(requested)
    if current == requested:
        return True
    return requested in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: str, requested: str) -> None:
    if not can_transition(current, requested):
        raise InvalidStatusTransitionError(
            QuotationStatus(current).value, QuotationStatus(requested).value
        )


def can_edit(status: str) -> bool:
    return QuotationStatus(status) != QuotationStatus.CONVERTED


def can_convert(status: str) -> bool:
    return QuotationStatus(status) in CONVERTIBLE
