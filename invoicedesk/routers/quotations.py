"""Quotation router.

Endpoints:
    GET    /api/quotations/               List quotations (newest first)
    GET    /api/quotations/new            Blank quotation with the next number
    POST   /api/quotations/               Create quotation (always draft)
    GET    /api/quotations/{id}           Get quotation
    PUT    /api/quotations/{id}           Replace quotation (fields and items)
    DELETE /api/quotations/{id}           Delete quotation and its items
    POST   /api/quotations/{id}/send      Mark as sent
    POST   /api/quotations/{id}/accept    Mark as accepted
    POST   /api/quotations/{id}/reject    Mark as rejected
    POST   /api/quotations/{id}/convert   Create an invoice from the quotation
"""

import datetime as dt

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicedesk.auth.deps import AuthUser, get_current_user
from invoicedesk.config import settings
from invoicedesk.database import get_db
from invoicedesk.middleware.exceptions import ResourceNotFoundError
from invoicedesk.schemas.common import LineItem
from invoicedesk.schemas.invoice import InvoiceOut
from invoicedesk.schemas.quotation import (
    ConvertRequest,
    QuotationData,
    QuotationOut,
    QuotationTemplate,
)
from invoicedesk.services.quotations import QuotationService
from invoicedesk.utils.numbering import generate_document_number

router = APIRouter()


def get_quotation_service(db: AsyncSession = Depends(get_db)) -> QuotationService:
    return QuotationService(db)


@router.get("/", response_model=list[QuotationOut])
async def list_quotations(
    service: QuotationService = Depends(get_quotation_service),
    _user: AuthUser = Depends(get_current_user),
):
    return await service.quotations.list()


@router.get("/new", response_model=QuotationTemplate)
async def new_quotation(
    db: AsyncSession = Depends(get_db),
    _user: AuthUser = Depends(get_current_user),
):
    """Pre-filled form data for a new quotation."""
    today = dt.date.today()
    return QuotationTemplate(
        quotation_number=await generate_document_number(db, "quotation"),
        date=today,
        expiry_date=today + dt.timedelta(days=settings.quotation_validity_days),
        items=[LineItem()],
        quotation_terms=settings.default_quotation_terms,
        terms_and_conditions=settings.default_terms_and_conditions,
        bank_account_details=settings.default_bank_account_details,
    )


@router.post("/", response_model=QuotationOut, status_code=status.HTTP_201_CREATED)
async def create_quotation(
    body: QuotationData,
    service: QuotationService = Depends(get_quotation_service),
    _user: AuthUser = Depends(get_current_user),
):
    return await service.create(body)


@router.get("/{quotation_id}", response_model=QuotationOut)
async def get_quotation(
    quotation_id: str,
    service: QuotationService = Depends(get_quotation_service),
    _user: AuthUser = Depends(get_current_user),
):
    quotation = await service.quotations.get_by_id(quotation_id)
    if quotation is None:
        raise ResourceNotFoundError("Quotation", quotation_id)
    return quotation


@router.put("/{quotation_id}", response_model=QuotationOut)
async def update_quotation(
    quotation_id: str,
    body: QuotationData,
    service: QuotationService = Depends(get_quotation_service),
    _user: AuthUser = Depends(get_current_user),
):
    """Replace a quotation. Converted quotations are read-only."""
    return await service.update(quotation_id, body)


@router.delete("/{quotation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quotation(
    quotation_id: str,
    service: QuotationService = Depends(get_quotation_service),
    _user: AuthUser = Depends(get_current_user),
):
    if not await service.quotations.delete(quotation_id):
        raise ResourceNotFoundError("Quotation", quotation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Status ───────────────────────────────────────────────────

@router.post("/{quotation_id}/send", response_model=QuotationOut)
async def send_quotation(
    quotation_id: str,
    service: QuotationService = Depends(get_quotation_service),
    _user: AuthUser = Depends(get_current_user),
):
    return await service.mark_sent(quotation_id)


@router.post("/{quotation_id}/accept", response_model=QuotationOut)
async def accept_quotation(
    quotation_id: str,
    service: QuotationService = Depends(get_quotation_service),
    _user: AuthUser = Depends(get_current_user),
):
    return await service.mark_accepted(quotation_id)


@router.post("/{quotation_id}/reject", response_model=QuotationOut)
async def reject_quotation(
    quotation_id: str,
    service: QuotationService = Depends(get_quotation_service),
    _user: AuthUser = Depends(get_current_user),
):
    return await service.mark_rejected(quotation_id)


# ── Conversion ───────────────────────────────────────────────

@router.post(
    "/{quotation_id}/convert",
    response_model=InvoiceOut,
    status_code=status.HTTP_201_CREATED,
)
async def convert_quotation(
    quotation_id: str,
    body: ConvertRequest | None = Body(None),
    service: QuotationService = Depends(get_quotation_service),
    _user: AuthUser = Depends(get_current_user),
):
    """Materialize an invoice from the quotation and mark it converted."""
    return await service.convert_to_invoice(quotation_id, body)
