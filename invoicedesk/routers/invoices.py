"""Invoice router.

Endpoints:
    GET    /api/invoices/            List invoices (newest first, ?search=)
    GET    /api/invoices/summary     Dashboard totals
    GET    /api/invoices/new         Blank invoice with the next number
    POST   /api/invoices/            Create invoice
    GET    /api/invoices/{id}        Get invoice
    PUT    /api/invoices/{id}        Replace invoice (fields and items)
    DELETE /api/invoices/{id}        Delete invoice and its items
"""

import datetime as dt

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from invoicedesk.auth.deps import AuthUser, get_current_user
from invoicedesk.config import settings
from invoicedesk.database import get_db
from invoicedesk.middleware.exceptions import ResourceNotFoundError
from invoicedesk.schemas.common import LineItem
from invoicedesk.schemas.invoice import InvoiceData, InvoiceOut, InvoiceSummary, InvoiceTemplate
from invoicedesk.services.documents import InvoiceGateway
from invoicedesk.utils.numbering import generate_document_number

router = APIRouter()


def get_invoice_gateway(db: AsyncSession = Depends(get_db)) -> InvoiceGateway:
    return InvoiceGateway(db)


@router.get("/", response_model=list[InvoiceOut])
async def list_invoices(
    search: str | None = Query(None, max_length=100),
    gateway: InvoiceGateway = Depends(get_invoice_gateway),
    _user: AuthUser = Depends(get_current_user),
):
    """List invoices, optionally filtered by client name or number."""
    return await gateway.list(search=search)


@router.get("/summary", response_model=InvoiceSummary)
async def invoice_summary(
    gateway: InvoiceGateway = Depends(get_invoice_gateway),
    _user: AuthUser = Depends(get_current_user),
):
    return await gateway.summary()


@router.get("/new", response_model=InvoiceTemplate)
async def new_invoice(
    db: AsyncSession = Depends(get_db),
    _user: AuthUser = Depends(get_current_user),
):
    """Pre-filled form data for a new invoice."""
    return InvoiceTemplate(
        invoice_number=await generate_document_number(db, "invoice"),
        date=dt.date.today(),
        items=[LineItem()],
        payment_terms=settings.default_payment_terms,
        terms_and_conditions=settings.default_terms_and_conditions,
        bank_account_details=settings.default_bank_account_details,
    )


@router.post("/", response_model=InvoiceOut, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    body: InvoiceData,
    gateway: InvoiceGateway = Depends(get_invoice_gateway),
    _user: AuthUser = Depends(get_current_user),
):
    return await gateway.create(body)


@router.get("/{invoice_id}", response_model=InvoiceOut)
async def get_invoice(
    invoice_id: str,
    gateway: InvoiceGateway = Depends(get_invoice_gateway),
    _user: AuthUser = Depends(get_current_user),
):
    invoice = await gateway.get_by_id(invoice_id)
    if invoice is None:
        raise ResourceNotFoundError("Invoice", invoice_id)
    return invoice


@router.put("/{invoice_id}", response_model=InvoiceOut)
async def update_invoice(
    invoice_id: str,
    body: InvoiceData,
    gateway: InvoiceGateway = Depends(get_invoice_gateway),
    _user: AuthUser = Depends(get_current_user),
):
    """Replace an invoice; the submitted items replace all existing ones."""
    invoice = await gateway.update(invoice_id, body)
    if invoice is None:
        raise ResourceNotFoundError("Invoice", invoice_id)
    return invoice


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    invoice_id: str,
    gateway: InvoiceGateway = Depends(get_invoice_gateway),
    _user: AuthUser = Depends(get_current_user),
):
    if not await gateway.delete(invoice_id):
        raise ResourceNotFoundError("Invoice", invoice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
