"""Company letterhead router.

Endpoints:
    GET  /api/company/    Company details printed on documents
    PUT  /api/company/    Create or replace the company details
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from invoicedesk.auth.deps import AuthUser, get_current_user
from invoicedesk.database import get_db
from invoicedesk.middleware.exceptions import ResourceNotFoundError
from invoicedesk.schemas.company import CompanyIn, CompanyOut
from invoicedesk.services.documents import CompanyGateway

router = APIRouter()


@router.get("/", response_model=CompanyOut)
async def get_company(
    db: AsyncSession = Depends(get_db),
    _user: AuthUser = Depends(get_current_user),
):
    company = await CompanyGateway(db).get()
    if company is None:
        raise ResourceNotFoundError("Company info", "default")
    return company


@router.put("/", response_model=CompanyOut)
async def save_company(
    body: CompanyIn,
    db: AsyncSession = Depends(get_db),
    _user: AuthUser = Depends(get_current_user),
):
    return await CompanyGateway(db).save(body)
