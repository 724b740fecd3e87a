"""
api/routes/companies.py
-----------------------
Company (tenant) endpoints.

POST /companies/register - Public: create a company and its first Admin.
GET  /companies/me       - The caller's own company.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.core.authorization import Principal
from erp_api.core.exceptions import NotFound
from erp_api.db.session import get_db
from erp_api.dependencies import get_current_principal
from erp_api.schemas.company import CompanyRead, CompanyRegister, CompanyRegistered
from erp_api.services.company_service import CompanyService
from erp_api.services.token_service import TokenService

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post(
    "/register",
    response_model=CompanyRegistered,
    status_code=status.HTTP_201_CREATED,
    summary="Register a company and bootstrap its Admin",
)
async def register_company(
    body: CompanyRegister,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CompanyRegistered:
    """
    Public endpoint - no authentication required.
    Returns an access token for the new Admin so the client can continue
    without a separate login.
    """
    company, admin = await CompanyService.register_company(db, body)
    return CompanyRegistered(
        company_id=company.id,
        company_name=company.name,
        admin_user_id=admin.id,
        admin_email=admin.email,
        token=TokenService.issue_access_token(admin),
    )


@router.get(
    "/me",
    response_model=CompanyRead,
    summary="Get the current user's company",
)
async def get_my_company(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CompanyRead:
    company = None
    if principal.has_tenant:
        company = await CompanyService.get_company_by_id(db, principal.tenant_id)
    if company is None:
        raise NotFound("Company not found.")
    return CompanyRead.model_validate(company)
