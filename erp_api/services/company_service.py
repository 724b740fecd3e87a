"""
services/company_service.py
---------------------------
Business logic for company (tenant) registration.

Service layer is responsible for:
  - Constructing queries
  - Enforcing business rules (e.g. unique names)
  - Returning domain objects (ORM models) to the route layer
  - Never returning HTTP responses (that's the route's job)
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.core.authorization import ADMIN_ROLE
from erp_api.core.exceptions import Conflict
from erp_api.core.logging import get_logger
from erp_api.models.company import Company
from erp_api.models.user import User
from erp_api.schemas.company import CompanyRegister
from erp_api.services.credential_service import CredentialService
from erp_api.services.role_service import RoleService

logger = get_logger(__name__)


class CompanyService:

    @staticmethod
    async def register_company(
        db: AsyncSession, data: CompanyRegister
    ) -> tuple[Company, User]:
        """
        Create a company and its first Admin in one transaction.
        The admin's email is confirmed immediately so they can log in.
        Raises Conflict if the company name or admin email is taken.
        """
        if await CompanyService.get_company_by_name(db, data.name) is not None:
            raise Conflict("A company with this name already exists.")
        if await CredentialService.get_user_by_email(db, data.admin_email) is not None:
            raise Conflict("A user with this email already exists.")

        company = Company(name=data.name)
        db.add(company)
        await db.flush()

        admin = await CredentialService.create_account(
            db,
            email=data.admin_email,
            password=data.admin_password,
            company_id=company.id,
            email_confirmed=True,
            roles=await RoleService.get_roles(db, [ADMIN_ROLE]),
        )

        logger.info(
            "Company registered",
            tenant_id=company.id,
            name=company.name,
            admin_user_id=admin.id,
        )
        return company, admin

    @staticmethod
    async def get_company_by_id(db: AsyncSession, company_id: int) -> Company | None:
        result = await db.execute(select(Company).where(Company.id == company_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_company_by_name(db: AsyncSession, name: str) -> Company | None:
        result = await db.execute(select(Company).where(Company.name == name))
        return result.scalars().first()
