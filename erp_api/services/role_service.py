"""
services/role_service.py
------------------------
Role lookup. The set of role names is fixed; rows in `roles` are created the
first time a role is assigned. Two requests racing to create the same row
both end up with the one that was committed.
"""

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.core.authorization import ADMIN_ROLE, USER_ROLE
from erp_api.core.exceptions import InvalidInput
from erp_api.core.logging import get_logger
from erp_api.models.user import Role

logger = get_logger(__name__)

KNOWN_ROLES = (ADMIN_ROLE, USER_ROLE)

_BY_KEY = {name.lower(): name for name in KNOWN_ROLES}


class RoleService:

    @staticmethod
    def canonical_names(names: Iterable[str]) -> list[str]:
        """
        Map role names to their canonical spelling, case-insensitively and
        without duplicates.
        Raises InvalidInput naming every unknown role.
        """
        canonical: list[str] = []
        unknown: list[str] = []
        for name in names:
            match = _BY_KEY.get(name.strip().lower())
            if match is None:
                unknown.append(name)
            elif match not in canonical:
                canonical.append(match)
        if unknown:
            raise InvalidInput(
                "Unknown role(s): " + ", ".join(unknown),
                extra={"invalid": unknown},
            )
        return canonical

    @staticmethod
    async def _existing(db: AsyncSession, names: list[str]) -> dict[str, Role]:
        result = await db.execute(select(Role).where(Role.name.in_(names)))
        return {role.name: role for role in result.scalars().all()}

    @staticmethod
    async def _create_or_fetch(db: AsyncSession, name: str) -> Role:
        """
        Insert the role under a savepoint. On a unique-name conflict only the
        savepoint is rolled back and the stored row is returned instead.
        """
        role = Role(name=name)
        try:
            async with db.begin_nested():
                db.add(role)
        except IntegrityError:
            logger.info("Role created concurrently, reusing stored row", role=name)
            result = await db.execute(select(Role).where(Role.name == name))
            return result.scalar_one()
        return role

    @staticmethod
    async def get_roles(db: AsyncSession, names: Iterable[str]) -> list[Role]:
        canonical = RoleService.canonical_names(names)
        if not canonical:
            return []

        existing = await RoleService._existing(db, canonical)
        for name in canonical:
            if name not in existing:
                existing[name] = await RoleService._create_or_fetch(db, name)

        return [existing[name] for name in canonical]
