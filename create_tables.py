"""
create_tables.py
----------------
One-shot script to create all database tables and the built-in roles.
Use this for quick setup. For production migrations, use Alembic instead.

Usage:
    python create_tables.py
"""

import asyncio

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from erp_api.core.config import settings
from erp_api.models import Base  # Imports all models so metadata is populated
from erp_api.services.role_service import KNOWN_ROLES, RoleService


async def create_all_tables() -> None:
    engine = create_async_engine(settings.DATABASE_URL, echo=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_sessionmaker(engine, expire_on_commit=False)() as session:
        await RoleService.get_roles(session, KNOWN_ROLES)
        await session.commit()

    await engine.dispose()
    print("All tables created successfully.")


if __name__ == "__main__":
    asyncio.run(create_all_tables())
