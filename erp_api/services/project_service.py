"""
services/project_service.py
---------------------------
Project CRUD for a single company. Same isolation rule as inventory:
company_id is always part of the WHERE clause.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.core.exceptions import NotFound
from erp_api.core.logging import get_logger
from erp_api.models.project import Project
from erp_api.schemas.project import ProjectWrite

logger = get_logger(__name__)


class ProjectService:

    @staticmethod
    async def list_projects(db: AsyncSession, tenant_id: int) -> list[Project]:
        """Newest first."""
        result = await db.execute(
            select(Project)
            .where(Project.company_id == tenant_id)
            .order_by(Project.created_at.desc(), Project.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_project(db: AsyncSession, tenant_id: int, project_id: int) -> Project:
        result = await db.execute(
            select(Project).where(
                Project.id == project_id,
                Project.company_id == tenant_id,
            )
        )
        project = result.scalar_one_or_none()
        if project is None:
            raise NotFound("Project not found.")
        return project

    @staticmethod
    async def create_project(
        db: AsyncSession, tenant_id: int, data: ProjectWrite
    ) -> Project:
        project = Project(
            name=data.name,
            description=data.description,
            start_date=data.start_date,
            end_date=data.end_date,
            company_id=tenant_id,
        )
        db.add(project)
        await db.flush()
        logger.info("Project created", project_id=project.id, tenant_id=tenant_id)
        return project

    @staticmethod
    async def update_project(
        db: AsyncSession, tenant_id: int, project_id: int, data: ProjectWrite
    ) -> Project:
        project = await ProjectService.get_project(db, tenant_id, project_id)
        project.name = data.name
        project.description = data.description
        project.start_date = data.start_date
        project.end_date = data.end_date
        await db.flush()
        return project

    @staticmethod
    async def delete_project(db: AsyncSession, tenant_id: int, project_id: int) -> None:
        project = await ProjectService.get_project(db, tenant_id, project_id)
        await db.delete(project)
        await db.flush()
        logger.info("Project deleted", project_id=project_id, tenant_id=tenant_id)
