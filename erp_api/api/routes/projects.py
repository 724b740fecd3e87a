"""
api/routes/projects.py
----------------------
Project endpoints.

GET    /projects        - any authenticated user with a company
GET    /projects/{id}   - any authenticated user with a company
POST   /projects        - Admin
PUT    /projects/{id}   - Admin
DELETE /projects/{id}   - Admin

Projects of other companies answer 404.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.core.authorization import Principal
from erp_api.db.session import get_db
from erp_api.dependencies import get_current_admin, get_tenant_id
from erp_api.schemas.project import ProjectRead, ProjectWrite
from erp_api.services.project_service import ProjectService

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("", response_model=list[ProjectRead], summary="List projects")
async def list_projects(
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ProjectRead]:
    projects = await ProjectService.list_projects(db, tenant_id)
    return [ProjectRead.model_validate(p) for p in projects]


@router.get("/{project_id}", response_model=ProjectRead, summary="Get a project")
async def get_project(
    project_id: int,
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProjectRead:
    project = await ProjectService.get_project(db, tenant_id, project_id)
    return ProjectRead.model_validate(project)


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a project (admin only)",
)
async def create_project(
    body: ProjectWrite,
    admin: Annotated[Principal, Depends(get_current_admin)],
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProjectRead:
    project = await ProjectService.create_project(db, tenant_id, body)
    return ProjectRead.model_validate(project)


@router.put(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update a project (admin only)",
)
async def update_project(
    project_id: int,
    body: ProjectWrite,
    admin: Annotated[Principal, Depends(get_current_admin)],
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    await ProjectService.update_project(db, tenant_id, project_id, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a project (admin only)",
)
async def delete_project(
    project_id: int,
    admin: Annotated[Principal, Depends(get_current_admin)],
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    await ProjectService.delete_project(db, tenant_id, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
