"""
api/routes/inventory.py
-----------------------
Inventory endpoints, gated by inventory permissions (Admin passes all).

GET    /inventory        - view_inventory
GET    /inventory/{id}   - view_inventory
POST   /inventory        - create_inventory
PUT    /inventory/{id}   - edit_inventory
DELETE /inventory/{id}   - delete_inventory

Items of other companies answer 404.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.core.authorization import Principal
from erp_api.core.permissions import Permission
from erp_api.db.session import get_db
from erp_api.dependencies import get_tenant_id, require_permission
from erp_api.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemRead,
    InventoryItemUpdate,
)
from erp_api.services.inventory_service import InventoryService

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get("", response_model=list[InventoryItemRead], summary="List inventory items")
async def list_items(
    principal: Annotated[Principal, Depends(require_permission(Permission.view_inventory))],
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[InventoryItemRead]:
    items = await InventoryService.list_items(db, tenant_id)
    return [InventoryItemRead.model_validate(i) for i in items]


@router.get("/{item_id}", response_model=InventoryItemRead, summary="Get an inventory item")
async def get_item(
    item_id: int,
    principal: Annotated[Principal, Depends(require_permission(Permission.view_inventory))],
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> InventoryItemRead:
    item = await InventoryService.get_item(db, tenant_id, item_id)
    return InventoryItemRead.model_validate(item)


@router.post(
    "",
    response_model=InventoryItemRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create an inventory item",
)
async def create_item(
    body: InventoryItemCreate,
    principal: Annotated[Principal, Depends(require_permission(Permission.create_inventory))],
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> InventoryItemRead:
    item = await InventoryService.create_item(db, tenant_id, body)
    return InventoryItemRead.model_validate(item)


@router.put(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update an inventory item",
)
async def update_item(
    item_id: int,
    body: InventoryItemUpdate,
    principal: Annotated[Principal, Depends(require_permission(Permission.edit_inventory))],
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    await InventoryService.update_item(db, tenant_id, item_id, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an inventory item",
)
async def delete_item(
    item_id: int,
    principal: Annotated[Principal, Depends(require_permission(Permission.delete_inventory))],
    tenant_id: Annotated[int, Depends(get_tenant_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    await InventoryService.delete_item(db, tenant_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
