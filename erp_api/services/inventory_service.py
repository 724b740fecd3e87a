"""
services/inventory_service.py
-----------------------------
Inventory CRUD for a single company.

Critical security invariant:
  Every query MUST include company_id in the WHERE clause. Records of other
  companies are indistinguishable from missing ones (NotFound).
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from erp_api.core.exceptions import Conflict, NotFound
from erp_api.core.logging import get_logger
from erp_api.models.inventory_item import InventoryItem
from erp_api.schemas.inventory import InventoryItemCreate, InventoryItemUpdate

logger = get_logger(__name__)

_DUPLICATE_SKU = "An item with this SKU already exists in your company."


class InventoryService:

    @staticmethod
    async def list_items(db: AsyncSession, tenant_id: int) -> list[InventoryItem]:
        result = await db.execute(
            select(InventoryItem)
            .where(InventoryItem.company_id == tenant_id)
            .order_by(InventoryItem.name, InventoryItem.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_item(db: AsyncSession, tenant_id: int, item_id: int) -> InventoryItem:
        result = await db.execute(
            select(InventoryItem).where(
                InventoryItem.id == item_id,
                InventoryItem.company_id == tenant_id,
            )
        )
        item = result.scalar_one_or_none()
        if item is None:
            raise NotFound("Inventory item not found.")
        return item

    @staticmethod
    async def _sku_taken(
        db: AsyncSession, tenant_id: int, sku: str, exclude_id: int | None = None
    ) -> bool:
        query = select(InventoryItem.id).where(
            InventoryItem.company_id == tenant_id,
            InventoryItem.sku == sku,
        )
        if exclude_id is not None:
            query = query.where(InventoryItem.id != exclude_id)
        result = await db.execute(query.limit(1))
        return result.first() is not None

    @staticmethod
    async def create_item(
        db: AsyncSession, tenant_id: int, data: InventoryItemCreate
    ) -> InventoryItem:
        sku = (data.sku or "").strip()
        if sku and await InventoryService._sku_taken(db, tenant_id, sku):
            raise Conflict(_DUPLICATE_SKU)

        item = InventoryItem(
            sku=sku,
            name=data.name,
            description=data.description,
            category=data.category,
            quantity_on_hand=data.quantity_on_hand,
            unit_price=data.unit_price,
            reorder_level=data.reorder_level,
            company_id=tenant_id,  # Sourced from authenticated session
        )
        db.add(item)
        await db.flush()

        logger.info("Inventory item created", item_id=item.id, tenant_id=tenant_id)
        return item

    @staticmethod
    async def update_item(
        db: AsyncSession, tenant_id: int, item_id: int, data: InventoryItemUpdate
    ) -> InventoryItem:
        """
        Replace the item's fields. The SKU is only touched when supplied;
        an empty string clears it.
        """
        item = await InventoryService.get_item(db, tenant_id, item_id)

        if data.sku is not None:
            sku = data.sku.strip()
            if sku != item.sku:
                if sku and await InventoryService._sku_taken(db, tenant_id, sku, item.id):
                    raise Conflict(_DUPLICATE_SKU)
                item.sku = sku

        item.name = data.name
        item.description = data.description
        item.category = data.category
        item.quantity_on_hand = data.quantity_on_hand
        item.unit_price = data.unit_price
        item.reorder_level = data.reorder_level
        await db.flush()
        return item

    @staticmethod
    async def delete_item(db: AsyncSession, tenant_id: int, item_id: int) -> None:
        item = await InventoryService.get_item(db, tenant_id, item_id)
        await db.delete(item)
        await db.flush()
        logger.info("Inventory item deleted", item_id=item_id, tenant_id=tenant_id)
