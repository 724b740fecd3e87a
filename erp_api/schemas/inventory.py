"""
schemas/inventory.py
--------------------
Pydantic models for inventory items.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import Field, StringConstraints

from erp_api.schemas.common import CamelModel

ItemName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Category = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]


class InventoryItemWrite(CamelModel):
    sku: Optional[str] = Field(default=None, max_length=64)
    name: ItemName
    description: Optional[str] = Field(default=None, max_length=1000)
    category: Optional[Category] = None
    quantity_on_hand: int = Field(default=0, ge=0)
    unit_price: Decimal = Field(default=Decimal("0"), ge=0, max_digits=18, decimal_places=2)
    reorder_level: Optional[int] = Field(default=None, ge=0)


class InventoryItemCreate(InventoryItemWrite):
    pass


class InventoryItemUpdate(InventoryItemWrite):
    """Full replacement, except that an omitted sku leaves the SKU as it is."""


class InventoryItemRead(CamelModel):
    """unit_price is rendered as a decimal string; it never passes through float."""
    id: int
    sku: str
    name: str
    description: Optional[str]
    category: Optional[str]
    quantity_on_hand: int
    unit_price: Decimal
    reorder_level: Optional[int]
    created_at: datetime
    updated_at: datetime
