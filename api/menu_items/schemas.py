"""
Pydantic schemas for menu item endpoints.

Request bodies are accepted as raw JSON objects and checked in `service.py`
so that each rule maps to its own 400 message; these models describe the
validated write and the response shapes.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

MenuItemStatus = Literal["active", "inactive"]


class MenuItemWrite(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    price: Decimal = Field(..., ge=0)
    status: MenuItemStatus = "active"


class MenuItemResponse(BaseModel):
    menu_item_id: int
    name: str
    description: str | None
    price: float
    status: MenuItemStatus = "active"
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MenuItemsResponse(BaseModel):
    items: list[MenuItemResponse]


class DeleteResponse(BaseModel):
    success: bool = True
    message: str
