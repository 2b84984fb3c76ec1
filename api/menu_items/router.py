"""
Menu item API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from core.db import Database, get_db

from . import schemas, service

router = APIRouter()


@router.get("/menu-items", response_model=schemas.MenuItemsResponse)
async def list_menu_items(
    q: str = Query(default="", max_length=200),
    db: Database = Depends(get_db),
) -> dict:
    items = await service.list_menu_items(db, search_query=q)
    return {"items": items}


@router.post(
    "/menu-items",
    response_model=schemas.MenuItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_menu_item(
    payload: Any = Body(...),
    db: Database = Depends(get_db),
) -> schemas.MenuItemResponse:
    return await service.create_menu_item(db, payload)


@router.get("/menu-items/{menu_item_id}", response_model=schemas.MenuItemResponse)
async def get_menu_item(
    menu_item_id: str,
    db: Database = Depends(get_db),
) -> schemas.MenuItemResponse:
    return await service.get_menu_item(db, service.parse_menu_item_id(menu_item_id))


@router.put("/menu-items/{menu_item_id}", response_model=schemas.MenuItemResponse)
async def update_menu_item(
    menu_item_id: str,
    payload: Any = Body(...),
    db: Database = Depends(get_db),
) -> schemas.MenuItemResponse:
    item_id = service.parse_menu_item_id(menu_item_id)
    return await service.update_menu_item(db, item_id, payload)


@router.delete("/menu-items/{menu_item_id}", response_model=schemas.DeleteResponse)
async def delete_menu_item(
    menu_item_id: str,
    db: Database = Depends(get_db),
) -> dict:
    return await service.delete_menu_item(db, service.parse_menu_item_id(menu_item_id))
