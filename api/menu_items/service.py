"""
Menu item business logic.

Scope:
- validate write payloads (name, price, description, status rules)
- map repository results to response shapes (numeric price)
- turn absence into 404 and zero-row mutations or storage faults into 500
"""

from __future__ import annotations

import logging
import math
import re
from decimal import Decimal
from typing import Any

from core.db import Database
from core.errors import NotFoundError, ServerError, ValidationError, storage_error_details

from . import repository
from .schemas import MenuItemResponse, MenuItemWrite

logger = logging.getLogger(__name__)

STATUSES = ("active", "inactive")
DEFAULT_STATUS = "active"

# menu_item_id is an int4 serial.
MAX_MENU_ITEM_ID = 2**31 - 1

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


def parse_menu_item_id(raw: str) -> int:
    value = str(raw).strip()
    if not _ID_PATTERN.fullmatch(value):
        raise ValidationError("Invalid menu item ID")
    return int(value)


def _ensure_storable_id(menu_item_id: int) -> None:
    # Ids the column cannot hold cannot exist.
    if not 1 <= menu_item_id <= MAX_MENU_ITEM_ID:
        raise NotFoundError("Menu item not found")


def validate_payload(payload: Any) -> MenuItemWrite:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    name = payload.get("name")
    price = payload.get("price")
    if not name or "price" not in payload:
        raise ValidationError("Name and price are required fields")

    is_number = isinstance(price, (int, float)) and not isinstance(price, bool)
    try:
        valid_price = is_number and math.isfinite(price) and price >= 0
    except OverflowError:
        valid_price = False
    if not valid_price:
        raise ValidationError("Price must be a valid non-negative number")

    if not isinstance(name, str):
        raise ValidationError("Name must be a string")

    description = payload.get("description")
    if description is not None and not isinstance(description, str):
        raise ValidationError("Description must be a string or null")

    status = payload.get("status") or DEFAULT_STATUS
    if status not in STATUSES:
        raise ValidationError("Status must be either 'active' or 'inactive'")

    return MenuItemWrite(
        name=name,
        description=description,
        price=Decimal(str(price)),
        status=status,
    )


def to_response(row: dict) -> MenuItemResponse:
    return MenuItemResponse(
        menu_item_id=int(row["menu_item_id"]),
        name=str(row["name"]),
        description=row.get("description"),
        price=float(row["price"]),
        status=row.get("status") or DEFAULT_STATUS,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


async def list_menu_items(db: Database, *, search_query: str = "") -> list[MenuItemResponse]:
    try:
        rows = await repository.list_menu_items(db, search_query=search_query)
    except Exception as exc:
        details = storage_error_details(exc)
        logger.exception("menu_items_list_failed details=%s", details)
        raise ServerError("Failed to retrieve menu items", error=str(exc), details=details) from exc

    logger.info("menu_items_listed count=%s q=%r", len(rows), search_query)
    return [to_response(row) for row in rows]


async def get_menu_item(db: Database, menu_item_id: int) -> MenuItemResponse:
    _ensure_storable_id(menu_item_id)
    try:
        row = await repository.get_menu_item(db, menu_item_id)
    except Exception as exc:
        logger.exception("menu_item_get_failed menu_item_id=%s", menu_item_id)
        raise ServerError("Failed to retrieve menu item", error=str(exc)) from exc

    if row is None:
        raise NotFoundError("Menu item not found")
    return to_response(row)


async def create_menu_item(db: Database, payload: Any) -> MenuItemResponse:
    item = validate_payload(payload)
    try:
        menu_item_id = await repository.create_menu_item(
            db,
            name=item.name,
            description=item.description,
            price=item.price,
            status=item.status,
        )
        if menu_item_id is None:
            raise ServerError("Failed to create menu item")
        row = await repository.get_menu_item(db, menu_item_id)
    except ServerError:
        raise
    except Exception as exc:
        logger.exception("menu_item_create_failed name=%r", item.name)
        raise ServerError("Failed to create menu item", error=str(exc)) from exc

    if row is None:
        raise ServerError("Failed to create menu item")
    logger.info("menu_item_created menu_item_id=%s", menu_item_id)
    return to_response(row)


async def update_menu_item(db: Database, menu_item_id: int, payload: Any) -> MenuItemResponse:
    item = validate_payload(payload)
    _ensure_storable_id(menu_item_id)
    try:
        if not await repository.menu_item_exists(db, menu_item_id):
            raise NotFoundError("Menu item not found")

        # Another request may delete the row between the check and the update.
        affected = await repository.update_menu_item(
            db,
            menu_item_id,
            name=item.name,
            description=item.description,
            price=item.price,
            status=item.status,
        )
        row = await repository.get_menu_item(db, menu_item_id) if affected > 0 else None
    except (NotFoundError, ServerError):
        raise
    except Exception as exc:
        logger.exception("menu_item_update_failed menu_item_id=%s", menu_item_id)
        raise ServerError("Failed to update menu item", error=str(exc)) from exc

    if row is None:
        raise ServerError("Failed to update menu item")
    logger.info("menu_item_updated menu_item_id=%s", menu_item_id)
    return to_response(row)


async def delete_menu_item(db: Database, menu_item_id: int) -> dict:
    _ensure_storable_id(menu_item_id)
    try:
        if not await repository.menu_item_exists(db, menu_item_id):
            raise NotFoundError("Menu item not found")

        if await repository.menu_item_in_use(db, menu_item_id):
            raise ValidationError(
                "Cannot delete menu item because it is referenced in orders",
                suggestion="Consider updating the item instead of deleting it",
            )

        deleted = await repository.delete_menu_item(db, menu_item_id)
    except (NotFoundError, ValidationError):
        raise
    except Exception as exc:
        logger.exception("menu_item_delete_failed menu_item_id=%s", menu_item_id)
        raise ServerError("Failed to delete menu item", error=str(exc)) from exc

    if deleted <= 0:
        raise ServerError("Failed to delete menu item")
    logger.info("menu_item_deleted menu_item_id=%s", menu_item_id)
    return {"success": True, "message": "Menu item deleted successfully"}
