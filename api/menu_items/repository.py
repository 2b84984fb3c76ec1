"""
Menu item persistence (raw SQL).
"""

from __future__ import annotations

from decimal import Decimal

from core.db import Database

_COLUMNS = "menu_item_id, name, description, price, status, created_at, updated_at"


async def list_menu_items(db: Database, *, search_query: str = "") -> list[dict]:
    q = (search_query or "").strip().lower()
    return await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM menu_item
        WHERE $1 = ''
           OR strpos(lower(name), $1) > 0
        ORDER BY name ASC
        """,
        q,
    )


async def get_menu_item(db: Database, menu_item_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM menu_item
        WHERE menu_item_id = $1
        """,
        menu_item_id,
    )


async def create_menu_item(
    db: Database,
    *,
    name: str,
    description: str | None,
    price: Decimal,
    status: str,
) -> int | None:
    """
    Insert a row and return its generated id (None if nothing was inserted).
    """
    row = await db.fetch_one(
        """
        INSERT INTO menu_item (name, description, price, status)
        VALUES ($1, $2, $3, $4)
        RETURNING menu_item_id
        """,
        name,
        description,
        price,
        status,
    )
    if row is None or not row.get("menu_item_id"):
        return None
    return int(row["menu_item_id"])


async def update_menu_item(
    db: Database,
    menu_item_id: int,
    *,
    name: str,
    description: str | None,
    price: Decimal,
    status: str,
) -> int:
    return await db.execute(
        """
        UPDATE menu_item
        SET name = $2,
            description = $3,
            price = $4,
            status = $5,
            updated_at = now()
        WHERE menu_item_id = $1
        """,
        menu_item_id,
        name,
        description,
        price,
        status,
    )


async def menu_item_exists(db: Database, menu_item_id: int) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM menu_item
        WHERE menu_item_id = $1
        """,
        menu_item_id,
    )
    return row is not None


async def menu_item_in_use(db: Database, menu_item_id: int) -> bool:
    row = await db.fetch_one(
        """
        SELECT order_item_id
        FROM order_item
        WHERE menu_item_id = $1
        LIMIT 1
        """,
        menu_item_id,
    )
    return row is not None


async def delete_menu_item(db: Database, menu_item_id: int) -> int:
    return await db.execute(
        """
        DELETE FROM menu_item
        WHERE menu_item_id = $1
        """,
        menu_item_id,
    )
