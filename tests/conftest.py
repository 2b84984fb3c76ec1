from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import pytest
from fastapi.testclient import TestClient

from core.db import DatabaseSettings, get_db
from main import app
from menu_items import repository


class FakeDatabase:
    """
    Stands in for `core.db.Database`: records statements and replays canned results.
    """

    def __init__(self) -> None:
        self.settings = DatabaseSettings()
        self.calls: list[tuple[str, str, tuple[Any, ...]]] = []
        self.fetch_one_result: dict | None = None
        self.fetch_all_result: list[dict] = []
        self.execute_result = 1

    async def fetch_one(self, sql: str, *args: Any) -> dict | None:
        self.calls.append(("fetch_one", sql, args))
        return self.fetch_one_result

    async def fetch_all(self, sql: str, *args: Any) -> list[dict]:
        self.calls.append(("fetch_all", sql, args))
        return self.fetch_all_result

    async def execute(self, sql: str, *args: Any) -> int:
        self.calls.append(("execute", sql, args))
        return self.execute_result


class InMemoryMenuStore:
    """
    Replaces the repository functions with a dict-backed table.
    """

    def __init__(self) -> None:
        self.rows: dict[int, dict] = {}
        self.order_item_refs: set[int] = set()
        self.next_id = 1
        self.fail_with: Exception | None = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def list_menu_items(self, db, *, search_query: str = "") -> list[dict]:
        self._check()
        q = (search_query or "").strip().lower()
        rows = [dict(r) for r in self.rows.values() if not q or q in r["name"].lower()]
        return sorted(rows, key=lambda r: r["name"])

    async def get_menu_item(self, db, menu_item_id: int) -> dict | None:
        self._check()
        row = self.rows.get(menu_item_id)
        return dict(row) if row is not None else None

    async def create_menu_item(self, db, *, name, description, price, status) -> int | None:
        self._check()
        now = datetime.now(timezone.utc)
        menu_item_id = self.next_id
        self.next_id += 1
        self.rows[menu_item_id] = {
            "menu_item_id": menu_item_id,
            "name": name,
            "description": description,
            "price": Decimal(price).quantize(Decimal("0.01")),
            "status": status,
            "created_at": now,
            "updated_at": now,
        }
        return menu_item_id

    async def update_menu_item(self, db, menu_item_id, *, name, description, price, status) -> int:
        self._check()
        row = self.rows.get(menu_item_id)
        if row is None:
            return 0
        row.update(
            name=name,
            description=description,
            price=Decimal(price).quantize(Decimal("0.01")),
            status=status,
            updated_at=datetime.now(timezone.utc),
        )
        return 1

    async def menu_item_exists(self, db, menu_item_id: int) -> bool:
        self._check()
        return menu_item_id in self.rows

    async def menu_item_in_use(self, db, menu_item_id: int) -> bool:
        self._check()
        return menu_item_id in self.order_item_refs

    async def delete_menu_item(self, db, menu_item_id: int) -> int:
        self._check()
        return 1 if self.rows.pop(menu_item_id, None) is not None else 0


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def store(monkeypatch) -> InMemoryMenuStore:
    store = InMemoryMenuStore()
    for name in (
        "list_menu_items",
        "get_menu_item",
        "create_menu_item",
        "update_menu_item",
        "menu_item_exists",
        "menu_item_in_use",
        "delete_menu_item",
    ):
        monkeypatch.setattr(repository, name, getattr(store, name))
    return store


@pytest.fixture
def client(fake_db, store):
    # No `with` block: the lifespan (and its real pool) never starts.
    app.dependency_overrides[get_db] = lambda: fake_db
    app.state.db = fake_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
