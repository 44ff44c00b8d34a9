"""Stock opname (catalog + quantity on hand) helpers."""

from __future__ import annotations

from ..core.errors import DocumentNotFound
from ..schemas.stock import StockItem
from .documents import STOCK, DocumentStore, sort_records, utcnow_iso


def _clean_name(value: object) -> str:
    name = str(value or "").strip()
    if not name:
        raise ValueError("book_name is required")
    return name


def _non_negative(field: str, value: object) -> int:
    if value is None or isinstance(value, bool):
        raise ValueError(f"{field} is required")
    number = int(value)
    if number < 0:
        raise ValueError(f"{field} must not be negative")
    return number


def list_stock_items(store: DocumentStore, search: str | None = None) -> list[StockItem]:
    """Newest first; items without ``created_at`` trail in store order."""

    records = sort_records(store.list_collection(STOCK), "created_at", "desc")
    items = [StockItem.model_validate(record) for record in records]
    needle = (search or "").strip().lower()
    if needle:
        items = [item for item in items if needle in item.book_name.lower()]
    return items


def get_stock_item(store: DocumentStore, stock_id: str) -> StockItem:
    record = store.get_one(STOCK, stock_id)
    if record is None:
        raise DocumentNotFound(STOCK, stock_id)
    return StockItem.model_validate(record)


def create_stock_item(store: DocumentStore, payload: dict) -> StockItem:
    data = {
        "book_name": _clean_name(payload.get("book_name")),
        "price": _non_negative("price", payload.get("price")),
        "stock": _non_negative("stock", payload.get("stock")),
        "created_at": utcnow_iso(),
    }
    return StockItem.model_validate(store.insert(STOCK, data))


def update_stock_item(store: DocumentStore, stock_id: str, payload: dict) -> StockItem:
    """Direct edit of name, cost price or counted stock."""

    changes: dict[str, object] = {}
    if payload.get("book_name") is not None:
        changes["book_name"] = _clean_name(payload["book_name"])
    if payload.get("price") is not None:
        changes["price"] = _non_negative("price", payload["price"])
    if payload.get("stock") is not None:
        # A recount may legitimately record a shortfall left by oversold orders.
        changes["stock"] = int(payload["stock"])
    store.update(STOCK, stock_id, changes)
    return get_stock_item(store, stock_id)


def delete_stock_item(store: DocumentStore, stock_id: str) -> None:
    store.remove(STOCK, stock_id)


def total_stock(store: DocumentStore) -> dict[str, int]:
    records = store.list_collection(STOCK)
    return {
        "total_stock": sum(int(record.get("stock") or 0) for record in records),
        "item_count": len(records),
    }


__all__ = [
    "create_stock_item",
    "delete_stock_item",
    "get_stock_item",
    "list_stock_items",
    "total_stock",
    "update_stock_item",
]
