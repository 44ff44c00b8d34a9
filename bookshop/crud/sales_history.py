"""Manually entered historical sales rollups.

These predate order tracking and are kept apart from the derived profit
report.
"""

from __future__ import annotations

from ..schemas.sales_history import SalesHistoryEntry
from .documents import SALES_HISTORY, DocumentStore, utcnow_iso

REQUIRED_FIELDS = ("description", "capital", "revenue", "total_books")


def create_entry(store: DocumentStore, payload: dict) -> SalesHistoryEntry:
    missing = [field for field in REQUIRED_FIELDS if payload.get(field) in (None, "")]
    if missing or not str(payload.get("description") or "").strip():
        raise ValueError("description, capital, revenue and total_books are required")
    capital = int(payload["capital"])
    revenue = int(payload["revenue"])
    data = {
        "description": str(payload["description"]).strip(),
        "capital": capital,
        "revenue": revenue,
        "profit": revenue - capital,
        "total_books": int(payload["total_books"]),
        "created_at": utcnow_iso(),
    }
    return SalesHistoryEntry.model_validate(store.insert(SALES_HISTORY, data))


def list_entries(store: DocumentStore) -> list[SalesHistoryEntry]:
    records = store.list_collection(SALES_HISTORY, order_by="created_at", direction="desc")
    return [SalesHistoryEntry.model_validate(record) for record in records]


def delete_entry(store: DocumentStore, entry_id: str) -> None:
    store.remove(SALES_HISTORY, entry_id)


__all__ = ["create_entry", "delete_entry", "list_entries"]
