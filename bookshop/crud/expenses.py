"""Operating expense records."""

from __future__ import annotations

from ..schemas.expense import Expense
from .documents import EXPENSES, DocumentStore, utcnow_iso


def create_expense(store: DocumentStore, payload: dict) -> Expense:
    """Persist an expense with ``total`` fixed at write time."""

    name = str(payload.get("name") or "").strip()
    if not name:
        raise ValueError("name is required")
    if payload.get("price") is None or payload.get("qty") is None:
        raise ValueError("price and qty are required")
    price = int(payload["price"])
    qty = int(payload["qty"])
    if price < 0:
        raise ValueError("price must not be negative")
    if qty < 1:
        raise ValueError("qty must be at least 1")
    data = {
        "name": name,
        "price": price,
        "qty": qty,
        "total": price * qty,
        "created_at": utcnow_iso(),
    }
    return Expense.model_validate(store.insert(EXPENSES, data))


def list_expenses(store: DocumentStore) -> list[Expense]:
    records = store.list_collection(EXPENSES, order_by="created_at", direction="desc")
    return [Expense.model_validate(record) for record in records]


def sum_expense_totals(records: list[dict]) -> int:
    """Sum stored totals; the product is never re-derived from price and qty."""

    return sum(int(record.get("total") or 0) for record in records)


def total_expenses(store: DocumentStore) -> int:
    return sum_expense_totals(store.list_collection(EXPENSES))


def delete_expense(store: DocumentStore, expense_id: str) -> None:
    store.remove(EXPENSES, expense_id)


__all__ = [
    "create_expense",
    "delete_expense",
    "list_expenses",
    "sum_expense_totals",
    "total_expenses",
]
