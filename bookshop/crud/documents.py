"""Document store access: the only place that talks to the database.

The services never import SQLAlchemy. They receive something shaped like
``DocumentStore`` and work with plain ``dict`` records that carry an ``"id"``
key, which keeps them testable against lightweight doubles.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Protocol
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import DocumentNotFound, StoreError
from ..models.document import Document

ORDERS = "orders"
STOCK = "stock_opname"
EXPENSES = "expenses"
SALES_HISTORY = "sales_history"


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class DocumentStore(Protocol):
    def list_collection(
        self, name: str, order_by: str | None = None, direction: str = "asc"
    ) -> list[dict[str, Any]]: ...

    def get_one(self, name: str, doc_id: str) -> dict[str, Any] | None: ...

    def insert(self, name: str, data: Mapping[str, Any]) -> dict[str, Any]: ...

    def update(self, name: str, doc_id: str, data: Mapping[str, Any]) -> None: ...

    def remove(self, name: str, doc_id: str) -> None: ...

    def batch_increment(self, name: str, field: str, deltas: Mapping[str, int]) -> None: ...


def sort_records(records: list[dict[str, Any]], field: str, direction: str = "asc") -> list[dict[str, Any]]:
    """Stable sort on ``field``; records missing the field sort as smallest."""

    def key(record: dict[str, Any]) -> tuple[bool, Any]:
        value = record.get(field)
        return (value is not None, value if value is not None else 0)

    return sorted(records, key=key, reverse=direction == "desc")


class SqlDocumentStore:
    """``DocumentStore`` backed by one SQLAlchemy ``documents`` table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _fetch(self, name: str, doc_id: str) -> Document | None:
        stmt = select(Document).where(Document.collection == name, Document.doc_id == doc_id)
        try:
            return self.db.execute(stmt).scalars().first()
        except SQLAlchemyError as exc:
            raise self._read_failed(exc) from exc

    def _read_failed(self, exc: SQLAlchemyError) -> StoreError:
        self.db.rollback()
        return StoreError(str(exc))

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(str(exc)) from exc

    def list_collection(
        self, name: str, order_by: str | None = None, direction: str = "asc"
    ) -> list[dict[str, Any]]:
        if direction not in ("asc", "desc"):
            raise ValueError("direction must be 'asc' or 'desc'")
        stmt = select(Document).where(Document.collection == name).order_by(Document.pk)
        try:
            rows = self.db.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            raise self._read_failed(exc) from exc
        records = [row.as_record() for row in rows]
        if order_by:
            records = sort_records(records, order_by, direction)
        return records

    def get_one(self, name: str, doc_id: str) -> dict[str, Any] | None:
        row = self._fetch(name, doc_id)
        return row.as_record() if row else None

    def insert(self, name: str, data: Mapping[str, Any]) -> dict[str, Any]:
        payload = {key: value for key, value in data.items() if key != "id"}
        now = utcnow_iso()
        row = Document(
            doc_id=uuid4().hex,
            collection=name,
            data=payload,
            created_at=now,
            updated_at=now,
        )
        self.db.add(row)
        self._commit()
        return row.as_record()

    def update(self, name: str, doc_id: str, data: Mapping[str, Any]) -> None:
        row = self._fetch(name, doc_id)
        if row is None:
            raise DocumentNotFound(name, doc_id)
        now = utcnow_iso()
        merged = dict(row.data or {})
        merged.update({key: value for key, value in data.items() if key != "id"})
        merged["updated_at"] = now
        # Reassign so SQLAlchemy sees the JSON column as dirty.
        row.data = merged
        row.updated_at = now
        self._commit()

    def remove(self, name: str, doc_id: str) -> None:
        row = self._fetch(name, doc_id)
        if row is None:
            raise DocumentNotFound(name, doc_id)
        self.db.delete(row)
        self._commit()

    def batch_increment(self, name: str, field: str, deltas: Mapping[str, int]) -> None:
        """Apply every ``doc_id -> delta`` to ``field`` or none of them."""

        if not deltas:
            return
        stmt = select(Document).where(
            Document.collection == name, Document.doc_id.in_(list(deltas))
        )
        try:
            rows = {row.doc_id: row for row in self.db.execute(stmt).scalars().all()}
        except SQLAlchemyError as exc:
            raise self._read_failed(exc) from exc
        missing = [doc_id for doc_id in deltas if doc_id not in rows]
        if missing:
            self.db.rollback()
            raise DocumentNotFound(name, missing[0])
        now = utcnow_iso()
        for doc_id, delta in deltas.items():
            row = rows[doc_id]
            data = dict(row.data or {})
            data[field] = int(data.get(field) or 0) + int(delta)
            row.data = data
            row.updated_at = now
        self._commit()


__all__ = [
    "DocumentStore",
    "EXPENSES",
    "ORDERS",
    "SALES_HISTORY",
    "STOCK",
    "SqlDocumentStore",
    "sort_records",
    "utcnow_iso",
]
