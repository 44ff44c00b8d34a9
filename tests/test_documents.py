"""Tests for the SQL-backed document store contract."""

import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite://")

from bookshop.db.session import Base
from bookshop.core.errors import DocumentNotFound, StoreError
from bookshop.crud.documents import SqlDocumentStore, sort_records

from bookshop.models import document as document_model  # noqa: F401


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def store(db_session):
    return SqlDocumentStore(db_session)


def test_insert_assigns_id_and_get_one_returns_record(store):
    created = store.insert("expenses", {"name": "Bubble wrap", "total": 15000})

    assert created["id"]
    assert store.get_one("expenses", created["id"]) == created
    assert store.get_one("orders", created["id"]) is None


def test_update_merges_and_stamps_updated_at(store):
    created = store.insert("orders", {"name": "Rina", "status": "pending"})

    store.update("orders", created["id"], {"status": "sent"})

    record = store.get_one("orders", created["id"])
    assert record["name"] == "Rina"
    assert record["status"] == "sent"
    assert record["updated_at"].endswith("Z")


def test_update_and_remove_missing_document_raise(store):
    with pytest.raises(DocumentNotFound):
        store.update("orders", "nope", {"status": "sent"})
    with pytest.raises(DocumentNotFound):
        store.remove("orders", "nope")


def test_list_collection_orders_by_field(store):
    store.insert("expenses", {"name": "b", "created_at": "2024-01-02T00:00:00Z"})
    store.insert("expenses", {"name": "none"})
    store.insert("expenses", {"name": "a", "created_at": "2024-01-01T00:00:00Z"})

    names_asc = [r["name"] for r in store.list_collection("expenses", "created_at", "asc")]
    names_desc = [r["name"] for r in store.list_collection("expenses", "created_at", "desc")]
    unordered = [r["name"] for r in store.list_collection("expenses")]

    assert names_asc == ["none", "a", "b"]
    assert names_desc == ["b", "a", "none"]
    assert unordered == ["b", "none", "a"]


def test_batch_increment_is_all_or_nothing(store):
    first = store.insert("stock_opname", {"stock": 4})
    second = store.insert("stock_opname", {"stock": 1})

    store.batch_increment("stock_opname", "stock", {first["id"]: -2, second["id"]: 3})
    assert store.get_one("stock_opname", first["id"])["stock"] == 2
    assert store.get_one("stock_opname", second["id"])["stock"] == 4

    with pytest.raises(DocumentNotFound):
        store.batch_increment("stock_opname", "stock", {first["id"]: -1, "missing": -1})
    assert store.get_one("stock_opname", first["id"])["stock"] == 2


def test_sort_records_is_stable_for_ties():
    records = [{"k": 1, "n": "x"}, {"k": 1, "n": "y"}, {"k": 2, "n": "z"}]

    assert [r["n"] for r in sort_records(records, "k", "desc")] == ["z", "x", "y"]


class BrokenSession:
    def __init__(self):
        self.rollbacks = 0

    def execute(self, stmt):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    def rollback(self):
        self.rollbacks += 1


def test_read_failures_roll_back_and_raise_store_error():
    session = BrokenSession()
    store = SqlDocumentStore(session)

    with pytest.raises(StoreError):
        store.get_one("orders", "o1")
    with pytest.raises(StoreError):
        store.list_collection("orders")
    with pytest.raises(StoreError):
        store.batch_increment("stock_opname", "stock", {"s1": -1})

    assert session.rollbacks == 3
