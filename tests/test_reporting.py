import os
import sys
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite://")

from bookshop.db.session import Base
from bookshop.crud.documents import SqlDocumentStore
from bookshop.crud.expenses import create_expense
from bookshop.crud.stock import create_stock_item
from bookshop.services.orders import OrderManager
from bookshop.services.reporting import ProfitAggregator, aggregate_profit, calculate_zakat

# Ensure models are registered so metadata tables are created
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


STOCK = [{"id": "s1", "book_name": "Atomic Habits", "price": 50000, "stock": 5}]


def _order(status="sent", **overrides):
    order = {
        "id": "o1",
        "name": "Rina",
        "status": status,
        "created_at": "2024-03-15T10:00:00Z",
        "orders": [{"id": "l1", "description": "Atomic Habits", "price": 80000, "stockId": "s1"}],
    }
    order.update(overrides)
    return order


def test_sent_order_yields_profit_line():
    report = aggregate_profit([_order()], STOCK, [])

    assert len(report.lines) == 1
    line = report.lines[0]
    assert (line.buy_price, line.sell_price, line.profit) == (50000, 80000, 30000)
    assert line.id == "o1-0"
    assert line.order_name == "Rina"
    assert report.summary.total_profit == 30000
    assert report.summary.total_revenue == 80000
    assert report.summary.total_cost == 50000
    assert report.summary.total_units_shipped == 1


@pytest.mark.parametrize("status", ["pending", "packing", "hnr"])
def test_unsent_orders_do_not_contribute(status):
    report = aggregate_profit([_order(status=status)], STOCK, [])

    assert report.lines == []
    summary = report.summary
    assert (summary.total_revenue, summary.total_cost, summary.total_profit) == (0, 0, 0)
    assert summary.total_units_shipped == 0


def test_cost_falls_back_to_case_insensitive_name_then_zero():
    order = _order(
        orders=[
            {"description": "atomic HABITS", "price": 75000},
            {"description": "Atomic Habits", "price": 80000, "stockId": "deleted"},
            {"description": "Unknown zine", "price": 20000},
        ]
    )

    report = aggregate_profit([order], STOCK, [])

    assert [line.buy_price for line in report.lines] == [50000, 50000, 0]
    assert [line.profit for line in report.lines] == [25000, 30000, 20000]
    assert report.summary.total_units_shipped == 3


def test_stock_id_match_wins_over_name():
    stock = STOCK + [{"id": "s2", "book_name": "Dune", "price": 60000}]
    order = _order(orders=[{"description": "Atomic Habits", "price": 90000, "stockId": "s2"}])

    report = aggregate_profit([order], stock, [])

    assert report.lines[0].buy_price == 60000


def test_net_profit_and_zakat_use_all_expenses():
    expenses = [{"id": "e1", "total": 10000}, {"id": "e2", "total": 5000}, {"id": "e3"}]

    summary = aggregate_profit([_order()], STOCK, expenses).summary

    assert summary.total_expenses == 15000
    assert summary.net_profit == 15000
    assert summary.zakat == Decimal("375.00")
    assert summary.model_dump(mode="json")["zakat"] == 375.0


def test_zakat_only_on_positive_net_profit():
    assert calculate_zakat(100000) == 2500
    assert calculate_zakat(-5000) == 0
    assert calculate_zakat(0) == 0


def test_lines_sorted_newest_first_with_stable_ties():
    older = _order(id="old", created_at="2024-01-01T08:00:00Z")
    newer = _order(
        id="new",
        created_at="2024-05-01T08:00:00Z",
        orders=[
            {"description": "First", "price": 1000},
            {"description": "Second", "price": 2000},
        ],
    )

    report = aggregate_profit([older, newer], STOCK, [])

    assert [line.id for line in report.lines] == ["new-0", "new-1", "old-0"]


def test_missing_names_use_placeholders():
    order = _order(name="", orders=[{"price": 1000}])

    line = aggregate_profit([order], STOCK, []).lines[0]

    assert line.order_name == "Unnamed customer"
    assert line.item_name == "Unnamed item"


def test_aggregator_reads_store_snapshot(db_session):
    store = SqlDocumentStore(db_session)
    item = create_stock_item(store, {"book_name": "Atomic Habits", "price": 50000, "stock": 5})
    manager = OrderManager(store, code_generator=lambda: 9)
    order, _ = manager.create(
        {
            "name": "Rina",
            "last_4_digits_phone": "1234",
            "orders": [{"description": "Atomic Habits", "price": 80000, "stockId": item.id}],
        }
    )
    manager.create(
        {
            "name": "Budi",
            "last_4_digits_phone": "9876",
            "orders": [{"description": "Atomic Habits", "price": 80000}],
        }
    )
    manager.update_status(order.id, "sent")
    create_expense(store, {"name": "Packing tape", "price": 2000, "qty": 5})

    report = ProfitAggregator(store).build_report()

    assert [line.order_id for line in report.lines] == [order.id]
    assert report.summary.total_profit == 30000
    assert report.summary.total_expenses == 10000
    assert report.summary.net_profit == 20000
    assert report.summary.zakat == Decimal("500.00")

    again = ProfitAggregator(store).build_report()
    assert again.summary == report.summary
