import os
import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite://")

from bookshop.schemas.filters import OrderFilter
from bookshop.schemas.order import Order
from bookshop.services.filters import filter_orders

TZ = "Asia/Jakarta"


@pytest.fixture()
def orders():
    return [
        Order(id="a", name="Rina", last_4_digits_phone="1234", status="pending", payment_status="none",
              created_at="2024-03-15T10:00"),
        Order(id="b", name="Budi", last_4_digits_phone="9876", status="sent", payment_status="full",
              created_at="2024-03-01T00:00"),
        Order(id="c", name="Sari", last_4_digits_phone="5555", status="sent", payment_status="half",
              created_at="2024-04-02T08:30"),
        Order(id="d", name="Undated", last_4_digits_phone="0000", status="hnr", payment_status="none"),
    ]


def _ids(result):
    return [order.id for order in result]


def test_all_filters_is_identity(orders):
    result = filter_orders(orders, OrderFilter(), tz=TZ)

    assert result == orders
    assert result is not orders


def test_status_and_payment_are_combined(orders):
    assert _ids(filter_orders(orders, OrderFilter(status="sent"), tz=TZ)) == ["b", "c"]
    assert _ids(filter_orders(orders, OrderFilter(status="sent", payment="half"), tz=TZ)) == ["c"]
    assert _ids(filter_orders(orders, OrderFilter(payment="none"), tz=TZ)) == ["a", "d"]
    assert filter_orders(orders, OrderFilter(status="packing"), tz=TZ) == []


def test_date_range_is_inclusive_by_calendar_day(orders):
    march = OrderFilter(from_date=date(2024, 3, 1), to_date=date(2024, 3, 31))
    early_march = OrderFilter(from_date=date(2024, 3, 1), to_date=date(2024, 3, 10))
    same_day = OrderFilter(from_date=date(2024, 3, 15), to_date=date(2024, 3, 15))

    assert _ids(filter_orders(orders, march, tz=TZ)) == ["a", "b"]
    assert _ids(filter_orders(orders, early_march, tz=TZ)) == ["b"]
    assert _ids(filter_orders(orders, same_day, tz=TZ)) == ["a"]


def test_single_bound_excludes_undated_orders(orders):
    result = filter_orders(orders, OrderFilter(from_date=date(2024, 3, 2)), tz=TZ)

    assert _ids(result) == ["a", "c"]


def test_utc_timestamps_are_judged_in_local_day(orders):
    # 2024-03-31T20:00Z is already April 1st in Jakarta (UTC+7).
    late = Order(id="late", created_at="2024-03-31T20:00:00Z")

    march = OrderFilter(to_date=date(2024, 3, 31))
    april = OrderFilter(from_date=date(2024, 4, 1))

    assert filter_orders([late], march, tz=TZ) == []
    assert _ids(filter_orders([late], april, tz=TZ)) == ["late"]


def test_search_matches_name_or_phone(orders):
    assert _ids(filter_orders(orders, OrderFilter(search="rIN"), tz=TZ)) == ["a"]
    assert _ids(filter_orders(orders, OrderFilter(search="9876"), tz=TZ)) == ["b"]
    assert _ids(filter_orders(orders, OrderFilter(search="  "), tz=TZ)) == _ids(orders)
    assert _ids(filter_orders(orders, OrderFilter(status="sent", search="sari"), tz=TZ)) == ["c"]
