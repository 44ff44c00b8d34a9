"""Pure predicates for narrowing an in-memory order list."""

from __future__ import annotations

from typing import Iterable

from ..core.config import settings
from ..core.order_status import FILTER_ALL
from ..schemas.filters import OrderFilter
from ..schemas.order import Order
from .dates import end_of_day, parse_iso, start_of_day


def _matches_dates(order: Order, criteria: OrderFilter, tz: str) -> bool:
    if criteria.from_date is None and criteria.to_date is None:
        return True
    created = parse_iso(order.created_at, tz)
    if created is None:
        # Undated orders cannot satisfy an active date bound.
        return False
    if criteria.from_date is not None and created < start_of_day(criteria.from_date, tz):
        return False
    if criteria.to_date is not None and created > end_of_day(criteria.to_date, tz):
        return False
    return True


def _matches_search(order: Order, needle: str) -> bool:
    return needle in (order.name or "").lower() or needle in (order.last_4_digits_phone or "").lower()


def filter_orders(
    orders: Iterable[Order],
    criteria: OrderFilter | None = None,
    *,
    tz: str | None = None,
) -> list[Order]:
    """Return the orders satisfying every active criterion, in input order."""

    criteria = criteria or OrderFilter()
    zone = tz or settings.TZ
    needle = (criteria.search or "").strip().lower()
    result = []
    for order in orders:
        if criteria.status != FILTER_ALL and order.status != criteria.status:
            continue
        if criteria.payment != FILTER_ALL and order.payment_status != criteria.payment:
            continue
        if not _matches_dates(order, criteria, zone):
            continue
        if needle and not _matches_search(order, needle):
            continue
        result.append(order)
    return result


__all__ = ["filter_orders"]
