"""Profit reporting over delivered orders, stock cost data and expenses.

The three collections are read independently with no shared transaction, so
a report is a best-effort snapshot that may interleave with concurrent
writes. Nothing here mutates the store.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from ..core.config import settings
from ..core.order_status import REPORTABLE_STATUS
from ..crud.documents import EXPENSES, ORDERS, STOCK, DocumentStore, utcnow_iso
from ..crud.expenses import sum_expense_totals
from ..schemas.report import ProfitLine, ProfitReport, ProfitSummary
from .dates import timestamp_or_zero
from .inventory import line_stock_id

TWOPLACES = Decimal("0.01")
UNNAMED_CUSTOMER = "Unnamed customer"
UNNAMED_ITEM = "Unnamed item"


def _quantize_currency(value: Decimal) -> Decimal:
    return value.quantize(TWOPLACES, rounding=ROUND_HALF_UP) if value else Decimal("0.00")


def calculate_zakat(net_profit: int, rate: float | None = None) -> Decimal:
    """Zakat is owed only on a positive net profit."""

    if net_profit <= 0:
        return Decimal("0.00")
    zakat_rate = Decimal(str(settings.ZAKAT_RATE if rate is None else rate))
    return _quantize_currency(Decimal(net_profit) * zakat_rate)


class CostLookup:
    """Buy-price resolution for a line item.

    An exact stock id match wins, then a case-insensitive match of the line
    description against ``book_name``. Anything unresolved costs zero, so the
    whole sell price is reported as profit.
    """

    def __init__(self, stock_records: Iterable[dict[str, Any]]) -> None:
        self.by_id: dict[str, int] = {}
        self.by_name: dict[str, int] = {}
        for record in stock_records:
            price = int(record.get("price") or 0)
            self.by_id[record["id"]] = price
            name = str(record.get("book_name") or "").lower()
            if name:
                # Later records with the same name win, matching map insertion.
                self.by_name[name] = price

    def buy_price(self, item: dict[str, Any]) -> int:
        stock_id = line_stock_id(item)
        if stock_id and stock_id in self.by_id:
            return self.by_id[stock_id]
        description = str(item.get("description") or "").lower()
        if description and description in self.by_name:
            return self.by_name[description]
        return 0


class ProfitAggregator:
    def __init__(self, store: DocumentStore, zakat_rate: float | None = None) -> None:
        self.store = store
        self.zakat_rate = zakat_rate

    def build_report(self) -> ProfitReport:
        orders = self.store.list_collection(ORDERS)
        stock = self.store.list_collection(STOCK)
        expenses = self.store.list_collection(EXPENSES)
        return aggregate_profit(orders, stock, expenses, zakat_rate=self.zakat_rate)


def aggregate_profit(
    orders: Iterable[dict[str, Any]],
    stock: Iterable[dict[str, Any]],
    expenses: Iterable[dict[str, Any]],
    *,
    zakat_rate: float | None = None,
) -> ProfitReport:
    """Join raw order, stock and expense records into a profit report."""

    lookup = CostLookup(stock)
    lines: list[ProfitLine] = []
    total_revenue = 0
    total_cost = 0
    total_profit = 0
    units_shipped = 0
    fallback_date = utcnow_iso()

    for order in orders:
        if order.get("status") != REPORTABLE_STATUS:
            continue
        items = order.get("orders")
        if not isinstance(items, list):
            continue
        for index, item in enumerate(items):
            sell_price = int(item.get("price") or 0)
            buy_price = lookup.buy_price(item)
            profit = sell_price - buy_price

            total_revenue += sell_price
            total_cost += buy_price
            total_profit += profit
            units_shipped += 1

            lines.append(
                ProfitLine(
                    id=f"{order['id']}-{index}",
                    order_id=order["id"],
                    order_name=order.get("name") or UNNAMED_CUSTOMER,
                    item_name=item.get("description") or UNNAMED_ITEM,
                    sell_price=sell_price,
                    buy_price=buy_price,
                    profit=profit,
                    date=order.get("created_at") or fallback_date,
                )
            )

    # list.sort stays stable with reverse=True: equal dates keep encounter order.
    lines.sort(key=lambda line: timestamp_or_zero(line.date, settings.TZ), reverse=True)

    total_expenses = sum_expense_totals(list(expenses))
    net_profit = total_profit - total_expenses
    summary = ProfitSummary(
        total_revenue=total_revenue,
        total_cost=total_cost,
        total_profit=total_profit,
        total_expenses=total_expenses,
        net_profit=net_profit,
        zakat=calculate_zakat(net_profit, zakat_rate),
        total_units_shipped=units_shipped,
    )
    return ProfitReport(lines=lines, summary=summary)


__all__ = ["CostLookup", "ProfitAggregator", "aggregate_profit", "calculate_zakat"]
