"""Inventory ledger: best-effort stock adjustments driven by orders.

Stock counts are advisory. Deductions have no floor, so concurrent orders can
push a count below zero; the number is used for restocking decisions, not as
a reservation system.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable, Mapping

from ..crud.documents import STOCK, DocumentStore
from ..schemas.ledger import LedgerResult

STOCK_FIELD = "stock"


def line_stock_id(item: Any) -> str | None:
    """Return the stock reference of a line item (model or raw record)."""

    if isinstance(item, Mapping):
        value = item.get("stockId") or item.get("stock_id")
    else:
        value = getattr(item, "stock_id", None)
    return value or None


def count_by_stock_id(items: Iterable[Any]) -> dict[str, int]:
    """Occurrences per stock id; lines without a stock reference are ignored."""

    counts: Counter[str] = Counter()
    for item in items:
        stock_id = line_stock_id(item)
        if stock_id:
            counts[stock_id] += 1
    return dict(counts)


class InventoryLedger:
    def __init__(self, store: DocumentStore, logger: logging.Logger | None = None) -> None:
        self.store = store
        self.logger = logger or logging.getLogger("bookshop.inventory")

    def deduct(self, items: Iterable[Any]) -> LedgerResult:
        """Decrement stock once per line item carrying a stock reference."""

        return self._apply(items, sign=-1, action="deduct")

    def restore(self, items: Iterable[Any]) -> LedgerResult:
        """Undo a previous :meth:`deduct` for the same line items."""

        return self._apply(items, sign=1, action="restore")

    def _apply(self, items: Iterable[Any], *, sign: int, action: str) -> LedgerResult:
        counts = count_by_stock_id(items)
        if not counts:
            return LedgerResult(ok=True)
        deltas = {stock_id: sign * count for stock_id, count in counts.items()}
        try:
            self.store.batch_increment(STOCK, STOCK_FIELD, deltas)
        except Exception as exc:
            # Never propagated: a failed adjustment must not block the order write.
            self.logger.warning(
                "inventory.%s.failed",
                action,
                exc_info=exc,
                extra={"extra_data": {"deltas": deltas}},
            )
            return LedgerResult(ok=False, deltas=deltas, error=str(exc))
        self.logger.info("inventory.%s.applied", action, extra={"extra_data": {"deltas": deltas}})
        return LedgerResult(ok=True, deltas=deltas)


__all__ = ["InventoryLedger", "count_by_stock_id", "line_stock_id"]
