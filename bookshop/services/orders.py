"""Order lifecycle: creation, status/payment transitions, edits and deletion.

Status and payment changes are unconditional sets. Any status can follow any
other (a sent order may be reopened as pending) and payment moves
independently of the delivery status.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Callable, Iterable

from pydantic import ValidationError

from ..core.config import settings
from ..core.errors import DocumentNotFound, OrderValidationError
from ..core.order_status import (
    PAYMENT_FULL,
    PAYMENT_HALF,
    STATUS_PENDING,
    normalize_payment,
    normalize_status,
)
from ..crud.documents import ORDERS, DocumentStore, utcnow_iso
from ..schemas.order import LineItem, Order, OrderOut, PaymentFlags
from ..schemas.ledger import LedgerResult
from .inventory import InventoryLedger


def order_total(order: Order) -> int:
    return sum(item.price or 0 for item in order.orders)


def final_total(order: Order) -> int:
    """Amount the customer transfers: basket total plus the unique code."""

    return order_total(order) + (order.unique_code or 0)


def payment_flags(order: Order, shopee_delivery_type: str | None = None) -> PaymentFlags:
    """Resolve book/shipping payment.

    Explicit ``is_book_paid`` / ``is_shipping_paid`` values win. Otherwise the
    book counts as paid once a down payment (``half``) is in, and shipping
    only when payment is ``full``.
    """

    marketplace = shopee_delivery_type or settings.SHOPEE_DELIVERY_TYPE
    book_paid = order.is_book_paid
    if book_paid is None:
        book_paid = order.payment_status in (PAYMENT_HALF, PAYMENT_FULL)
    shipping_paid = order.is_shipping_paid
    if shipping_paid is None:
        shipping_paid = order.payment_status == PAYMENT_FULL
    return PaymentFlags(
        is_book_paid=book_paid,
        is_shipping_paid=shipping_paid,
        shipping_managed=order.delivery_type == marketplace,
    )


def to_order_out(order: Order) -> OrderOut:
    return OrderOut(
        **order.model_dump(),
        total=order_total(order),
        final_total=final_total(order),
        payment=payment_flags(order),
    )


def _coerce_line_items(items: Iterable[Any]) -> list[LineItem]:
    try:
        return [item if isinstance(item, LineItem) else LineItem.model_validate(item) for item in items]
    except ValidationError as exc:
        raise OrderValidationError(OrderValidationError.LINE_ITEMS) from exc


def validate_line_items(items: list[LineItem]) -> None:
    if not items:
        raise OrderValidationError(OrderValidationError.LINE_ITEMS)
    for item in items:
        if not (item.description or "").strip() or (item.price or 0) <= 0:
            raise OrderValidationError(OrderValidationError.LINE_ITEMS)


def _dump_items(items: list[LineItem]) -> list[dict[str, Any]]:
    return [item.model_dump(by_alias=True, exclude_none=True) for item in items]


class OrderManager:
    """Owns order documents and drives the inventory ledger as a side effect."""

    def __init__(
        self,
        store: DocumentStore,
        ledger: InventoryLedger | None = None,
        *,
        logger: logging.Logger | None = None,
        code_generator: Callable[[], int] | None = None,
    ) -> None:
        self.store = store
        self.logger = logger or logging.getLogger("bookshop.orders")
        self.ledger = ledger or InventoryLedger(store, logger=self.logger)
        self._code_generator = code_generator or self._random_unique_code

    @staticmethod
    def _random_unique_code() -> int:
        # No collision check against other open orders; identical totals can
        # still clash on the same code.
        return random.randint(settings.UNIQUE_CODE_MIN, settings.UNIQUE_CODE_MAX)

    def get(self, order_id: str) -> Order:
        record = self.store.get_one(ORDERS, order_id)
        if record is None:
            raise DocumentNotFound(ORDERS, order_id)
        return Order.model_validate(record)

    def list_orders(self) -> list[Order]:
        records = self.store.list_collection(ORDERS, order_by="created_at", direction="desc")
        return [Order.model_validate(record) for record in records]

    def create(self, payload: dict[str, Any]) -> tuple[Order, LedgerResult]:
        """Validate, persist, then deduct stock for the new order.

        The ledger outcome is returned alongside the order; a failed deduction
        never undoes or fails the order write.
        """

        name = str(payload.get("name") or "").strip()
        phone = str(payload.get("last_4_digits_phone") or "").strip()
        if not name or not phone:
            raise OrderValidationError(OrderValidationError.CUSTOMER)
        items = _coerce_line_items(payload.get("orders") or [])
        validate_line_items(items)
        try:
            payment_status = normalize_payment(payload.get("payment_status") or "none")
        except ValueError as exc:
            raise OrderValidationError(OrderValidationError.PAYMENT, str(exc)) from exc

        now = utcnow_iso()
        data = {
            "name": name,
            "last_4_digits_phone": phone,
            "delivery_address": payload.get("delivery_address"),
            "delivery_type": payload.get("delivery_type") or "",
            "payment_status": payment_status,
            "status": STATUS_PENDING,
            "orders": _dump_items(items),
            "unique_code": self._code_generator(),
            "created_at": now,
            "updated_at": now,
        }
        if payload.get("additional_notes"):
            data["additional_notes"] = payload["additional_notes"]
        order = Order.model_validate(self.store.insert(ORDERS, data))
        self.logger.info(
            "order.created",
            extra={"extra_data": {"order_id": order.id, "line_items": len(items)}},
        )

        return order, self._run_ledger("deduct", order)

    def _run_ledger(self, op: str, order: Order) -> LedgerResult:
        try:
            return getattr(self.ledger, op)(order.orders)
        except Exception as exc:
            # Ledgers are expected not to raise; an injected one still must not
            # fail an order write that has already happened.
            self.logger.warning(
                "order.stock_%s.error",
                op,
                exc_info=exc,
                extra={"extra_data": {"order_id": order.id}},
            )
            return LedgerResult(ok=False, error=str(exc))

    def _patch(self, order_id: str, changes: dict[str, Any]) -> Order:
        self.store.update(ORDERS, order_id, changes)
        self.logger.info(
            "order.updated",
            extra={"extra_data": {"order_id": order_id, "fields": sorted(changes)}},
        )
        return self.get(order_id)

    def update_status(self, order_id: str, status: str) -> Order:
        return self._patch(order_id, {"status": normalize_status(status)})

    def update_payment(self, order_id: str, payment_status: str) -> Order:
        return self._patch(order_id, {"payment_status": normalize_payment(payment_status)})

    def update_address(self, order_id: str, delivery_address: str | None) -> Order:
        return self._patch(order_id, {"delivery_address": delivery_address or ""})

    def update_delivery_type(self, order_id: str, delivery_type: str | None) -> Order:
        return self._patch(order_id, {"delivery_type": delivery_type or ""})

    def update_notes(self, order_id: str, additional_notes: str | None) -> Order:
        return self._patch(order_id, {"additional_notes": additional_notes})

    def set_paid_flags(
        self,
        order_id: str,
        *,
        is_book_paid: bool | None = None,
        is_shipping_paid: bool | None = None,
    ) -> Order:
        changes: dict[str, Any] = {}
        if is_book_paid is not None:
            changes["is_book_paid"] = is_book_paid
        if is_shipping_paid is not None:
            changes["is_shipping_paid"] = is_shipping_paid
        if not changes:
            return self.get(order_id)
        return self._patch(order_id, changes)

    def update_line_items(self, order_id: str, items: Iterable[Any]) -> Order:
        """Replace the basket. Stock is not re-balanced for edited lines."""

        line_items = _coerce_line_items(items)
        validate_line_items(line_items)
        return self._patch(order_id, {"orders": _dump_items(line_items)})

    def delete(self, order_id: str, *, restore_stock: bool = False) -> LedgerResult | None:
        """Remove the order.

        Deducted stock stays deducted unless ``restore_stock`` is set, in
        which case the order's lines are handed back to the ledger.
        """

        order = self.get(order_id) if restore_stock else None
        self.store.remove(ORDERS, order_id)
        self.logger.info(
            "order.deleted",
            extra={"extra_data": {"order_id": order_id, "restore_stock": restore_stock}},
        )
        if order is None:
            return None
        return self._run_ledger("restore", order)


__all__ = [
    "OrderManager",
    "final_total",
    "order_total",
    "payment_flags",
    "to_order_out",
    "validate_line_items",
]
