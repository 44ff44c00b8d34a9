from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends

from ..deps.services import get_order_manager
from ..schemas.filters import OrderFilter
from ..schemas.ledger import LedgerResult
from ..schemas.order import (
    AddressUpdate,
    DeliveryTypeUpdate,
    LineItemsUpdate,
    NotesUpdate,
    OrderCreate,
    OrderCreated,
    OrderOut,
    PaidFlagsUpdate,
    PaymentUpdate,
    StatusUpdate,
)
from ..services.filters import filter_orders
from ..services.orders import OrderManager, to_order_out

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.get("", response_model=list[OrderOut])
def api_list_orders(
    status: Literal["all", "pending", "packing", "sent", "hnr"] = "all",
    payment: Literal["all", "none", "half", "full"] = "all",
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    q: Optional[str] = None,
    manager: OrderManager = Depends(get_order_manager),
):
    criteria = OrderFilter(
        status=status,
        payment=payment,
        from_date=from_date,
        to_date=to_date,
        search=q,
    )
    return [to_order_out(order) for order in filter_orders(manager.list_orders(), criteria)]


@router.post("", response_model=OrderCreated, status_code=201)
def api_create_order(payload: OrderCreate, manager: OrderManager = Depends(get_order_manager)):
    order, stock_result = manager.create(payload.model_dump(by_alias=True))
    return OrderCreated(order=to_order_out(order), stock=stock_result)


@router.get("/{order_id}", response_model=OrderOut)
def api_get_order(order_id: str, manager: OrderManager = Depends(get_order_manager)):
    return to_order_out(manager.get(order_id))


@router.delete("/{order_id}")
def api_delete_order(
    order_id: str,
    restore_stock: bool = False,
    manager: OrderManager = Depends(get_order_manager),
):
    result: LedgerResult | None = manager.delete(order_id, restore_stock=restore_stock)
    body: dict[str, object] = {"status": "deleted"}
    if result is not None:
        body["stock"] = result.model_dump()
    return body


@router.patch("/{order_id}/status", response_model=OrderOut)
def api_update_status(order_id: str, payload: StatusUpdate, manager: OrderManager = Depends(get_order_manager)):
    return to_order_out(manager.update_status(order_id, payload.status))


@router.patch("/{order_id}/payment", response_model=OrderOut)
def api_update_payment(order_id: str, payload: PaymentUpdate, manager: OrderManager = Depends(get_order_manager)):
    return to_order_out(manager.update_payment(order_id, payload.payment_status))


@router.patch("/{order_id}/paid-flags", response_model=OrderOut)
def api_update_paid_flags(
    order_id: str, payload: PaidFlagsUpdate, manager: OrderManager = Depends(get_order_manager)
):
    updated = manager.set_paid_flags(
        order_id,
        is_book_paid=payload.is_book_paid,
        is_shipping_paid=payload.is_shipping_paid,
    )
    return to_order_out(updated)


@router.patch("/{order_id}/address", response_model=OrderOut)
def api_update_address(order_id: str, payload: AddressUpdate, manager: OrderManager = Depends(get_order_manager)):
    return to_order_out(manager.update_address(order_id, payload.delivery_address))


@router.patch("/{order_id}/delivery-type", response_model=OrderOut)
def api_update_delivery_type(
    order_id: str, payload: DeliveryTypeUpdate, manager: OrderManager = Depends(get_order_manager)
):
    return to_order_out(manager.update_delivery_type(order_id, payload.delivery_type))


@router.patch("/{order_id}/items", response_model=OrderOut)
def api_update_items(order_id: str, payload: LineItemsUpdate, manager: OrderManager = Depends(get_order_manager)):
    return to_order_out(manager.update_line_items(order_id, payload.orders))


@router.patch("/{order_id}/notes", response_model=OrderOut)
def api_update_notes(order_id: str, payload: NotesUpdate, manager: OrderManager = Depends(get_order_manager)):
    return to_order_out(manager.update_notes(order_id, payload.additional_notes))
