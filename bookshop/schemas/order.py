"""Pydantic schemas for orders and their line items."""

from __future__ import annotations

from typing import Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from .ledger import LedgerResult

OrderStatus = Literal["pending", "packing", "sent", "hnr"]
PaymentStatus = Literal["none", "half", "full"]


class LineItem(BaseModel):
    """One basket entry. Quantity is expressed by repeating the line.

    ``stock_id`` (stored as ``stockId``) only points at a stock record for
    cost lookup; the stock record lives and dies independently of the order.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: uuid4().hex)
    description: str = ""
    price: int = 0
    stock_id: Optional[str] = Field(default=None, alias="stockId")


class OrderCreate(BaseModel):
    name: str = ""
    last_4_digits_phone: str = ""
    delivery_address: Optional[str] = None
    delivery_type: str = ""
    payment_status: PaymentStatus = "none"
    additional_notes: Optional[str] = None
    orders: list[LineItem] = Field(default_factory=list)


class Order(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = ""
    last_4_digits_phone: str = ""
    delivery_address: Optional[str] = None
    delivery_type: str = ""
    status: OrderStatus = "pending"
    payment_status: PaymentStatus = "none"
    is_book_paid: Optional[bool] = None
    is_shipping_paid: Optional[bool] = None
    additional_notes: Optional[str] = None
    orders: list[LineItem] = Field(default_factory=list)
    unique_code: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class PaymentFlags(BaseModel):
    is_book_paid: bool
    is_shipping_paid: bool
    shipping_managed: bool = False


class OrderOut(Order):
    total: int = 0
    final_total: int = 0
    payment: Optional[PaymentFlags] = None


class StatusUpdate(BaseModel):
    status: OrderStatus


class PaymentUpdate(BaseModel):
    payment_status: PaymentStatus


class AddressUpdate(BaseModel):
    delivery_address: str = ""


class DeliveryTypeUpdate(BaseModel):
    delivery_type: str = ""


class LineItemsUpdate(BaseModel):
    orders: list[LineItem]


class PaidFlagsUpdate(BaseModel):
    is_book_paid: Optional[bool] = None
    is_shipping_paid: Optional[bool] = None


class NotesUpdate(BaseModel):
    additional_notes: Optional[str] = None


class OrderCreated(BaseModel):
    order: OrderOut
    stock: LedgerResult
