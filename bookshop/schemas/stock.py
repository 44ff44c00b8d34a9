from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .order import LineItem


class StockItemCreate(BaseModel):
    book_name: str
    price: int = Field(ge=0)
    stock: int = Field(ge=0)


class StockItemUpdate(BaseModel):
    book_name: Optional[str] = None
    price: Optional[int] = Field(default=None, ge=0)
    stock: Optional[int] = None


class StockItem(BaseModel):
    id: str
    book_name: str = ""
    price: int = 0
    stock: int = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class StockTotal(BaseModel):
    total_stock: int
    item_count: int


class StockAdjustment(BaseModel):
    orders: list[LineItem]


__all__ = [
    "StockAdjustment",
    "StockItem",
    "StockItemCreate",
    "StockItemUpdate",
    "StockTotal",
]
