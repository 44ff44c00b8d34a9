from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ExpenseCreate(BaseModel):
    name: str
    price: int = Field(ge=0)
    qty: int = Field(ge=1)


class Expense(BaseModel):
    id: str
    name: str = ""
    price: int = 0
    qty: int = 0
    total: int = 0
    created_at: Optional[str] = None


class ExpenseList(BaseModel):
    items: list[Expense]
    total: int
