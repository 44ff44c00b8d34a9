from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class SalesHistoryCreate(BaseModel):
    description: str
    capital: int = Field(ge=0)
    revenue: int = Field(ge=0)
    total_books: int = Field(ge=0)


class SalesHistoryEntry(BaseModel):
    id: str
    description: str = ""
    capital: int = 0
    revenue: int = 0
    profit: int = 0
    total_books: int = 0
    created_at: Optional[str] = None
