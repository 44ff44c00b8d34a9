from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel


class OrderFilter(BaseModel):
    """Criteria for narrowing an in-memory order list.

    Date bounds are inclusive calendar days. ``search`` matches the customer
    name or phone digits, ignoring case.
    """

    status: Literal["all", "pending", "packing", "sent", "hnr"] = "all"
    payment: Literal["all", "none", "half", "full"] = "all"
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    search: Optional[str] = None
