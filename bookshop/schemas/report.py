from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, field_serializer


class ProfitLine(BaseModel):
    id: str
    order_id: str
    order_name: str
    item_name: str
    sell_price: int
    buy_price: int
    profit: int
    date: str


class ProfitSummary(BaseModel):
    total_revenue: int = 0
    total_cost: int = 0
    total_profit: int = 0
    total_expenses: int = 0
    net_profit: int = 0
    zakat: Decimal = Decimal("0.00")
    total_units_shipped: int = 0

    @field_serializer("zakat")
    def serialize_zakat(self, value: Decimal) -> float:
        return float(value)


class ProfitReport(BaseModel):
    lines: list[ProfitLine]
    summary: ProfitSummary
