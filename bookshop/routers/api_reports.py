from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps.services import get_profit_aggregator
from ..schemas.report import ProfitReport
from ..services.reporting import ProfitAggregator

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


@router.get("/profit", response_model=ProfitReport)
def api_profit_report(aggregator: ProfitAggregator = Depends(get_profit_aggregator)):
    return aggregator.build_report()
