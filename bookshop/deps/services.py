from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ..crud.documents import SqlDocumentStore
from ..db.session import get_db
from ..services.inventory import InventoryLedger
from ..services.orders import OrderManager
from ..services.reporting import ProfitAggregator


def get_store(db: Session = Depends(get_db)) -> SqlDocumentStore:
    return SqlDocumentStore(db)


def get_ledger(store: SqlDocumentStore = Depends(get_store)) -> InventoryLedger:
    return InventoryLedger(store, logger=logging.getLogger("bookshop.inventory"))


def get_order_manager(
    store: SqlDocumentStore = Depends(get_store),
    ledger: InventoryLedger = Depends(get_ledger),
) -> OrderManager:
    return OrderManager(store, ledger, logger=logging.getLogger("bookshop.orders"))


def get_profit_aggregator(store: SqlDocumentStore = Depends(get_store)) -> ProfitAggregator:
    return ProfitAggregator(store)
