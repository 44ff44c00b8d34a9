from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ..crud.documents import SqlDocumentStore
from ..crud.stock import (
    create_stock_item,
    delete_stock_item,
    list_stock_items,
    total_stock,
    update_stock_item,
)
from ..deps.services import get_ledger, get_store
from ..schemas.ledger import LedgerResult
from ..schemas.stock import (
    StockAdjustment,
    StockItem,
    StockItemCreate,
    StockItemUpdate,
    StockTotal,
)
from ..services.inventory import InventoryLedger

router = APIRouter(prefix="/api/v1/stock", tags=["stock"])


@router.get("", response_model=list[StockItem])
def api_list_stock(q: Optional[str] = None, store: SqlDocumentStore = Depends(get_store)):
    return list_stock_items(store, search=q)


@router.get("/total", response_model=StockTotal)
def api_total_stock(store: SqlDocumentStore = Depends(get_store)):
    return total_stock(store)


@router.post("", response_model=StockItem, status_code=201)
def api_create_stock(payload: StockItemCreate, store: SqlDocumentStore = Depends(get_store)):
    try:
        return create_stock_item(store, payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.patch("/{stock_id}", response_model=StockItem)
def api_update_stock(stock_id: str, payload: StockItemUpdate, store: SqlDocumentStore = Depends(get_store)):
    try:
        return update_stock_item(store, stock_id, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.delete("/{stock_id}")
def api_delete_stock(stock_id: str, store: SqlDocumentStore = Depends(get_store)):
    delete_stock_item(store, stock_id)
    return {"status": "deleted"}


@router.post("/deduct", response_model=LedgerResult)
def api_deduct_stock(payload: StockAdjustment, ledger: InventoryLedger = Depends(get_ledger)):
    return ledger.deduct(payload.orders)


@router.post("/restore", response_model=LedgerResult)
def api_restore_stock(payload: StockAdjustment, ledger: InventoryLedger = Depends(get_ledger)):
    return ledger.restore(payload.orders)
