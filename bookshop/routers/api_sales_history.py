from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..crud.documents import SqlDocumentStore
from ..crud.sales_history import create_entry, delete_entry, list_entries
from ..deps.services import get_store
from ..schemas.sales_history import SalesHistoryCreate, SalesHistoryEntry

router = APIRouter(prefix="/api/v1/sales-history", tags=["sales-history"])


@router.get("", response_model=list[SalesHistoryEntry])
def api_list_sales_history(store: SqlDocumentStore = Depends(get_store)):
    return list_entries(store)


@router.post("", response_model=SalesHistoryEntry, status_code=201)
def api_create_sales_history(payload: SalesHistoryCreate, store: SqlDocumentStore = Depends(get_store)):
    try:
        return create_entry(store, payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.delete("/{entry_id}")
def api_delete_sales_history(entry_id: str, store: SqlDocumentStore = Depends(get_store)):
    delete_entry(store, entry_id)
    return {"status": "deleted"}
