from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..crud.documents import SqlDocumentStore
from ..crud.expenses import create_expense, delete_expense, list_expenses
from ..deps.services import get_store
from ..schemas.expense import Expense, ExpenseCreate, ExpenseList

router = APIRouter(prefix="/api/v1/expenses", tags=["expenses"])


@router.get("", response_model=ExpenseList)
def api_list_expenses(store: SqlDocumentStore = Depends(get_store)):
    items = list_expenses(store)
    return ExpenseList(items=items, total=sum(item.total for item in items))


@router.post("", response_model=Expense, status_code=201)
def api_create_expense(payload: ExpenseCreate, store: SqlDocumentStore = Depends(get_store)):
    try:
        return create_expense(store, payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.delete("/{expense_id}")
def api_delete_expense(expense_id: str, store: SqlDocumentStore = Depends(get_store)):
    delete_expense(store, expense_id)
    return {"status": "deleted"}
