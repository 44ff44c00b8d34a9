from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("bookshop.errors")

CUSTOMER_FIELDS_MESSAGE = "Customer name and phone are required"
LINE_ITEMS_MESSAGE = "Every line item needs a description and a price above zero"

ORDERS_PATH = "/api/v1/orders"


class OrderValidationError(ValueError):
    """Raised before any write when an order payload is incomplete.

    ``kind`` tells the caller which part of the form to re-prompt for:
    ``"customer"`` for the name/phone fields, ``"line_items"`` for the basket
    and ``"payment_status"`` for an unknown payment value.
    """

    CUSTOMER = "customer"
    LINE_ITEMS = "line_items"
    PAYMENT = "payment_status"

    def __init__(self, kind: str, message: str | None = None) -> None:
        if message is None:
            message = CUSTOMER_FIELDS_MESSAGE if kind == self.CUSTOMER else LINE_ITEMS_MESSAGE
        super().__init__(message)
        self.kind = kind
        self.message = message


class DocumentNotFound(LookupError):
    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(f"{collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


class StoreError(RuntimeError):
    """Generic I/O failure talking to the document store."""


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"code": code, "message": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    message = detail if isinstance(detail, str) else "Error"
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(status_code=exc.status_code, code="http_error", message=message, details=details)


def _order_error_kind(errors: list[dict[str, Any]]) -> str | None:
    """Map body errors on order fields onto the order validation kinds.

    Customer fields are reported before the basket, matching the order in
    which ``OrderManager.create`` checks them.
    """

    fields = {err["loc"][1] for err in errors if len(err.get("loc", ())) > 1 and err["loc"][0] == "body"}
    if fields & {"name", "last_4_digits_phone"}:
        return OrderValidationError.CUSTOMER
    if "orders" in fields:
        return OrderValidationError.LINE_ITEMS
    return None


async def validation_exception_handler(request: Request, exc):  # type: ignore[override]
    from fastapi.exceptions import RequestValidationError

    if isinstance(exc, RequestValidationError):
        kind = _order_error_kind(exc.errors()) if request.url.path.startswith(ORDERS_PATH) else None
        if kind is not None:
            return await order_validation_handler(request, OrderValidationError(kind))
        return ErrorEnvelope(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            code="validation_error",
            message="Validation failed",
            details={"errors": exc.errors()},
        )
    raise exc


async def order_validation_handler(request: Request, exc: OrderValidationError):
    return ErrorEnvelope(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code=f"invalid_{exc.kind}",
        message=exc.message,
    )


async def not_found_handler(request: Request, exc: DocumentNotFound):
    return ErrorEnvelope(
        status_code=status.HTTP_404_NOT_FOUND,
        code="not_found",
        message="Not found",
        details={"collection": exc.collection, "id": exc.doc_id},
    )


async def store_error_handler(request: Request, exc: StoreError):
    logger.error("store.failure", exc_info=exc, extra={"extra_data": {"path": request.url.path}})
    return ErrorEnvelope(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        code="store_unavailable",
        message="The data store could not complete the request",
    )
