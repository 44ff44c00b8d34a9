"""Application factory and top-level wiring.

Configuration, logging, the database schema, routers and error handlers all
come together here. Importing the module builds the ASGI ``app`` used by
``uvicorn bookshop.main:app``.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import (
    DocumentNotFound,
    OrderValidationError,
    StoreError,
    http_exception_handler,
    not_found_handler,
    order_validation_handler,
    store_error_handler,
    validation_exception_handler,
)
from .core.logging import configure_logging
from .db.session import Base, engine
from .middlewares import RequestIdMiddleware

# Importing the model registers the table with the metadata before create_all.
from .models import document as _document  # noqa: F401
from .routers import api_expenses, api_orders, api_reports, api_sales_history, api_stock


def create_app() -> FastAPI:
    app = FastAPI(title=settings.APP_NAME)

    Base.metadata.create_all(bind=engine)

    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_orders.router)
    app.include_router(api_stock.router)
    app.include_router(api_expenses.router)
    app.include_router(api_sales_history.router)
    app.include_router(api_reports.router)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(OrderValidationError, order_validation_handler)
    app.add_exception_handler(DocumentNotFound, not_found_handler)
    app.add_exception_handler(StoreError, store_error_handler)

    @app.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    Instrumentator().instrument(app).expose(app)
    return app


configure_logging(settings.LOG_LEVEL)
app = create_app()

__all__ = ["app", "create_app"]
