"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from banking_api.api.middleware import RequestIDMiddleware, MetricsMiddleware
from banking_api.api.v1 import accounts
from banking_api.api.v1.schemas import ResponseWrapper
from banking_api.config import Settings, settings
from banking_api.domain.accounts import AccountService
from banking_api.domain.exceptions import StorageFailure
from banking_api.domain.ledger_store import LedgerStore
from banking_api.domain.limits import LimitPolicy
from banking_api.domain.processor import TransactionProcessor
from banking_api.infrastructure.database.repositories import SqlLedgerStore
from banking_api.infrastructure.database.session import build_engine, build_session_factory, create_schema
from banking_api.infrastructure.observability.logging import setup_logging
from banking_api.infrastructure.observability.metrics import storage_failure_counter

# Setup structured logging
setup_logging(settings.log_level)

INTERNAL_SERVER_ERROR = (
    "A system error occurred while processing your request. "
    "Kindly try again or contact the admin for assistance!"
)


def _error_body(code: int, message: str, data=None) -> JSONResponse:
    body = ResponseWrapper(code=code, message=message, data=data)
    return JSONResponse(status_code=code, content=body.model_dump(mode="json"))


def _sql_store(app_settings: Settings) -> SqlLedgerStore:
    engine = build_engine(app_settings.database_url)
    return SqlLedgerStore(build_session_factory(engine), timezone_name=app_settings.ledger_timezone)


def create_app(
    store: LedgerStore | None = None,
    limits: LimitPolicy | None = None,
    app_settings: Settings | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    The ledger store and limit policy are built here once and shared by every
    request; pass them in to run against an in-memory store or custom limits.
    """
    app_settings = app_settings or settings
    store = store or _sql_store(app_settings)
    limits = limits or LimitPolicy.from_settings(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if isinstance(store, SqlLedgerStore):
            create_schema(store.session_factory.kw["bind"])
        logging.info("Banking API started", extra={"limits": repr(limits)})
        yield

    app = FastAPI(
        title="Banking API",
        description="Accounts, deposits and withdrawals with per-transaction and daily limits",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.ledger_store = store
    app.state.limit_policy = limits
    app.state.account_service = AccountService(store)
    app.state.transaction_processor = TransactionProcessor(store, limits)

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        ]
        return _error_body(status.HTTP_400_BAD_REQUEST, "Validation error", errors)

    @app.exception_handler(StorageFailure)
    async def storage_failure_handler(request: Request, exc: StorageFailure):
        storage_failure_counter.inc()
        request_id = getattr(request.state, "request_id", "unknown")
        logging.error(f"Ledger store error: {exc}", extra={"request_id": request_id})
        return _error_body(status.HTTP_503_SERVICE_UNAVAILABLE, INTERNAL_SERVER_ERROR)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        request_id = getattr(request.state, "request_id", "unknown")
        logging.error(f"Unexpected error: {exc}", extra={"request_id": request_id})
        return _error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_SERVER_ERROR)

    @app.get("/", response_class=PlainTextResponse)
    def index():
        return "ok"

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": app_settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(accounts.router, prefix="/api", tags=["accounts"])

    return app


app = create_app()
