# audit_trail/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from audit_trail.api.errors import error_response
from audit_trail.api.middleware import CorrelationIdMiddleware, RequestLogMiddleware
from audit_trail.api.routers import audit_logs, health
from audit_trail.application.audit_service import AuditService
from audit_trail.config.logging import configure_logging
from audit_trail.config.settings import get_settings
from audit_trail.domain.exceptions import AuditError
from audit_trail.domain.models.event_record import ServiceType
from audit_trail.infrastructure.database.ledger_store_db import DbLedgerStore
from audit_trail.infrastructure.database.session import (
    create_engine_from_settings,
    create_schema,
    create_session_factory,
)

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("audit_trail")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build engine, store and AuditService once; share them across all requests."""
    engine = create_engine_from_settings(settings)
    if settings.auto_create_schema:
        await create_schema(engine)
    store = DbLedgerStore(create_session_factory(engine))
    app.state.ledger_store = store
    app.state.audit_service = AuditService(
        store=store,
        logger=logging.getLogger("audit_trail.service"),
        default_limit=settings.default_query_limit,
    )
    logger.info("audit_service_started", extra={"environment": settings.environment})
    try:
        await app.state.audit_service.log_system_event(ServiceType.AUDIT, "Audit service started successfully")
    except AuditError as e:
        logger.warning("startup_event_not_recorded", extra={"error": e.message})

    yield

    logger.info("audit_service_stopping")
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Middleware order: last added runs first (outermost). Request flow: CorrelationId -> RequestLog.
app.add_middleware(RequestLogMiddleware)
app.add_middleware(CorrelationIdMiddleware)


@app.exception_handler(AuditError)
async def audit_error_handler(request: Request, exc: AuditError):
    return error_response(exc)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("unhandled_exception", exc_info=exc, extra={"path": request.url.path})
    service = getattr(request.app.state, "audit_service", None)
    if service is not None:
        try:
            await service.log_error_event(
                ServiceType.AUDIT,
                exc,
                context={"path": request.url.path, "method": request.method},
            )
        except AuditError as e:
            logger.warning("error_event_not_recorded", extra={"error": e.message})
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
    )


# Routers: /, /health, /api/v1/logs
app.include_router(health.router)
app.include_router(audit_logs.router, prefix="/api/v1")


def main():
    """Run the service with uvicorn."""
    import uvicorn

    uvicorn.run(
        "audit_trail.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
