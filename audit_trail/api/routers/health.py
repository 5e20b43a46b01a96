# audit_trail/api/routers/health.py

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from audit_trail.api.dependencies import get_ledger_store
from audit_trail.config.settings import get_settings
from audit_trail.infrastructure.database.ledger_store_db import DbLedgerStore

router = APIRouter()


@router.get("/")
async def root():
    """Service banner."""
    settings = get_settings()
    return {
        "service": settings.app_name,
        "version": settings.version,
        "status": "operational",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health")
async def health(
    request: Request,
    store: Annotated[DbLedgerStore, Depends(get_ledger_store)],
):
    """Health check with database connectivity and correlation ID from request state."""
    settings = get_settings()
    connected = await store.ping()
    return {
        "status": "healthy" if connected else "degraded",
        "service": "audit",
        "database": "connected" if connected else "disconnected",
        "correlation_id": getattr(request.state, "correlation_id", None),
        "environment": settings.environment,
        "version": settings.version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
