"""FastAPI dependency injection: shared AuditService, ledger store, admin gate."""

import secrets
from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from audit_trail.application.audit_service import AuditService
from audit_trail.config.settings import AppSettings, get_settings
from audit_trail.domain.exceptions import AuditError
from audit_trail.infrastructure.database.ledger_store_db import DbLedgerStore

ADMIN_KEY_HEADER = "X-Admin-Key"


def get_audit_service(request: Request) -> AuditService:
    """Return the process-wide AuditService built in the application lifespan."""
    return request.app.state.audit_service


def get_ledger_store(request: Request) -> DbLedgerStore:
    return request.app.state.ledger_store


def require_admin(
    settings: Annotated[AppSettings, Depends(get_settings)],
    x_admin_key: Annotated[Optional[str], Header(alias=ADMIN_KEY_HEADER)] = None,
) -> None:
    """Gate for retention and single-record deletion. Refused outright when no key is configured."""
    if not settings.admin_api_key:
        raise AuditError.forbidden("Administrative operations are disabled (admin_api_key not configured)")
    if not x_admin_key or not secrets.compare_digest(x_admin_key, settings.admin_api_key):
        raise AuditError.forbidden()
