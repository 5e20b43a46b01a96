"""Shared fixtures: SQLite-backed ledger store, AuditService, candidate factory."""

import logging
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from audit_trail.application.audit_service import AuditService
from audit_trail.domain.models.event_record import AuditAction, EventRecordCandidate, ServiceType
from audit_trail.infrastructure.database.ledger_store_db import DbLedgerStore
from audit_trail.infrastructure.database.session import create_schema, create_session_factory

FIXED_NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
async def engine(tmp_path):
    """Fresh file-based SQLite database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'audit.db'}")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def ledger_store(engine) -> DbLedgerStore:
    return DbLedgerStore(create_session_factory(engine))


@pytest.fixture
def audit_service(ledger_store) -> AuditService:
    return AuditService(
        store=ledger_store,
        logger=logging.getLogger("tests.audit"),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def make_candidate():
    """Build a valid candidate; keyword overrides replace individual fields."""

    def _make(**overrides) -> EventRecordCandidate:
        values = {
            "service": ServiceType.USER,
            "action": AuditAction.CREATE,
            "message": "User registered",
        }
        values.update(overrides)
        return EventRecordCandidate(**values)

    return _make


@pytest.fixture
def days_ago():
    def _days_ago(days: float) -> datetime:
        return FIXED_NOW - timedelta(days=days)

    return _days_ago
