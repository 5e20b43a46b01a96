# scripts/seed_audit_logs.py

import sys
from pathlib import Path

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
import logging
from audit_trail.application.audit_service import AuditService
from audit_trail.config.settings import get_settings
from audit_trail.domain.models.event_record import AuditAction, EventRecordCandidate, LogLevel, ServiceType
from audit_trail.infrastructure.database.ledger_store_db import DbLedgerStore
from audit_trail.infrastructure.database.session import (
    create_engine_from_settings,
    create_schema,
    create_session_factory,
)

SEED_USER_ID = "f47ac10b-58cc-4372-a567-0e02b2c3d479"

SEED_RECORDS = [
    EventRecordCandidate(
        service=ServiceType.AUDIT,
        action=AuditAction.SYSTEM_EVENT,
        log_level=LogLevel.INFO,
        message="Audit service started successfully",
        ip_address="127.0.0.1",
    ),
    EventRecordCandidate(
        service=ServiceType.PRODUCTION,
        action=AuditAction.CREATE,
        message="Plant seeded: Rosa damascena from Bulgaria",
        user_id=SEED_USER_ID,
        entity_type="Plant",
        entity_id="1",
        ip_address="192.168.1.100",
    ),
    EventRecordCandidate(
        service=ServiceType.PROCESSING,
        action=AuditAction.CREATE,
        message="Perfume created: Rose Eau de Parfum (250ml)",
        user_id=SEED_USER_ID,
        entity_type="Perfume",
        entity_id="1",
        ip_address="192.168.1.100",
    ),
]


async def seed():
    engine = create_engine_from_settings(get_settings())
    await create_schema(engine)
    service = AuditService(
        store=DbLedgerStore(create_session_factory(engine)),
        logger=logging.getLogger("seed"),
    )
    for candidate in SEED_RECORDS:
        stored = await service.record(candidate)
        print("Seeded:", stored.id, stored.service.value, stored.message)
    await engine.dispose()

asyncio.run(seed())
