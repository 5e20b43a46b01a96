# scripts/prune_audit_logs.py
# Retention job for cron: python scripts/prune_audit_logs.py 90

import sys
from pathlib import Path

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
import logging
from audit_trail.application.audit_service import AuditService
from audit_trail.config.logging import configure_logging
from audit_trail.config.settings import get_settings
from audit_trail.infrastructure.database.ledger_store_db import DbLedgerStore
from audit_trail.infrastructure.database.session import create_engine_from_settings, create_session_factory


async def prune(days: int):
    settings = get_settings()
    configure_logging(settings.log_level)
    engine = create_engine_from_settings(settings)
    service = AuditService(
        store=DbLedgerStore(create_session_factory(engine)),
        logger=logging.getLogger("audit_trail.retention"),
    )
    try:
        deleted = await service.prune(days)
        print(f"Deleted {deleted} audit logs older than {days} days")
    finally:
        await engine.dispose()

if len(sys.argv) != 2 or not sys.argv[1].isdigit():
    print("usage: prune_audit_logs.py <days>")
    sys.exit(2)

asyncio.run(prune(int(sys.argv[1])))
