"""DB-backed ledger store. Persists audit records to the audit_logs table via SQLAlchemy."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from audit_trail.application.ledger_store import LedgerPredicate, SortOrder
from audit_trail.domain.exceptions import AuditError
from audit_trail.domain.models.event_record import (
    AuditAction,
    EventRecord,
    LogLevel,
    ServiceType,
    StoredEventRecord,
)
from audit_trail.infrastructure.database.models import AuditLogRow

logger = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; every value written is UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _conditions(predicate: LedgerPredicate) -> list:
    conditions = []
    if predicate.service is not None:
        conditions.append(AuditLogRow.service == predicate.service.value)
    if predicate.action is not None:
        conditions.append(AuditLogRow.action == predicate.action.value)
    if predicate.log_level is not None:
        conditions.append(AuditLogRow.log_level == predicate.log_level.value)
    if predicate.user_id is not None:
        conditions.append(AuditLogRow.user_id == predicate.user_id)
    if predicate.entity_id is not None:
        conditions.append(AuditLogRow.entity_id == predicate.entity_id)
    if predicate.entity_type is not None:
        conditions.append(AuditLogRow.entity_type == predicate.entity_type)
    if predicate.start_date is not None:
        conditions.append(AuditLogRow.timestamp >= _as_utc(predicate.start_date))
    if predicate.end_date is not None:
        conditions.append(AuditLogRow.timestamp <= _as_utc(predicate.end_date))
    if predicate.before is not None:
        conditions.append(AuditLogRow.timestamp < _as_utc(predicate.before))
    return conditions


def _to_row(record: EventRecord) -> AuditLogRow:
    return AuditLogRow(
        service=record.service.value,
        action=record.action.value,
        log_level=record.log_level.value,
        message=record.message,
        details=record.details,
        user_id=record.user_id,
        user_email=record.user_email,
        entity_id=record.entity_id,
        entity_type=record.entity_type,
        ip_address=record.ip_address,
        user_agent=record.user_agent,
        source=record.source,
        successful=record.successful,
        timestamp=_as_utc(record.timestamp),
    )


def _to_stored(row: AuditLogRow) -> StoredEventRecord:
    return StoredEventRecord(
        id=row.id,
        service=ServiceType(row.service),
        action=AuditAction(row.action),
        log_level=LogLevel(row.log_level),
        message=row.message,
        details=row.details,
        user_id=row.user_id,
        user_email=row.user_email,
        entity_id=row.entity_id,
        entity_type=row.entity_type,
        ip_address=row.ip_address,
        user_agent=row.user_agent,
        source=row.source,
        successful=bool(row.successful),
        timestamp=_as_utc(row.timestamp),
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class DbLedgerStore:
    """
    Implements LedgerStore over an async session factory. One session and one
    transaction per call; any database error rolls back and becomes AuditError(STORAGE).
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert(self, record: EventRecord) -> StoredEventRecord:
        """Insert and commit; return the row with its assigned id and bookkeeping timestamps."""
        try:
            async with self._session_factory() as session:
                row = _to_row(record)
                session.add(row)
                await session.commit()
                await session.refresh(row)
                return _to_stored(row)
        except (SQLAlchemyError, OSError) as e:
            logger.error("ledger_insert_failed", extra={"error": str(e)})
            raise AuditError.storage(f"Failed to persist audit record: {e}") from e

    async def find_by_id(self, record_id: int) -> Optional[StoredEventRecord]:
        try:
            async with self._session_factory() as session:
                row = await session.get(AuditLogRow, record_id)
                return _to_stored(row) if row is not None else None
        except (SQLAlchemyError, OSError) as e:
            logger.error("ledger_find_by_id_failed", extra={"record_id": record_id, "error": str(e)})
            raise AuditError.storage(f"Failed to fetch audit record: {e}") from e

    async def find(
        self,
        predicate: LedgerPredicate,
        order: SortOrder = SortOrder.DESC,
        limit: Optional[int] = 100,
        offset: int = 0,
    ) -> List[StoredEventRecord]:
        if order == SortOrder.DESC:
            ordering = (AuditLogRow.timestamp.desc(), AuditLogRow.id.desc())
        else:
            ordering = (AuditLogRow.timestamp.asc(), AuditLogRow.id.asc())
        stmt = select(AuditLogRow).where(*_conditions(predicate)).order_by(*ordering)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [_to_stored(row) for row in result.scalars().all()]
        except (SQLAlchemyError, OSError) as e:
            logger.error("ledger_find_failed", extra={"error": str(e)})
            raise AuditError.storage(f"Failed to query audit records: {e}") from e

    async def count(self, predicate: LedgerPredicate) -> int:
        stmt = select(func.count()).select_from(AuditLogRow).where(*_conditions(predicate))
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return int(result.scalar_one())
        except (SQLAlchemyError, OSError) as e:
            logger.error("ledger_count_failed", extra={"error": str(e)})
            raise AuditError.storage(f"Failed to count audit records: {e}") from e

    async def delete_where(self, predicate: LedgerPredicate) -> int:
        """Bulk delete. An empty predicate is refused so the ledger cannot be wiped by accident."""
        if predicate.is_empty():
            raise AuditError.validation(["delete requires at least one condition"], ["predicate"])
        stmt = delete(AuditLogRow).where(*_conditions(predicate))
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
                return result.rowcount or 0
        except (SQLAlchemyError, OSError) as e:
            logger.error("ledger_delete_failed", extra={"error": str(e)})
            raise AuditError.storage(f"Failed to delete audit records: {e}") from e

    async def delete_by_id(self, record_id: int) -> bool:
        stmt = delete(AuditLogRow).where(AuditLogRow.id == record_id)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
                return (result.rowcount or 0) > 0
        except (SQLAlchemyError, OSError) as e:
            logger.error("ledger_delete_by_id_failed", extra={"record_id": record_id, "error": str(e)})
            raise AuditError.storage(f"Failed to delete audit record: {e}") from e

    async def ping(self) -> bool:
        """Connectivity probe for the health endpoint. Never raises."""
        try:
            async with self._session_factory() as session:
                await session.execute(select(1))
            return True
        except (SQLAlchemyError, OSError):
            return False
