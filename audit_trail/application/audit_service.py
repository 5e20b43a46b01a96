"""Audit application service. Orchestrates validation, persistence, queries and retention."""

import asyncio
import functools
import logging
import traceback
from typing import Any, Dict, List, Optional

from audit_trail.application.ledger_store import LedgerStore
from audit_trail.application.query_engine import QueryEngine, QueryPage
from audit_trail.application.retention import Clock, RetentionManager, utc_now
from audit_trail.domain.exceptions import AuditError
from audit_trail.domain.models.event_record import (
    MESSAGE_MAX_LENGTH,
    AuditAction,
    EventRecord,
    EventRecordCandidate,
    LogLevel,
    ServiceType,
    StoredEventRecord,
)
from audit_trail.domain.models.query import DEFAULT_LIMIT, QueryFilter
from audit_trail.domain.validators.event_validator import (
    ensure_valid_event_record,
    parse_datetime,
    parse_enum,
)


def _truncate(text: str, max_length: int = MESSAGE_MAX_LENGTH) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


class AuditService:
    """
    Public audit operations. Built once at startup and shared across requests;
    holds no per-request state. Every operation is one store call, so no locking.
    """

    def __init__(
        self,
        store: LedgerStore,
        logger: logging.Logger,
        clock: Clock = utc_now,
        default_limit: int = DEFAULT_LIMIT,
    ) -> None:
        self._store = store
        self._logger = logger
        self._clock = clock
        self._queries = QueryEngine(store, default_limit=default_limit)
        self._retention = RetentionManager(store, clock=clock, logger=logger)

    def _normalize(self, candidate: EventRecordCandidate) -> EventRecord:
        """Apply defaults to an already validated candidate."""
        log_level = LogLevel.INFO
        if candidate.log_level is not None:
            log_level = parse_enum(LogLevel, candidate.log_level)
        timestamp = parse_datetime(candidate.timestamp) if candidate.timestamp else None
        return EventRecord(
            service=parse_enum(ServiceType, candidate.service),
            action=parse_enum(AuditAction, candidate.action),
            log_level=log_level,
            message=candidate.message,
            timestamp=timestamp or self._clock(),
            successful=True if candidate.successful is None else candidate.successful,
            details=candidate.details,
            user_id=candidate.user_id,
            user_email=candidate.user_email,
            entity_id=candidate.entity_id,
            entity_type=candidate.entity_type,
            ip_address=candidate.ip_address,
            user_agent=candidate.user_agent,
            source=candidate.source,
        )

    async def record(self, candidate: EventRecordCandidate) -> StoredEventRecord:
        """
        Validate, apply defaults and append to the ledger. Raises AuditError
        (VALIDATION before any store call, STORAGE on persistence failure).
        The append is shielded: a caller that gives up does not abort it.
        """
        try:
            ensure_valid_event_record(candidate)
        except AuditError as e:
            self._logger.warning(
                "audit_record_rejected",
                extra={"fields": e.fields, "errors": e.errors},
            )
            raise

        record = self._normalize(candidate)
        insert = asyncio.ensure_future(self._store.insert(record))
        try:
            stored = await asyncio.shield(insert)
        except asyncio.CancelledError:
            # Nobody awaits the insert any more; report its outcome from here.
            insert.add_done_callback(functools.partial(self._report_detached_insert, record))
            raise
        except AuditError as e:
            self._log_persist_failed(record, e)
            raise

        self._logger.info(
            "audit_record_persisted",
            extra={
                "record_id": stored.id,
                "service": stored.service.value,
                "action": stored.action.value,
                "log_level": stored.log_level.value,
            },
        )
        return stored

    def _log_persist_failed(self, record: EventRecord, error: BaseException, detached: bool = False) -> None:
        self._logger.error(
            "audit_record_persist_failed",
            extra={
                "service": record.service.value,
                "action": record.action.value,
                "error": getattr(error, "message", None) or f"{type(error).__name__}: {error}",
                "detached": detached,
            },
        )

    def _report_detached_insert(self, record: EventRecord, task: "asyncio.Future") -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._log_persist_failed(record, error, detached=True)

    async def get_by_id(self, record_id: int) -> Optional[StoredEventRecord]:
        """Return the record or None. A miss is a valid outcome, not a failure."""
        return await self._store.find_by_id(record_id)

    async def require_by_id(self, record_id: int) -> StoredEventRecord:
        """Like get_by_id, but a miss raises AuditError(kind=NOT_FOUND)."""
        record = await self._store.find_by_id(record_id)
        if record is None:
            raise AuditError.not_found(record_id)
        return record

    async def query(self, query: QueryFilter) -> QueryPage:
        """Filtered, paginated listing. Zero matches is an empty page, not an error."""
        page = await self._queries.run(query)
        self._logger.info(
            "audit_records_queried",
            extra={"count": len(page.records), "total": page.total, "page": page.page, "limit": page.limit},
        )
        return page

    async def get_by_service(self, service: Any, limit: Optional[int] = None) -> List[StoredEventRecord]:
        return await self._queries.by_service(service, limit)

    async def get_by_entity(self, entity_id: str, entity_type: Optional[str] = None) -> List[StoredEventRecord]:
        return await self._queries.by_entity(entity_id, entity_type)

    async def delete_by_id(self, record_id: int) -> None:
        """Administrative single-record deletion. Raises AuditError(kind=NOT_FOUND) on miss."""
        deleted = await self._store.delete_by_id(record_id)
        if not deleted:
            raise AuditError.not_found(record_id)
        self._logger.info("audit_record_deleted", extra={"record_id": record_id})

    async def prune(self, days: int) -> int:
        """Delete records older than days. Returns count removed."""
        return await self._retention.prune_older_than(days)

    async def log_system_event(
        self,
        service: Any,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> StoredEventRecord:
        """Record an operational event (action SYSTEM_EVENT, level INFO)."""
        return await self.record(
            EventRecordCandidate(
                service=service,
                action=AuditAction.SYSTEM_EVENT,
                log_level=LogLevel.INFO,
                message=message,
                details=details,
                source="system",
            )
        )

    async def log_error_event(
        self,
        service: Any,
        error: BaseException,
        context: Optional[Dict[str, Any]] = None,
    ) -> StoredEventRecord:
        """Record a failure (action SYSTEM_EVENT, level ERROR, successful False) with its stack trace."""
        details: Dict[str, Any] = {
            "error_type": type(error).__name__,
            "stack_trace": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
        }
        if context:
            details["context"] = context
        return await self.record(
            EventRecordCandidate(
                service=service,
                action=AuditAction.SYSTEM_EVENT,
                log_level=LogLevel.ERROR,
                message=_truncate(str(error).strip() or type(error).__name__),
                details=details,
                successful=False,
                source="system",
            )
        )
