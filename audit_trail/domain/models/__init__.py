"""Domain models. Pure business entities."""

from audit_trail.domain.models.event_record import (
    MESSAGE_MAX_LENGTH,
    AuditAction,
    EventRecord,
    EventRecordCandidate,
    LogLevel,
    ServiceType,
    StoredEventRecord,
)
from audit_trail.domain.models.query import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT, QueryFilter

__all__ = [
    "DEFAULT_LIMIT",
    "DEFAULT_PAGE",
    "MAX_LIMIT",
    "MESSAGE_MAX_LENGTH",
    "AuditAction",
    "EventRecord",
    "EventRecordCandidate",
    "LogLevel",
    "QueryFilter",
    "ServiceType",
    "StoredEventRecord",
]
