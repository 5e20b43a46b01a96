"""Domain layer: models, schemas, validators, exceptions. Pure business logic only."""

from audit_trail.domain.exceptions import AuditError, ErrorKind
from audit_trail.domain.models import (
    AuditAction,
    EventRecord,
    EventRecordCandidate,
    LogLevel,
    QueryFilter,
    ServiceType,
    StoredEventRecord,
)
from audit_trail.domain.schemas import (
    CreateEventRecordRequest,
    EventRecordListResponse,
    EventRecordResponse,
)
from audit_trail.domain.validators import (
    ensure_valid_event_record,
    validate_event_record,
    validate_retention_days,
)

__all__ = [
    "AuditAction",
    "AuditError",
    "CreateEventRecordRequest",
    "ErrorKind",
    "EventRecord",
    "EventRecordCandidate",
    "EventRecordListResponse",
    "EventRecordResponse",
    "LogLevel",
    "QueryFilter",
    "ServiceType",
    "StoredEventRecord",
    "ensure_valid_event_record",
    "validate_event_record",
    "validate_retention_days",
]
