"""Domain model for audit event records. Pure business semantics, no ORM or infrastructure."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

MESSAGE_MAX_LENGTH = 1000


class ServiceType(str, Enum):
    """Closed set of services that may emit audit records."""

    USER = "USER"
    AUDIT = "AUDIT"
    PRODUCTION = "PRODUCTION"
    PROCESSING = "PROCESSING"
    STORAGE = "STORAGE"
    PERFORMANCE = "PERFORMANCE"
    ANALYTICS = "ANALYTICS"
    SYSTEM = "SYSTEM"


class AuditAction(str, Enum):
    """Closed set of event categories. Extending it is a code change, never a runtime coercion."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    READ = "READ"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    SYSTEM_EVENT = "SYSTEM_EVENT"
    ERROR = "ERROR"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


@dataclass(frozen=True, kw_only=True)
class EventRecordCandidate:
    """
    Unvalidated record as submitted by a caller. Enumerated fields may still hold
    raw strings here; the validator decides whether they belong to their closed set.
    """

    service: Union[ServiceType, str, None]
    action: Union[AuditAction, str, None]
    message: Optional[str]
    log_level: Union[LogLevel, str, None] = None
    details: Optional[Dict[str, Any]] = None
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    entity_id: Optional[str] = None
    entity_type: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    source: Optional[str] = None
    successful: Optional[bool] = None
    timestamp: Optional[datetime] = None


@dataclass(frozen=True, kw_only=True)
class EventRecord:
    """
    Validated, immutable audit fact ready for persistence.
    Defaults (log_level INFO, successful True, timestamp) are already applied.
    """

    service: ServiceType
    action: AuditAction
    log_level: LogLevel
    message: str
    timestamp: datetime
    successful: bool = True
    details: Optional[Dict[str, Any]] = None
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    entity_id: Optional[str] = None
    entity_type: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    source: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class StoredEventRecord(EventRecord):
    """Event record as held by the ledger: id and bookkeeping timestamps are store-assigned."""

    id: int
    created_at: datetime
    updated_at: Optional[datetime] = field(default=None)
