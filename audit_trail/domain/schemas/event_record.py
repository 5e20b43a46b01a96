"""Pydantic schemas for the audit log API and serialization. No DB or infrastructure."""

import json
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator

from audit_trail.domain.models.event_record import (
    AuditAction,
    EventRecordCandidate,
    LogLevel,
    ServiceType,
    StoredEventRecord,
)

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class CreateEventRecordRequest(BaseModel):
    """
    Request schema for creating an audit record. Enumerated fields stay plain strings
    here so that closed-set membership is decided by the domain validator.
    """

    service: str = Field(..., description="Origin service, e.g. PRODUCTION")
    action: str = Field(..., description="Event category, e.g. CREATE")
    message: str = Field(..., description="Free-text description, at most 1000 characters")
    log_level: Optional[str] = Field(None, description="DEBUG, INFO, WARN or ERROR; defaults to INFO")
    details: Optional[Dict[str, Any]] = Field(None, description="JSON-serializable structured context")
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    entity_id: Optional[str] = None
    entity_type: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    source: Optional[str] = None
    successful: Optional[bool] = None
    timestamp: Optional[datetime] = None

    @field_validator("details")
    @classmethod
    def details_must_be_json_serializable(cls, v: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Ensure details is JSON-serializable."""
        if v is None:
            return v
        try:
            json.dumps(v)
        except (TypeError, ValueError) as e:
            raise ValueError("details must be JSON-serializable") from e
        return v

    @field_validator("user_id", "entity_id", mode="before")
    @classmethod
    def ids_as_strings(cls, v: Any) -> Any:
        """Callers send numeric or UUID identifiers; both are stored as text."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    def to_candidate(self) -> EventRecordCandidate:
        return EventRecordCandidate(
            service=self.service,
            action=self.action,
            message=self.message,
            log_level=self.log_level,
            details=self.details,
            user_id=self.user_id,
            user_email=self.user_email,
            entity_id=self.entity_id,
            entity_type=self.entity_type,
            ip_address=self.ip_address,
            user_agent=self.user_agent,
            source=self.source,
            successful=self.successful,
            timestamp=self.timestamp,
        )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class EventRecordResponse(BaseModel):
    """Stored audit record as returned by the API."""

    id: int
    service: ServiceType
    action: AuditAction
    log_level: LogLevel
    message: str
    details: Optional[Dict[str, Any]] = None
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    entity_id: Optional[str] = None
    entity_type: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    source: Optional[str] = None
    successful: bool
    timestamp: datetime
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_record(cls, record: StoredEventRecord) -> "EventRecordResponse":
        return cls.model_validate(record, from_attributes=True)


class ApiResponse(BaseModel, Generic[T]):
    """Standard envelope: success flag, optional message, payload."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class EventRecordListResponse(BaseModel):
    """List envelope with the page size actually returned and the total matching count."""

    success: bool = True
    count: int
    total: Optional[int] = None
    page: Optional[int] = None
    limit: Optional[int] = None
    data: List[EventRecordResponse]


class RetentionResult(BaseModel):
    deleted_count: int
    days: int
