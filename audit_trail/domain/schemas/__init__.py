"""Domain schemas. Request/response and validation."""

from audit_trail.domain.schemas.event_record import (
    ApiResponse,
    CreateEventRecordRequest,
    EventRecordListResponse,
    EventRecordResponse,
    RetentionResult,
)

__all__ = [
    "ApiResponse",
    "CreateEventRecordRequest",
    "EventRecordListResponse",
    "EventRecordResponse",
    "RetentionResult",
]
