"""Query filter model. Raw caller-supplied filter fields, validated by the query engine."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from audit_trail.domain.models.event_record import AuditAction, LogLevel, ServiceType

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 100
MAX_LIMIT = 1000


@dataclass(frozen=True, kw_only=True)
class QueryFilter:
    """All fields optional. Dates may arrive as ISO-8601 strings from the boundary."""

    service: Union[ServiceType, str, None] = None
    action: Union[AuditAction, str, None] = None
    user_id: Optional[str] = None
    entity_id: Optional[str] = None
    entity_type: Optional[str] = None
    log_level: Union[LogLevel, str, None] = None
    start_date: Union[datetime, str, None] = None
    end_date: Union[datetime, str, None] = None
    page: Optional[int] = None
    limit: Optional[int] = None
