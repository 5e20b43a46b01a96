"""Validators for audit record rules. Pure functions, no infrastructure or DB access."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

from audit_trail.domain.exceptions import AuditError
from audit_trail.domain.models.event_record import (
    MESSAGE_MAX_LENGTH,
    AuditAction,
    EventRecordCandidate,
    LogLevel,
    ServiceType,
)

E = TypeVar("E", bound=Enum)

# Column bounds for optional text fields
OPTIONAL_FIELD_MAX_LENGTHS: Dict[str, int] = {
    "user_id": 64,
    "user_email": 255,
    "entity_id": 100,
    "entity_type": 100,
    "ip_address": 45,
    "user_agent": 500,
    "source": 100,
}


@dataclass
class ValidationResult:
    """Outcome of validating a candidate. `fields` mirrors `errors` by offending field name."""

    errors: List[str] = field(default_factory=list)
    fields: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def add(self, field_name: str, error: str) -> None:
        self.errors.append(error)
        if field_name not in self.fields:
            self.fields.append(field_name)

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise AuditError.validation(self.errors, self.fields)


def parse_enum(enum_cls: Type[E], value: Any) -> Optional[E]:
    """Return the enum member for value (case-insensitive for strings), or None if not a member."""
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value.strip().upper())
    except ValueError:
        return None


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 datetime (or pass one through) and normalize to UTC. None if unparseable."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def validate_message(message: Optional[str], result: ValidationResult) -> None:
    if not isinstance(message, str) or not message.strip():
        result.add("message", "Message is required")
        return
    if len(message) > MESSAGE_MAX_LENGTH:
        result.add("message", f"Message cannot exceed {MESSAGE_MAX_LENGTH} characters")


def validate_details(details: Optional[Dict[str, Any]], result: ValidationResult) -> None:
    """Details are stored as-is but must be a JSON-serializable mapping."""
    if details is None:
        return
    if not isinstance(details, dict):
        result.add("details", "Details must be a key/value mapping")
        return
    try:
        json.dumps(details)
    except (TypeError, ValueError):
        result.add("details", "Details must be JSON-serializable")


def validate_event_record(candidate: EventRecordCandidate) -> ValidationResult:
    """
    Check a candidate against the record invariants: closed enumerations,
    non-empty bounded message, bounded optional text. No side effects.
    """
    result = ValidationResult()

    if parse_enum(ServiceType, candidate.service) is None:
        result.add("service", "Valid service type is required")

    if parse_enum(AuditAction, candidate.action) is None:
        result.add("action", "Valid action is required")

    validate_message(candidate.message, result)

    if candidate.log_level is not None and parse_enum(LogLevel, candidate.log_level) is None:
        result.add("log_level", "Valid log level is required")

    validate_details(candidate.details, result)

    for name, max_length in OPTIONAL_FIELD_MAX_LENGTHS.items():
        value = getattr(candidate, name)
        if value is not None and len(str(value)) > max_length:
            result.add(name, f"{name} must not exceed {max_length} characters")

    return result


def ensure_valid_event_record(candidate: EventRecordCandidate) -> None:
    """Raise AuditError(kind=VALIDATION) listing offending fields if the candidate is invalid."""
    validate_event_record(candidate).raise_if_invalid()


def validate_retention_days(days: Any) -> int:
    """Retention window must be a positive integer; zero/negative would wipe the whole ledger."""
    if isinstance(days, bool) or not isinstance(days, int) or days < 1:
        raise AuditError.validation(["days must be a positive integer"], ["days"])
    return days
