"""Domain validators. Pure validation functions."""

from audit_trail.domain.validators.event_validator import (
    ValidationResult,
    ensure_valid_event_record,
    parse_datetime,
    parse_enum,
    validate_event_record,
    validate_retention_days,
)

__all__ = [
    "ValidationResult",
    "ensure_valid_event_record",
    "parse_datetime",
    "parse_enum",
    "validate_event_record",
    "validate_retention_days",
]
