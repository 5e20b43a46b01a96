"""Audit error taxonomy. One error type tagged with a kind; no HTTP status codes here."""

from enum import Enum
from typing import List, Optional, Sequence


class ErrorKind(str, Enum):
    """Category of an audit failure. Transport mapping is done at the API boundary."""

    VALIDATION = "validation"  # malformed or out-of-domain input, caller-fixable
    INVALID_RANGE = "invalid_range"  # start_date after end_date
    NOT_FOUND = "not_found"  # single-record lookup miss where existence is required
    STORAGE = "storage"  # persistence layer failure, not caller-fixable
    FORBIDDEN = "forbidden"  # privileged operation without admin credentials


class AuditError(Exception):
    """
    Base for all audit-layer errors.
    `kind` says what went wrong; `fields` lists offending input fields (validation only).
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        fields: Optional[Sequence[str]] = None,
        errors: Optional[Sequence[str]] = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.fields: List[str] = list(fields or [])
        self.errors: List[str] = list(errors or [])
        super().__init__(message)

    @classmethod
    def validation(cls, errors: Sequence[str], fields: Sequence[str]) -> "AuditError":
        return cls(ErrorKind.VALIDATION, "Validation failed", fields=fields, errors=errors)

    @classmethod
    def invalid_range(cls, message: str = "start_date cannot be after end_date") -> "AuditError":
        return cls(ErrorKind.INVALID_RANGE, message, fields=["start_date", "end_date"], errors=[message])

    @classmethod
    def not_found(cls, record_id: int) -> "AuditError":
        return cls(ErrorKind.NOT_FOUND, f"Audit log with ID {record_id} not found")

    @classmethod
    def storage(cls, message: str) -> "AuditError":
        return cls(ErrorKind.STORAGE, message)

    @classmethod
    def forbidden(cls, message: str = "Administrative credentials required") -> "AuditError":
        return cls(ErrorKind.FORBIDDEN, message)

    def to_dict(self) -> dict:
        """Structured representation for error responses and JSON logging."""
        payload: dict = {"kind": self.kind.value, "message": self.message}
        if self.fields:
            payload["fields"] = self.fields
        if self.errors:
            payload["errors"] = self.errors
        return payload

    def __repr__(self) -> str:
        return f"AuditError(kind={self.kind.value!r}, message={self.message!r}, fields={self.fields!r})"
