"""Ledger store protocol. Application layer depends on this; infrastructure implements it."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Protocol

from audit_trail.domain.models.event_record import (
    AuditAction,
    EventRecord,
    LogLevel,
    ServiceType,
    StoredEventRecord,
)


class SortOrder(str, Enum):
    """Ordering by timestamp; id breaks ties in the same direction."""

    DESC = "desc"
    ASC = "asc"


@dataclass(frozen=True, kw_only=True)
class LedgerPredicate:
    """
    Conjunction of equality filters plus optional timestamp bounds.
    Empty predicate matches every record.
    start_date/end_date are inclusive; before is exclusive (retention cutoff).
    """

    service: Optional[ServiceType] = None
    action: Optional[AuditAction] = None
    user_id: Optional[str] = None
    entity_id: Optional[str] = None
    entity_type: Optional[str] = None
    log_level: Optional[LogLevel] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    before: Optional[datetime] = None

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in self.__dataclass_fields__)


class LedgerStore(Protocol):
    """
    Append-only storage for audit records. Every operation is a single atomic store call;
    I/O failures surface as AuditError(kind=STORAGE) with no partial results.
    """

    async def insert(self, record: EventRecord) -> StoredEventRecord:
        """Persist record; assigns id, created_at and updated_at. Returns the stored form."""
        ...

    async def find_by_id(self, record_id: int) -> Optional[StoredEventRecord]:
        """Return the stored record or None."""
        ...

    async def find(
        self,
        predicate: LedgerPredicate,
        order: SortOrder = SortOrder.DESC,
        limit: Optional[int] = 100,
        offset: int = 0,
    ) -> List[StoredEventRecord]:
        """Return records matching predicate, ordered by (timestamp, id). limit=None is unlimited."""
        ...

    async def count(self, predicate: LedgerPredicate) -> int:
        """Return the number of records matching predicate."""
        ...

    async def delete_where(self, predicate: LedgerPredicate) -> int:
        """Delete records matching predicate. Returns rows removed; 0 is not an error."""
        ...

    async def delete_by_id(self, record_id: int) -> bool:
        """Delete a single record. Returns False if it did not exist."""
        ...
