"""Query engine: validates a filter request and resolves it into a bounded, ordered store query."""

from dataclasses import dataclass
from typing import List, Optional

from audit_trail.application.ledger_store import LedgerPredicate, LedgerStore, SortOrder
from audit_trail.domain.exceptions import AuditError
from audit_trail.domain.models.event_record import AuditAction, LogLevel, ServiceType, StoredEventRecord
from audit_trail.domain.models.query import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT, QueryFilter
from audit_trail.domain.validators.event_validator import ValidationResult, parse_datetime, parse_enum


@dataclass(frozen=True)
class ResolvedQuery:
    """Validated predicate plus pagination window. Always ordered timestamp DESC, id DESC."""

    predicate: LedgerPredicate
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class QueryPage:
    records: List[StoredEventRecord]
    total: int
    page: int
    limit: int


def _blank(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class QueryEngine:
    """
    Turns caller filters into a single conjunctive predicate. Invalid filters fail fast
    with AuditError and never reach the store.
    """

    def __init__(self, store: LedgerStore, default_limit: int = DEFAULT_LIMIT) -> None:
        self._store = store
        self._default_limit = default_limit

    def build(self, query: QueryFilter) -> ResolvedQuery:
        """Validate every present filter field and build the predicate. Raises AuditError."""
        result = ValidationResult()

        service = None
        if query.service is not None:
            service = parse_enum(ServiceType, query.service)
            if service is None:
                result.add("service", "Invalid service type")

        action = None
        if query.action is not None:
            action = parse_enum(AuditAction, query.action)
            if action is None:
                result.add("action", "Invalid action")

        log_level = None
        if query.log_level is not None:
            log_level = parse_enum(LogLevel, query.log_level)
            if log_level is None:
                result.add("log_level", "Invalid log level")

        page = DEFAULT_PAGE if query.page is None else query.page
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            result.add("page", "Page must be greater than 0")

        limit = self._default_limit if query.limit is None else query.limit
        if isinstance(limit, bool) or not isinstance(limit, int) or not (1 <= limit <= MAX_LIMIT):
            result.add("limit", f"Limit must be between 1 and {MAX_LIMIT}")

        start_date = None
        if query.start_date is not None:
            start_date = parse_datetime(query.start_date)
            if start_date is None:
                result.add("start_date", "Invalid start date")

        end_date = None
        if query.end_date is not None:
            end_date = parse_datetime(query.end_date)
            if end_date is None:
                result.add("end_date", "Invalid end date")

        result.raise_if_invalid()

        if start_date is not None and end_date is not None and start_date > end_date:
            raise AuditError.invalid_range()

        predicate = LedgerPredicate(
            service=service,
            action=action,
            user_id=_blank(query.user_id),
            entity_id=_blank(query.entity_id),
            entity_type=_blank(query.entity_type),
            log_level=log_level,
            start_date=start_date,
            end_date=end_date,
        )
        return ResolvedQuery(predicate=predicate, page=page, limit=limit)

    async def run(self, query: QueryFilter) -> QueryPage:
        """Resolve the filter, then fetch the page and the total matching count."""
        resolved = self.build(query)
        records = await self._store.find(
            resolved.predicate,
            order=SortOrder.DESC,
            limit=resolved.limit,
            offset=resolved.offset,
        )
        total = await self._store.count(resolved.predicate)
        return QueryPage(records=records, total=total, page=resolved.page, limit=resolved.limit)

    async def by_service(self, service: object, limit: Optional[int] = None) -> List[StoredEventRecord]:
        """Latest records of one service, newest first."""
        resolved = self.build(QueryFilter(service=service, limit=limit))
        if resolved.predicate.service is None:
            raise AuditError.validation(["Valid service type is required"], ["service"])
        return await self._store.find(resolved.predicate, order=SortOrder.DESC, limit=resolved.limit)

    async def by_entity(self, entity_id: str, entity_type: Optional[str] = None) -> List[StoredEventRecord]:
        """Full history of one entity, newest first, unlimited."""
        entity_id = _blank(entity_id)
        if entity_id is None:
            raise AuditError.validation(["entity_id is required"], ["entity_id"])
        predicate = LedgerPredicate(entity_id=entity_id, entity_type=_blank(entity_type))
        return await self._store.find(predicate, order=SortOrder.DESC, limit=None)
