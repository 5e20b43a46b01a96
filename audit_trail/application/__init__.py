# Application layer: services that orchestrate domain and infrastructure.

from audit_trail.application.audit_service import AuditService
from audit_trail.application.ledger_store import LedgerPredicate, LedgerStore, SortOrder
from audit_trail.application.query_engine import QueryEngine, QueryPage, ResolvedQuery
from audit_trail.application.retention import RetentionManager

__all__ = [
    "AuditService",
    "LedgerPredicate",
    "LedgerStore",
    "QueryEngine",
    "QueryPage",
    "ResolvedQuery",
    "RetentionManager",
    "SortOrder",
]
