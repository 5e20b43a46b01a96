"""Fire-and-forget audit client used by business services."""

from audit_trail.client.audit_client import AuditClient, AuditSink, HttpAuditSink

__all__ = ["AuditClient", "AuditSink", "HttpAuditSink"]
