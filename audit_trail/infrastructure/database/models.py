# audit_trail/infrastructure/database/models.py

from datetime import datetime, timezone

from sqlalchemy import JSON, BigInteger, Boolean, Column, DateTime, Index, Integer, String, Text

from audit_trail.infrastructure.database.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditLogRow(Base):
    """ORM row for one audit record. Append-only: no code path updates a row in place."""

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_service_timestamp", "service", "timestamp"),
        Index("ix_audit_logs_entity", "entity_id", "entity_type"),
        Index("ix_audit_logs_timestamp", "timestamp"),
        Index("ix_audit_logs_user_id", "user_id"),
    )

    # BIGINT autoincrement on servers; SQLite only autoincrements INTEGER primary keys.
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)

    service = Column(String(32), nullable=False)
    action = Column(String(32), nullable=False)
    log_level = Column(String(16), nullable=False, default="INFO")
    message = Column(String(1000), nullable=False)
    details = Column(JSON, nullable=True)

    user_id = Column(String(64), nullable=True)
    user_email = Column(String(255), nullable=True)
    entity_id = Column(String(100), nullable=True)
    entity_type = Column(String(100), nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    source = Column(String(100), nullable=True)

    successful = Column(Boolean, nullable=False, default=True)
    timestamp = Column(DateTime(timezone=True), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, default=_utcnow)
