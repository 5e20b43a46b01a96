"""Retention manager: age-based bulk deletion of ledger records."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from audit_trail.application.ledger_store import LedgerPredicate, LedgerStore
from audit_trail.domain.validators.event_validator import validate_retention_days

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RetentionManager:
    """Deletes records whose timestamp is older than now - days. Idempotent."""

    def __init__(
        self,
        store: LedgerStore,
        clock: Clock = utc_now,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)

    def cutoff_for(self, days: int) -> datetime:
        return self._clock() - timedelta(days=days)

    async def prune_older_than(self, days: int) -> int:
        """Validate days (positive integer), delete records with timestamp < cutoff, return count."""
        days = validate_retention_days(days)
        cutoff = self.cutoff_for(days)
        deleted = await self._store.delete_where(LedgerPredicate(before=cutoff))
        self._logger.info(
            "audit_records_pruned",
            extra={"days": days, "cutoff": cutoff.isoformat(), "deleted_count": deleted},
        )
        return deleted
