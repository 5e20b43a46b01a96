"""Fire-and-forget audit client for business services. Audit failures never reach the caller."""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol, Set

import httpx

from audit_trail.domain.models.event_record import (
    AuditAction,
    EventRecordCandidate,
    LogLevel,
    ServiceType,
)

LOGS_PATH = "/api/v1/logs"


class AuditSink(Protocol):
    """Anything that can record a candidate. AuditService satisfies this in-process."""

    async def record(self, candidate: EventRecordCandidate) -> Any:
        ...


def _candidate_payload(candidate: EventRecordCandidate) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for name in candidate.__dataclass_fields__:
        value = getattr(candidate, name)
        if value is None:
            continue
        if hasattr(value, "value"):
            value = value.value
        elif hasattr(value, "isoformat"):
            value = value.isoformat()
        payload[name] = value
    return payload


class HttpAuditSink:
    """Posts candidates to a remote audit service over HTTP. Raises on any transport or HTTP error."""

    def __init__(
        self,
        base_url: str,
        service_name: str,
        timeout_seconds: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"X-Service-Name": service_name},
        )

    async def record(self, candidate: EventRecordCandidate) -> Dict[str, Any]:
        response = await self._client.post(LOGS_PATH, json=_candidate_payload(candidate))
        response.raise_for_status()
        return response.json()

    async def aclose(self) -> None:
        await self._client.aclose()


class AuditClient:
    """
    At-most-once, no retries, no buffering. log_* coroutines swallow every failure
    after logging it locally; fire_* schedule the same call in the background and
    return immediately.
    """

    def __init__(self, sink: AuditSink, logger: Optional[logging.Logger] = None) -> None:
        self._sink = sink
        self._logger = logger or logging.getLogger(__name__)
        self._pending: Set[asyncio.Task] = set()

    @classmethod
    def over_http(
        cls,
        base_url: str,
        service: ServiceType,
        timeout_seconds: float = 5.0,
        logger: Optional[logging.Logger] = None,
    ) -> "AuditClient":
        sink = HttpAuditSink(base_url, f"{service.value}_SERVICE", timeout_seconds=timeout_seconds)
        return cls(sink, logger=logger)

    async def _send(
        self,
        service: Any,
        level: LogLevel,
        action: AuditAction,
        message: str,
        entity_id: Optional[str],
        details: Optional[Dict[str, Any]],
        user_id: Optional[str],
    ) -> bool:
        candidate = EventRecordCandidate(
            service=service,
            action=action,
            log_level=level,
            message=message,
            entity_id=entity_id,
            details=details,
            user_id=user_id,
            successful=level != LogLevel.ERROR,
            source=getattr(service, "value", service),
        )
        try:
            self._logger.debug("audit_send", extra={"log_level": level.value, "audit_message": message})
            await self._sink.record(candidate)
            return True
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._logger.warning(
                "audit_send_failed",
                extra={"log_level": level.value, "error": f"{type(e).__name__}: {e}"},
            )
            return False

    async def log_info(
        self,
        service: Any,
        message: str,
        entity_id: Optional[str] = None,
        *,
        action: AuditAction = AuditAction.SYSTEM_EVENT,
        details: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None,
    ) -> bool:
        """Record an INFO event. Returns False instead of raising when the audit path fails."""
        return await self._send(service, LogLevel.INFO, action, message, entity_id, details, user_id)

    async def log_warning(
        self,
        service: Any,
        message: str,
        entity_id: Optional[str] = None,
        *,
        action: AuditAction = AuditAction.SYSTEM_EVENT,
        details: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None,
    ) -> bool:
        return await self._send(service, LogLevel.WARN, action, message, entity_id, details, user_id)

    async def log_error(
        self,
        service: Any,
        message: str,
        entity_id: Optional[str] = None,
        *,
        action: AuditAction = AuditAction.ERROR,
        details: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None,
    ) -> bool:
        """Record an ERROR event (successful=False). Never raises."""
        return await self._send(service, LogLevel.ERROR, action, message, entity_id, details, user_id)

    def _schedule(self, coro) -> Optional[asyncio.Task]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            self._logger.warning("audit_send_dropped", extra={"error": "no running event loop"})
            return None
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def fire_info(self, service: Any, message: str, entity_id: Optional[str] = None, **kwargs: Any) -> Optional[asyncio.Task]:
        """Schedule log_info without waiting for it. Outside a running event loop the event is dropped and None returned."""
        return self._schedule(self.log_info(service, message, entity_id, **kwargs))

    def fire_warning(self, service: Any, message: str, entity_id: Optional[str] = None, **kwargs: Any) -> Optional[asyncio.Task]:
        return self._schedule(self.log_warning(service, message, entity_id, **kwargs))

    def fire_error(self, service: Any, message: str, entity_id: Optional[str] = None, **kwargs: Any) -> Optional[asyncio.Task]:
        return self._schedule(self.log_error(service, message, entity_id, **kwargs))

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def aclose(self) -> None:
        """Wait for scheduled sends, then close the sink if it holds a connection."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        close = getattr(self._sink, "aclose", None)
        if close is not None:
            await close()
