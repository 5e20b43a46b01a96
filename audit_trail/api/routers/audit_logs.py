"""Audit logs API router: create, list, get, by-service, by-entity, delete, retention cleanup."""

from dataclasses import replace
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Request

from audit_trail.api.dependencies import get_audit_service, require_admin
from audit_trail.application.audit_service import AuditService
from audit_trail.domain.exceptions import AuditError
from audit_trail.domain.models.query import QueryFilter
from audit_trail.domain.schemas.event_record import (
    ApiResponse,
    CreateEventRecordRequest,
    EventRecordListResponse,
    EventRecordResponse,
    RetentionResult,
)

router = APIRouter()

Service = Annotated[AuditService, Depends(get_audit_service)]


def _list_response(records, total=None, page=None, limit=None) -> EventRecordListResponse:
    data = [EventRecordResponse.from_record(r) for r in records]
    return EventRecordListResponse(count=len(data), total=total, page=page, limit=limit, data=data)


@router.post("/logs", status_code=201, response_model=ApiResponse[EventRecordResponse])
async def create_log(request: Request, body: CreateEventRecordRequest, service: Service):
    """Create an audit record. Request metadata fills ip_address/user_agent when the caller omits them."""
    candidate = body.to_candidate()
    if candidate.ip_address is None and request.client is not None:
        candidate = replace(candidate, ip_address=request.client.host)
    if candidate.user_agent is None and request.headers.get("user-agent"):
        candidate = replace(candidate, user_agent=request.headers["user-agent"][:500])

    stored = await service.record(candidate)
    return ApiResponse[EventRecordResponse](
        message="Audit log created successfully",
        data=EventRecordResponse.from_record(stored),
    )


@router.get("/logs", response_model=EventRecordListResponse)
async def list_logs(
    service: Service,
    service_name: Annotated[Optional[str], Query(alias="service")] = None,
    action: Optional[str] = None,
    user_id: Optional[str] = None,
    entity_id: Optional[str] = None,
    entity_type: Optional[str] = None,
    log_level: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
):
    """Filtered, paginated listing, newest first. Validation happens in the query engine."""
    result = await service.query(
        QueryFilter(
            service=service_name,
            action=action,
            user_id=user_id,
            entity_id=entity_id,
            entity_type=entity_type,
            log_level=log_level,
            start_date=start_date,
            end_date=end_date,
            page=page,
            limit=limit,
        )
    )
    return _list_response(result.records, total=result.total, page=result.page, limit=result.limit)


@router.get("/logs/service/{service_name}", response_model=EventRecordListResponse)
async def list_logs_by_service(
    service_name: str,
    service: Service,
    limit: Optional[int] = None,
):
    records = await service.get_by_service(service_name, limit)
    return _list_response(records)


@router.get("/logs/entity/{entity_id}", response_model=EventRecordListResponse)
async def list_logs_by_entity(
    entity_id: str,
    service: Service,
    entity_type: Optional[str] = None,
):
    """Full history of one entity."""
    records = await service.get_by_entity(entity_id, entity_type)
    return _list_response(records)


@router.get("/logs/{record_id}")
async def get_log(record_id: int, service: Service):
    record = await service.require_by_id(record_id)
    return ApiResponse[EventRecordResponse](data=EventRecordResponse.from_record(record))


@router.delete("/logs/cleanup/{days}", dependencies=[Depends(require_admin)])
async def delete_old_logs(days: int, service: Service):
    """Retention: delete records older than `days` days. Admin only."""
    deleted_count = await service.prune(days)
    return ApiResponse[RetentionResult](
        message=f"Deleted {deleted_count} audit logs older than {days} days",
        data=RetentionResult(deleted_count=deleted_count, days=days),
    )


@router.delete("/logs/{record_id}", dependencies=[Depends(require_admin)])
async def delete_log(record_id: int, service: Service):
    """Administrative single-record deletion."""
    if record_id < 1:
        raise AuditError.validation(["Invalid audit log ID"], ["id"])
    await service.delete_by_id(record_id)
    return ApiResponse[None](message=f"Audit log {record_id} deleted")
