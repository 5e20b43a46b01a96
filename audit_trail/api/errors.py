"""Maps audit error kinds to HTTP status codes. The only place that knows about status codes."""

from fastapi.responses import JSONResponse

from audit_trail.domain.exceptions import AuditError, ErrorKind

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 422,
    ErrorKind.INVALID_RANGE: 422,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORAGE: 503,
    ErrorKind.FORBIDDEN: 403,
}


def status_for(error: AuditError) -> int:
    return STATUS_BY_KIND.get(error.kind, 500)


def error_response(error: AuditError) -> JSONResponse:
    content = {"success": False, **error.to_dict()}
    return JSONResponse(status_code=status_for(error), content=content)
