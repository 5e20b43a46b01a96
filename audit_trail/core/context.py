# audit_trail/core/context.py

import contextvars

correlation_id_ctx = contextvars.ContextVar("correlation_id", default=None)
# Service that sent the current request (X-Service-Name); None for direct callers.
caller_service_ctx = contextvars.ContextVar("caller_service", default=None)
