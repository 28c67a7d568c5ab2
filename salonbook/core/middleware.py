# salonbook/core/middleware.py
"""Request tracing for the booking API"""
import re
import time
import uuid
import logging
from starlette.requests import Request

logger = logging.getLogger(__name__)

# /api/v1/public/<business_id>/... and /api/v1/dashboard/<business_id>/...
TENANT_PATH = re.compile(r"^/api/v1/(public|dashboard)/([0-9a-fA-F-]{36})(?:/|$)")


def business_scope(path: str):
    """Return (surface, business_id) for tenant routes, else (None, None)"""
    match = TENANT_PATH.match(path)
    if not match:
        return None, None
    return match.group(1), match.group(2)


async def correlation_id_middleware(request: Request, call_next):
    """Reuse the caller's X-Correlation-ID or mint one, and echo it back"""
    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
    request.state.correlation_id = correlation_id

    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


async def request_logging_middleware(request: Request, call_next):
    """One log line per request, tagged with the salon it was made for"""
    started = time.perf_counter()
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    surface, business_id = business_scope(request.url.path)

    response = await call_next(request)

    duration_ms = round((time.perf_counter() - started) * 1000, 2)
    response.headers["X-Response-Time-Ms"] = str(duration_ms)

    # Conflicts and validation failures are normal booking outcomes
    log = logger.warning if response.status_code >= 500 else logger.info
    log(
        f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms}ms)",
        extra={
            "correlation_id": correlation_id,
            "surface": surface,
            "business_id": business_id,
            "method": request.method,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }
    )

    return response
