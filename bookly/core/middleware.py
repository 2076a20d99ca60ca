# bookly/core/middleware.py
"""Custom middleware for request handling"""
import uuid
import time
import logging
from starlette.requests import Request

logger = logging.getLogger(__name__)


async def correlation_id_middleware(request: Request, call_next):
    """Tag every request with a correlation ID so a booking can be traced across log lines"""
    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
    request.state.correlation_id = correlation_id

    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


async def request_logging_middleware(request: Request, call_next):
    """Log each request with its tenant, outcome and duration"""
    start_time = time.time()
    correlation_id = getattr(request.state, "correlation_id", "unknown")
    business_id = request.headers.get("X-Business-ID", "-")

    response = await call_next(request)

    duration_ms = round((time.time() - start_time) * 1000, 2)
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} "
        f"({duration_ms}ms, business={business_id}, correlation_id={correlation_id})"
    )

    return response
