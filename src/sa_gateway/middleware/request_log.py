"""Request logging middleware.

Every request gets a request ID, stored on request.state (routers and error
handlers copy it into ApiResponse) and echoed in the X-Request-ID response
header. A well-formed X-Request-ID sent by the client (or a proxy) is kept,
so one ID can be traced across services.

Log format:
    INFO [POST] /api/gifts → 201 (23ms) req_a1b2c3d4e5f6
Server errors are logged at WARNING.
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("sa.request")

_INBOUND_ID = re.compile(r"^[A-Za-z0-9_\-]{8,64}$")


def resolve_request_id(request: Request) -> str:
    inbound = request.headers.get("x-request-id", "")
    if _INBOUND_ID.match(inbound):
        return inbound
    return f"req_{uuid.uuid4().hex[:12]}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request)
        request.state.request_id = request_id

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        logger.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response
