"""
Request ID middleware for request correlation.

Every log line written while a request is served carries its id, and the
id is echoed in the X-Request-ID response header.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from unitportal.logging_config import get_logger, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128
SLOW_REQUEST_MS = 1000


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Assign a request ID to each request.

    A client-supplied X-Request-ID is kept when it is reasonably short;
    otherwise a new UUID is generated.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
        if incoming and len(incoming) <= MAX_REQUEST_ID_LENGTH:
            request_id = incoming
        else:
            request_id = str(uuid.uuid4())

        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        try:
            start = time.perf_counter()
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start) * 1000, 1)

            response.headers[REQUEST_ID_HEADER] = request_id

            log = logger.warning if duration_ms > SLOW_REQUEST_MS else logger.debug
            log(
                "%s %s -> %s",
                request.method,
                request.url.path,
                response.status_code,
                extra={"duration_ms": duration_ms, "status_code": response.status_code},
            )
            return response
        finally:
            request_id_var.reset(token)
