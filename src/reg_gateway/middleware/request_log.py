"""Request logging middleware.

Logs every HTTP request with method, path, status code, latency, the
authenticated caller address (``-`` for anonymous reads) and a short request
ID. The request_id is injected into request.state for ApiResponse and echoed
back in the ``X-Request-ID`` header so relayers can correlate receipts.

Log format:
    INFO [POST] /api/v1/markets/0x.../actors → 200 (23ms) caller=0xAb..12 req_a1b2c3d4
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("reg.request")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = f"req_{uuid.uuid4().hex[:12]}"
        request.state.caller = None

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        logger.info(
            "[%s] %s → %d (%.0fms) caller=%s %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.state.caller or "-",
            request.state.request_id,
        )
        return response
