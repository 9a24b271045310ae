"""Response envelope shared by every endpoint.

    {
        "code": 0,            // 0 = success, otherwise the AppError code
        "message": "success",
        "data": { ... },      // null on error
        "timestamp": "...",
        "request_id": "..."   // same value as the X-Request-ID header
    }

Mutating endpoints put the events their call emitted under ``data.events``,
the way a transaction receipt carries its logs.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field
from starlette.requests import Request


def _new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=_new_request_id)


def success_response(
    data: Any = None, message: str = "success", request_id: str | None = None
) -> ApiResponse:
    return ApiResponse(
        code=0, message=message, data=data, request_id=request_id or _new_request_id()
    )


def error_response(code: int, message: str, request_id: str | None = None) -> ApiResponse:
    return ApiResponse(
        code=code, message=message, data=None, request_id=request_id or _new_request_id()
    )


def respond(request: Request, data: Any = None, message: str = "success") -> ApiResponse:
    """Success envelope stamped with the id RequestLogMiddleware gave this request."""
    return success_response(data, message, getattr(request.state, "request_id", None))
