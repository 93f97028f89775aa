"""Reject request bodies larger than the configured limit with 413."""

from typing import Any

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = structlog.get_logger()

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Cap JSON request bodies at `max_body_bytes` (10 KB by default)."""

    def __init__(self, app: Any, max_body_bytes: int = 10 * 1024) -> None:  # noqa: ANN401
        super().__init__(app)
        self.max_body_bytes = max_body_bytes

    def _too_large(self, request: Request, size: int) -> JSONResponse:
        logger.info("request_body_too_large", path=request.url.path, size=size, limit=self.max_body_bytes)
        return JSONResponse(
            status_code=413,
            content={"detail": f"Request body exceeds {self.max_body_bytes} bytes"},
        )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method not in _BODY_METHODS:
            return await call_next(request)

        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                size = int(content_length)
            except ValueError:
                return JSONResponse(status_code=400, content={"detail": "Invalid Content-Length header"})
            if size > self.max_body_bytes:
                return self._too_large(request, size)
            return await call_next(request)

        # Chunked upload: the body is buffered here and replayed to the route.
        body = await request.body()
        if len(body) > self.max_body_bytes:
            return self._too_large(request, len(body))
        return await call_next(request)
