"""
API Middleware - Request/response processing.

Provides:
- Request log: request id plus latency on every response
- Error handling with taxonomy codes
- Upload rate limiting per client IP
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from docintake.config.errors import ErrorCode, IntakeError, is_processing_error

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]

WINDOW_SECONDS = 60


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _error_body(request: Request, error: dict) -> dict:
    return {"error": error, "request_id": _request_id(request)}


class RequestLogMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an id and log it with its latency.

    The id is taken from ``X-Request-ID`` when the client sends one and is
    echoed back, together with ``X-Response-Time-Ms``.
    """

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        request.state.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Request-ID"] = request.state.request_id
        response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"
        logger.info(
            "%s %s status=%d latency_ms=%.2f request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request.state.request_id,
        )
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Convert IntakeError exceptions to structured JSON responses."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        try:
            return await call_next(request)
        except IntakeError as e:
            status_code = _error_code_to_status(e.code)
            log = logger.warning if is_processing_error(e) and status_code < 500 else logger.error
            log(
                "%s: %s request_id=%s details=%s",
                e.code.value,
                e.message,
                _request_id(request),
                e.details,
            )
            return JSONResponse(status_code=status_code, content=_error_body(request, e.to_dict()))
        except Exception as e:
            logger.exception("Unhandled error: %s request_id=%s", e, _request_id(request))
            return JSONResponse(
                status_code=500,
                content=_error_body(
                    request,
                    {
                        "code": ErrorCode.INTERNAL_ERROR.value,
                        "message": "Internal server error",
                        "details": {},
                    },
                ),
            )


@dataclass
class _Window:
    start: float
    used: int = 0


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Fixed one-minute window per client IP on upload endpoints.

    Only POSTs under ``path_prefix`` count; OCR and analysis are the
    expensive calls. Health and info endpoints are never limited.
    """

    def __init__(
        self,
        app: ASGIApp,
        requests_per_minute: int = 60,
        path_prefix: str = "/api/documents",
    ) -> None:
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.path_prefix = path_prefix
        self._windows: dict[str, _Window] = {}

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        if request.method != "POST" or not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        window = self._windows.get(client_ip)
        if window is None or now - window.start >= WINDOW_SECONDS:
            window = self._windows[client_ip] = _Window(start=now)

        if window.used >= self.requests_per_minute:
            retry_after = max(1, int(window.start + WINDOW_SECONDS - now + 0.999))
            logger.warning(
                "Upload rate limit exceeded for %s request_id=%s",
                client_ip,
                _request_id(request),
            )
            return JSONResponse(
                status_code=429,
                content=_error_body(
                    request,
                    {
                        "code": ErrorCode.SECURITY_RATE_LIMITED.value,
                        "message": f"Too many uploads. Please retry after {retry_after} seconds.",
                        "details": {"retry_after": retry_after},
                    },
                ),
                headers={"Retry-After": str(retry_after)},
            )

        window.used += 1
        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(self.requests_per_minute - window.used)
        response.headers["X-RateLimit-Limit"] = str(self.requests_per_minute)
        return response


def _error_code_to_status(code: ErrorCode) -> int:
    """Map error codes to HTTP status codes."""
    mapping = {
        # 413 Payload Too Large
        ErrorCode.FILE_TOO_LARGE: 413,
        # 415 Unsupported Media Type
        ErrorCode.UNSUPPORTED_FILE_TYPE: 415,
        ErrorCode.UNSUPPORTED_IMAGE_FORMAT: 415,
        # 422 Unprocessable: file accepted but no usable text
        ErrorCode.EMPTY_FILE: 422,
        ErrorCode.EMPTY_DOCUMENT: 422,
        ErrorCode.OCR_FAILED: 422,
        ErrorCode.PDF_OCR_FAILED: 422,
        ErrorCode.PDF_EXTRACTION_FAILED: 422,
        ErrorCode.DOCX_EXTRACTION_FAILED: 422,
        # 429 Rate Limited
        ErrorCode.SECURITY_RATE_LIMITED: 429,
        ErrorCode.LLM_RATE_LIMITED: 429,
        ErrorCode.VISION_RATE_LIMITED: 429,
        # 502 Bad Gateway: upstream answered with garbage
        ErrorCode.ANALYSIS_INVALID_RESPONSE: 502,
        ErrorCode.VISION_API_ERROR: 502,
        ErrorCode.VISION_PROCESSING_ERROR: 502,
        # 503 Service Unavailable
        ErrorCode.LLM_UNAVAILABLE: 503,
        ErrorCode.VISION_NOT_CONFIGURED: 503,
        ErrorCode.VISION_NETWORK_ERROR: 503,
    }
    return mapping.get(code, 500)
