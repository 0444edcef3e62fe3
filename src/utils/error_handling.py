"""
Centralized Error Handling and Logging
Structured error logs with request context, trace IDs on every response,
and consistent JSON error bodies.
"""

import json
import logging
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union
from contextvars import ContextVar

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from middleware.security_headers import apply_security_headers

# Context variable for request tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

logger = logging.getLogger(__name__)

TRACE_HEADER = "X-Trace-ID"


class ErrorHandlingConfig:
    """Centralized configuration for error handling behavior"""

    SENSITIVE_FIELD_PATTERNS = [
        'password', 'token', 'key', 'secret', 'authorization',
        'auth', 'bearer', 'credential', 'api_key'
    ]

    LOG_REQUEST_BODIES = True
    LOG_HEADERS = True
    MAX_BODY_LOG_SIZE = 5000

    @classmethod
    def is_sensitive_field(cls, field_name: str) -> bool:
        field_lower = field_name.lower()
        return any(pattern in field_lower for pattern in cls.SENSITIVE_FIELD_PATTERNS)

    @classmethod
    def sanitize_data(cls, data: Union[Dict, str, Any]) -> Any:
        """Recursively redact sensitive data before it reaches the logs"""
        if isinstance(data, dict):
            return {
                key: "***REDACTED***" if cls.is_sensitive_field(str(key)) else cls.sanitize_data(value)
                for key, value in data.items()
            }
        elif isinstance(data, list):
            return [cls.sanitize_data(item) for item in data]
        elif isinstance(data, str) and len(data) > cls.MAX_BODY_LOG_SIZE:
            return data[:cls.MAX_BODY_LOG_SIZE] + "...[TRUNCATED]"
        return data


def new_trace_id() -> str:
    return str(uuid.uuid4())[:8]


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_trace_id(request: Optional[Request] = None) -> str:
    """Trace ID of the current request, creating one if none was assigned"""
    if request is not None:
        trace_id = getattr(request.state, 'trace_id', None)
        if trace_id:
            return trace_id
    return request_id_var.get('') or new_trace_id()


class StructuredLogger:
    """Structured logging with consistent format and context"""

    @staticmethod
    def log_error(
        error_type: str,
        message: str,
        request: Optional[Request] = None,
        exception: Optional[Exception] = None,
        extra_context: Optional[Dict] = None,
        include_traceback: bool = True
    ) -> str:
        """Log structured error with full context and return its trace ID"""
        trace_id = get_trace_id(request)

        log_entry = {
            "timestamp": utc_timestamp(),
            "trace_id": trace_id,
            "error_type": error_type,
            "message": message,
            "level": "ERROR"
        }

        if request:
            headers = dict(request.headers)
            log_entry["request"] = {
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "headers": ErrorHandlingConfig.sanitize_data(headers) if ErrorHandlingConfig.LOG_HEADERS else {},
                "client_ip": request.client.host if request.client else None,
            }

        if exception:
            log_entry["exception"] = {
                "type": type(exception).__name__,
                "details": str(exception),
            }
            if include_traceback:
                log_entry["exception"]["traceback"] = "".join(
                    traceback.format_exception(type(exception), exception, exception.__traceback__)
                )

        if extra_context:
            log_entry["context"] = ErrorHandlingConfig.sanitize_data(extra_context)

        logger.error(json.dumps(log_entry, indent=2, default=str))

        return trace_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to assign request trace IDs and keep the body for error logs"""

    BODY_METHODS = {"POST", "PUT", "PATCH"}

    async def dispatch(self, request: Request, call_next):
        trace_id = new_trace_id()
        request_id_var.set(trace_id)
        request.state.trace_id = trace_id

        body = None
        if ErrorHandlingConfig.LOG_REQUEST_BODIES and request.method in self.BODY_METHODS:
            body = await request.body()
        request.state.captured_body = body

        response = await call_next(request)
        response.headers[TRACE_HEADER] = trace_id
        return response


def _captured_body(request: Request) -> Optional[Any]:
    body = getattr(request.state, 'captured_body', None)
    if not body:
        return None
    try:
        return ErrorHandlingConfig.sanitize_data(json.loads(body))
    except ValueError:
        return ErrorHandlingConfig.sanitize_data(body.decode('utf-8', errors='replace'))


def _error_response(status_code: int, content: Dict[str, Any], trace_id: str, headers: Optional[Dict] = None) -> JSONResponse:
    content["trace_id"] = trace_id
    content["timestamp"] = utc_timestamp()
    response_headers = dict(headers or {})
    response_headers[TRACE_HEADER] = trace_id
    return JSONResponse(status_code=status_code, content=content, headers=response_headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions, logging server-side failures"""
    if exc.status_code >= 500:
        trace_id = StructuredLogger.log_error(
            f"http_{exc.status_code}",
            f"HTTP {exc.status_code}: {exc.detail}",
            request=request,
            extra_context={"request_body": _captured_body(request)},
            include_traceback=False
        )
    else:
        trace_id = get_trace_id(request)
        logger.info(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}")

    return _error_response(
        exc.status_code,
        {"error": f"HTTP {exc.status_code}", "message": exc.detail},
        trace_id,
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors (HTTP 422)"""
    validation_details = []
    for error in exc.errors():
        validation_details.append({
            "field": " -> ".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Unknown validation error"),
            "type": error.get("type", "unknown"),
        })

    trace_id = get_trace_id(request)
    logger.warning(
        f"Request validation failed on {request.method} {request.url.path}: "
        f"{json.dumps(ErrorHandlingConfig.sanitize_data(validation_details), default=str)}"
    )

    return _error_response(
        422,
        {
            "error": "Validation Error",
            "message": "Request validation failed",
            "detail": validation_details,
            "error_count": len(validation_details)
        },
        trace_id
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other exceptions without exposing internals"""
    trace_id = StructuredLogger.log_error(
        "internal_server_error",
        f"Unhandled exception: {str(exc)}",
        request=request,
        exception=exc,
        extra_context={"request_body": _captured_body(request)},
    )

    response = _error_response(
        500,
        {"error": "Internal Server Error", "message": "An unexpected error occurred"},
        trace_id
    )
    # Built outside the middleware stack, so hardening headers are added here
    apply_security_headers(response.headers, request.url.path)
    return response


def setup_error_handling(app):
    """Setup error handling middleware and exception handlers for a FastAPI app"""
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Centralized error handling initialized")
