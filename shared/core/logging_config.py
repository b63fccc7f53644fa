"""
Structured JSON logging shared by the services.

Every record is rendered as one JSON object carrying the service identity,
the request trace context (request id, correlation id, acting user) and any
``extra_fields`` passed by the caller.
"""

import logging
import logging.handlers
import os
import re
import sys
import json
import time
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from contextvars import ContextVar
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

# Context variables for request tracking
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)
actor_id_var: ContextVar[Optional[str]] = ContextVar('actor_id', default=None)

class StructuredFormatter(logging.Formatter):
    """Render log records as single-line JSON."""

    def __init__(self, service_name: str = "unknown-service"):
        super().__init__()
        self.service_name = service_name
        self.environment = os.getenv('ENVIRONMENT', 'development')
        self.version = os.getenv('SERVICE_VERSION', '1.0.0')

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "@timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "environment": self.environment,
            "version": self.version,
            "location": {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
                "module": record.module
            },
        }

        trace_context = get_trace_context()
        if trace_context:
            log_obj["trace"] = trace_context

        if record.exc_info:
            log_obj["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info)
            }

        if hasattr(record, 'extra_fields'):
            log_obj["custom"] = record.extra_fields

        if hasattr(record, 'duration_ms'):
            log_obj["performance"] = {"duration_ms": record.duration_ms}

        return json.dumps(log_obj, default=str)

class SecurityFilter(logging.Filter):
    """Redact credentials that end up in log messages."""

    SENSITIVE_PATTERNS = [
        re.compile(r'(Bearer\s+)[A-Za-z0-9\-_\.=]+', re.IGNORECASE),
        re.compile(r'((?:password|token|secret|api_key)["\']?\s*[:=]\s*["\']?)[^\s,"\'}]+', re.IGNORECASE),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = message
        for pattern in self.SENSITIVE_PATTERNS:
            redacted = pattern.sub(r'\1***REDACTED***', redacted)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True

def setup_logging(
    service_name: str,
    level: str = "INFO",
    enable_console: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Configure the root logger with the structured formatter.

    Args:
        service_name: Name reported in every record
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_console: Write to stdout
        log_file: Optional path for a rotating file handler
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers = []

    formatter = StructuredFormatter(service_name)
    handlers = []

    if enable_console:
        handlers.append(logging.StreamHandler(sys.stdout))

    if log_file:
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10485760,  # 10MB
            backupCount=5
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(SecurityFilter())
        root_logger.addHandler(handler)

    logging.getLogger('uvicorn').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)

    root_logger.info(
        "Logging initialized",
        extra={
            'extra_fields': {
                'service': service_name,
                'level': level,
                'file': log_file,
            }
        }
    )

class LoggerAdapter(logging.LoggerAdapter):
    """Attaches the current trace context to each call's ``extra``."""

    def process(self, msg, kwargs):
        extra = kwargs.get('extra', {})
        extra.update(get_trace_context() or {})
        kwargs['extra'] = extra
        return msg, kwargs

def get_logger(name: str) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name), {})

def get_trace_context() -> Optional[Dict[str, Any]]:
    context = {
        "request_id": request_id_var.get(),
        "correlation_id": correlation_id_var.get(),
        "actor_id": actor_id_var.get(),
    }
    context = {k: v for k, v in context.items() if v}
    return context or None

def set_request_context(
    request_id: Optional[str] = None,
    correlation_id: Optional[str] = None,
    actor_id: Optional[str] = None
) -> None:
    if request_id:
        request_id_var.set(request_id)
    if correlation_id:
        correlation_id_var.set(correlation_id)
    if actor_id:
        actor_id_var.set(actor_id)

def clear_request_context() -> None:
    request_id_var.set(None)
    correlation_id_var.set(None)
    actor_id_var.set(None)

def generate_request_id() -> str:
    return str(uuid.uuid4())

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request and response, tracks duration and echoes the
    request id back in the ``X-Request-ID`` header.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get('X-Request-ID') or generate_request_id()
        clear_request_context()
        set_request_context(
            request_id=request_id,
            correlation_id=request.headers.get('X-Correlation-ID')
        )

        logger = get_logger(__name__)
        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                'extra_fields': {
                    'method': request.method,
                    'path': request.url.path,
                    'client_host': request.client.host if request.client else None
                }
            }
        )

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"Request failed: {request.method} {request.url.path}",
                exc_info=True,
                extra={
                    'extra_fields': {
                        'method': request.method,
                        'path': request.url.path,
                        'duration_ms': (time.time() - start_time) * 1000
                    }
                }
            )
            raise

        logger.info(
            f"Request completed: {request.method} {request.url.path}",
            extra={
                'extra_fields': {
                    'method': request.method,
                    'path': request.url.path,
                    'status_code': response.status_code,
                },
                'duration_ms': (time.time() - start_time) * 1000
            }
        )
        response.headers['X-Request-ID'] = request_id
        return response
