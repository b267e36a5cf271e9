"""Structured logging for the scheduling engine and its HTTP layer.

Engine events (appointment_booked, appointment_transitioned,
appointment_rescheduled, slot_conflict) are emitted as JSON through
structlog on top of the standard library. Inside an HTTP request every
event also carries the request_id bound by RequestIDMiddleware.
"""
import logging
import sys
import uuid

import structlog

from clinic_scheduler import config

REQUEST_ID_HEADER = b"x-request-id"

# merge_contextvars first: request_id is part of every event
PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.JSONRenderer(),
]


def setup_structured_logging(log_level: str = config.LOG_LEVEL):
    """
    Route engine and API logs through structlog as JSON on stdout.

    Called once from the API lifespan; library users may call it themselves.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR (default: LOG_LEVEL)
    """
    structlog.configure(
        processors=PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper())
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Module logger; event names are snake_case, context goes in kwargs."""
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """Request id of the form req-<12 hex chars>."""
    return f"req-{uuid.uuid4().hex[:12]}"


class RequestIDMiddleware:
    """ASGI middleware that tags every request with an id.

    The id is bound to the structlog context for the duration of the
    request and returned to the client in the X-Request-ID header.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = generate_request_id()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        async def send_with_request_id(message):
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((REQUEST_ID_HEADER, request_id.encode()))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
