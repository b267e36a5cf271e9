"""Tests for structured logging and request tracing."""
import re

import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient

from clinic_scheduler.logging_config import (
    PROCESSORS,
    RequestIDMiddleware,
    generate_request_id,
    get_logger,
    setup_structured_logging,
)


def test_request_id_format():
    request_id = generate_request_id()

    assert re.fullmatch(r"req-[0-9a-f]{12}", request_id)
    assert generate_request_id() != request_id


def test_get_logger_after_setup():
    setup_structured_logging("DEBUG")

    logger = get_logger("clinic_scheduler.tests")

    assert logger is not None
    logger.info("logging_configured", component="tests")


def _traced_app():
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/whoami")
    async def whoami():
        return structlog.contextvars.get_contextvars()

    return app


def test_request_id_is_bound_and_returned():
    client = TestClient(_traced_app())

    response = client.get("/whoami")

    assert response.status_code == 200
    request_id = response.headers["x-request-id"]
    assert request_id.startswith("req-")
    assert response.json()["request_id"] == request_id


def test_each_request_gets_its_own_id():
    client = TestClient(_traced_app())

    first = client.get("/whoami").headers["x-request-id"]
    second = client.get("/whoami").headers["x-request-id"]

    assert first != second


def test_request_id_is_unbound_after_request():
    client = TestClient(_traced_app())

    client.get("/whoami")

    assert "request_id" not in structlog.contextvars.get_contextvars()


def test_context_is_merged_before_rendering():
    """request_id bound in the context must reach the JSON renderer."""
    assert PROCESSORS[0] is structlog.contextvars.merge_contextvars
    assert isinstance(PROCESSORS[-1], structlog.processors.JSONRenderer)
