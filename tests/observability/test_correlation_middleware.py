"""
Test suite for correlation and request logging middleware.

System role: Verification of request tracing
"""

import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient

from reading_room.observability import get_correlation_id
from reading_room.observability.logger import CorrelationIdFilter
from reading_room.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware


def build_client() -> TestClient:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    @app.get("/echo")
    async def echo():
        return {"correlation_id": get_correlation_id()}

    return TestClient(app)


class TestCorrelationMiddleware:
    """Test suite for CorrelationMiddleware."""

    def test_incoming_header_should_be_propagated(self) -> None:
        response = build_client().get("/echo", headers={"X-Correlation-ID": "req-123"})

        assert response.json() == {"correlation_id": "req-123"}
        assert response.headers["X-Correlation-ID"] == "req-123"

    def test_missing_header_should_generate_id(self) -> None:
        response = build_client().get("/echo")

        generated = response.headers["X-Correlation-ID"]
        assert generated
        assert response.json() == {"correlation_id": generated}


class TestCorrelationIdFilter:
    """Test suite for CorrelationIdFilter."""

    def test_record_should_carry_placeholder_outside_request(self) -> None:
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "-"
