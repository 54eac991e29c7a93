"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from vrf_api.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    set_request_id,
)


@pytest.fixture
def log_stream():
    logger = logging.getLogger("test_vrf_logging")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers.clear()
    clear_request_id()


def test_redacts_rpc_urls_and_keys(log_stream) -> None:
    logger, stream = log_stream

    logger.info(
        "chain.configured",
        extra={
            "rpc_url": "https://harmony.example/key/sk-secret-123",
            "api_key": "another-secret",
            "chain": "harmony-one",
        },
    )

    output = stream.getvalue()
    assert "sk-secret-123" not in output
    assert "another-secret" not in output
    assert "[REDACTED]" in output
    assert "harmony-one" in output


def test_safe_fields_pass_through(log_stream) -> None:
    logger, stream = log_stream

    logger.info(
        "vrf.generated",
        extra={"block_number": 123, "range_min": 1, "range_max": 100},
    )

    payload = json.loads(stream.getvalue())
    assert payload["message"] == "vrf.generated"
    assert payload["level"] == "info"
    assert payload["block_number"] == 123
    assert "[REDACTED]" not in stream.getvalue()


def test_redacts_nested_dicts(log_stream) -> None:
    logger, stream = log_stream

    logger.info(
        "nested_event",
        extra={
            "headers": {"authorization": "Bearer abc", "user-agent": "pytest"},
            "safe_data": {"count": 5},
        },
    )

    payload = json.loads(stream.getvalue())
    assert payload["headers"]["authorization"] == "[REDACTED]"
    assert payload["headers"]["user-agent"] == "pytest"
    assert payload["safe_data"] == {"count": 5}


def test_request_id_from_context(log_stream) -> None:
    logger, stream = log_stream

    set_request_id("req-42")
    logger.warning("rate_limit.exceeded")

    payload = json.loads(stream.getvalue())
    assert payload["request_id"] == "req-42"
