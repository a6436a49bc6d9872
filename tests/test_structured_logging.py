"""Tests for the structured logging system (checkout_kernel/logging_config.py)."""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from checkout_kernel.domain.values import Outcome, ProofType
from checkout_kernel.exceptions import UnknownVendorError
from checkout_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests, then restore the suite configuration."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()
    configure_logging(level=logging.DEBUG)


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_log(stream: StringIO) -> dict:
    """Parse the first JSON log line from a stream."""
    line = stream.getvalue().strip().split("\n")[0]
    return json.loads(line)


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    """Tests for JSON log output format."""

    def test_edit_event_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("services.checkout_session").info(
            "checkout_edit_applied", extra={"field": "notes", "accepted": True}
        )

        record = _parse_log(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "checkout_edit_applied"
        assert record["logger"] == "checkout_kernel.services.checkout_session"
        assert record["field"] == "notes"
        assert record["accepted"] is True

    def test_session_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(correlation_id="corr_abc", session_id="sess-1")
        get_logger("test").info("test_msg")

        record = _parse_log(stream)
        assert record["correlation_id"] == "corr_abc"
        assert record["session_id"] == "sess-1"

    def test_no_context_fields_when_empty(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("bare_message")

        record = _parse_log(stream)
        assert "correlation_id" not in record
        assert "session_id" not in record

    def test_checkout_exception_code_extracted(self):
        """Checkout kernel exceptions carry a .code attribute."""
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            raise UnknownVendorError("v_ghost")
        except UnknownVendorError:
            get_logger("test").error("vendor_error", exc_info=True)

        record = _parse_log(stream)
        assert record["exc_code"] == "UNKNOWN_VENDOR"
        assert record["exc_type"] == "UnknownVendorError"
        assert record["exc_vendor_id"] == "v_ghost"
        assert "traceback" in record

    def test_domain_values_serialized(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        uid = uuid4()
        get_logger("test").info(
            "with_values",
            extra={
                "attachment_uuid": uid,
                "distance_km": Decimal("9.5"),
                "outcome": Outcome.APPROVAL_REQUIRED,
                "due_at": datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
                "required": frozenset({ProofType.RECIPIENT_SIGNATURE, ProofType.DROPOFF_PHOTO}),
            },
        )

        record = _parse_log(stream)
        assert record["attachment_uuid"] == str(uid)
        assert record["distance_km"] == "9.5"
        assert record["outcome"] == "Approval required"
        assert record["due_at"] == "2024-01-01T12:00:00+00:00"
        assert record["required"] == ["Drop-off photo", "Recipient signature"]


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    def test_set_and_get(self):
        LogContext.set(correlation_id="x", session_id="y")

        assert LogContext.get_all() == {"correlation_id": "x", "session_id": "y"}
        assert LogContext.get("session_id") == "y"

    def test_get_unknown_field(self):
        with pytest.raises(KeyError):
            LogContext.get("tenant_id")

    def test_bind_restores_session(self):
        LogContext.set(session_id="outer")
        with LogContext.bind(session_id="inner", actor_id="user-7"):
            assert LogContext.get_all()["session_id"] == "inner"
        assert LogContext.get_all() == {"session_id": "outer"}


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    """Tests for initialization."""

    def test_second_call_adds_nothing(self):
        root = logging.getLogger("checkout_kernel")
        h1, _ = _make_handler()
        configure_logging(handler=h1)
        before = list(root.handlers)
        h2, _ = _make_handler()

        configure_logging(handler=h2)

        assert root.handlers == before
        assert h2 not in root.handlers
        assert [h for h in root.handlers if isinstance(h.formatter, StructuredFormatter)] == [h1]

    def test_child_logger_inherits_configuration(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler, level=logging.DEBUG)
        get_logger("engines.pricing").debug("hierarchy_test")

        record = _parse_log(stream)
        assert record["message"] == "hierarchy_test"
        assert record["logger"] == "checkout_kernel.engines.pricing"

    def test_does_not_propagate_to_root(self):
        configure_logging(handler=_make_handler()[0])

        assert logging.getLogger("checkout_kernel").propagate is False
