"""
Pytest fixtures for the checkout test suite.

Provides:
- Structured logging configured once per session, with per-test capture
- A deterministic clock
- The default policy configuration and its vendors
- Request and session factories
"""

import json
import logging
from dataclasses import replace
from decimal import Decimal
from io import StringIO

import pytest

from checkout_config import get_active_config
from checkout_kernel.domain.clock import DeterministicClock
from checkout_kernel.domain.delivery import DeliveryRequest
from checkout_kernel.domain.values import ProofType
from checkout_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from checkout_services.checkout_session import CheckoutSession


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture checkout_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, session):
            session.apply_edit("notes", "urgent")
            logs = captured_logs()
            assert any(r["message"] == "checkout_edit_applied" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("checkout_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# Clock fixtures


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock for testing."""
    return DeterministicClock()


# Configuration fixtures


@pytest.fixture(scope="session")
def policy_config():
    """The shipped default checkout policy."""
    return get_active_config()


@pytest.fixture
def manual_proof_config(policy_config):
    """Default policy with required proof left for the user to switch on."""
    return replace(policy_config, auto_enable_required_proof=False)


@pytest.fixture
def vendors(policy_config):
    """Catalog vendors keyed by id."""
    return {v.vendor_id: v for v in policy_config.catalog.vendors}


# Request and session factories


def _make_delivery(**overrides) -> DeliveryRequest:
    """A valid corporate delivery with every proof item enabled."""
    fields = dict(
        vendor_id="v_evz",
        pickup="Kampala CBD",
        dropoff="Ntinda",
        distance_km=Decimal("9"),
        weight_kg=Decimal("2"),
        declared_value=350_000,
        cost_center="OPS-01",
        project_tag="Project",
        purpose="Documents",
        notes="",
        proof={p: True for p in ProofType},
    )
    fields.update(overrides)
    return DeliveryRequest(**fields)


@pytest.fixture
def delivery_factory():
    """Build valid corporate deliveries with keyword overrides."""
    return _make_delivery


@pytest.fixture
def session(policy_config, deterministic_clock):
    """A fresh checkout session on the default policy."""
    return CheckoutSession(
        policy_config,
        clock=deterministic_clock,
        session_id="sess-test",
        correlation_id="corr_test",
    )
