"""
Tests for the simulated single-flight submission task.
"""

import re
from datetime import datetime, timedelta, timezone

import pytest

from checkout_kernel.domain.wizard import SubmissionKind
from checkout_kernel.exceptions import SubmissionStateError
from checkout_services.submission import (
    SimulatedSubmission,
    SubmissionState,
    generate_result_id,
)

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestResultIds:
    def test_order_prefix(self):
        assert re.fullmatch(r"DLV-[0-9A-F]{4}", generate_result_id(SubmissionKind.ORDER_CREATED))

    def test_approval_prefix(self):
        result_id = generate_result_id(SubmissionKind.APPROVAL_REQUESTED)

        assert re.fullmatch(r"REQ-DLV-[0-9A-F]{4}", result_id)


class TestSimulatedSubmission:
    def test_starts_idle(self):
        task = SimulatedSubmission()

        assert task.state is SubmissionState.IDLE
        assert not task.is_busy
        assert task.result is None
        assert task.poll(T0) is None

    def test_resolves_at_due_time(self):
        task = SimulatedSubmission(delay_seconds=0.9)

        assert task.start(SubmissionKind.ORDER_CREATED, T0)
        assert task.due_at == T0 + timedelta(seconds=0.9)
        assert task.poll(T0 + timedelta(seconds=0.5)) is None

        result = task.poll(T0 + timedelta(seconds=0.9))

        assert task.state is SubmissionState.COMPLETED
        assert result.kind is SubmissionKind.ORDER_CREATED
        assert result.completed_at == T0 + timedelta(seconds=0.9)

    def test_single_flight(self):
        task = SimulatedSubmission()
        task.start(SubmissionKind.ORDER_CREATED, T0)

        assert not task.start(SubmissionKind.APPROVAL_REQUESTED, T0)
        assert task.kind is SubmissionKind.ORDER_CREATED

    def test_completed_is_terminal(self):
        task = SimulatedSubmission(delay_seconds=0)
        task.start(SubmissionKind.APPROVAL_REQUESTED, T0)
        result = task.poll(T0)

        assert not task.start(SubmissionKind.ORDER_CREATED, T0)
        assert not task.cancel()
        assert task.poll(T0 + timedelta(hours=1)) == result

    def test_cancel_resets(self):
        task = SimulatedSubmission()
        task.start(SubmissionKind.ORDER_CREATED, T0)

        assert task.cancel()
        assert task.state is SubmissionState.IDLE
        assert task.due_at is None
        assert task.poll(T0 + timedelta(seconds=5)) is None
        assert task.start(SubmissionKind.ORDER_CREATED, T0)

    def test_complete_immediately(self):
        task = SimulatedSubmission(delay_seconds=60)
        task.start(SubmissionKind.ORDER_CREATED, T0)

        result = task.complete(T0)

        assert result.result_id.startswith("DLV-")

    def test_complete_without_flight_raises(self):
        with pytest.raises(SubmissionStateError):
            SimulatedSubmission().complete(T0)
