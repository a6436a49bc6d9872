"""
checkout_services.submission -- Simulated single-flight submission task.

Responsibility:
    Model checkout submission as a timed, cancellable, single-shot task:
    once started it resolves after a fixed delay to a terminal result
    carrying a freshly generated identifier.

Architecture position:
    Services layer.  Holds no policy logic; the session decides whether a
    submission may start and which kind of result it produces.  Time is
    supplied by the caller, so nothing here sleeps or spawns threads.

Invariants enforced:
    - At most one submission in flight; ``start`` while busy is refused.
    - A completed task stays completed; it cannot be restarted or
      cancelled.
    - ``due_at`` is fixed at start; resolution happens on the first poll at
      or after it.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from uuid import uuid4

from checkout_kernel.domain.wizard import SubmissionKind, SubmissionResult
from checkout_kernel.exceptions import SubmissionStateError

_ID_PREFIX: dict[SubmissionKind, str] = {
    SubmissionKind.ORDER_CREATED: "DLV",
    SubmissionKind.APPROVAL_REQUESTED: "REQ-DLV",
}


class SubmissionState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    COMPLETED = "completed"


def generate_result_id(kind: SubmissionKind) -> str:
    """``DLV-7F3A`` for orders, ``REQ-DLV-7F3A`` for approval requests."""
    return f"{_ID_PREFIX[kind]}-{uuid4().hex[:4].upper()}"


class SimulatedSubmission:
    """Timed single-shot submission."""

    def __init__(self, delay_seconds: float = 0.9):
        self._delay = timedelta(seconds=delay_seconds)
        self._state = SubmissionState.IDLE
        self._kind: SubmissionKind | None = None
        self._due_at: datetime | None = None
        self._result: SubmissionResult | None = None

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state is SubmissionState.IN_FLIGHT

    @property
    def kind(self) -> SubmissionKind | None:
        return self._kind

    @property
    def due_at(self) -> datetime | None:
        return self._due_at

    @property
    def result(self) -> SubmissionResult | None:
        return self._result

    def start(self, kind: SubmissionKind, now: datetime) -> bool:
        """Begin a submission.  Returns False if one is already running or done."""
        if self._state is not SubmissionState.IDLE:
            return False
        self._state = SubmissionState.IN_FLIGHT
        self._kind = kind
        self._due_at = now + self._delay
        return True

    def poll(self, now: datetime) -> SubmissionResult | None:
        """Resolve the task if its delay has elapsed."""
        if self._state is SubmissionState.IN_FLIGHT and now >= self._due_at:
            return self.complete(now)
        return self._result

    def complete(self, now: datetime) -> SubmissionResult:
        """Resolve immediately.

        Raises:
            SubmissionStateError: If no submission is in flight.
        """
        if self._state is not SubmissionState.IN_FLIGHT:
            raise SubmissionStateError(self._state.value, "complete")
        self._result = SubmissionResult(
            kind=self._kind,
            result_id=generate_result_id(self._kind),
            completed_at=now,
        )
        self._state = SubmissionState.COMPLETED
        return self._result

    def cancel(self) -> bool:
        """Reset an in-flight task to idle.  Returns False if nothing was running."""
        if self._state is not SubmissionState.IN_FLIGHT:
            return False
        self._state = SubmissionState.IDLE
        self._kind = None
        self._due_at = None
        return True
