"""
Policy evaluation result types (``checkout_kernel.domain.policy``).

Responsibility
--------------
Value objects produced by the policy evaluator: individual typed findings
(``PolicyReason``), the ternary decision with its full reason list
(``PolicyOutcome``), and the "why" record shown to auditors
(``AuditExplanation``).

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* ``PolicyOutcome.reasons`` is never empty; a passing evaluation carries at
  least one Info reason.
* Reason identity (``reason_id``) is presentation-only.  Two evaluations of
  the same inputs compare equal on ``content()`` even though ids differ.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import uuid4

from checkout_kernel.domain.values import Outcome, ReasonCode, Severity

_SEVERITY_ORDER: tuple[Severity, ...] = (
    Severity.CRITICAL,
    Severity.WARNING,
    Severity.INFO,
)


def _reason_id() -> str:
    return f"r_{uuid4().hex[:12]}"


@dataclass(frozen=True)
class PolicyReason:
    """A single typed finding contributing to an outcome."""

    severity: Severity
    code: ReasonCode
    title: str
    detail: str
    reason_id: str = field(default_factory=_reason_id, compare=False)

    def content(self) -> tuple[Severity, ReasonCode, str, str]:
        return (self.severity, self.code, self.title, self.detail)


@dataclass(frozen=True)
class AuditField:
    label: str
    value: str


@dataclass(frozen=True)
class PolicyPathStep:
    step: str
    detail: str


@dataclass(frozen=True)
class AuditExplanation:
    """Human-auditable account of how an outcome was reached.

    ``audit`` metadata (correlation id, policy version, timestamp) is for
    display and export only; no control flow reads it.
    """

    summary: str
    triggers: tuple[AuditField, ...]
    policy_path: tuple[PolicyPathStep, ...]
    audit: tuple[AuditField, ...]


@dataclass(frozen=True)
class PolicyOutcome:
    """Decision plus every reason that produced it."""

    decision: Outcome
    reasons: tuple[PolicyReason, ...]
    explanation: AuditExplanation

    @property
    def has_critical(self) -> bool:
        return any(r.severity is Severity.CRITICAL for r in self.reasons)

    @property
    def has_warning(self) -> bool:
        return any(r.severity is Severity.WARNING for r in self.reasons)

    def codes(self) -> tuple[ReasonCode, ...]:
        return tuple(r.code for r in self.reasons)

    def content(self) -> tuple[tuple[Severity, ReasonCode, str, str], ...]:
        return tuple(r.content() for r in self.reasons)

    def reasons_by_severity(self) -> dict[Severity, tuple[PolicyReason, ...]]:
        """Group reasons Critical, Warning, Info; nothing is dropped."""
        return {
            severity: tuple(r for r in self.reasons if r.severity is severity)
            for severity in _SEVERITY_ORDER
        }
