"""
Checkout wizard types (``checkout_kernel.domain.wizard``).

Responsibility
--------------
Value objects for the checkout wizard: the ordered steps, per-step
readiness, guard-rejection signals, terminal submission results, and the
read-only snapshot handed to render/export collaborators.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* ``WIZARD_STEPS`` is the only step order; navigation may jump anywhere but
  submission is reachable only from ``WizardStep.REVIEW``.
* Readiness is derived on every recomputation and never stored on the
  request.
* ``EditResult(accepted=False)`` always carries a ``rejection_code``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from checkout_kernel.domain.delivery import DeliveryRequest
from checkout_kernel.domain.policy import PolicyOutcome
from checkout_kernel.domain.pricing import CostEstimate
from checkout_kernel.domain.values import CorporateAvailability, ProofType
from checkout_kernel.domain.vendor import Vendor


class WizardStep(str, Enum):
    DELIVERY_DETAILS = "Delivery details"
    VENDOR_AND_SERVICE = "Vendor and service"
    ALLOCATION = "Allocation"
    PROOF_REQUIREMENTS = "Proof requirements"
    REVIEW = "Review"

    @property
    def index(self) -> int:
        return WIZARD_STEPS.index(self)


WIZARD_STEPS: tuple[WizardStep, ...] = (
    WizardStep.DELIVERY_DETAILS,
    WizardStep.VENDOR_AND_SERVICE,
    WizardStep.ALLOCATION,
    WizardStep.PROOF_REQUIREMENTS,
    WizardStep.REVIEW,
)


@dataclass(frozen=True)
class StepReadiness:
    """Readiness booleans derived from the current request and outcome."""

    delivery_details: bool
    vendor_and_service: bool
    allocation: bool
    proof_requirements: bool
    submit_eligible: bool

    def for_step(self, step: WizardStep) -> bool:
        """Readiness of a single step; Review is ready when submission is."""
        return {
            WizardStep.DELIVERY_DETAILS: self.delivery_details,
            WizardStep.VENDOR_AND_SERVICE: self.vendor_and_service,
            WizardStep.ALLOCATION: self.allocation,
            WizardStep.PROOF_REQUIREMENTS: self.proof_requirements,
            WizardStep.REVIEW: self.submit_eligible,
        }[step]


class RejectionCode(str, Enum):
    """Why a guarded transition was refused without changing state."""

    PROOF_REQUIRED = "PROOF_REQUIRED"
    CAPABILITY_UNSUPPORTED = "CAPABILITY_UNSUPPORTED"
    SUBMISSION_IN_FLIGHT = "SUBMISSION_IN_FLIGHT"
    NOT_AT_REVIEW = "NOT_AT_REVIEW"
    SUBMIT_NOT_ELIGIBLE = "SUBMIT_NOT_ELIGIBLE"
    ALREADY_SUBMITTED = "ALREADY_SUBMITTED"


@dataclass(frozen=True)
class EditResult:
    """Outcome of a field edit or guarded transition."""

    accepted: bool
    field: str
    rejection_code: RejectionCode | None = None
    message: str = ""

    @classmethod
    def ok(cls, field: str, message: str = "") -> EditResult:
        return cls(accepted=True, field=field, message=message)

    @classmethod
    def rejected(cls, field: str, code: RejectionCode, message: str) -> EditResult:
        return cls(accepted=False, field=field, rejection_code=code, message=message)


class SubmissionKind(str, Enum):
    ORDER_CREATED = "order_created"
    APPROVAL_REQUESTED = "approval_requested"


@dataclass(frozen=True)
class SubmissionResult:
    """Terminal result of a checkout."""

    kind: SubmissionKind
    result_id: str
    completed_at: datetime


@dataclass(frozen=True)
class CheckoutSnapshot:
    """Read model consumed by display, export and handoff collaborators.

    Collaborators render this as-is; they never re-derive the outcome.
    """

    request: DeliveryRequest
    vendor: Vendor
    step: WizardStep
    estimate: CostEstimate
    required_proof: frozenset[ProofType]
    grace_active: bool
    outcome: PolicyOutcome
    availability: CorporateAvailability
    readiness: StepReadiness
    alternatives: tuple[str, ...]
    geo_allowed: bool
    time_allowed: bool
    currency: str
    taken_at: datetime
    submitting: bool = False
    result: SubmissionResult | None = None
