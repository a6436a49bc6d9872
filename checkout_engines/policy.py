"""
checkout_engines.policy -- Corporate delivery policy evaluation.

Responsibility:
    Compose field validity, route gates, vendor trust, proof completeness,
    corporate program state, allocation completeness and spend thresholds
    into an ordered list of typed reasons, a ternary outcome, and an audit
    explanation.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Reads no clock: the
    evaluation instant ``as_of`` is a parameter and drives both the grace
    window and the audit timestamp.

Invariants enforced:
    - Never raises for business conditions; every problem is a reason.
    - The reason list is never empty; a clean evaluation yields one Info
      "OK" reason.
    - Outcome derivation is order-independent:
        corporate:  Critical -> Blocked, else Warning -> Approval required,
                    else Allowed
        personal:   Critical -> Blocked, else Allowed
      Warnings only gate corporate payment.  Info never gates anything.
    - A Blocked vendor always yields a Critical reason, so its outcome is
      Blocked whatever the other fields hold.

Failure modes:
    None for well-typed input.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4

from checkout_engines.corporate import is_grace_active, is_program_blocked
from checkout_engines.proof import ordered_proof
from checkout_engines.tracer import traced_engine
from checkout_kernel.domain.delivery import DeliveryRequest
from checkout_kernel.domain.policy import (
    AuditExplanation,
    AuditField,
    PolicyOutcome,
    PolicyPathStep,
    PolicyReason,
)
from checkout_kernel.domain.pricing import CostEstimate
from checkout_kernel.domain.values import (
    Outcome,
    PaymentMethod,
    ProofType,
    ReasonCode,
    Severity,
    TrustTier,
    format_money,
)
from checkout_kernel.domain.vendor import Vendor
from checkout_kernel.logging_config import LogContext

DEFAULT_POLICY_VERSION = "corp.delivery.policy.v1"


@dataclass(frozen=True)
class PolicyThresholds:
    """Spend and value thresholds for corporate deliveries."""

    approval_threshold: int = 200_000
    high_value_threshold: int = 1_000_000


# ---------------------------------------------------------------------------
# Reason builders
# ---------------------------------------------------------------------------


def _critical(code: ReasonCode, title: str, detail: str) -> PolicyReason:
    return PolicyReason(severity=Severity.CRITICAL, code=code, title=title, detail=detail)


def _warning(code: ReasonCode, title: str, detail: str) -> PolicyReason:
    return PolicyReason(severity=Severity.WARNING, code=code, title=title, detail=detail)


def _info(code: ReasonCode, title: str, detail: str) -> PolicyReason:
    return PolicyReason(severity=Severity.INFO, code=code, title=title, detail=detail)


def field_reasons(request: DeliveryRequest) -> list[PolicyReason]:
    reasons: list[PolicyReason] = []
    if not request.pickup.strip():
        reasons.append(_critical(ReasonCode.FIELDS, "Pickup required", "Enter pickup location."))
    if not request.dropoff.strip():
        reasons.append(_critical(ReasonCode.FIELDS, "Drop-off required", "Enter drop-off location."))
    if request.distance_km <= 0:
        reasons.append(
            _critical(ReasonCode.FIELDS, "Distance required", "Enter an estimated distance (km).")
        )
    return reasons


def route_reasons(geo_allowed: bool, time_allowed: bool) -> list[PolicyReason]:
    reasons: list[PolicyReason] = []
    if not geo_allowed:
        reasons.append(_critical(
            ReasonCode.GEO,
            "Outside allowed zone",
            "Delivery route is outside corporate allowed zones.",
        ))
    if not time_allowed:
        reasons.append(_critical(
            ReasonCode.TIME,
            "Outside allowed time",
            "Corporate deliveries are restricted outside time windows.",
        ))
    return reasons


def vendor_reasons(vendor: Vendor) -> list[PolicyReason]:
    if vendor.trust_tier is TrustTier.BLOCKED:
        return [_critical(
            ReasonCode.VENDOR, "Vendor blocked", "This vendor is blocked by corporate policy."
        )]
    if vendor.trust_tier is TrustTier.RESTRICTED:
        return [_warning(
            ReasonCode.VENDOR, "Vendor restricted", "This vendor requires Procurement approval."
        )]
    return []


def proof_reasons(
    request: DeliveryRequest, required_proof: Iterable[ProofType]
) -> list[PolicyReason]:
    return [
        _critical(
            ReasonCode.PROOF,
            "Proof requirement missing",
            f"Enable required proof: {proof_type.value}.",
        )
        for proof_type in ordered_proof(required_proof)
        if not request.proof[proof_type]
    ]


def corporate_reasons(
    request: DeliveryRequest,
    vendor: Vendor,
    estimate: CostEstimate,
    thresholds: PolicyThresholds,
    grace_active: bool,
    currency: str,
) -> list[PolicyReason]:
    """Checks that apply only when the corporate program pays."""
    reasons: list[PolicyReason] = []

    if grace_active:
        reasons.append(_warning(
            ReasonCode.PROGRAM,
            "Grace window active",
            "Billing is past due, but grace window is active.",
        ))
    if is_program_blocked(request.program_status, grace_active):
        reasons.append(_critical(
            ReasonCode.PROGRAM,
            "CorporatePay unavailable",
            f"CorporatePay is unavailable due to: {request.program_status.value}.",
        ))

    if not request.cost_center.strip():
        reasons.append(_critical(
            ReasonCode.ALLOC,
            "Cost center required",
            "Select a cost center for corporate allocation.",
        ))
    if not request.purpose.strip():
        reasons.append(_critical(
            ReasonCode.ALLOC,
            "Purpose required",
            "Select a purpose tag for corporate compliance.",
        ))
    if not request.project_tag.strip():
        reasons.append(_info(
            ReasonCode.ALLOC,
            "Project tag optional",
            "Project tag is optional unless your org enforces it.",
        ))

    over_threshold = estimate.total > thresholds.approval_threshold
    high_value = request.declared_value >= thresholds.high_value_threshold

    if over_threshold:
        reasons.append(_warning(
            ReasonCode.AMOUNT,
            "Approval required",
            f"Estimated cost {format_money(estimate.total, currency)} exceeds threshold "
            f"{format_money(thresholds.approval_threshold, currency)}.",
        ))
    if high_value:
        reasons.append(_warning(
            ReasonCode.VALUE,
            "High-value delivery",
            f"Declared value {format_money(request.declared_value, currency)} triggers "
            "additional scrutiny and may require approval.",
        ))

    needs_context = over_threshold or high_value or vendor.trust_tier is not TrustTier.ALLOWED
    if needs_context and not request.notes.strip():
        reasons.append(_info(
            ReasonCode.NOTE,
            "Add a note",
            "Add context to speed up approvals and reduce rework.",
        ))

    return reasons


# ---------------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------------


def derive_outcome(
    payment_method: PaymentMethod, reasons: Iterable[PolicyReason]
) -> Outcome:
    """Map reason severities to a decision.

    Warnings gate corporate payment only; this asymmetry is policy.
    """
    severities = {r.severity for r in reasons}
    if Severity.CRITICAL in severities:
        return Outcome.BLOCKED
    if payment_method.is_corporate and Severity.WARNING in severities:
        return Outcome.APPROVAL_REQUIRED
    return Outcome.ALLOWED


def _vendor_path_verdict(vendor: Vendor) -> str:
    if vendor.trust_tier is TrustTier.ALLOWED:
        return "Allowed"
    if vendor.trust_tier is TrustTier.RESTRICTED:
        return "Approval required"
    return "Blocked"


def build_explanation(
    *,
    request: DeliveryRequest,
    vendor: Vendor,
    estimate: CostEstimate,
    required_proof: Iterable[ProofType],
    geo_allowed: bool,
    time_allowed: bool,
    thresholds: PolicyThresholds,
    decision: Outcome,
    as_of: datetime,
    currency: str,
    policy_version: str,
    correlation_id: str,
) -> AuditExplanation:
    proof_labels = ", ".join(p.value for p in ordered_proof(required_proof))
    corporate = request.payment_method.is_corporate

    return AuditExplanation(
        summary=(
            "Delivery checkout result is computed from vendor policy, proof "
            "requirements, allocation rules, and CorporatePay program status."
        ),
        triggers=(
            AuditField("Vendor", f"{vendor.name} ({vendor.trust_tier.value})"),
            AuditField("Type", request.category.value),
            AuditField("Speed", request.speed.value),
            AuditField("Vehicle", request.vehicle.value),
            AuditField("Est cost", format_money(estimate.total, currency)),
            AuditField("Payment", request.payment_method.value),
            AuditField("Program", request.program_status.value),
        ),
        policy_path=(
            PolicyPathStep(
                "Route controls",
                f"{'Geo ok' if geo_allowed else 'Geo blocked'}, "
                f"{'Time ok' if time_allowed else 'Time blocked'}.",
            ),
            PolicyPathStep("Vendor policy", _vendor_path_verdict(vendor)),
            PolicyPathStep("Proof", f"Required proofs: {proof_labels}."),
            PolicyPathStep(
                "Allocation",
                "Cost center and purpose required." if corporate else "Not required",
            ),
            PolicyPathStep(
                "Thresholds",
                f"Approval threshold: {format_money(thresholds.approval_threshold, currency)}.",
            ),
            PolicyPathStep("Decision", decision.value),
        ),
        audit=(
            AuditField("Correlation id", correlation_id),
            AuditField("Policy snapshot", policy_version),
            AuditField("Timestamp", as_of.isoformat()),
        ),
    )


@traced_engine(
    "delivery_policy",
    "1.0",
    fingerprint_fields=(
        "request", "vendor", "estimate", "required_proof",
        "geo_allowed", "time_allowed", "thresholds", "as_of",
    ),
)
def evaluate_delivery_policy(
    *,
    request: DeliveryRequest,
    vendor: Vendor,
    estimate: CostEstimate,
    required_proof: Iterable[ProofType],
    geo_allowed: bool,
    time_allowed: bool,
    thresholds: PolicyThresholds,
    as_of: datetime,
    currency: str = "UGX",
    policy_version: str = DEFAULT_POLICY_VERSION,
    correlation_id: str | None = None,
) -> PolicyOutcome:
    """Evaluate a delivery against corporate policy.

    Args:
        request: Current delivery request.
        vendor: The vendor the request references.
        estimate: Cost estimate for the request.
        required_proof: Output of ``resolve_required_proof``.
        geo_allowed: Route lies inside an allowed zone.
        time_allowed: Delivery time lies inside an allowed window.
        thresholds: Approval and high-value thresholds.
        as_of: Evaluation instant (grace window and audit timestamp).
        currency: Display currency for reason details.
        policy_version: Policy snapshot tag recorded in the audit trail.
        correlation_id: Audit correlation id; defaults to the bound
            ``LogContext`` correlation id, else a fresh one.

    Returns:
        PolicyOutcome with decision, non-empty reasons and explanation.
    """
    required = frozenset(required_proof)
    reasons: list[PolicyReason] = []

    reasons += field_reasons(request)
    reasons += route_reasons(geo_allowed, time_allowed)
    reasons += vendor_reasons(vendor)
    reasons += proof_reasons(request, required)

    if request.payment_method.is_corporate:
        grace_active = is_grace_active(
            request.program_status,
            request.grace_enabled,
            request.grace_expires_at,
            as_of,
        )
        reasons += corporate_reasons(
            request, vendor, estimate, thresholds, grace_active, currency
        )
    else:
        reasons.append(_info(
            ReasonCode.PAYMENT,
            "Personal payment selected",
            "Corporate policy checks do not block personal payments.",
        ))

    decision = derive_outcome(request.payment_method, reasons)

    if not reasons:
        reasons.append(_info(
            ReasonCode.OK, "Within policy", "This delivery passes current policy checks."
        ))

    explanation = build_explanation(
        request=request,
        vendor=vendor,
        estimate=estimate,
        required_proof=required,
        geo_allowed=geo_allowed,
        time_allowed=time_allowed,
        thresholds=thresholds,
        decision=decision,
        as_of=as_of,
        currency=currency,
        policy_version=policy_version,
        correlation_id=(
            correlation_id
            or LogContext.get("correlation_id")
            or f"corr_{uuid4().hex[:12]}"
        ),
    )

    return PolicyOutcome(decision=decision, reasons=tuple(reasons), explanation=explanation)
