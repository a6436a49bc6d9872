"""
checkout_engines.pipeline -- The explicit recomputation pipeline.

Responsibility:
    Run every derivation for a delivery request in one synchronous pass:

        estimate -> required proof -> grace -> evaluate -> availability
                 -> readiness -> alternatives

    Each stage is an independent engine; this module only wires them.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Callers pass the current
    instant; the grace window is re-derived from it on every call.

Invariants enforced:
    - The derivation is a pure function of its inputs.  No previous
      derivation is read, so edit order cannot affect the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from checkout_engines.alternatives import recommend_alternatives
from checkout_engines.corporate import is_grace_active, resolve_corporate_availability
from checkout_engines.policy import (
    DEFAULT_POLICY_VERSION,
    PolicyThresholds,
    evaluate_delivery_policy,
)
from checkout_engines.pricing import estimate_delivery_cost
from checkout_engines.proof import ProofThresholds, resolve_required_proof
from checkout_engines.readiness import derive_step_readiness
from checkout_kernel.domain.delivery import DeliveryRequest
from checkout_kernel.domain.policy import PolicyOutcome
from checkout_kernel.domain.pricing import CostEstimate, CostRates
from checkout_kernel.domain.values import CorporateAvailability, ProofType
from checkout_kernel.domain.vendor import Vendor
from checkout_kernel.domain.wizard import StepReadiness


@dataclass(frozen=True)
class CheckoutDerivation:
    """Everything derived from one request at one instant."""

    estimate: CostEstimate
    required_proof: frozenset[ProofType]
    grace_active: bool
    outcome: PolicyOutcome
    availability: CorporateAvailability
    readiness: StepReadiness
    alternatives: tuple[str, ...]


def derive_checkout_state(
    *,
    request: DeliveryRequest,
    vendor: Vendor,
    geo_allowed: bool,
    time_allowed: bool,
    as_of: datetime,
    rates: CostRates | None = None,
    proof_thresholds: ProofThresholds | None = None,
    policy_thresholds: PolicyThresholds | None = None,
    currency: str = "UGX",
    policy_version: str = DEFAULT_POLICY_VERSION,
    correlation_id: str | None = None,
) -> CheckoutDerivation:
    policy_thresholds = policy_thresholds or PolicyThresholds()

    estimate = estimate_delivery_cost(
        distance_km=request.distance_km,
        weight_kg=request.weight_kg,
        declared_value=request.declared_value,
        speed=request.speed,
        vehicle=request.vehicle,
        insurance=request.insurance,
        rates=rates,
    )

    required_proof = resolve_required_proof(
        category=request.category,
        declared_value=request.declared_value,
        speed=request.speed,
        vendor_defaults=vendor.proof_defaults,
        thresholds=proof_thresholds,
    )

    grace_active = is_grace_active(
        request.program_status,
        request.grace_enabled,
        request.grace_expires_at,
        as_of,
    )

    outcome = evaluate_delivery_policy(
        request=request,
        vendor=vendor,
        estimate=estimate,
        required_proof=required_proof,
        geo_allowed=geo_allowed,
        time_allowed=time_allowed,
        thresholds=policy_thresholds,
        as_of=as_of,
        currency=currency,
        policy_version=policy_version,
        correlation_id=correlation_id,
    )

    availability = resolve_corporate_availability(
        payment_method=request.payment_method,
        program_status=request.program_status,
        grace_active=grace_active,
        outcome=outcome.decision,
    )

    readiness = derive_step_readiness(
        request=request,
        vendor=vendor,
        required_proof=required_proof,
        availability=availability,
        outcome=outcome,
    )

    alternatives = recommend_alternatives(
        request=request,
        vendor=vendor,
        estimate=estimate,
        availability=availability,
        geo_allowed=geo_allowed,
        time_allowed=time_allowed,
        approval_threshold=policy_thresholds.approval_threshold,
        high_value_threshold=policy_thresholds.high_value_threshold,
    )

    return CheckoutDerivation(
        estimate=estimate,
        required_proof=required_proof,
        grace_active=grace_active,
        outcome=outcome,
        availability=availability,
        readiness=readiness,
        alternatives=alternatives,
    )
