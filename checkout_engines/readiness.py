"""
checkout_engines.readiness -- Wizard step readiness.

Responsibility:
    Derive the per-step readiness booleans and overall submit eligibility
    from the current request, vendor, required proof, availability and
    policy outcome.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Readiness is recomputed
    on every change and never stored.

Invariants enforced:
    - Submit-eligible implies every step predicate holds.
    - A Blocked outcome is never submit-eligible.
    - Corporate payment with availability Not available is never
      submit-eligible.
"""

from __future__ import annotations

from collections.abc import Iterable

from checkout_engines.tracer import traced_engine
from checkout_kernel.domain.delivery import DeliveryRequest
from checkout_kernel.domain.policy import PolicyOutcome
from checkout_kernel.domain.values import (
    CorporateAvailability,
    Outcome,
    ProofType,
    TrustTier,
)
from checkout_kernel.domain.vendor import Vendor
from checkout_kernel.domain.wizard import StepReadiness


def delivery_details_ready(request: DeliveryRequest) -> bool:
    return bool(request.pickup.strip()) and bool(request.dropoff.strip()) and request.distance_km > 0


def allocation_ready(request: DeliveryRequest) -> bool:
    if not request.payment_method.is_corporate:
        return True
    return bool(request.cost_center.strip()) and bool(request.purpose.strip())


def proof_ready(request: DeliveryRequest, required_proof: Iterable[ProofType]) -> bool:
    return all(request.proof[p] for p in required_proof)


@traced_engine(
    "step_readiness",
    "1.0",
    fingerprint_fields=("request", "vendor", "required_proof", "availability"),
)
def derive_step_readiness(
    *,
    request: DeliveryRequest,
    vendor: Vendor,
    required_proof: Iterable[ProofType],
    availability: CorporateAvailability,
    outcome: PolicyOutcome,
) -> StepReadiness:
    details = delivery_details_ready(request)
    vendor_ok = vendor.trust_tier is not TrustTier.BLOCKED
    allocation = allocation_ready(request)
    proof = proof_ready(request, required_proof)

    corporate_usable = (
        not request.payment_method.is_corporate
        or availability is not CorporateAvailability.NOT_AVAILABLE
    )

    return StepReadiness(
        delivery_details=details,
        vendor_and_service=vendor_ok,
        allocation=allocation,
        proof_requirements=proof,
        submit_eligible=(
            details
            and vendor_ok
            and allocation
            and proof
            and corporate_usable
            and outcome.decision is not Outcome.BLOCKED
        ),
    )
