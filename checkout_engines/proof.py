"""
checkout_engines.proof -- Proof requirement resolution.

Responsibility:
    Decide which evidence a courier must capture for a delivery, from the
    package category, declared value, speed tier and the vendor's own
    default proof set.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Additive only: every rule can add a proof type, none can remove one.
    - Monotonic: raising the declared value or the speed tier never shrinks
      the result for otherwise equal inputs.
    - Drop-off photo is always required.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from checkout_engines.tracer import traced_engine
from checkout_kernel.domain.values import PackageCategory, ProofType, SpeedTier


@dataclass(frozen=True)
class ProofThresholds:
    """Declared-value thresholds that add proof obligations."""

    signature_threshold: int = 500_000
    pickup_photo_threshold: int = 1_500_000


_CATEGORY_PROOF: dict[PackageCategory, frozenset[ProofType]] = {
    PackageCategory.MEDICAL: frozenset({ProofType.RECIPIENT_SIGNATURE, ProofType.ID_CHECK}),
    PackageCategory.ELECTRONICS: frozenset({ProofType.RECIPIENT_SIGNATURE}),
}


@traced_engine(
    "required_proof",
    "1.0",
    fingerprint_fields=("category", "declared_value", "speed", "vendor_defaults"),
)
def resolve_required_proof(
    *,
    category: PackageCategory,
    declared_value: int,
    speed: SpeedTier,
    vendor_defaults: Iterable[ProofType] = (),
    thresholds: ProofThresholds | None = None,
) -> frozenset[ProofType]:
    """Return the deduplicated set of proof types a delivery requires."""
    thresholds = thresholds or ProofThresholds()

    required: set[ProofType] = {ProofType.DROPOFF_PHOTO}
    required |= _CATEGORY_PROOF.get(category, frozenset())

    if declared_value >= thresholds.signature_threshold:
        required.add(ProofType.RECIPIENT_SIGNATURE)
    if declared_value >= thresholds.pickup_photo_threshold:
        required.add(ProofType.PICKUP_PHOTO)

    # Same-day deliveries photograph the pickup to settle disputes.
    if speed is SpeedTier.SAME_DAY:
        required.add(ProofType.PICKUP_PHOTO)

    required |= set(vendor_defaults)
    return frozenset(required)


def ordered_proof(proof: Iterable[ProofType]) -> tuple[ProofType, ...]:
    """Present a proof set in declaration order."""
    members = set(proof)
    return tuple(p for p in ProofType if p in members)
