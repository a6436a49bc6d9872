"""
Delivery request record (``checkout_kernel.domain.delivery``).

Responsibility
--------------
The single record a user edits across the checkout steps.  Every edit
produces a new ``DeliveryRequest`` via ``dataclasses.replace``; nothing
derived from it (estimate, proof set, outcome) is stored on it.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* The proof map holds an entry for every ``ProofType``; missing entries are
  filled with ``False`` at construction.
* Attachments are bounded; the newest ``max_attachments`` are kept.
* Distances, weights and declared values are never negative; negative
  inputs are clamped to zero at construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

from checkout_kernel.domain.values import (
    CorporateProgramStatus,
    PackageCategory,
    PaymentMethod,
    ProofType,
    ScheduleMode,
    SpeedTier,
    VehicleClass,
)

DEFAULT_MAX_ATTACHMENTS = 10


@dataclass(frozen=True)
class Attachment:
    """Metadata for a supporting file; the file body never enters the engine."""

    attachment_id: str
    name: str
    size: int
    kind: str
    added_at: datetime


def _normalize_proof(proof: Mapping[ProofType, bool] | None) -> Mapping[ProofType, bool]:
    source = dict(proof or {})
    return MappingProxyType({p: bool(source.get(p, False)) for p in ProofType})


def _non_negative(value: Decimal | int | float) -> Decimal:
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    return max(amount, Decimal("0"))


@dataclass(frozen=True)
class DeliveryRequest:
    """A corporate delivery being checked out."""

    vendor_id: str
    pickup: str = ""
    dropoff: str = ""
    distance_km: Decimal = Decimal("0")
    weight_kg: Decimal = Decimal("0")
    declared_value: int = 0
    category: PackageCategory = PackageCategory.DOCUMENTS
    fragile: bool = False
    insurance: bool = False
    schedule: ScheduleMode = ScheduleMode.NOW
    scheduled_at: datetime | None = None
    speed: SpeedTier = SpeedTier.STANDARD
    vehicle: VehicleClass = VehicleClass.BIKE
    payment_method: PaymentMethod = PaymentMethod.CORPORATE_PAY
    program_status: CorporateProgramStatus = CorporateProgramStatus.ELIGIBLE
    grace_enabled: bool = False
    grace_expires_at: datetime | None = None
    cost_center: str = ""
    project_tag: str = ""
    purpose: str = ""
    notes: str = ""
    proof: Mapping[ProofType, bool] = field(default_factory=dict)
    attachments: tuple[Attachment, ...] = ()
    max_attachments: int = DEFAULT_MAX_ATTACHMENTS

    def __post_init__(self) -> None:
        object.__setattr__(self, "proof", _normalize_proof(self.proof))
        object.__setattr__(self, "distance_km", _non_negative(self.distance_km))
        object.__setattr__(self, "weight_kg", _non_negative(self.weight_kg))
        object.__setattr__(self, "declared_value", max(int(self.declared_value), 0))
        object.__setattr__(
            self, "attachments", tuple(self.attachments)[: self.max_attachments]
        )

    @property
    def enabled_proof(self) -> frozenset[ProofType]:
        return frozenset(p for p, on in self.proof.items() if on)

    def with_proof(self, proof_type: ProofType, enabled: bool) -> DeliveryRequest:
        """Return a copy with a single proof entry changed."""
        updated = dict(self.proof)
        updated[proof_type] = enabled
        return replace(self, proof=updated)
