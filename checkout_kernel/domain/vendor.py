"""
Vendor catalog types (``checkout_kernel.domain.vendor``).

Responsibility
--------------
Immutable catalog entries describing each courier: its trust tier, the
speed/vehicle capabilities it offers, and the proof it imposes on every
delivery regardless of package policy.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* Standard speed is always supported; Express and Same-day need the
  matching capability.
* ``VendorCatalog`` lookups by unknown id raise ``UnknownVendorError``.
"""

from __future__ import annotations

from dataclasses import dataclass

from checkout_kernel.domain.values import (
    ProofType,
    SpeedTier,
    TrustTier,
    VehicleClass,
    VendorCapability,
)
from checkout_kernel.exceptions import UnknownVendorError

_SPEED_CAPABILITY: dict[SpeedTier, VendorCapability | None] = {
    SpeedTier.STANDARD: None,
    SpeedTier.EXPRESS: VendorCapability.EXPRESS,
    SpeedTier.SAME_DAY: VendorCapability.SAME_DAY,
}

_VEHICLE_CAPABILITY: dict[VehicleClass, VendorCapability] = {
    VehicleClass.BIKE: VendorCapability.BIKE,
    VehicleClass.CAR: VendorCapability.CAR,
    VehicleClass.VAN: VendorCapability.VAN,
}


@dataclass(frozen=True)
class Vendor:
    """A courier in the corporate catalog."""

    vendor_id: str
    name: str
    trust_tier: TrustTier
    capabilities: frozenset[VendorCapability] = frozenset()
    proof_defaults: frozenset[ProofType] = frozenset()
    notes: str = ""

    def supports_speed(self, speed: SpeedTier) -> bool:
        needed = _SPEED_CAPABILITY[speed]
        return needed is None or needed in self.capabilities

    def supports_vehicle(self, vehicle: VehicleClass) -> bool:
        return _VEHICLE_CAPABILITY[vehicle] in self.capabilities

    def smallest_vehicle(self) -> VehicleClass | None:
        """Lowest-capacity vehicle this vendor operates, if any."""
        for vehicle in sorted(VehicleClass, key=lambda v: v.rank):
            if self.supports_vehicle(vehicle):
                return vehicle
        return None


@dataclass(frozen=True)
class VendorCatalog:
    """Ordered, id-addressable collection of vendors."""

    vendors: tuple[Vendor, ...]
    default_vendor_id: str

    def get(self, vendor_id: str) -> Vendor:
        for vendor in self.vendors:
            if vendor.vendor_id == vendor_id:
                return vendor
        raise UnknownVendorError(vendor_id)

    def __contains__(self, vendor_id: object) -> bool:
        return any(v.vendor_id == vendor_id for v in self.vendors)

    @property
    def default_vendor(self) -> Vendor:
        return self.get(self.default_vendor_id)
