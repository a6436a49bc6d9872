"""
Pricing types (``checkout_kernel.domain.pricing``).

``CostRates`` is the configured tariff; ``CostEstimate`` is the itemized,
non-persisted result of applying it to a delivery.  All amounts are whole
currency units; the multiplier is an exact ``Decimal``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping

from checkout_kernel.domain.values import SpeedTier, VehicleClass


@dataclass(frozen=True)
class CostRates:
    """Delivery tariff.

    Speed multipliers must be strictly increasing with urgency and vehicle
    multipliers strictly increasing with capacity (checked at config load).
    """

    base_fee: int = 8000
    distance_rate: Decimal = Decimal("1200")
    weight_rate: Decimal = Decimal("250")
    insurance_rate: Decimal = Decimal("0.01")
    speed_multipliers: Mapping[SpeedTier, Decimal] = field(default_factory=lambda: {
        SpeedTier.STANDARD: Decimal("1"),
        SpeedTier.EXPRESS: Decimal("1.4"),
        SpeedTier.SAME_DAY: Decimal("1.8"),
    })
    vehicle_multipliers: Mapping[VehicleClass, Decimal] = field(default_factory=lambda: {
        VehicleClass.BIKE: Decimal("1"),
        VehicleClass.CAR: Decimal("1.25"),
        VehicleClass.VAN: Decimal("1.6"),
    })


@dataclass(frozen=True)
class CostEstimate:
    """Itemized delivery estimate."""

    base: int
    distance_fee: int
    weight_fee: int
    insurance_fee: int
    multiplier: Decimal
    subtotal: int
    total: int
