"""
checkout_engines.pricing -- Delivery cost estimation.

Responsibility:
    Turn a delivery's physical attributes into an itemized estimate:
    base fee, distance fee, weight fee, speed x vehicle multiplier,
    insurance fee and total.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Decimal arithmetic; every fee is rounded half-up to a whole unit.
    - Fee products are computed at 60 significant digits, so whole-unit
      results stay exact past the default 28-digit decimal context.
    - Monotonic: the total never decreases as distance, weight, speed rank
      or vehicle rank increases (given strictly increasing multipliers,
      which the config validator guarantees).
    - Clamping: ``DeliveryRequest`` clamps negative quantities when it is
      built, so the request layer owns clamping.  The estimator clamps once
      more so that direct callers cannot produce negative fees.

Failure modes:
    None.  The estimator has no error conditions.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext

from checkout_engines.tracer import traced_engine
from checkout_kernel.domain.pricing import CostEstimate, CostRates
from checkout_kernel.domain.values import SpeedTier, VehicleClass

_ZERO = Decimal("0")
_ONE = Decimal("1")

# Working precision for fee products; whole-unit results keep every digit.
_PRECISION = 60


def round_half_up(value: Decimal) -> int:
    """Round to a whole unit, halves away from zero."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 2)
        return int(value.quantize(_ONE, rounding=ROUND_HALF_UP))


@traced_engine(
    "delivery_cost",
    "1.0",
    fingerprint_fields=(
        "distance_km", "weight_kg", "declared_value", "speed", "vehicle", "insurance",
    ),
)
def estimate_delivery_cost(
    *,
    distance_km: Decimal,
    weight_kg: Decimal,
    declared_value: int,
    speed: SpeedTier,
    vehicle: VehicleClass,
    insurance: bool,
    rates: CostRates | None = None,
) -> CostEstimate:
    """Compute the itemized cost of a delivery.

    subtotal = round((base + distance_fee + weight_fee) * speed_mult * vehicle_mult)
    total    = subtotal + (round(declared_value * insurance_rate) if insured)
    """
    rates = rates or CostRates()

    base = rates.base_fee
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _PRECISION)
        distance_fee = round_half_up(max(Decimal(distance_km), _ZERO) * rates.distance_rate)
        weight_fee = round_half_up(max(Decimal(weight_kg), _ZERO) * rates.weight_rate)

        multiplier = rates.speed_multipliers[speed] * rates.vehicle_multipliers[vehicle]
        subtotal = round_half_up((base + distance_fee + weight_fee) * multiplier)

        insurance_fee = 0
        if insurance:
            insurance_fee = round_half_up(
                Decimal(max(int(declared_value), 0)) * rates.insurance_rate
            )

    return CostEstimate(
        base=base,
        distance_fee=distance_fee,
        weight_fee=weight_fee,
        insurance_fee=insurance_fee,
        multiplier=multiplier,
        subtotal=subtotal,
        total=subtotal + insurance_fee,
    )
