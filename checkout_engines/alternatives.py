"""
checkout_engines.alternatives -- Recommended remediation suggestions.

Pure function over the request, vendor, estimate and availability.
Suggestions are presentation hints only; nothing reads them for control
flow.  At most ``MAX_ALTERNATIVES`` are returned, in first-seen order and
without duplicates.
"""

from __future__ import annotations

from checkout_engines.tracer import traced_engine
from checkout_kernel.domain.delivery import DeliveryRequest
from checkout_kernel.domain.pricing import CostEstimate
from checkout_kernel.domain.values import CorporateAvailability, TrustTier
from checkout_kernel.domain.vendor import Vendor

MAX_ALTERNATIVES = 5

CHOOSE_ALLOWED_VENDOR = "Choose an allowed vendor"
SWITCH_TO_PERSONAL = "Switch to personal payment"
USE_ALLOWED_ZONE = "Use an allowed route/zone"
SCHEDULE_IN_WINDOW = "Schedule within allowed time window"
REDUCE_COST = "Use Standard speed or Bike to reduce cost"
ADD_NOTE_AND_SIGNATURE = "Add a note and ensure signature proof is enabled"


@traced_engine(
    "alternatives",
    "1.0",
    fingerprint_fields=("request", "vendor", "availability", "geo_allowed", "time_allowed"),
)
def recommend_alternatives(
    *,
    request: DeliveryRequest,
    vendor: Vendor,
    estimate: CostEstimate,
    availability: CorporateAvailability,
    geo_allowed: bool,
    time_allowed: bool,
    approval_threshold: int,
    high_value_threshold: int,
) -> tuple[str, ...]:
    suggestions: list[str] = []
    corporate = request.payment_method.is_corporate

    if vendor.trust_tier is TrustTier.BLOCKED:
        suggestions.append(CHOOSE_ALLOWED_VENDOR)
    if corporate and availability is CorporateAvailability.NOT_AVAILABLE:
        suggestions.append(SWITCH_TO_PERSONAL)
    if not geo_allowed:
        suggestions.append(USE_ALLOWED_ZONE)
    if not time_allowed:
        suggestions.append(SCHEDULE_IN_WINDOW)
    if corporate and estimate.total > approval_threshold:
        suggestions.append(REDUCE_COST)
    if request.declared_value >= high_value_threshold:
        suggestions.append(ADD_NOTE_AND_SIGNATURE)

    # dict preserves first-seen order
    return tuple(dict.fromkeys(suggestions))[:MAX_ALTERNATIVES]
