"""
checkout_engines.corporate -- Corporate program availability.

Responsibility:
    Decide whether the corporate payment program can carry a delivery:
    Available, Requires approval, or Not available.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  The current instant is a
    parameter; the grace window is re-derived on every call and never
    cached, so availability flips to Not available at the exact instant
    the grace window expires.

Invariants enforced:
    - Personal payment methods are always Available; program rules are
      inert for them.
    - A grace window is active only while status is Billing delinquency,
      grace is enabled, and expiry is strictly after ``as_of``.
"""

from __future__ import annotations

from datetime import datetime

from checkout_engines.tracer import traced_engine
from checkout_kernel.domain.values import (
    PROGRAM_BLOCKING_STATUSES,
    CorporateAvailability,
    CorporateProgramStatus,
    Outcome,
    PaymentMethod,
)


def is_grace_active(
    program_status: CorporateProgramStatus,
    grace_enabled: bool,
    grace_expires_at: datetime | None,
    as_of: datetime,
) -> bool:
    if program_status is not CorporateProgramStatus.BILLING_DELINQUENCY:
        return False
    if not grace_enabled or grace_expires_at is None:
        return False
    return grace_expires_at > as_of


def is_program_blocked(program_status: CorporateProgramStatus, grace_active: bool) -> bool:
    """True when the program itself, not the policy outcome, rules it out."""
    if program_status in PROGRAM_BLOCKING_STATUSES:
        return True
    return program_status is CorporateProgramStatus.BILLING_DELINQUENCY and not grace_active


@traced_engine(
    "corporate_availability",
    "1.0",
    fingerprint_fields=("payment_method", "program_status", "grace_active", "outcome"),
)
def resolve_corporate_availability(
    *,
    payment_method: PaymentMethod,
    program_status: CorporateProgramStatus,
    grace_active: bool,
    outcome: Outcome,
) -> CorporateAvailability:
    if not payment_method.is_corporate:
        return CorporateAvailability.AVAILABLE

    if is_program_blocked(program_status, grace_active):
        return CorporateAvailability.NOT_AVAILABLE
    if outcome is Outcome.BLOCKED:
        return CorporateAvailability.NOT_AVAILABLE
    if outcome is Outcome.APPROVAL_REQUIRED:
        return CorporateAvailability.REQUIRES_APPROVAL
    return CorporateAvailability.AVAILABLE
