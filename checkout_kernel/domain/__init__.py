"""
Pure domain layer.

Immutable value objects for the delivery checkout with NO dependencies on
I/O, configuration files, or the wall clock (SystemClock excepted).
"""

from checkout_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from checkout_kernel.domain.delivery import Attachment, DeliveryRequest
from checkout_kernel.domain.policy import (
    AuditExplanation,
    AuditField,
    PolicyOutcome,
    PolicyPathStep,
    PolicyReason,
)
from checkout_kernel.domain.pricing import CostEstimate, CostRates
from checkout_kernel.domain.values import (
    CorporateAvailability,
    CorporateProgramStatus,
    Outcome,
    PackageCategory,
    PaymentMethod,
    ProofType,
    ReasonCode,
    ScheduleMode,
    Severity,
    SpeedTier,
    TrustTier,
    VehicleClass,
    VendorCapability,
    format_money,
)
from checkout_kernel.domain.vendor import Vendor, VendorCatalog
from checkout_kernel.domain.wizard import (
    WIZARD_STEPS,
    CheckoutSnapshot,
    EditResult,
    RejectionCode,
    StepReadiness,
    SubmissionKind,
    SubmissionResult,
    WizardStep,
)

__all__ = [
    # Clock
    "Clock",
    "DeterministicClock",
    "SystemClock",
    # Values
    "CorporateAvailability",
    "CorporateProgramStatus",
    "Outcome",
    "PackageCategory",
    "PaymentMethod",
    "ProofType",
    "ReasonCode",
    "ScheduleMode",
    "Severity",
    "SpeedTier",
    "TrustTier",
    "VehicleClass",
    "VendorCapability",
    "format_money",
    # Records
    "Attachment",
    "DeliveryRequest",
    "Vendor",
    "VendorCatalog",
    "CostEstimate",
    "CostRates",
    # Policy results
    "AuditExplanation",
    "AuditField",
    "PolicyOutcome",
    "PolicyPathStep",
    "PolicyReason",
    # Wizard
    "WIZARD_STEPS",
    "CheckoutSnapshot",
    "EditResult",
    "RejectionCode",
    "StepReadiness",
    "SubmissionKind",
    "SubmissionResult",
    "WizardStep",
]
