"""
Closed value types for the delivery checkout (``checkout_kernel.domain.values``).

Responsibility
--------------
Every enumerated choice the checkout makes is a closed ``str``-valued
``Enum`` whose value is the label the product shows.  Engines branch on
members, never on raw strings, so an unhandled member is visible in review
rather than silently falling through.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.
"""

from __future__ import annotations

from enum import Enum


# =========================================================================
# Delivery description
# =========================================================================


class PackageCategory(str, Enum):
    DOCUMENTS = "Documents"
    PARCEL = "Parcel"
    ELECTRONICS = "Electronics"
    MEDICAL = "Medical"
    FOOD = "Food"
    OTHER = "Other"


class ScheduleMode(str, Enum):
    NOW = "Now"
    SCHEDULED = "Scheduled"


class SpeedTier(str, Enum):
    """Delivery urgency, ordered from least to most urgent."""

    STANDARD = "Standard"
    EXPRESS = "Express"
    SAME_DAY = "Same-day"

    @property
    def rank(self) -> int:
        return _SPEED_ORDER.index(self)


class VehicleClass(str, Enum):
    """Vehicle capacity, ordered from smallest to largest."""

    BIKE = "Bike"
    CAR = "Car"
    VAN = "Van"

    @property
    def rank(self) -> int:
        return _VEHICLE_ORDER.index(self)


_SPEED_ORDER: tuple[SpeedTier, ...] = (
    SpeedTier.STANDARD,
    SpeedTier.EXPRESS,
    SpeedTier.SAME_DAY,
)

_VEHICLE_ORDER: tuple[VehicleClass, ...] = (
    VehicleClass.BIKE,
    VehicleClass.CAR,
    VehicleClass.VAN,
)


class ProofType(str, Enum):
    """Evidence a courier may be obliged to capture."""

    PICKUP_PHOTO = "Pickup photo"
    DROPOFF_PHOTO = "Drop-off photo"
    RECIPIENT_SIGNATURE = "Recipient signature"
    ID_CHECK = "ID check"


# =========================================================================
# Payment and corporate program
# =========================================================================


class PaymentMethod(str, Enum):
    CORPORATE_PAY = "CorporatePay"
    PERSONAL_WALLET = "Personal Wallet"
    CARD = "Card"
    MOBILE_MONEY = "Mobile Money"

    @property
    def is_corporate(self) -> bool:
        return self is PaymentMethod.CORPORATE_PAY


class CorporateProgramStatus(str, Enum):
    ELIGIBLE = "Eligible"
    NOT_LINKED = "Not linked"
    NOT_ELIGIBLE = "Not eligible"
    DEPOSIT_DEPLETED = "Deposit depleted"
    CREDIT_LIMIT_EXCEEDED = "Credit limit exceeded"
    BILLING_DELINQUENCY = "Billing delinquency"


# Statuses that make the corporate program unusable regardless of grace.
PROGRAM_BLOCKING_STATUSES: frozenset[CorporateProgramStatus] = frozenset({
    CorporateProgramStatus.NOT_LINKED,
    CorporateProgramStatus.NOT_ELIGIBLE,
    CorporateProgramStatus.DEPOSIT_DEPLETED,
    CorporateProgramStatus.CREDIT_LIMIT_EXCEEDED,
})


class CorporateAvailability(str, Enum):
    AVAILABLE = "Available"
    REQUIRES_APPROVAL = "Requires approval"
    NOT_AVAILABLE = "Not available"


# =========================================================================
# Vendor policy
# =========================================================================


class TrustTier(str, Enum):
    ALLOWED = "Allowed"
    RESTRICTED = "Restricted"
    BLOCKED = "Blocked"


class VendorCapability(str, Enum):
    BIKE = "Bike"
    CAR = "Car"
    VAN = "Van"
    EXPRESS = "Express"
    SAME_DAY = "Same-day"


# =========================================================================
# Policy evaluation
# =========================================================================


class Severity(str, Enum):
    INFO = "Info"
    WARNING = "Warning"
    CRITICAL = "Critical"


class ReasonCode(str, Enum):
    """Taxonomy of policy findings."""

    FIELDS = "FIELDS"
    GEO = "GEO"
    TIME = "TIME"
    VENDOR = "VENDOR"
    PROOF = "PROOF"
    PROGRAM = "PROGRAM"
    ALLOC = "ALLOC"
    AMOUNT = "AMOUNT"
    VALUE = "VALUE"
    NOTE = "NOTE"
    PAYMENT = "PAYMENT"
    OK = "OK"


class Outcome(str, Enum):
    """Ternary authorization decision."""

    ALLOWED = "Allowed"
    APPROVAL_REQUIRED = "Approval required"
    BLOCKED = "Blocked"

    @property
    def tone(self) -> str:
        """Presentation tone used by banner renderers."""
        if self is Outcome.ALLOWED:
            return "good"
        if self is Outcome.APPROVAL_REQUIRED:
            return "warn"
        return "bad"


# =========================================================================
# Display helpers
# =========================================================================


def format_money(amount: int, currency: str = "UGX") -> str:
    """Format a whole-unit amount for reason details and exports.

    >>> format_money(19300)
    'UGX 19,300'
    """
    return f"{currency} {int(amount):,}"
