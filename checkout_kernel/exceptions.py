"""
Typed Exception Hierarchy for the Checkout Kernel.

===============================================================================
WHAT IS (AND IS NOT) AN EXCEPTION HERE
===============================================================================

The checkout engine reports business problems as data, not exceptions:

  - Field problems            -> Critical "FIELDS" policy reasons
  - Policy violations         -> Critical / Warning policy reasons
  - Guard rejections          -> EditResult(accepted=False, rejection_code=...)

Exceptions are reserved for programming errors: a caller referencing a vendor
or field that does not exist, handing the engine a value it cannot coerce,
editing a session that already produced a terminal result, or loading a
configuration that fails validation.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    CheckoutKernelError (base)
    |
    +-- CatalogError
    |   +-- UnknownVendorError
    |
    +-- EditError
    |   +-- UnknownFieldError
    |   +-- InvalidFieldValueError
    |
    +-- SessionError
    |   +-- SessionClosedError
    |   +-- SubmissionStateError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                     | When Raised
-----------|--------------------------|------------------------------------------
Catalog    | UNKNOWN_VENDOR           | Vendor id not present in the catalog
-----------|--------------------------|------------------------------------------
Edit       | UNKNOWN_FIELD            | Edit names a field that is not editable
           | INVALID_FIELD_VALUE      | Value cannot be coerced to the field type
-----------|--------------------------|------------------------------------------
Session    | SESSION_CLOSED           | Edit after a terminal submission result
           | SUBMISSION_STATE         | Completing a submission not in flight
-----------|--------------------------|------------------------------------------
Config     | CONFIGURATION_INVALID    | Policy configuration failed validation

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        session.apply_edit("vendor_id", raw_vendor)
    except UnknownVendorError as e:
        api_response(code=e.code, vendor_id=e.vendor_id)

    result = session.set_proof(ProofType.ID_CHECK, False)
    if not result.accepted:
        toast(result.message)          # guard rejection, not an exception
"""

from typing import Any


class CheckoutKernelError(Exception):
    """
    Base exception for all checkout kernel errors.

    All subclasses carry a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "CHECKOUT_KERNEL_ERROR"


# Catalog exceptions


class CatalogError(CheckoutKernelError):
    """Base exception for vendor catalog errors."""

    code: str = "CATALOG_ERROR"


class UnknownVendorError(CatalogError):
    """Vendor with the given id is not in the catalog."""

    code: str = "UNKNOWN_VENDOR"

    def __init__(self, vendor_id: str):
        self.vendor_id = vendor_id
        super().__init__(f"Unknown vendor: {vendor_id}")


# Edit exceptions


class EditError(CheckoutKernelError):
    """Base exception for field-edit programming errors."""

    code: str = "EDIT_ERROR"


class UnknownFieldError(EditError):
    """The edit names a field that is not part of the editable surface."""

    code: str = "UNKNOWN_FIELD"

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Field is not editable: {field_name}")


class InvalidFieldValueError(EditError):
    """
    The value cannot be coerced to the field's type.

    Raw input parsing is the caller's job; reaching this means the caller
    handed over an unparsed or out-of-domain value.
    """

    code: str = "INVALID_FIELD_VALUE"

    def __init__(self, field_name: str, value: Any, expected: str):
        self.field_name = field_name
        self.value = value
        self.expected = expected
        super().__init__(
            f"Invalid value for {field_name}: {value!r} (expected {expected})"
        )


# Session exceptions


class SessionError(CheckoutKernelError):
    """Base exception for checkout session lifecycle errors."""

    code: str = "SESSION_ERROR"


class SessionClosedError(SessionError):
    """The session already produced a terminal submission result."""

    code: str = "SESSION_CLOSED"

    def __init__(self, result_id: str):
        self.result_id = result_id
        super().__init__(
            f"Checkout already completed with {result_id}; start a new session"
        )


class SubmissionStateError(SessionError):
    """A submission transition was forced from the wrong state."""

    code: str = "SUBMISSION_STATE"

    def __init__(self, state: str, action: str):
        self.state = state
        self.action = action
        super().__init__(f"Cannot {action} a submission in state '{state}'")


# Configuration exceptions


class ConfigurationError(CheckoutKernelError):
    """Policy configuration failed validation."""

    code: str = "CONFIGURATION_INVALID"

    def __init__(self, source: str, errors: list[str]):
        self.source = source
        self.errors = errors
        super().__init__(
            f"Configuration {source} is invalid:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )
