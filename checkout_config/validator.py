"""
Configuration Validator (``checkout_config.validator``).

Responsibility
--------------
Validates a parsed ``CheckoutPolicyConfig`` before it is handed out,
collecting every problem rather than stopping at the first.

Architecture position
---------------------
**Config layer** -- load-time validation.  Called by
``checkout_config.get_active_config()`` after parsing.

Invariants enforced
-------------------
* Multipliers cover every speed tier and vehicle class and are strictly
  increasing with urgency and capacity (the estimator's monotonicity
  depends on it).
* Rates, fees and thresholds are non-negative.
* Vendor ids are unique; the default vendor and every category-preference
  vendor exist in the catalog.
* Session timings and bounds are positive.

Failure modes
-------------
* Validation errors (``ConfigValidationResult.errors``)  -> the
  configuration MUST NOT be used.
* Validation warnings  -> usable but should be reviewed.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from checkout_config.schema import CheckoutPolicyConfig
from checkout_kernel.domain.values import SpeedTier, TrustTier, VehicleClass


@dataclass
class ConfigValidationResult:
    """
    Result of configuration validation.

    ``is_valid`` returns ``True`` only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def validate_configuration(config: CheckoutPolicyConfig) -> ConfigValidationResult:
    """
    Validate a checkout policy configuration.

    Postconditions:
        - Returns a ``ConfigValidationResult`` with errors and warnings.
        - A configuration with errors MUST NOT be used.
    """
    result = ConfigValidationResult()

    _validate_multipliers(config, result)
    _validate_rates(config, result)
    _validate_thresholds(config, result)
    _validate_catalog(config, result)
    _validate_session(config, result)

    return result


def _validate_multipliers(config: CheckoutPolicyConfig, result: ConfigValidationResult) -> None:
    rates = config.cost_rates
    for label, ordered, table in (
        ("speed", sorted(SpeedTier, key=lambda s: s.rank), rates.speed_multipliers),
        ("vehicle", sorted(VehicleClass, key=lambda v: v.rank), rates.vehicle_multipliers),
    ):
        missing = [member.value for member in ordered if member not in table]
        if missing:
            result.add_error(f"Missing {label} multipliers: {', '.join(missing)}")
            continue
        values = [table[member] for member in ordered]
        if any(v <= 0 for v in values):
            result.add_error(f"{label.capitalize()} multipliers must be positive")
        if any(lo >= hi for lo, hi in zip(values, values[1:])):
            result.add_error(
                f"{label.capitalize()} multipliers must be strictly increasing: "
                + ", ".join(f"{m.value}={table[m]}" for m in ordered)
            )


def _validate_rates(config: CheckoutPolicyConfig, result: ConfigValidationResult) -> None:
    rates = config.cost_rates
    for name, value in (
        ("base_fee", rates.base_fee),
        ("distance_rate", rates.distance_rate),
        ("weight_rate", rates.weight_rate),
        ("insurance_rate", rates.insurance_rate),
    ):
        if value < 0:
            result.add_error(f"Cost rate '{name}' must be non-negative, got {value}")


def _validate_thresholds(config: CheckoutPolicyConfig, result: ConfigValidationResult) -> None:
    proof = config.proof_thresholds
    policy = config.policy_thresholds
    for name, value in (
        ("signature", proof.signature_threshold),
        ("pickup_photo", proof.pickup_photo_threshold),
        ("approval", policy.approval_threshold),
        ("high_value", policy.high_value_threshold),
    ):
        if value < 0:
            result.add_error(f"Threshold '{name}' must be non-negative, got {value}")
    if proof.pickup_photo_threshold < proof.signature_threshold:
        result.add_warning(
            "Pickup-photo threshold is below the signature threshold; "
            "high-value deliveries may need a photo before a signature"
        )


def _validate_catalog(config: CheckoutPolicyConfig, result: ConfigValidationResult) -> None:
    catalog = config.catalog
    if not catalog.vendors:
        result.add_error("Vendor catalog is empty")
        return

    counts = Counter(v.vendor_id for v in catalog.vendors)
    for vendor_id, count in sorted(counts.items()):
        if count > 1:
            result.add_error(f"Duplicate vendor id '{vendor_id}' ({count} entries)")

    if catalog.default_vendor_id not in catalog:
        result.add_error(f"Default vendor '{catalog.default_vendor_id}' is not in the catalog")
    elif catalog.default_vendor.trust_tier is TrustTier.BLOCKED:
        result.add_warning(f"Default vendor '{catalog.default_vendor_id}' is blocked")

    for category, preference in sorted(
        config.category_preferences.items(), key=lambda item: item[0].value
    ):
        if preference.vendor_id is not None and preference.vendor_id not in catalog:
            result.add_error(
                f"Preference for {category.value} names unknown vendor '{preference.vendor_id}'"
            )


def _validate_session(config: CheckoutPolicyConfig, result: ConfigValidationResult) -> None:
    if config.submission_delay_seconds < 0:
        result.add_error("submission_delay_seconds must be non-negative")
    if config.grace_window_hours <= 0:
        result.add_error("grace_window_hours must be positive")
    if config.max_attachments < 1:
        result.add_error("max_attachments must be at least 1")
