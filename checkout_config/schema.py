"""
Checkout policy configuration schema.

Defines the reviewable policy artifact for corporate delivery checkout.
YAML is parsed into these types by the loader, checked by the validator,
and handed out by ``get_active_config()``.  Engines receive the pieces they
need (rates, thresholds, vendors) as plain parameters and never see this
object.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from checkout_engines.policy import PolicyThresholds
from checkout_engines.proof import ProofThresholds
from checkout_kernel.domain.pricing import CostRates
from checkout_kernel.domain.values import PackageCategory, ProofType, VehicleClass
from checkout_kernel.domain.vendor import VendorCatalog


@dataclass(frozen=True)
class CategoryPreference:
    """Defaults applied when the package category changes to this category."""

    vendor_id: str | None = None
    vehicle: VehicleClass | None = None
    purpose: str | None = None


@dataclass(frozen=True)
class CheckoutDefaults:
    """Initial values of a fresh delivery request."""

    pickup: str = "Kampala CBD"
    dropoff: str = "Ntinda"
    distance_km: str = "9"
    weight_kg: str = "2"
    declared_value: int = 350_000
    cost_center: str = "OPS-01"
    project_tag: str = "Project"
    purpose: str = "Documents"
    grace_enabled: bool = True
    enabled_proof: tuple[ProofType, ...] = (ProofType.DROPOFF_PHOTO,)


@dataclass(frozen=True)
class CheckoutPolicyConfig:
    """Active checkout policy.

    Attributes:
        policy_version: Tag recorded in every audit explanation.
        currency: Display currency for reasons and exports.
        checksum: SHA-256 of the canonical parsed source.
        cost_rates: Delivery tariff.
        proof_thresholds: Declared-value thresholds adding proof.
        policy_thresholds: Approval and high-value thresholds.
        catalog: Vendor catalog with default vendor.
        category_preferences: Per-category vendor/vehicle/purpose defaults.
        defaults: Initial request values.
        submission_delay_seconds: Simulated submission latency.
        grace_window_hours: Length of a reset grace window.
        max_attachments: Attachment list bound.
        auto_enable_required_proof: Switch on proof as it becomes required.
    """

    policy_version: str
    currency: str
    checksum: str
    cost_rates: CostRates
    proof_thresholds: ProofThresholds
    policy_thresholds: PolicyThresholds
    catalog: VendorCatalog
    category_preferences: dict[PackageCategory, CategoryPreference] = field(default_factory=dict)
    defaults: CheckoutDefaults = field(default_factory=CheckoutDefaults)
    submission_delay_seconds: float = 0.9
    grace_window_hours: float = 4
    max_attachments: int = 10
    auto_enable_required_proof: bool = True
