"""
Configuration Loader (``checkout_config.loader``).

Responsibility
--------------
Loads the checkout policy YAML file and parses it into typed
``checkout_config.schema`` dataclass instances.  The single public entry
point for runtime config is ``checkout_config.get_active_config()``.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Depends on kernel value types
and engine parameter types; nothing below it depends on the loader.

Invariants enforced
-------------------
* Required keys raise ``KeyError`` when missing; no silent defaults for
  rates, thresholds or vendors.
* Enum-valued keys are parsed by label (``"Same-day"``), so an unknown
  label raises ``ValueError``.
* Rates are parsed to ``Decimal`` via ``str`` so YAML floats never leak
  binary rounding into the tariff.
* ``compute_checksum`` produces a deterministic SHA-256 hash.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Unknown enum label  -> ``ValueError`` propagates.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from checkout_config.schema import (
    CategoryPreference,
    CheckoutDefaults,
    CheckoutPolicyConfig,
)
from checkout_engines.policy import DEFAULT_POLICY_VERSION, PolicyThresholds
from checkout_engines.proof import ProofThresholds
from checkout_kernel.domain.pricing import CostRates
from checkout_kernel.domain.values import (
    PackageCategory,
    ProofType,
    SpeedTier,
    TrustTier,
    VehicleClass,
    VendorCapability,
)
from checkout_kernel.domain.vendor import Vendor, VendorCatalog


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value))


def parse_cost_rates(data: dict[str, Any]) -> CostRates:
    return CostRates(
        base_fee=int(data["base_fee"]),
        distance_rate=_decimal(data["distance_rate"]),
        weight_rate=_decimal(data["weight_rate"]),
        insurance_rate=_decimal(data["insurance_rate"]),
        speed_multipliers={
            SpeedTier(label): _decimal(v) for label, v in data["speed_multipliers"].items()
        },
        vehicle_multipliers={
            VehicleClass(label): _decimal(v) for label, v in data["vehicle_multipliers"].items()
        },
    )


def parse_proof_thresholds(data: dict[str, Any]) -> ProofThresholds:
    return ProofThresholds(
        signature_threshold=int(data["signature"]),
        pickup_photo_threshold=int(data["pickup_photo"]),
    )


def parse_policy_thresholds(data: dict[str, Any]) -> PolicyThresholds:
    return PolicyThresholds(
        approval_threshold=int(data["approval"]),
        high_value_threshold=int(data["high_value"]),
    )


def parse_vendor(data: dict[str, Any]) -> Vendor:
    """
    Parse a ``Vendor`` from a dict.

    Preconditions:
        - ``data`` contains ``id``, ``name`` and ``tier``.
    Raises:
        KeyError: if required keys are missing.
        ValueError: if a tier, capability or proof label is unknown.
    """
    return Vendor(
        vendor_id=data["id"],
        name=data["name"],
        trust_tier=TrustTier(data["tier"]),
        capabilities=frozenset(VendorCapability(c) for c in data.get("capabilities", [])),
        proof_defaults=frozenset(ProofType(p) for p in data.get("proof_defaults", [])),
        notes=data.get("notes", ""),
    )


def parse_catalog(data: dict[str, Any]) -> VendorCatalog:
    return VendorCatalog(
        vendors=tuple(parse_vendor(v) for v in data["vendors"]),
        default_vendor_id=data["default_vendor"],
    )


def parse_category_preference(data: dict[str, Any]) -> CategoryPreference:
    vehicle = data.get("vehicle")
    return CategoryPreference(
        vendor_id=data.get("vendor"),
        vehicle=VehicleClass(vehicle) if vehicle else None,
        purpose=data.get("purpose"),
    )


def parse_defaults(data: dict[str, Any]) -> CheckoutDefaults:
    return CheckoutDefaults(
        pickup=data.get("pickup", ""),
        dropoff=data.get("dropoff", ""),
        distance_km=str(data.get("distance_km", "0")),
        weight_kg=str(data.get("weight_kg", "0")),
        declared_value=int(data.get("declared_value", 0)),
        cost_center=data.get("cost_center", ""),
        project_tag=data.get("project_tag", ""),
        purpose=data.get("purpose", ""),
        grace_enabled=bool(data.get("grace_enabled", False)),
        enabled_proof=tuple(ProofType(p) for p in data.get("enabled_proof", [])),
    )


def parse_config(data: dict[str, Any], checksum: str) -> CheckoutPolicyConfig:
    """Parse the whole policy document into a ``CheckoutPolicyConfig``."""
    session = data.get("session", {})
    preferences = {
        PackageCategory(label): parse_category_preference(pref)
        for label, pref in (data.get("category_preferences") or {}).items()
    }
    return CheckoutPolicyConfig(
        policy_version=data.get("policy_version", DEFAULT_POLICY_VERSION),
        currency=data.get("currency", "UGX"),
        checksum=checksum,
        cost_rates=parse_cost_rates(data["cost_rates"]),
        proof_thresholds=parse_proof_thresholds(data["proof_thresholds"]),
        policy_thresholds=parse_policy_thresholds(data["policy_thresholds"]),
        catalog=parse_catalog(data["catalog"]),
        category_preferences=preferences,
        defaults=parse_defaults(data.get("defaults", {})),
        submission_delay_seconds=float(session.get("submission_delay_seconds", 0.9)),
        grace_window_hours=float(session.get("grace_window_hours", 4)),
        max_attachments=int(session.get("max_attachments", 10)),
        auto_enable_required_proof=bool(session.get("auto_enable_required_proof", True)),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
