"""
checkout_config -- single public entrypoint for checkout policy configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads the policy file
    directly.  Returns a frozen ``CheckoutPolicyConfig``.

Architecture position:
    Configuration -- YAML-driven policy, load-time validation.
    This package sits above ``checkout_kernel`` and ``checkout_engines``
    and below ``checkout_services``.  The kernel and the engines MUST NEVER
    import from ``checkout_config``.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - Validation: a configuration with any validation error is never
      returned; every error is reported at once.
    - Deterministic checksum: the same YAML always yields the same
      ``CheckoutPolicyConfig.checksum``.

Failure modes:
    - ``FileNotFoundError`` -- the policy file does not exist.
    - ``yaml.YAMLError`` -- the policy file is not valid YAML.
    - ``KeyError`` / ``ValueError`` -- required keys missing or unknown labels.
    - ``ConfigurationError`` -- structural validation failures.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``CHECKOUT_CONFIG_TRACE`` log entry with the policy version, checksum,
    vendor count and thresholds.  The policy version also appears in every
    audit explanation the evaluator produces.
"""

from __future__ import annotations

from pathlib import Path

from checkout_config.loader import compute_checksum, load_yaml_file, parse_config
from checkout_config.schema import (
    CategoryPreference,
    CheckoutDefaults,
    CheckoutPolicyConfig,
)
from checkout_config.validator import ConfigValidationResult, validate_configuration
from checkout_kernel.exceptions import ConfigurationError
from checkout_kernel.logging_config import get_logger

_logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "delivery_policy.yaml"


def get_active_config(path: Path | None = None) -> CheckoutPolicyConfig:
    """The ONLY public configuration entrypoint.

    Args:
        path: Override path to a policy YAML file.  Defaults to
            checkout_config/defaults/delivery_policy.yaml.

    Returns:
        A validated, frozen ``CheckoutPolicyConfig``.

    Raises:
        FileNotFoundError: If the policy file does not exist.
        ConfigurationError: If validation reports any error.
    """
    source = Path(path) if path is not None else DEFAULT_CONFIG_PATH

    data = load_yaml_file(source)
    config = parse_config(data, checksum=compute_checksum(data))

    validation = validate_configuration(config)
    if not validation.is_valid:
        raise ConfigurationError(str(source), validation.errors)
    for warning in validation.warnings:
        _logger.warning(
            "checkout_config_warning",
            extra={"config_source": str(source), "warning": warning},
        )

    _logger.info(
        "CHECKOUT_CONFIG_TRACE",
        extra={
            "trace_type": "CHECKOUT_CONFIG_TRACE",
            "config_source": str(source),
            "policy_version": config.policy_version,
            "checksum": config.checksum,
            "currency": config.currency,
            "vendor_count": len(config.catalog.vendors),
            "approval_threshold": config.policy_thresholds.approval_threshold,
            "high_value_threshold": config.policy_thresholds.high_value_threshold,
        },
    )

    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "CategoryPreference",
    "CheckoutDefaults",
    "CheckoutPolicyConfig",
    "ConfigValidationResult",
    "get_active_config",
    "validate_configuration",
]
