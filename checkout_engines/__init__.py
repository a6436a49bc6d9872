"""
Module: checkout_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for higher
    layers (checkout_config, checkout_services).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import checkout_kernel (and sibling engine modules).
    MUST NOT import checkout_config or checkout_services.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()``.  The evaluation instant
      is always an explicit parameter supplied by the caller.
    - Decimal arithmetic for rates; whole-unit integers for money.
    - Determinism: identical inputs produce identical outcomes and reason
      content.

Audit relevance:
    Every engine invocation is traced via ``@traced_engine`` (see
    ``checkout_engines.tracer``), emitting CHECKOUT_ENGINE_TRACE records
    with engine name, version, input fingerprint and duration.

Usage:
    from checkout_engines import derive_checkout_state
    from checkout_engines.pricing import estimate_delivery_cost
    from checkout_engines.policy import evaluate_delivery_policy
"""

from checkout_kernel.logging_config import get_logger

logger = get_logger("engines")

from checkout_engines.alternatives import MAX_ALTERNATIVES, recommend_alternatives
from checkout_engines.corporate import (
    is_grace_active,
    is_program_blocked,
    resolve_corporate_availability,
)
from checkout_engines.pipeline import CheckoutDerivation, derive_checkout_state
from checkout_engines.policy import (
    DEFAULT_POLICY_VERSION,
    PolicyThresholds,
    derive_outcome,
    evaluate_delivery_policy,
)
from checkout_engines.pricing import estimate_delivery_cost, round_half_up
from checkout_engines.proof import ProofThresholds, ordered_proof, resolve_required_proof
from checkout_engines.readiness import derive_step_readiness
from checkout_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "CheckoutDerivation",
    "DEFAULT_POLICY_VERSION",
    "MAX_ALTERNATIVES",
    "PolicyThresholds",
    "ProofThresholds",
    "compute_input_fingerprint",
    "derive_checkout_state",
    "derive_outcome",
    "derive_step_readiness",
    "estimate_delivery_cost",
    "evaluate_delivery_policy",
    "is_grace_active",
    "is_program_blocked",
    "ordered_proof",
    "recommend_alternatives",
    "resolve_corporate_availability",
    "resolve_required_proof",
    "round_half_up",
    "traced_engine",
]
