"""
Tests for the full derivation pipeline on the shipped policy.
"""

from datetime import timedelta
from decimal import Decimal

from checkout_engines.pipeline import derive_checkout_state
from checkout_kernel.domain.values import (
    CorporateAvailability,
    CorporateProgramStatus,
    Outcome,
    ProofType,
    ReasonCode,
)


def derive(policy_config, request, as_of, geo_allowed=True, time_allowed=True):
    return derive_checkout_state(
        request=request,
        vendor=policy_config.catalog.get(request.vendor_id),
        geo_allowed=geo_allowed,
        time_allowed=time_allowed,
        as_of=as_of,
        rates=policy_config.cost_rates,
        proof_thresholds=policy_config.proof_thresholds,
        policy_thresholds=policy_config.policy_thresholds,
        currency=policy_config.currency,
        policy_version=policy_config.policy_version,
        correlation_id="corr_pipeline",
    )


class TestDeriveCheckoutState:
    def test_default_delivery(self, policy_config, delivery_factory, deterministic_clock):
        result = derive(policy_config, delivery_factory(), deterministic_clock.now())

        assert result.estimate.total == 19300
        assert result.required_proof == frozenset(
            {ProofType.DROPOFF_PHOTO, ProofType.RECIPIENT_SIGNATURE}
        )
        assert result.outcome.decision is Outcome.ALLOWED
        assert result.availability is CorporateAvailability.AVAILABLE
        assert result.readiness.submit_eligible
        assert result.alternatives == ()
        assert result.grace_active is False

    def test_medical_vendor_defaults_flow_into_required_proof(
        self, policy_config, delivery_factory, deterministic_clock
    ):
        request = delivery_factory(vendor_id="v_med", proof={ProofType.DROPOFF_PHOTO: True})

        result = derive(policy_config, request, deterministic_clock.now())

        assert ProofType.ID_CHECK in result.required_proof
        assert not result.readiness.proof_requirements
        assert result.outcome.decision is Outcome.BLOCKED
        assert ReasonCode.PROOF in result.outcome.codes()

    def test_grace_expiry_flips_availability_on_the_tick(
        self, policy_config, delivery_factory, deterministic_clock
    ):
        expiry = deterministic_clock.now() + timedelta(seconds=1)
        request = delivery_factory(
            program_status=CorporateProgramStatus.BILLING_DELINQUENCY,
            grace_enabled=True,
            grace_expires_at=expiry,
        )

        before = derive(policy_config, request, deterministic_clock.now())
        deterministic_clock.advance(1)
        after = derive(policy_config, request, deterministic_clock.now())

        assert before.grace_active
        assert before.availability is CorporateAvailability.REQUIRES_APPROVAL
        assert not after.grace_active
        assert after.availability is CorporateAvailability.NOT_AVAILABLE
        assert not after.readiness.submit_eligible

    def test_derivation_is_independent_of_history(
        self, policy_config, delivery_factory, deterministic_clock
    ):
        now = deterministic_clock.now()
        request = delivery_factory(distance_km=Decimal("40"), declared_value=1_200_000)

        derive(policy_config, delivery_factory(), now, geo_allowed=False)
        first = derive(policy_config, request, now)
        second = derive(policy_config, request, now)

        assert first.outcome.content() == second.outcome.content()
        assert first.readiness == second.readiness
        assert first.alternatives == second.alternatives
