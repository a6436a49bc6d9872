"""
Tests for the delivery cost estimator.

Tests cover:
- Itemized fees for the default delivery (base, distance, weight)
- Speed x vehicle multipliers and half-up rounding
- Insurance fee
- Clamping of negative inputs
- Monotonicity in distance, weight, speed rank and vehicle rank (Hypothesis)
"""

from decimal import Decimal

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from checkout_engines.pricing import estimate_delivery_cost, round_half_up
from checkout_kernel.domain.pricing import CostRates
from checkout_kernel.domain.values import SpeedTier, VehicleClass


def estimate(
    distance_km="9",
    weight_kg="2",
    declared_value=350_000,
    speed=SpeedTier.STANDARD,
    vehicle=VehicleClass.BIKE,
    insurance=False,
    rates=None,
):
    return estimate_delivery_cost(
        distance_km=Decimal(distance_km),
        weight_kg=Decimal(weight_kg),
        declared_value=declared_value,
        speed=speed,
        vehicle=vehicle,
        insurance=insurance,
        rates=rates,
    )


class TestEstimateDeliveryCost:
    def test_default_delivery_itemization(self):
        """9 km, 2 kg, Standard, Bike, no insurance."""
        result = estimate()

        assert result.base == 8000
        assert result.distance_fee == 10800
        assert result.weight_fee == 500
        assert result.multiplier == Decimal("1")
        assert result.insurance_fee == 0
        assert result.subtotal == 19300
        assert result.total == 19300

    @pytest.mark.parametrize(
        "speed, vehicle, expected_subtotal",
        [
            (SpeedTier.EXPRESS, VehicleClass.BIKE, 27020),
            (SpeedTier.EXPRESS, VehicleClass.CAR, 33775),
            (SpeedTier.SAME_DAY, VehicleClass.VAN, 55584),
        ],
    )
    def test_multiplier_applies_to_fee_sum(self, speed, vehicle, expected_subtotal):
        result = estimate(speed=speed, vehicle=vehicle)

        assert result.subtotal == expected_subtotal
        assert result.total == expected_subtotal

    def test_insurance_is_one_percent_of_declared_value(self):
        result = estimate(insurance=True)

        assert result.insurance_fee == 3500
        assert result.total == 19300 + 3500

    def test_insurance_not_multiplied(self):
        result = estimate(insurance=True, speed=SpeedTier.SAME_DAY, vehicle=VehicleClass.VAN)

        assert result.total == result.subtotal + 3500

    def test_fees_round_half_up(self):
        result = estimate(distance_km="0", weight_kg="0.002", declared_value=50, insurance=True)

        assert result.weight_fee == 1
        assert result.insurance_fee == 1

    def test_negative_inputs_clamped(self):
        result = estimate(distance_km="-5", weight_kg="-1", declared_value=-100, insurance=True)

        assert result.distance_fee == 0
        assert result.weight_fee == 0
        assert result.insurance_fee == 0
        assert result.total == 8000

    def test_custom_rates(self):
        rates = CostRates(base_fee=1000, distance_rate=Decimal("100"), weight_rate=Decimal("0"))

        result = estimate(rates=rates)

        assert result.total == 1000 + 900

    def test_round_half_up(self):
        assert round_half_up(Decimal("0.5")) == 1
        assert round_half_up(Decimal("1.49")) == 1
        assert round_half_up(Decimal("2.5")) == 3
        assert round_half_up(Decimal("12345678901234567890123456789012.5")) == (
            12345678901234567890123456789013
        )

    def test_values_beyond_default_precision_stay_exact(self):
        result = estimate(distance_km="1e30", declared_value=10**30, insurance=True)

        assert result.distance_fee == 1200 * 10**30
        assert result.subtotal == 1200 * 10**30 + 8500
        assert result.insurance_fee == 10**28
        assert result.total == result.subtotal + 10**28


# =========================================================================
# Monotonicity
# =========================================================================

quantities = st.decimals(min_value=0, max_value=500, places=2, allow_nan=False, allow_infinity=False)
increments = st.decimals(min_value=0, max_value=100, places=2, allow_nan=False, allow_infinity=False)
speeds = st.sampled_from(list(SpeedTier))
vehicles = st.sampled_from(list(VehicleClass))


def total(distance, weight, speed, vehicle, insurance=False, declared_value=0):
    return estimate_delivery_cost(
        distance_km=distance,
        weight_kg=weight,
        declared_value=declared_value,
        speed=speed,
        vehicle=vehicle,
        insurance=insurance,
    ).total


class TestEstimateMonotonicity:
    @given(quantities, quantities, increments, speeds, vehicles)
    @settings(max_examples=100)
    def test_total_non_decreasing_in_distance(self, distance, weight, extra, speed, vehicle):
        assert total(distance, weight, speed, vehicle) <= total(distance + extra, weight, speed, vehicle)

    @given(quantities, quantities, increments, speeds, vehicles)
    @settings(max_examples=100)
    def test_total_non_decreasing_in_weight(self, distance, weight, extra, speed, vehicle):
        assert total(distance, weight, speed, vehicle) <= total(distance, weight + extra, speed, vehicle)

    @given(quantities, quantities, speeds, speeds, vehicles)
    @settings(max_examples=100)
    def test_total_non_decreasing_in_speed_rank(self, distance, weight, s1, s2, vehicle):
        low, high = sorted((s1, s2), key=lambda s: s.rank)
        assert total(distance, weight, low, vehicle) <= total(distance, weight, high, vehicle)

    @given(quantities, quantities, speeds, vehicles, vehicles)
    @settings(max_examples=100)
    def test_total_non_decreasing_in_vehicle_rank(self, distance, weight, speed, v1, v2):
        low, high = sorted((v1, v2), key=lambda v: v.rank)
        assert total(distance, weight, speed, low) <= total(distance, weight, speed, high)
