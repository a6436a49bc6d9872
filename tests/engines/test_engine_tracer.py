"""
Tests for the engine tracer decorator and input fingerprints.
"""

import logging
from decimal import Decimal

from checkout_engines.pricing import estimate_delivery_cost
from checkout_engines.tracer import compute_input_fingerprint, traced_engine
from checkout_kernel.domain.values import ProofType, SpeedTier, VehicleClass


def _estimate(distance: str):
    return estimate_delivery_cost(
        distance_km=Decimal(distance),
        weight_kg=Decimal("2"),
        declared_value=0,
        speed=SpeedTier.STANDARD,
        vehicle=VehicleClass.BIKE,
        insurance=False,
    )


class TestFingerprint:
    def test_deterministic_and_short(self):
        fp1 = compute_input_fingerprint(("a", "b"), {"a": 1, "b": SpeedTier.EXPRESS})
        fp2 = compute_input_fingerprint(("a", "b"), {"b": SpeedTier.EXPRESS, "a": 1})

        assert fp1 == fp2
        assert len(fp1) == 16

    def test_set_order_does_not_matter(self):
        forward = {"p": frozenset([ProofType.ID_CHECK, ProofType.PICKUP_PHOTO])}
        backward = {"p": frozenset([ProofType.PICKUP_PHOTO, ProofType.ID_CHECK])}

        assert compute_input_fingerprint(("p",), forward) == compute_input_fingerprint(("p",), backward)

    def test_different_inputs_differ(self):
        assert compute_input_fingerprint(("a",), {"a": 1}) != compute_input_fingerprint(("a",), {"a": 2})

    def test_missing_field_is_null(self):
        assert compute_input_fingerprint(("a",), {}) == compute_input_fingerprint(("a",), {"a": None})


class TestTracedEngine:
    def test_emits_trace_record(self, captured_logs):
        _estimate("9")

        traces = [r for r in captured_logs() if r["message"] == "CHECKOUT_ENGINE_TRACE"]
        assert traces
        trace = traces[-1]
        assert trace["engine_name"] == "delivery_cost"
        assert trace["engine_version"] == "1.0"
        assert len(trace["input_fingerprint"]) == 16
        assert trace["level"] == "DEBUG"

    def test_fingerprint_tracks_inputs(self, captured_logs):
        _estimate("9")
        _estimate("9")
        _estimate("10")

        fps = [
            r["input_fingerprint"]
            for r in captured_logs()
            if r.get("engine_name") == "delivery_cost"
        ]
        assert fps[0] == fps[1]
        assert fps[1] != fps[2]

    def test_result_passes_through(self):
        @traced_engine("echo", "0.1", fingerprint_fields=("value",))
        def echo(*, value):
            return value

        assert echo(value=[1, 2]) == [1, 2]

    def test_logger_namespace(self):
        assert logging.getLogger("checkout_kernel.engines.tracer").isEnabledFor(logging.DEBUG)
