"""
Tests for the printable review summary and the handoff payload.
"""

import json

import pytest

from checkout_kernel.domain.values import ProofType
from checkout_services.checkout_session import CheckoutSession
from checkout_services.export import format_bytes, render_review_html, snapshot_to_dict


@pytest.mark.parametrize(
    "size, expected",
    [
        (0, "0 B"),
        (512, "512 B"),
        (1536, "1.5 KB"),
        (2 * 1024 * 1024, "2.0 MB"),
        (-10, "0 B"),
        (None, "0 B"),
    ],
)
def test_format_bytes(size, expected):
    assert format_bytes(size) == expected


class TestRenderReviewHtml:
    def test_sections_and_totals(self, session):
        html = render_review_html(session.snapshot())

        for heading in (
            "Delivery",
            "Pricing",
            "Allocation",
            "Policy reasons",
            "Proof requirements",
            "Attachments",
            "Audit",
        ):
            assert f"<h2>{heading}</h2>" in html
        assert "EVzone Courier" in html
        assert "UGX 19,300" in html
        assert 'class="tone-good"' in html

    def test_user_text_is_escaped(self, session):
        session.apply_edit("notes", "<script>alert('x')</script>")
        session.add_attachment('"quote".pdf', size=2048)

        html = render_review_html(session.snapshot())

        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "&quot;quote&quot;.pdf (2.0 KB)" in html

    def test_proof_status(self, manual_proof_config, deterministic_clock):
        session = CheckoutSession(manual_proof_config, clock=deterministic_clock)

        html = render_review_html(session.snapshot())

        assert "<li>Drop-off photo: Enabled</li>" in html
        assert "<li>Recipient signature: Missing</li>" in html
        assert 'class="tone-bad"' in html

    def test_empty_values_render_as_dash(self, session):
        html = render_review_html(session.snapshot())

        assert "Notes: -" in html
        assert "<li>(none)</li>" in html


class TestSnapshotToDict:
    def test_json_serializable(self, session):
        session.add_attachment("receipt.pdf", size=100)

        payload = snapshot_to_dict(session.snapshot())

        assert json.loads(json.dumps(payload)) == payload

    def test_contents(self, session):
        payload = snapshot_to_dict(session.snapshot())

        assert payload["vendor"]["id"] == "v_evz"
        assert payload["estimate"]["total"] == 19300
        assert payload["estimate"]["multiplier"] == "1.00"
        assert payload["policy"]["outcome"] == "Allowed"
        assert payload["proof"]["required"] == ["Drop-off photo", "Recipient signature"]
        assert payload["proof"]["enabled"][ProofType.ID_CHECK.value] is False
        assert payload["payment"]["corporate_availability"] == "Available"
        assert payload["readiness"]["submit_eligible"] is True
        assert payload["policy"]["explanation"]["audit"]["Correlation id"] == "corr_test"
        assert payload["step"] == "Delivery details"
