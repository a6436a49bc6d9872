"""
checkout_services -- Stateful coordination above the pure engines.

``CheckoutSession`` owns the delivery request and the wizard;
``SimulatedSubmission`` is its single-flight submission task; ``export``
renders snapshots for printing and handoff.
"""

from checkout_services.checkout_session import EDITABLE_FIELDS, CheckoutSession, fit_to_vendor
from checkout_services.export import format_bytes, render_review_html, snapshot_to_dict
from checkout_services.submission import (
    SimulatedSubmission,
    SubmissionState,
    generate_result_id,
)

__all__ = [
    "EDITABLE_FIELDS",
    "CheckoutSession",
    "SimulatedSubmission",
    "SubmissionState",
    "fit_to_vendor",
    "format_bytes",
    "generate_result_id",
    "render_review_html",
    "snapshot_to_dict",
]
