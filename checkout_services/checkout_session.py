"""
checkout_services.checkout_session -- Checkout wizard state machine.

Responsibility:
    Own the single mutable thing in the checkout: the current
    ``DeliveryRequest``.  Apply field edits, enforce guard transitions
    (required proof, vendor capabilities, single-flight submission), track
    the wizard step, and drive the simulated submission.  Every read goes
    through ``snapshot()``, which re-runs the pure derivation pipeline.

Architecture position:
    Services layer.  Thin coordinator: all policy, pricing and readiness
    logic lives in ``checkout_engines``; this module decides only what an
    edit changes and whether a transition is allowed.

Invariants enforced:
    - Nothing derived is stored.  ``snapshot()`` recomputes from the current
      request and the clock's current instant, so the grace window expires
      on time and edit order cannot change the result.
    - A required proof item can never be switched off (PROOF_REQUIRED).
    - Speed and vehicle edits must be supported by the selected vendor
      (CAPABILITY_UNSUPPORTED).
    - At most one submission in flight; edits during it are rejected
      (SUBMISSION_IN_FLIGHT).
    - Submission is reachable only from Review and only when the current
      derivation is submit-eligible.
    - After a terminal result the request is closed; further edits raise
      ``SessionClosedError``.

Failure modes:
    - Guard violations return ``EditResult(accepted=False)``; state is
      unchanged.
    - ``UnknownFieldError`` / ``InvalidFieldValueError`` /
      ``UnknownVendorError`` for caller programming errors.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any
from uuid import uuid4

from checkout_config.schema import CheckoutPolicyConfig
from checkout_engines.pipeline import derive_checkout_state
from checkout_engines.proof import ordered_proof, resolve_required_proof
from checkout_kernel.domain.clock import Clock, SystemClock
from checkout_kernel.domain.delivery import Attachment, DeliveryRequest
from checkout_kernel.domain.values import (
    CorporateProgramStatus,
    Outcome,
    PackageCategory,
    PaymentMethod,
    ProofType,
    ScheduleMode,
    SpeedTier,
    VehicleClass,
)
from checkout_kernel.domain.vendor import Vendor
from checkout_kernel.domain.wizard import (
    WIZARD_STEPS,
    CheckoutSnapshot,
    EditResult,
    RejectionCode,
    SubmissionKind,
    SubmissionResult,
    WizardStep,
)
from checkout_kernel.exceptions import (
    InvalidFieldValueError,
    SessionClosedError,
    UnknownFieldError,
)
from checkout_kernel.logging_config import LogContext, get_logger
from checkout_services.submission import SimulatedSubmission

logger = get_logger("services.checkout_session")

EVENT_EDIT_APPLIED = "checkout_edit_applied"
EVENT_EDIT_REJECTED = "checkout_edit_rejected"
EVENT_STEP_CHANGED = "checkout_step_changed"
EVENT_SUBMISSION_STARTED = "checkout_submission_started"
EVENT_SUBMISSION_REJECTED = "checkout_submission_rejected"
EVENT_SUBMISSION_COMPLETED = "checkout_submission_completed"
EVENT_SUBMISSION_CANCELLED = "checkout_submission_cancelled"

# Largest accepted magnitude for numeric fields.
MAX_FIELD_MAGNITUDE = Decimal("1e15")


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def _as_text(field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidFieldValueError(field, value, "str")
    return value


def _as_flag(field: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidFieldValueError(field, value, "bool")
    return value


def _as_quantity(field: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise InvalidFieldValueError(field, value, "number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise InvalidFieldValueError(field, value, "number") from None
    if not amount.is_finite():
        raise InvalidFieldValueError(field, value, "finite number")
    if abs(amount) > MAX_FIELD_MAGNITUDE:
        raise InvalidFieldValueError(field, value, f"magnitude at most {MAX_FIELD_MAGNITUDE}")
    return amount


def _as_amount(field: str, value: Any) -> int:
    amount = _as_quantity(field, value)
    if amount != amount.to_integral_value():
        raise InvalidFieldValueError(field, value, "whole currency units")
    return int(amount)


def _as_optional_instant(field: str, value: Any) -> datetime | None:
    if value is not None and not isinstance(value, datetime):
        raise InvalidFieldValueError(field, value, "datetime or None")
    return value


def _as_member(enum_type: type[Enum]) -> Callable[[str, Any], Enum]:
    def coerce(field: str, value: Any) -> Enum:
        try:
            return enum_type(value)
        except ValueError:
            raise InvalidFieldValueError(field, value, enum_type.__name__) from None

    return coerce


_FIELD_COERCERS: dict[str, Callable[[str, Any], Any]] = {
    "pickup": _as_text,
    "dropoff": _as_text,
    "distance_km": _as_quantity,
    "weight_kg": _as_quantity,
    "declared_value": _as_amount,
    "category": _as_member(PackageCategory),
    "fragile": _as_flag,
    "insurance": _as_flag,
    "schedule": _as_member(ScheduleMode),
    "scheduled_at": _as_optional_instant,
    "speed": _as_member(SpeedTier),
    "vehicle": _as_member(VehicleClass),
    "vendor_id": _as_text,
    "payment_method": _as_member(PaymentMethod),
    "program_status": _as_member(CorporateProgramStatus),
    "grace_enabled": _as_flag,
    "grace_expires_at": _as_optional_instant,
    "cost_center": _as_text,
    "project_tag": _as_text,
    "purpose": _as_text,
    "notes": _as_text,
}

EDITABLE_FIELDS: frozenset[str] = frozenset(_FIELD_COERCERS)


def fit_to_vendor(request: DeliveryRequest, vendor: Vendor) -> DeliveryRequest:
    """Fall back to choices the vendor supports.

    Unsupported speed becomes Standard; unsupported vehicle becomes the
    vendor's lowest-capacity vehicle.
    """
    changes: dict[str, Any] = {}
    if not vendor.supports_speed(request.speed):
        changes["speed"] = SpeedTier.STANDARD
    if not vendor.supports_vehicle(request.vehicle):
        smallest = vendor.smallest_vehicle()
        if smallest is not None:
            changes["vehicle"] = smallest
    return replace(request, **changes) if changes else request


class CheckoutSession:
    """One checkout of one delivery.

    Args:
        config: Active checkout policy.
        clock: Time source; defaults to the system clock.
        request: Starting request; defaults to the configured defaults.
        session_id: Log correlation for this session.
        correlation_id: Audit correlation id recorded in explanations.
    """

    def __init__(
        self,
        config: CheckoutPolicyConfig,
        clock: Clock | None = None,
        request: DeliveryRequest | None = None,
        session_id: str | None = None,
        correlation_id: str | None = None,
    ):
        self._config = config
        self._clock = clock or SystemClock()
        self.session_id = session_id or str(uuid4())
        self.correlation_id = correlation_id or f"corr_{uuid4().hex[:12]}"

        start = request if request is not None else self._initial_request()
        self._config.catalog.get(start.vendor_id)
        self._request = self._with_required_proof(start)[0]

        self._step = WizardStep.DELIVERY_DETAILS
        self._geo_allowed = True
        self._time_allowed = True
        self._submission = SimulatedSubmission(config.submission_delay_seconds)

    def _initial_request(self) -> DeliveryRequest:
        defaults = self._config.defaults
        now = self._clock.now()
        return DeliveryRequest(
            vendor_id=self._config.catalog.default_vendor_id,
            pickup=defaults.pickup,
            dropoff=defaults.dropoff,
            distance_km=Decimal(defaults.distance_km),
            weight_kg=Decimal(defaults.weight_kg),
            declared_value=defaults.declared_value,
            scheduled_at=now + timedelta(hours=24),
            grace_enabled=defaults.grace_enabled,
            grace_expires_at=now + timedelta(hours=self._config.grace_window_hours),
            cost_center=defaults.cost_center,
            project_tag=defaults.project_tag,
            purpose=defaults.purpose,
            proof={p: True for p in defaults.enabled_proof},
            max_attachments=self._config.max_attachments,
        )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def config(self) -> CheckoutPolicyConfig:
        return self._config

    @property
    def request(self) -> DeliveryRequest:
        return self._request

    @property
    def vendor(self) -> Vendor:
        return self._config.catalog.get(self._request.vendor_id)

    @property
    def step(self) -> WizardStep:
        return self._step

    @property
    def geo_allowed(self) -> bool:
        return self._geo_allowed

    @property
    def time_allowed(self) -> bool:
        return self._time_allowed

    @property
    def is_submitting(self) -> bool:
        return self._submission.is_busy

    @property
    def result(self) -> SubmissionResult | None:
        return self._submission.result

    def required_proof(self) -> frozenset[ProofType]:
        return self._required_proof(self._request)

    def snapshot(self) -> CheckoutSnapshot:
        """Derive everything from the current request at the current instant."""
        now = self._clock.now()
        vendor = self.vendor
        derived = derive_checkout_state(
            request=self._request,
            vendor=vendor,
            geo_allowed=self._geo_allowed,
            time_allowed=self._time_allowed,
            as_of=now,
            rates=self._config.cost_rates,
            proof_thresholds=self._config.proof_thresholds,
            policy_thresholds=self._config.policy_thresholds,
            currency=self._config.currency,
            policy_version=self._config.policy_version,
            correlation_id=self.correlation_id,
        )
        return CheckoutSnapshot(
            request=self._request,
            vendor=vendor,
            step=self._step,
            estimate=derived.estimate,
            required_proof=derived.required_proof,
            grace_active=derived.grace_active,
            outcome=derived.outcome,
            availability=derived.availability,
            readiness=derived.readiness,
            alternatives=derived.alternatives,
            geo_allowed=self._geo_allowed,
            time_allowed=self._time_allowed,
            currency=self._config.currency,
            taken_at=now,
            submitting=self._submission.is_busy,
            result=self._submission.result,
        )

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def apply_edit(self, field: str, value: Any) -> EditResult:
        """Apply a single-field edit.

        Raises:
            UnknownFieldError: ``field`` is not editable.
            InvalidFieldValueError: ``value`` has the wrong type.
            UnknownVendorError: ``vendor_id`` is not in the catalog.
            SessionClosedError: The checkout already completed.
        """
        coerce = _FIELD_COERCERS.get(field)
        if coerce is None:
            raise UnknownFieldError(field)

        rejected = self._guard_edit(field)
        if rejected is not None:
            return rejected

        value = coerce(field, value)

        if field == "vendor_id":
            vendor = self._config.catalog.get(value)
            updated = fit_to_vendor(replace(self._request, vendor_id=vendor.vendor_id), vendor)
        elif field == "speed" and not self.vendor.supports_speed(value):
            return self._reject(
                field,
                RejectionCode.CAPABILITY_UNSUPPORTED,
                "Selected vendor does not support this speed.",
            )
        elif field == "vehicle" and not self.vendor.supports_vehicle(value):
            return self._reject(
                field,
                RejectionCode.CAPABILITY_UNSUPPORTED,
                "Vendor does not support this vehicle class.",
            )
        elif field == "category":
            updated = self._apply_category(value)
        else:
            updated = replace(self._request, **{field: value})

        return self._commit(field, updated)

    def set_proof(self, proof_type: ProofType | str, enabled: bool) -> EditResult:
        """Switch a proof item on or off; required items cannot be switched off."""
        proof_type = _as_member(ProofType)("proof", proof_type)
        enabled = _as_flag("proof", enabled)

        rejected = self._guard_edit("proof")
        if rejected is not None:
            return rejected

        if not enabled and proof_type in self.required_proof():
            return self._reject(
                "proof",
                RejectionCode.PROOF_REQUIRED,
                f"{proof_type.value} is required by policy.",
            )
        return self._commit("proof", self._request.with_proof(proof_type, enabled))

    def set_route_gates(
        self,
        geo_allowed: bool | None = None,
        time_allowed: bool | None = None,
    ) -> EditResult:
        """Record geofence and time-window verdicts from the routing collaborator."""
        rejected = self._guard_edit("route_gates")
        if rejected is not None:
            return rejected

        geo = self._geo_allowed if geo_allowed is None else _as_flag("geo_allowed", geo_allowed)
        window = (
            self._time_allowed if time_allowed is None else _as_flag("time_allowed", time_allowed)
        )
        self._geo_allowed, self._time_allowed = geo, window
        self._log(
            EVENT_EDIT_APPLIED,
            field="route_gates",
            geo_allowed=self._geo_allowed,
            time_allowed=self._time_allowed,
        )
        return EditResult.ok("route_gates")

    def add_attachment(self, name: str, size: int = 0, kind: str = "manual") -> EditResult:
        """Prepend attachment metadata; the oldest entries fall off the bound."""
        rejected = self._guard_edit("attachments")
        if rejected is not None:
            return rejected

        attachment = Attachment(
            attachment_id=f"att_{uuid4().hex[:12]}",
            name=_as_text("attachments", name),
            size=max(_as_amount("attachments", size), 0),
            kind=_as_text("attachments", kind) or "unknown",
            added_at=self._clock.now(),
        )
        updated = replace(
            self._request, attachments=(attachment,) + self._request.attachments
        )
        return self._commit("attachments", updated, attachment_id=attachment.attachment_id)

    def remove_attachment(self, attachment_id: str) -> EditResult:
        rejected = self._guard_edit("attachments")
        if rejected is not None:
            return rejected

        remaining = tuple(
            a for a in self._request.attachments if a.attachment_id != attachment_id
        )
        return self._commit(
            "attachments",
            replace(self._request, attachments=remaining),
            attachment_id=attachment_id,
        )

    def reset_grace_window(self) -> EditResult:
        """Restart the grace window from now for the configured length."""
        rejected = self._guard_edit("grace_expires_at")
        if rejected is not None:
            return rejected

        expires = self._clock.now() + timedelta(hours=self._config.grace_window_hours)
        return self._commit("grace_expires_at", replace(self._request, grace_expires_at=expires))

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def go_to(self, step: WizardStep | str) -> WizardStep:
        """Jump to any step; viewing is never blocked."""
        target = WizardStep(step)
        if target is not self._step:
            self._log(
                EVENT_STEP_CHANGED,
                from_step=self._step.value,
                to_step=target.value,
            )
            self._step = target
        return self._step

    def next_step(self) -> WizardStep:
        index = min(len(WIZARD_STEPS) - 1, self._step.index + 1)
        return self.go_to(WIZARD_STEPS[index])

    def previous_step(self) -> WizardStep:
        index = max(0, self._step.index - 1)
        return self.go_to(WIZARD_STEPS[index])

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit(self) -> EditResult:
        """Start the simulated submission against the current values."""
        if self._submission.result is not None:
            return self._reject_submission(
                RejectionCode.ALREADY_SUBMITTED,
                f"Checkout already submitted as {self._submission.result.result_id}.",
            )
        if self._submission.is_busy:
            return self._reject_submission(
                RejectionCode.SUBMISSION_IN_FLIGHT, "A submission is already in progress."
            )
        if self._step is not WizardStep.REVIEW:
            return self._reject_submission(
                RejectionCode.NOT_AT_REVIEW, "Submission is only available from Review."
            )

        snapshot = self.snapshot()
        if not snapshot.readiness.submit_eligible:
            return self._reject_submission(
                RejectionCode.SUBMIT_NOT_ELIGIBLE,
                "Fix issues or change payment/vendor.",
                outcome=snapshot.outcome.decision.value,
            )

        kind = SubmissionKind.ORDER_CREATED
        if (
            self._request.payment_method.is_corporate
            and snapshot.outcome.decision is Outcome.APPROVAL_REQUIRED
        ):
            kind = SubmissionKind.APPROVAL_REQUESTED

        self._submission.start(kind, snapshot.taken_at)
        self._log(
            EVENT_SUBMISSION_STARTED,
            submission_kind=kind.value,
            outcome=snapshot.outcome.decision.value,
            estimate_total=snapshot.estimate.total,
            due_at=self._submission.due_at,
        )
        return EditResult.ok("submit")

    def poll_submission(self) -> SubmissionResult | None:
        """Resolve the in-flight submission once its delay has elapsed."""
        was_busy = self._submission.is_busy
        result = self._submission.poll(self._clock.now())
        if was_busy and result is not None:
            self._log(
                EVENT_SUBMISSION_COMPLETED,
                submission_kind=result.kind.value,
                result_id=result.result_id,
            )
        return result

    def cancel_submission(self) -> bool:
        cancelled = self._submission.cancel()
        if cancelled:
            self._log(EVENT_SUBMISSION_CANCELLED)
        return cancelled

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _required_proof(self, request: DeliveryRequest) -> frozenset[ProofType]:
        vendor = self._config.catalog.get(request.vendor_id)
        return resolve_required_proof(
            category=request.category,
            declared_value=request.declared_value,
            speed=request.speed,
            vendor_defaults=vendor.proof_defaults,
            thresholds=self._config.proof_thresholds,
        )

    def _with_required_proof(
        self, request: DeliveryRequest
    ) -> tuple[DeliveryRequest, tuple[ProofType, ...]]:
        if not self._config.auto_enable_required_proof:
            return request, ()
        missing = ordered_proof(self._required_proof(request) - request.enabled_proof)
        if not missing:
            return request, ()
        proof = dict(request.proof)
        proof.update({p: True for p in missing})
        return replace(request, proof=proof), missing

    def _apply_category(self, category: PackageCategory) -> DeliveryRequest:
        request = replace(self._request, category=category)
        preference = self._config.category_preferences.get(category)
        if preference is None:
            return request

        if preference.vendor_id is not None:
            request = replace(request, vendor_id=preference.vendor_id)
        if preference.purpose is not None:
            request = replace(request, purpose=preference.purpose)

        vendor = self._config.catalog.get(request.vendor_id)
        if preference.vehicle is not None and vendor.supports_vehicle(preference.vehicle):
            request = replace(request, vehicle=preference.vehicle)
        return fit_to_vendor(request, vendor)

    def _guard_edit(self, field: str) -> EditResult | None:
        if self._submission.result is not None:
            raise SessionClosedError(self._submission.result.result_id)
        if self._submission.is_busy:
            return self._reject(
                field,
                RejectionCode.SUBMISSION_IN_FLIGHT,
                "Edits are locked while a submission is in progress.",
            )
        return None

    def _commit(self, field: str, updated: DeliveryRequest, **log_fields: Any) -> EditResult:
        updated, auto_enabled = self._with_required_proof(updated)
        self._request = updated
        if auto_enabled:
            log_fields["auto_enabled_proof"] = [p.value for p in auto_enabled]
        self._log(EVENT_EDIT_APPLIED, field=field, **log_fields)
        return EditResult.ok(field)

    def _reject(self, field: str, code: RejectionCode, message: str) -> EditResult:
        self._log(
            EVENT_EDIT_REJECTED,
            level=logging.WARNING,
            field=field,
            rejection_code=code.value,
            rejection_message=message,
        )
        return EditResult.rejected(field, code, message)

    def _reject_submission(
        self, code: RejectionCode, message: str, **log_fields: Any
    ) -> EditResult:
        self._log(
            EVENT_SUBMISSION_REJECTED,
            level=logging.WARNING,
            rejection_code=code.value,
            rejection_message=message,
            **log_fields,
        )
        return EditResult.rejected("submit", code, message)

    def _log(self, event: str, level: int = logging.INFO, **fields: Any) -> None:
        with LogContext.bind(session_id=self.session_id, correlation_id=self.correlation_id):
            logger.log(level, event, extra=fields)
