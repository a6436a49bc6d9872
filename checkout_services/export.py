"""
checkout_services.export -- Printable review summary and handoff payload.

Responsibility:
    Render a ``CheckoutSnapshot`` for collaborators outside the engine: a
    printable HTML summary and a JSON-safe payload for the shared final
    confirmation step.

Architecture position:
    Services layer, read-only.  Both functions consume exactly one
    snapshot and perform no policy logic: the outcome, reasons and proof
    status are rendered as computed, never re-derived.

Invariants enforced:
    - Every user-supplied string is HTML-escaped before rendering.
    - ``snapshot_to_dict`` returns only str/int/bool/None/list/dict values.
"""

from __future__ import annotations

from html import escape
from typing import Any

from checkout_engines.proof import ordered_proof
from checkout_kernel.domain.values import ProofType, format_money
from checkout_kernel.domain.wizard import CheckoutSnapshot


def format_bytes(size: int) -> str:
    """Human file size: ``512 B``, ``1.5 KB``, ``2.0 MB``."""
    size = max(0, int(size or 0))
    if size < 1024:
        return f"{size} B"
    kb = size / 1024
    if kb < 1024:
        return f"{kb:.1f} KB"
    return f"{kb / 1024:.1f} MB"


def _e(value: Any) -> str:
    text = str(value) if value not in (None, "") else "-"
    return escape(text, quote=True)


_STYLE = """
body{font-family: ui-sans-serif, system-ui, sans-serif; margin:0; padding:24px; color:#0f172a;}
.card{border:1px solid #e2e8f0; border-radius:18px; padding:18px; margin-top:18px;}
.muted{color:#64748b; font-size:12px;}
.tone-good{color:#065f46;} .tone-warn{color:#92400e;} .tone-bad{color:#991b1b;}
h1{font-size:18px; margin:0;} h2{font-size:14px; margin:0 0 8px;}
ul{margin:0; padding-left:18px;}
""".strip()


def render_review_html(snapshot: CheckoutSnapshot) -> str:
    """Render the printable delivery checkout summary."""
    request = snapshot.request
    estimate = snapshot.estimate
    outcome = snapshot.outcome
    currency = snapshot.currency

    def money(amount: int) -> str:
        return _e(format_money(amount, currency))

    proof_rows = "\n".join(
        f"<li>{_e(p.value)}: {'Enabled' if request.proof[p] else 'Missing'}</li>"
        for p in ordered_proof(snapshot.required_proof)
    ) or "<li>(none)</li>"

    attachment_rows = "\n".join(
        f"<li>{_e(a.name)} ({_e(format_bytes(a.size))})</li>"
        for a in request.attachments
    ) or "<li>(none)</li>"

    reason_rows = "\n".join(
        f"<li><strong>{_e(r.severity.value)}</strong> [{_e(r.code.value)}] "
        f"{_e(r.title)}: {_e(r.detail)}</li>"
        for group in outcome.reasons_by_severity().values()
        for r in group
    )

    audit_rows = "\n".join(
        f"<div class=\"muted\">{_e(f.label)}: {_e(f.value)}</div>"
        for f in outcome.explanation.audit
    )

    return f"""<html>
  <head>
    <title>Delivery checkout summary</title>
    <meta charset="utf-8" />
    <style>{_STYLE}</style>
  </head>
  <body>
    <h1>Delivery checkout</h1>
    <div class="muted">Vendor: {_e(snapshot.vendor.name)} &bull; Outcome: <span class="tone-{outcome.decision.tone}">{_e(outcome.decision.value)}</span></div>
    <div class="muted">Estimated total: {money(estimate.total)} &bull; Payment: {_e(request.payment_method.value)}</div>

    <div class="card">
      <h2>Delivery</h2>
      <div class="muted">Pickup: {_e(request.pickup)}</div>
      <div class="muted">Drop-off: {_e(request.dropoff)}</div>
      <div class="muted">Distance: {_e(request.distance_km)} km &bull; Weight: {_e(request.weight_kg)} kg</div>
      <div class="muted">Type: {_e(request.category.value)} &bull; Value: {money(request.declared_value)}</div>
    </div>

    <div class="card">
      <h2>Pricing</h2>
      <div class="muted">Base: {money(estimate.base)} &bull; Distance: {money(estimate.distance_fee)} &bull; Weight: {money(estimate.weight_fee)}</div>
      <div class="muted">Multiplier: {_e(estimate.multiplier)} &bull; Insurance: {money(estimate.insurance_fee)}</div>
    </div>

    <div class="card">
      <h2>Allocation</h2>
      <div class="muted">Cost center: {_e(request.cost_center)} &bull; Project: {_e(request.project_tag)} &bull; Purpose: {_e(request.purpose)}</div>
      <div class="muted">Notes: {_e(request.notes)}</div>
    </div>

    <div class="card">
      <h2>Policy reasons</h2>
      <ul>{reason_rows}</ul>
    </div>

    <div class="card">
      <h2>Proof requirements</h2>
      <ul>{proof_rows}</ul>
    </div>

    <div class="card">
      <h2>Attachments</h2>
      <ul>{attachment_rows}</ul>
    </div>

    <div class="card">
      <h2>Audit</h2>
      {audit_rows}
    </div>
  </body>
</html>
"""


def snapshot_to_dict(snapshot: CheckoutSnapshot) -> dict[str, Any]:
    """Build the JSON-safe handoff payload for final confirmation."""
    request = snapshot.request
    estimate = snapshot.estimate
    outcome = snapshot.outcome
    explanation = outcome.explanation

    return {
        "vendor": {
            "id": snapshot.vendor.vendor_id,
            "name": snapshot.vendor.name,
            "trust_tier": snapshot.vendor.trust_tier.value,
        },
        "delivery": {
            "pickup": request.pickup,
            "dropoff": request.dropoff,
            "distance_km": str(request.distance_km),
            "weight_kg": str(request.weight_kg),
            "declared_value": request.declared_value,
            "category": request.category.value,
            "fragile": request.fragile,
            "insurance": request.insurance,
            "schedule": request.schedule.value,
            "scheduled_at": request.scheduled_at.isoformat() if request.scheduled_at else None,
            "speed": request.speed.value,
            "vehicle": request.vehicle.value,
        },
        "payment": {
            "method": request.payment_method.value,
            "program_status": request.program_status.value,
            "grace_active": snapshot.grace_active,
            "corporate_availability": snapshot.availability.value,
        },
        "allocation": {
            "cost_center": request.cost_center,
            "project_tag": request.project_tag,
            "purpose": request.purpose,
            "notes": request.notes,
        },
        "estimate": {
            "currency": snapshot.currency,
            "base": estimate.base,
            "distance_fee": estimate.distance_fee,
            "weight_fee": estimate.weight_fee,
            "insurance_fee": estimate.insurance_fee,
            "multiplier": str(estimate.multiplier),
            "subtotal": estimate.subtotal,
            "total": estimate.total,
        },
        "proof": {
            "required": [p.value for p in ordered_proof(snapshot.required_proof)],
            "enabled": {p.value: request.proof[p] for p in ProofType},
        },
        "attachments": [
            {
                "id": a.attachment_id,
                "name": a.name,
                "size": a.size,
                "kind": a.kind,
                "added_at": a.added_at.isoformat(),
            }
            for a in request.attachments
        ],
        "policy": {
            "outcome": outcome.decision.value,
            "reasons": [
                {
                    "id": r.reason_id,
                    "severity": r.severity.value,
                    "code": r.code.value,
                    "title": r.title,
                    "detail": r.detail,
                }
                for r in outcome.reasons
            ],
            "explanation": {
                "summary": explanation.summary,
                "triggers": {f.label: f.value for f in explanation.triggers},
                "policy_path": [
                    {"step": s.step, "detail": s.detail} for s in explanation.policy_path
                ],
                "audit": {f.label: f.value for f in explanation.audit},
            },
            "alternatives": list(snapshot.alternatives),
        },
        "readiness": {
            "delivery_details": snapshot.readiness.delivery_details,
            "vendor_and_service": snapshot.readiness.vendor_and_service,
            "allocation": snapshot.readiness.allocation,
            "proof_requirements": snapshot.readiness.proof_requirements,
            "submit_eligible": snapshot.readiness.submit_eligible,
        },
        "step": snapshot.step.value,
        "taken_at": snapshot.taken_at.isoformat(),
    }
