# backend/sitter_quote/routes/estimate.py
from __future__ import annotations

import logging
from typing import Any, Dict

from flask import current_app, jsonify, request
from pydantic import ValidationError

from .blueprint import api_bp
from . import deps
from ..domain import rules
from ..domain.booking import derive_snapshot
from ..domain.formatting import format_breakdown
from ..domain.invoice import compute_invoice
from ..domain.models import BookingDraft, BookingSnapshot, InvoiceBreakdown

log = logging.getLogger("SitterQuote.routes.estimate")


# ----------------------------- Helpers ---------------------------------------

def _booking_payload() -> Dict[str, Any]:
    """Request body, either top-level fields or ``{ "booking": { ... } }``."""
    payload = request.get_json(force=True, silent=True) or {}
    data = payload.get("booking", payload) if isinstance(payload, dict) else {}
    return dict(data) if isinstance(data, dict) else {}


def parse_draft(data: Dict[str, Any]) -> BookingDraft:
    """Build a draft, taking omitted schedule/alliance/counseling from settings."""
    s = deps.settings_mgr.load()
    data.setdefault("fee_schedule", s.DEFAULT_FEE_SCHEDULE)
    data.setdefault("alliance", s.DEFAULT_ALLIANCE)
    data.setdefault("counseling", s.DEFAULT_COUNSELING)
    return BookingDraft(**data)


def _invoice_response(snapshot: BookingSnapshot, invoice: InvoiceBreakdown):
    return jsonify({
        "ok": True,
        "snapshot": snapshot.model_dump(mode="json"),
        "invoice": invoice.model_dump(mode="json"),
        "formatted": format_breakdown(invoice),
    })


# ----------------------------- Endpoints -------------------------------------

@api_bp.post("/estimate", endpoint="estimate")
def estimate():
    """
    Validate a booking draft, resolve its prices from the rate catalog and
    return the invoice breakdown.
    """
    try:
        draft = parse_draft(_booking_payload())
    except (ValidationError, TypeError) as e:
        return jsonify({"ok": False, "errors": {"schema": str(e)}}), 400

    val_errors = rules.validate(draft)
    if val_errors:
        return jsonify({
            "ok": False,
            "errors": {k: v.to_dict() for k, v in val_errors.items()},
        }), 400

    try:
        snapshot = derive_snapshot(draft)
        invoice = compute_invoice(snapshot)
    except Exception as e:
        current_app.logger.exception("Estimate failed")
        return jsonify({"ok": False, "errors": {"pricing": f"{type(e).__name__}: {e}"}}), 500

    log.info(
        "estimate schedule=%s alliance=%s plans=%d grand_total=%d",
        snapshot.fee_schedule.value, snapshot.alliance.value,
        len(snapshot.plans), invoice.grand_total,
    )
    return _invoice_response(snapshot, invoice)


@api_bp.post("/estimate/snapshot", endpoint="estimate_snapshot")
def estimate_snapshot():
    """
    Price an already-resolved booking snapshot as-is. Unit prices and the
    transportation count are taken from the request, not the catalog.
    """
    try:
        snapshot = BookingSnapshot(**_booking_payload())
    except (ValidationError, TypeError) as e:
        return jsonify({"ok": False, "errors": {"schema": str(e)}}), 400

    try:
        invoice = compute_invoice(snapshot)
    except Exception as e:
        current_app.logger.exception("Snapshot estimate failed")
        return jsonify({"ok": False, "errors": {"pricing": f"{type(e).__name__}: {e}"}}), 500

    return _invoice_response(snapshot, invoice)
