# backend/sitter_quote/routes/options.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple, TypedDict

from flask import Blueprint, jsonify, request

from .blueprint import api_bp
from . import deps
from ..domain import catalog
from ..domain.formatting import format_currency
from ..domain.models import (
    Alliance,
    CancellationTier,
    CounselingTier,
    FeeSchedule,
    normalize_label,
)
from ..domain.rules import MAX_ADDITIONAL_PETS
from ..domain.surcharges import allowed_tags

log = logging.getLogger("SitterQuote.routes.options")
bp = Blueprint("options", __name__, url_prefix="/options")


class PlanOption(TypedDict):
    name: str
    unit_price: int


class OptionsPayload(TypedDict):
    """
    Shape for options payloads returned to the frontend.
    Values are the canonical ones the booking models and validators accept.
    """
    fee_schedule: str
    alliance: str
    fee_schedules: List[str]
    alliances: List[str]
    cancellation_tiers: List[str]
    counseling: List[str]
    plans: List[PlanOption]
    surcharges: List[str]
    additional_pets: List[int]


def _resolve_context() -> Tuple[FeeSchedule, Alliance]:
    """Schedule/alliance from the query string, falling back to the saved defaults."""
    defaults = deps.settings_mgr.load()
    schedule = request.args.get("fee_schedule") or defaults.DEFAULT_FEE_SCHEDULE
    alliance = request.args.get("alliance") or defaults.DEFAULT_ALLIANCE
    return FeeSchedule(normalize_label(schedule)), Alliance(normalize_label(alliance))


def _compose_payload(schedule: FeeSchedule, alliance: Alliance) -> OptionsPayload:
    """Return the complete options payload in one response."""
    table = catalog.rate_table(schedule, alliance)
    payload: OptionsPayload = {
        "fee_schedule": schedule.value,
        "alliance": alliance.value,
        "fee_schedules": [s.value for s in FeeSchedule],
        "alliances": [a.value for a in Alliance],
        "cancellation_tiers": [t.value for t in CancellationTier],
        "counseling": [c.value for c in CounselingTier],
        "plans": [{"name": n, "unit_price": p} for n, p in table.plans.items()],
        "surcharges": [t.value for t in allowed_tags(alliance)],
        "additional_pets": list(range(MAX_ADDITIONAL_PETS + 1)),
    }
    return payload


def _bad_context(exc: ValueError):
    log.warning("Invalid options context: %s", exc)
    return jsonify({"error": str(exc)}), 400


@bp.get("")
def get_all_options():
    """
    GET /api/options?fee_schedule=new&alliance=tokyu
    Returns the entire option map so the FE can hydrate all <select>s in one call.
    """
    try:
        schedule, alliance = _resolve_context()
    except ValueError as exc:
        return _bad_context(exc)
    log.debug("Options requested (all) schedule=%s alliance=%s", schedule.value, alliance.value)
    return jsonify(_compose_payload(schedule, alliance))


@bp.get("/<category>")
def get_options(category: str):
    """
    GET /api/options/<category>
    Returns options for a single category to support lazy-loading.
    """
    try:
        schedule, alliance = _resolve_context()
    except ValueError as exc:
        return _bad_context(exc)
    log.debug("Options requested for category=%s", category)
    data: Dict[str, Any] = dict(_compose_payload(schedule, alliance))
    if category not in data:
        log.warning("Unknown options category requested: %s", category)
        return jsonify({"error": f"Unknown category '{category}'"}), 404
    return jsonify({category: data[category]})


@bp.post("/labels")
def get_labeled_options():
    """
    POST /api/options/labels
    Body: { "categories": ["alliances","surcharges",...] }
    Returns [{ value, label }] for each requested category. Plans use their
    catalog name as value and add the unit price to the label.
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    cats = body.get("categories") or []
    if not isinstance(cats, list):
        cats = []
    try:
        schedule, alliance = _resolve_context()
    except ValueError as exc:
        return _bad_context(exc)
    full: Dict[str, Any] = dict(_compose_payload(schedule, alliance))

    result: Dict[str, List[Dict[str, str]]] = {}
    for cat in cats:
        if not isinstance(cat, str):
            continue
        values = full.get(cat)
        if not isinstance(values, list):
            continue
        if cat == "plans":
            result[cat] = [
                {"value": p["name"], "label": f"{p['name']} ({format_currency(p['unit_price'])})"}
                for p in values
            ]
        else:
            result[cat] = [{"value": str(v), "label": str(v)} for v in values]

    log.debug("Labeled options response for categories=%s", cats)
    return jsonify(result)


# Register nested blueprint under the API namespace
api_bp.register_blueprint(bp)
