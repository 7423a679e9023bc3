from flask import jsonify
from pydantic import ValidationError
from .blueprint import api_bp
from .estimate import _booking_payload, parse_draft
from ..domain import rules

@api_bp.post("/validate")
def validate_booking():
    try:
        draft = parse_draft(_booking_payload())
    except (ValidationError, TypeError) as e:
        return jsonify({"ok": False, "errors": {"schema": str(e)}}), 400
    errors = rules.validate(draft)
    if errors:
        return jsonify({"ok": False, "errors": {k: v.to_dict() for k, v in errors.items()}}), 400
    return jsonify({"ok": True})
