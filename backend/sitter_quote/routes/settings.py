from flask import current_app, request, jsonify
from pydantic import ValidationError
from .blueprint import api_bp
from ..config import apply_log_level
from ..domain.models import Settings
from . import deps

@api_bp.get("/settings")
def get_settings():
    return jsonify(deps.settings_mgr.load().model_dump(mode="json"))

@api_bp.post("/settings")
def set_settings():
    data = request.get_json(force=True) or {}
    try:
        s = Settings(**data)
    except (ValidationError, TypeError) as e:
        return jsonify({"ok": False, "error": f"Invalid settings: {e}"}), 400
    try:
        s = deps.settings_mgr.save(s)
    except ValueError as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    apply_log_level(current_app.logger, s.LOG_LEVEL)
    return jsonify({"ok": True, "settings": s.model_dump(mode="json")})
