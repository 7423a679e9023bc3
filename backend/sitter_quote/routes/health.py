from datetime import UTC, datetime
from flask import jsonify
from .blueprint import api_bp
from ..domain import catalog

@api_bp.get("/health")
def health():
    """Liveness plus the (schedule, alliance) pairs the rate catalog can price."""
    now = datetime.now(UTC)
    priced = sorted(f"{s.value}/{a.value}" for s, a in catalog.CATALOG)
    return jsonify({
        "ok": True,
        "service": "sitter-quote",
        "catalog": priced,
        "ts": now.isoformat().replace("+00:00", "Z"),
    })
