from __future__ import annotations
from flask import Flask
from .config import apply_log_level
from .routes import api_bp

def create_app() -> Flask:
    app = Flask(__name__)

    # API
    app.register_blueprint(api_bp)

    # Logger level follows the saved settings; a broken settings file falls
    # back to defaults inside SettingsManager.load().
    from .routes import deps

    apply_log_level(app.logger, deps.settings_mgr.load().LOG_LEVEL)

    return app
