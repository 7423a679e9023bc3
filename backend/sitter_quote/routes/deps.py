# Shared singletons for route modules; tests swap these via monkeypatch.
from ..config import SettingsManager

settings_mgr = SettingsManager()
