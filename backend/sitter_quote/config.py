# backend/sitter_quote/config.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import Lock
from typing import Dict

from pydantic import ValidationError

from .domain.models import Settings, normalize_label

log = logging.getLogger("SitterQuote.config")


def apply_log_level(logger: logging.Logger, level: str) -> None:
    """Set *logger* and the ``SitterQuote`` loggers to a settings level name."""
    value = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(value)
    logging.getLogger("SitterQuote").setLevel(value)


class SettingsManager:
    """Filesystem-backed storage for the estimate form defaults."""

    def __init__(self, storage_path: str | Path | None = None) -> None:
        """Initialise the manager.

        Parameters
        ----------
        storage_path:
            Optional override for where the JSON settings document lives.
            Defaults to ``<repo-root>/settings.json``.
        """

        backend_dir = Path(__file__).resolve().parents[1]
        default_path = backend_dir.parent / "settings.json"
        self._path = Path(storage_path) if storage_path is not None else default_path
        self._cache: Settings | None = None
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self, *, refresh: bool = False) -> Settings:
        """Load settings from disk (or cached copy).

        ``refresh`` forces a re-read which is useful for tests that mutate
        the file directly.
        """

        if self._cache is not None and not refresh:
            return self._cache

        data: Dict[str, object]
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text("utf-8"))
            except (OSError, ValueError) as exc:
                log.warning("Failed to read settings from %s: %s", self.path, exc)
                data = {}
        else:
            data = {}

        # Documents written by the first form release used FEE_SELECTION.
        legacy = data.pop("FEE_SELECTION", None)
        if legacy is not None and "DEFAULT_FEE_SCHEDULE" not in data:
            data["DEFAULT_FEE_SCHEDULE"] = normalize_label(legacy)

        try:
            settings = Settings(**data)
        except ValidationError as exc:
            log.warning("Ignoring invalid settings in %s: %s", self.path, exc)
            settings = Settings()
        self._cache = settings
        return settings

    def save(self, settings: Settings) -> Settings:
        """Persist *settings* to disk after sanitisation."""

        settings = self.sanitize(settings)
        serialised = settings.model_dump(mode="json")
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(serialised, indent=2), encoding="utf-8")
            self._cache = settings
        log.debug("Settings saved to %s", self.path)
        return settings

    @staticmethod
    def sanitize(s: Settings) -> Settings:
        """Re-validate through the model so new defaults are persisted too."""
        try:
            return Settings.model_validate(s.model_dump())
        except ValidationError as exc:
            raise ValueError(f"Invalid settings: {exc}") from exc
