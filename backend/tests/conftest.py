from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pytest

from sitter_quote.config import SettingsManager
from sitter_quote.domain.models import (
    Alliance,
    BookingDraft,
    BookingSnapshot,
    CounselingTier,
    FeeSchedule,
    PlanLineItem,
    Settings,
)


# ---------------------------------------------------------------------------
# Booking builders
# ---------------------------------------------------------------------------


def make_snapshot(**overrides: Any) -> BookingSnapshot:
    """Snapshot with nothing billable unless the test adds it."""
    data: Dict[str, Any] = {
        "fee_schedule": FeeSchedule.OLD,
        "alliance": Alliance.SEWAKURU,
        "counseling": CounselingTier.NONE,
        "plans": [],
    }
    data.update(overrides)
    return BookingSnapshot(**data)


def plan(name: str = "Dog Basic", unit_price: float = 4200, count: int = 1, *tags: str) -> PlanLineItem:
    return PlanLineItem(name=name, unit_price=unit_price, count=count, surcharges=tags)


def draft_payload(**overrides: Any) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "customer_name": "Sato",
        "sitter_name": "Tanaka",
        "sitting_datetime": "2025/08/01 10:00",
        "fee_schedule": "old",
        "alliance": "sewakuru",
        "cancellation_tier": "normal",
        "counseling": "none",
        "plans": [{"name": "Dog Basic", "count": 2, "surcharges": []}],
    }
    data.update(overrides)
    return data


@pytest.fixture()
def draft() -> BookingDraft:
    return BookingDraft(**draft_payload())


# ---------------------------------------------------------------------------
# Flask app fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def fake_settings() -> Settings:
    return Settings(
        DEFAULT_FEE_SCHEDULE="old",
        DEFAULT_ALLIANCE="sewakuru",
        DEFAULT_COUNSELING="free",
        LOG_LEVEL="debug",
    )


@pytest.fixture()
def settings_mgr(fake_settings: Settings, tmp_path: Path) -> SettingsManager:
    mgr = SettingsManager(storage_path=tmp_path / "settings.json")
    mgr.save(fake_settings)
    return mgr


@pytest.fixture()
def app(monkeypatch: pytest.MonkeyPatch, settings_mgr: SettingsManager) -> Any:
    from sitter_quote import create_app
    from sitter_quote.routes import deps

    monkeypatch.setattr(deps, "settings_mgr", settings_mgr, raising=False)

    flask_app = create_app()
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture()
def client(app) -> Any:  # noqa: ANN001
    return app.test_client()
