"""
Tests for shared/api/health.py and shared/api/settings_routes.py
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from database import get_db
from shared.api import health, settings_routes


@pytest.fixture
def api(db_session):
    app = FastAPI()
    app.include_router(health.router)
    app.include_router(settings_routes.router)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


# ===========================================================================
# Health
# ===========================================================================

class TestHealth:

    @patch("shared.api.health.get_settings")
    def test_read_root(self, mock_get_settings, api):
        mock_settings = MagicMock()
        mock_settings.openai_api_key = "sk-test"
        mock_settings.gemini_api_key = None
        mock_settings.groq_api_key = ""
        mock_get_settings.return_value = mock_settings

        resp = api.get("/")

        data = resp.json()
        assert resp.status_code == 200
        assert data["status"] == "ok"
        assert data["service"] == "Essay Writer Backend"
        assert data["version"] == "1.0.0"
        assert data["providers"] == {"openai": True, "gemini": False, "groq": False}

    @patch("shared.api.health.get_db_manager")
    def test_database_ok(self, mock_get_manager, api):
        mock_get_manager.return_value.health_check.return_value = True
        assert api.get("/health/db").json() == {"status": "ok", "database": "connected"}

    @patch("shared.api.health.get_db_manager")
    def test_database_down(self, mock_get_manager, api):
        mock_get_manager.return_value.health_check.return_value = False
        assert api.get("/health/db").json()["status"] == "error"


# ===========================================================================
# Settings
# ===========================================================================

class TestSettingsRoutes:

    def test_get_defaults(self, api):
        resp = api.get("/settings")

        assert resp.status_code == 200
        assert resp.json() == {
            "time_limit_minutes": 30,
            "word_limit": 500,
            "backspace_limit": 10,
            "spacing_after_words": 1,
            "auto_save": True,
        }

    def test_partial_update(self, api):
        resp = api.put("/settings", json={"word_limit": 750, "auto_save": False})

        assert resp.status_code == 200
        assert resp.json()["word_limit"] == 750
        assert resp.json()["auto_save"] is False
        assert api.get("/settings").json()["word_limit"] == 750

    def test_out_of_range_is_422(self, api):
        resp = api.put("/settings", json={"backspace_limit": 500})

        assert resp.status_code == 422
        assert api.get("/settings").json()["backspace_limit"] == 10

    def test_reset(self, api):
        api.put("/settings", json={"time_limit_minutes": 60})

        resp = api.post("/settings/reset")
        assert resp.json()["time_limit_minutes"] == 30
        assert api.get("/settings").json()["time_limit_minutes"] == 30
