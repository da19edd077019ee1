"""Tests for essay/api/grading.py: standalone grading and proofreading."""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from essay.api.grading import router
from essay.services.grading_service import GradingService
from essay.services.proofreading_service import ProofreadingService


@pytest.fixture
def api():
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


class TestCheckEssay:

    def test_blank_content_is_400(self, api):
        resp = api.post("/grading/check", json={"content": "   "})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "No content provided"

    def test_missing_content_is_400(self, api):
        assert api.post("/grading/check", json={}).status_code == 400

    @patch("essay.api.grading.GradingService.from_settings")
    def test_returns_provider_report(self, mock_from_settings, api):
        llm = Mock()
        llm.call.return_value = json.dumps({"overallScore": 91, "summary": "Excellent"})
        mock_from_settings.return_value = GradingService(openai_llm=llm)

        resp = api.post("/grading/check", json={"content": "A well argued essay."})

        data = resp.json()
        assert resp.status_code == 200
        assert data["overall_score"] == 91
        assert data["grade"] == "A"
        assert data["provider"] == "openai"

    @patch("essay.api.grading.GradingService.from_settings")
    def test_infinite_provider_score_degrades(self, mock_from_settings, api):
        llm = Mock()
        llm.call.return_value = '{"overallScore": Infinity, "grade": "A"}'
        mock_from_settings.return_value = GradingService(openai_llm=llm)

        resp = api.post("/grading/check", json={"content": "A short essay."})

        assert resp.status_code == 200
        assert resp.json()["provider"] == "local-fallback"

    @patch("essay.api.grading.GradingService.from_settings")
    def test_unexpected_error_is_500(self, mock_from_settings, api):
        mock_from_settings.side_effect = RuntimeError("settings unavailable")

        resp = api.post("/grading/check", json={"content": "Some text."})

        assert resp.status_code == 500
        assert resp.json()["detail"]["type"] == "RuntimeError"

    @patch("essay.api.grading.GradingService.from_settings")
    def test_degrades_to_local_report(self, mock_from_settings, api):
        mock_from_settings.return_value = GradingService()

        resp = api.post("/grading/check", json={"content": "they was late. i recieve mail."})

        data = resp.json()
        assert resp.status_code == 200
        assert data["provider"] == "local-emergency"
        assert len(data["issues"]) > 0


class TestProofread:

    def test_blank_content_is_400(self, api):
        assert api.post("/proofreading", json={"content": ""}).status_code == 400

    @patch("essay.api.grading.ProofreadingService.from_settings")
    def test_local_proofreading(self, mock_from_settings, api):
        mock_from_settings.return_value = ProofreadingService()

        resp = api.post("/proofreading", json={"content": "Their are to much errors here"})

        data = resp.json()
        assert resp.status_code == 200
        assert data["provider"] == "local-enhanced"
        assert data["corrected_text"] == "There are too much errors here."
        assert data["statistics"]["grammar_errors"] == 2

    @patch("essay.api.grading.ProofreadingService.from_settings")
    def test_unexpected_error_is_500(self, mock_from_settings, api):
        mock_from_settings.return_value.proofread.side_effect = RuntimeError("boom")

        resp = api.post("/proofreading", json={"content": "Some text."})

        assert resp.status_code == 500
        assert resp.json()["detail"] == {"message": "Error proofreading essay: boom", "type": "RuntimeError"}
