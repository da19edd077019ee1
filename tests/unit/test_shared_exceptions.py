"""Unit tests for shared/utils/exceptions.py: custom exception hierarchy."""
import pytest
from fastapi import HTTPException

from shared.utils.exceptions import (
    DatabaseException,
    EssayWriterException,
    InvalidSessionConfigError,
    PromptTemplateError,
    SessionNotFoundException,
    StaleStateError,
)


# ---------------------------------------------------------------------------
# EssayWriterException base class
# ---------------------------------------------------------------------------

class TestEssayWriterException:

    def test_can_be_raised_and_caught(self):
        with pytest.raises(EssayWriterException, match="something went wrong"):
            raise EssayWriterException("something went wrong")

    @pytest.mark.parametrize("exc_cls", [
        SessionNotFoundException,
        InvalidSessionConfigError,
            DatabaseException,
        StaleStateError,
        PromptTemplateError,
    ])
    def test_subclasses_share_base(self, exc_cls):
        assert issubclass(exc_cls, EssayWriterException)


# ---------------------------------------------------------------------------
# HTTP mapping
# ---------------------------------------------------------------------------

class TestHttpMapping:

    def test_session_not_found_is_404(self):
        exc = SessionNotFoundException("essay_123")
        http = exc.to_http_exception()

        assert isinstance(http, HTTPException)
        assert http.status_code == 404
        assert "essay_123" in http.detail
        assert exc.session_id == "essay_123"

    def test_invalid_config_is_422(self):
        exc = InvalidSessionConfigError("word_limit", 0, "must be > 0")
        http = exc.to_http_exception()

        assert http.status_code == 422
        assert http.detail["field"] == "word_limit"
        assert "must be > 0" in http.detail["message"]

    def test_database_is_500(self):
        exc = DatabaseException("save", RuntimeError("disk full"))

        assert str(exc) == "Database save failed: disk full"
        assert exc.to_http_exception().status_code == 500

    def test_stale_state_is_409(self):
        http = StaleStateError("version mismatch").to_http_exception()

        assert http.status_code == 409
        assert http.detail == "version mismatch"


class TestPromptTemplateError:

    def test_message_lists_missing_vars(self):
        exc = PromptTemplateError("grading", ["content", "topic"])

        assert exc.template_name == "grading"
        assert exc.missing_vars == ["content", "topic"]
        assert str(exc) == "Prompt template 'grading' missing variables: content, topic"
