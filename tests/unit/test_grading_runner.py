"""Unit tests for essay/services/grading_runner.py and the grading columns
of SessionRepository."""

from unittest.mock import MagicMock, Mock, patch

import pytest

from essay.models.grading import GradingReport
from essay.models.session_state import SessionConfig, create_session
from essay.services.grading_runner import dispatch_grading, grade_submitted_session
from shared.repositories.session_repository import (
    GRADING_COMPLETE,
    GRADING_FAILED,
    GRADING_PENDING,
    GRADING_RUNNING,
    SessionRepository,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _submitted_session(db_session, content="My finished essay. It has two sentences."):
    state = create_session(SessionConfig(time_limit_seconds=600, word_limit=500, deletion_limit=10))
    repo = SessionRepository(db_session)
    repo.create(state)

    state.content = content
    state.word_count = len(content.split())
    state.submitted = True
    assert repo.save_state(state.session_id, state, expected_version=1, grading_status=GRADING_PENDING)
    db_session.commit()
    return state


def _report(score=77):
    return GradingReport(overall_score=score, grade="C", provider="openai")


# ===========================================================================
# grade_submitted_session
# ===========================================================================

class TestGradeSubmittedSession:

    def test_stores_report(self, db_session):
        state = _submitted_session(db_session)
        grader = Mock()
        grader.grade_session.return_value = _report(77)

        assert grade_submitted_session(db_session, state.session_id, grader) is True

        row = SessionRepository(db_session).get_by_id(state.session_id)
        assert row.grading_status == GRADING_COMPLETE
        assert row.overall_score == 77
        assert GradingReport.model_validate_json(row.grading_json).provider == "openai"
        graded_state = grader.grade_session.call_args.args[0]
        assert graded_state.content == state.content

    def test_second_grader_skips(self, db_session):
        state = _submitted_session(db_session)
        grader = Mock()
        grader.grade_session.return_value = _report()

        assert grade_submitted_session(db_session, state.session_id, grader) is True
        assert grade_submitted_session(db_session, state.session_id, grader) is False
        grader.grade_session.assert_called_once()

    def test_not_pending_is_not_claimed(self, db_session):
        state = create_session(SessionConfig(time_limit_seconds=60, word_limit=100, deletion_limit=1))
        SessionRepository(db_session).create(state)
        grader = Mock()

        assert grade_submitted_session(db_session, state.session_id, grader) is False
        grader.grade_session.assert_not_called()

    def test_grader_failure_stores_local_report(self, db_session):
        state = _submitted_session(db_session, content="they was late. i recieve mail.")
        grader = Mock()
        grader.grade_session.side_effect = OverflowError("cannot convert float infinity to integer")

        assert grade_submitted_session(db_session, state.session_id, grader) is True

        row = SessionRepository(db_session).get_by_id(state.session_id)
        report = GradingReport.model_validate_json(row.grading_json)
        assert row.grading_status == GRADING_COMPLETE
        assert report.provider == "local-emergency"
        assert report.overall_score == row.overall_score
        assert report.metrics is not None
        assert report.metrics.word_count == state.word_count

    def test_storage_failure_marks_failed_and_raises(self, db_session):
        state = _submitted_session(db_session)
        grader = Mock()
        grader.grade_session.return_value = _report()

        with patch.object(SessionRepository, "store_grading", side_effect=RuntimeError("db down")):
            with pytest.raises(RuntimeError):
                grade_submitted_session(db_session, state.session_id, grader)

        row = SessionRepository(db_session).get_by_id(state.session_id)
        assert row.grading_status == GRADING_FAILED
        assert row.submitted is True
        assert row.grading_json is None

    def test_default_service_built_from_settings(self, db_session):
        state = _submitted_session(db_session)
        with patch("essay.services.grading_runner.GradingService") as mock_cls:
            mock_cls.from_settings.return_value.grade_session.return_value = _report(81)
            grade_submitted_session(db_session, state.session_id)

        mock_cls.from_settings.assert_called_once()
        assert SessionRepository(db_session).get_by_id(state.session_id).overall_score == 81


# ===========================================================================
# claim_grading
# ===========================================================================

class TestClaimGrading:

    def test_claim_moves_to_running(self, db_session):
        state = _submitted_session(db_session)
        repo = SessionRepository(db_session)

        assert repo.claim_grading(state.session_id) is True
        assert repo.get_by_id(state.session_id).grading_status == GRADING_RUNNING
        assert repo.claim_grading(state.session_id) is False


# ===========================================================================
# dispatch_grading
# ===========================================================================

class TestDispatchGrading:

    @patch("essay.services.grading_runner.grade_submitted_session")
    @patch("essay.services.grading_runner.get_db_manager")
    def test_runs_in_thread_with_own_session(self, mock_get_manager, mock_grade):
        thread_session = MagicMock()
        mock_get_manager.return_value.session_factory.return_value = thread_session

        thread = dispatch_grading("essay_abc")
        thread.join(timeout=5)

        assert thread.daemon is True
        mock_grade.assert_called_once_with(thread_session, "essay_abc", None)
        thread_session.close.assert_called_once()

    @patch("essay.services.grading_runner.grade_submitted_session")
    @patch("essay.services.grading_runner.get_db_manager")
    def test_failure_is_logged_and_session_closed(self, mock_get_manager, mock_grade):
        thread_session = MagicMock()
        mock_get_manager.return_value.session_factory.return_value = thread_session
        mock_grade.side_effect = RuntimeError("grader crashed")

        thread = dispatch_grading("essay_abc")
        thread.join(timeout=5)

        thread_session.close.assert_called_once()
