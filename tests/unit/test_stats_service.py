"""Unit tests for essay/services/stats_service.py"""

from datetime import datetime, timedelta

from essay.models.grading import EssayMetrics, GradingReport
from essay.models.session_state import SessionConfig, create_session
from essay.services.stats_service import StatsService
from shared.repositories.session_repository import GRADING_PENDING, SessionRepository


T0 = datetime(2026, 5, 1, 8, 0, 0)


def _graded_session(db_session, score, words, seconds, deleted, grammar_issues, offset):
    state = create_session(SessionConfig(time_limit_seconds=1800, word_limit=500, deletion_limit=10))
    state.created_at = T0 + timedelta(minutes=offset)
    repo = SessionRepository(db_session)
    repo.create(state)

    state.content = " ".join(["word"] * words)
    state.word_count = words
    state.elapsed_seconds = seconds
    state.deleted_character_count = deleted
    state.submitted = True
    state.submitted_at = state.created_at + timedelta(seconds=seconds)
    repo.save_state(state.session_id, state, expected_version=1, grading_status=GRADING_PENDING)
    db_session.commit()

    report = GradingReport(
        overall_score=score,
        grade="C",
        provider="openai",
        metrics=EssayMetrics(
            word_count=words,
            characters_deleted=deleted,
            deletion_limit=10,
            time_spent=seconds,
            completion_percentage=words / 5,
            grammar_issues=grammar_issues,
        ),
    )
    repo.store_grading(state.session_id, report)
    return state


class TestStatsService:

    def test_empty(self, db_session):
        stats = StatsService(db_session).get_stats()

        assert stats.total_essays == 0
        assert stats.chart == []
        assert stats.words_per_minute == 0

    def test_aggregates_graded_sessions(self, db_session):
        _graded_session(db_session, score=70, words=300, seconds=600, deleted=4, grammar_issues=3, offset=0)
        _graded_session(db_session, score=85, words=500, seconds=900, deleted=8, grammar_issues=1, offset=10)

        stats = StatsService(db_session).get_stats()

        assert stats.total_essays == 2
        assert stats.current_score == 85
        assert stats.best_score == 85
        assert stats.average_score == 78  # round(77.5) banker's rounding
        assert stats.improvement_trend == 15
        assert stats.total_words == 800
        assert stats.average_words == 400
        assert stats.total_time_seconds == 1500
        assert stats.average_time_seconds == 750
        assert stats.total_characters_deleted == 12
        assert stats.average_characters_deleted == 6
        assert stats.total_grammar_issues == 4
        assert stats.average_grammar_issues == 2
        assert stats.words_per_minute == 32
        assert [p.essay_number for p in stats.chart] == [1, 2]
        assert stats.chart[0].score == 70

    def test_single_essay_has_no_trend(self, db_session):
        _graded_session(db_session, score=64, words=200, seconds=300, deleted=0, grammar_issues=0, offset=0)

        stats = StatsService(db_session).get_stats()
        assert stats.improvement_trend == 0
        assert stats.words_per_minute == 40

    def test_ignores_ungraded_and_unsubmitted(self, db_session):
        _graded_session(db_session, score=90, words=400, seconds=600, deleted=1, grammar_issues=0, offset=0)

        repo = SessionRepository(db_session)
        repo.create(create_session(SessionConfig(time_limit_seconds=60, word_limit=100, deletion_limit=1)))

        pending = create_session(SessionConfig(time_limit_seconds=60, word_limit=100, deletion_limit=1))
        repo.create(pending)
        pending.submitted = True
        repo.save_state(pending.session_id, pending, expected_version=1, grading_status=GRADING_PENDING)
        db_session.commit()

        stats = StatsService(db_session).get_stats()
        assert stats.total_essays == 1
        assert stats.current_score == 90
