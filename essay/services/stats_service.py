"""Performance statistics over graded essay sessions."""

import logging

from sqlalchemy.orm import Session as DBSession

from essay.models.grading import GradingReport
from shared.models.schemas import ChartPoint, PerformanceStats
from shared.repositories.session_repository import GRADING_COMPLETE, SessionRepository

logger = logging.getLogger(__name__)


class StatsService:
    """Aggregates submitted, graded sessions into dashboard statistics."""

    def __init__(self, db: DBSession):
        self.session_repo = SessionRepository(db)

    def get_stats(self) -> PerformanceStats:
        rows = [
            row for row in self.session_repo.list_all(submitted_only=True)
            if row.grading_status == GRADING_COMPLETE and row.grading_json
        ]
        if not rows:
            return PerformanceStats()

        chart = []
        for index, row in enumerate(rows, start=1):
            report = GradingReport.model_validate_json(row.grading_json)
            grammar_issues = report.metrics.grammar_issues if report.metrics else report.total_issues
            chart.append(ChartPoint(
                essay_number=index,
                session_id=row.id,
                score=report.overall_score,
                word_count=row.word_count or 0,
                time_spent=row.elapsed_seconds or 0,
                characters_deleted=row.characters_deleted or 0,
                grammar_issues=grammar_issues,
                date=row.submitted_at,
            ))

        total = len(chart)
        scores = [point.score for point in chart]
        current = scores[-1]
        previous = scores[-2] if total > 1 else current

        total_words = sum(point.word_count for point in chart)
        total_time = sum(point.time_spent for point in chart)
        total_deleted = sum(point.characters_deleted for point in chart)
        total_grammar = sum(point.grammar_issues for point in chart)

        return PerformanceStats(
            total_essays=total,
            current_score=current,
            best_score=max(scores),
            average_score=round(sum(scores) / total),
            improvement_trend=current - previous,
            total_words=total_words,
            average_words=round(total_words / total),
            total_time_seconds=total_time,
            average_time_seconds=round(total_time / total),
            total_characters_deleted=total_deleted,
            average_characters_deleted=round(total_deleted / total),
            total_grammar_issues=total_grammar,
            average_grammar_issues=round(total_grammar / total),
            words_per_minute=round(total_words / (total_time / 60)) if total_time > 0 else 0,
            chart=chart,
        )
