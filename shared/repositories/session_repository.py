"""Essay session data access layer."""
import logging
from typing import Optional
from sqlalchemy import update
from sqlalchemy.orm import Session as DBSession
from datetime import datetime

from essay.models.grading import GradingReport
from essay.models.session_state import SessionState
from shared.models.entities import EssaySession

logger = logging.getLogger(__name__)

GRADING_PENDING = "pending"
GRADING_RUNNING = "running"
GRADING_COMPLETE = "complete"
GRADING_FAILED = "failed"


class SessionRepository:
    """Repository for essay session CRUD operations."""

    def __init__(self, db: DBSession):
        self.db = db

    def create(self, state: SessionState) -> EssaySession:
        """
        Create a new session record.

        Args:
            state: Freshly created SessionState

        Returns:
            Created EssaySession row
        """
        row = EssaySession(
            id=state.session_id,
            state_json=state.model_dump_json(),
            config_json=state.config.model_dump_json(),
            topic_json=state.topic.model_dump_json() if state.topic else None,
            submitted=False,
            auto_submitted=False,
            word_count=state.word_count,
            characters_deleted=state.deleted_character_count,
            elapsed_seconds=state.elapsed_seconds,
            state_version=1,
            created_at=state.created_at,
            updated_at=state.updated_at,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def get_by_id(self, session_id: str) -> Optional[EssaySession]:
        return self.db.query(EssaySession).filter(EssaySession.id == session_id).first()

    def save_state(
        self,
        session_id: str,
        state: SessionState,
        expected_version: int,
        grading_status: Optional[str] = None,
    ) -> bool:
        """Version-checked write of the session state.

        Returns False (after rolling back) when the row's version no longer
        matches ``expected_version``. Does not commit; the caller decides.
        """
        values = dict(
            state_json=state.model_dump_json(),
            submitted=state.submitted,
            auto_submitted=state.auto_submitted,
            submission_reason=state.submission_reason,
            word_count=state.word_count,
            characters_deleted=state.deleted_character_count,
            elapsed_seconds=state.elapsed_seconds,
            submitted_at=state.submitted_at,
            state_version=expected_version + 1,
            updated_at=datetime.utcnow(),
        )
        if grading_status is not None:
            values["grading_status"] = grading_status

        result = self.db.execute(
            update(EssaySession)
            .where(
                EssaySession.id == session_id,
                EssaySession.state_version == expected_version,
            )
            .values(**values)
        )
        if result.rowcount == 0:
            self.db.rollback()
            return False
        return True

    def list_all(self, submitted_only: bool = False, limit: Optional[int] = None) -> list[EssaySession]:
        """Sessions, oldest first."""
        query = self.db.query(EssaySession)
        if submitted_only:
            query = query.filter(EssaySession.submitted.is_(True))
        query = query.order_by(EssaySession.created_at.asc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def claim_grading(self, session_id: str) -> bool:
        """Atomically move grading from pending to running.

        Only one grader can win the claim for a given session.
        """
        result = self.db.execute(
            update(EssaySession)
            .where(
                EssaySession.id == session_id,
                EssaySession.grading_status == GRADING_PENDING,
            )
            .values(grading_status=GRADING_RUNNING)
        )
        self.db.commit()
        return result.rowcount == 1

    def store_grading(self, session_id: str, report: GradingReport) -> None:
        self.db.execute(
            update(EssaySession)
            .where(EssaySession.id == session_id)
            .values(
                grading_status=GRADING_COMPLETE,
                grading_json=report.model_dump_json(),
                overall_score=report.overall_score,
            )
        )
        self.db.commit()

    def mark_grading_failed(self, session_id: str) -> None:
        self.db.execute(
            update(EssaySession)
            .where(EssaySession.id == session_id)
            .values(grading_status=GRADING_FAILED)
        )
        self.db.commit()

    def delete_all(self) -> int:
        """Delete every session. Returns the number of rows removed."""
        count = self.db.query(EssaySession).delete()
        self.db.commit()
        return count
