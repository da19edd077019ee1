"""
Background grading using Python threads.

Grading runs after the submitting request has committed, on a thread with
its own DB session so it never touches the request-scoped session.

Usage:
    from essay.services.grading_runner import dispatch_grading

    thread = dispatch_grading(session_id)
"""
import logging
import threading
from typing import Optional

from sqlalchemy.orm import Session as DBSession

from database import get_db_manager
from essay.models.grading import GradingReport
from essay.models.session_state import SessionState
from essay.services.grading_service import GradingService
from shared.repositories.session_repository import SessionRepository

logger = logging.getLogger(__name__)


def grade_submitted_session(
    db: DBSession,
    session_id: str,
    grading_service: Optional[GradingService] = None,
) -> bool:
    """Grade one submitted session and store the report on its row.

    Returns False when another grader already claimed the session.
    """
    repo = SessionRepository(db)
    if not repo.claim_grading(session_id):
        logger.info(f"Grading for {session_id} already claimed, skipping")
        return False

    try:
        row = repo.get_by_id(session_id)
        state = SessionState.model_validate_json(row.state_json)
        report = _grade_or_degrade(state, grading_service)
        repo.store_grading(session_id, report)
    except Exception:
        db.rollback()
        repo.mark_grading_failed(session_id)
        raise

    logger.info(f"Stored grading for {session_id}: {report.overall_score} ({report.grade}, {report.provider})")
    return True


def _grade_or_degrade(state: SessionState, grading_service: Optional[GradingService]) -> GradingReport:
    """Grade through the configured chain; on any failure fall back to local analysis."""
    try:
        service = grading_service or GradingService.from_settings()
        return service.grade_session(state)
    except Exception as e:
        logger.error(f"Grading for {state.session_id} failed, storing local analysis: {e}", exc_info=True)
        return GradingService().grade_session(state)


def dispatch_grading(session_id: str, grading_service: Optional[GradingService] = None) -> threading.Thread:
    """
    Run grading for a submitted session in a background thread.

    Failures are logged and recorded as grading_status='failed'; the
    session itself stays submitted.
    """
    def wrapper():
        session = get_db_manager().session_factory()
        try:
            grade_submitted_session(session, session_id, grading_service)
        except Exception as e:
            logger.error(f"Background grading for {session_id} failed: {e}", exc_info=True)
        finally:
            session.close()

    thread = threading.Thread(target=wrapper, daemon=True, name=f"grading-{session_id}")
    thread.start()
    logger.info(f"Launched background grading (session_id={session_id})")
    return thread
