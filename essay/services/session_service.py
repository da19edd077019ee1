"""Essay session business logic: persistence around SessionController."""

import logging
from datetime import datetime
from typing import Any, Callable, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from essay.models.grading import GradingReport
from essay.models.session_state import SessionConfig, SessionState, create_session
from essay.services.grading_runner import dispatch_grading
from essay.services.session_controller import SessionController
from shared.models.schemas import (
    CreateSessionRequest,
    KeyEventResponse,
    SessionGradingResponse,
    SessionSummary,
    SessionView,
)
from shared.repositories.session_repository import GRADING_PENDING, SessionRepository
from shared.services.settings_service import SettingsService
from shared.utils.exceptions import DatabaseException, SessionNotFoundException, StaleStateError

logger = logging.getLogger("essay.session_service")

Operation = Callable[[SessionController, datetime], Any]


class EssaySessionService:
    """Loads a session, runs one controller operation, and persists the result.

    Every operation first catches the timer up to wall-clock time. Writes
    are version-checked; grading is dispatched only after the write that
    moved the session into Submitted has committed.
    """

    def __init__(
        self,
        db: DBSession,
        grading_dispatcher: Optional[Callable[[str], Any]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.db = db
        self.session_repo = SessionRepository(db)
        self.settings_service = SettingsService(db)
        self._dispatch = grading_dispatcher or dispatch_grading
        self._clock = clock or datetime.utcnow

    # ─── Lifecycle ────────────────────────────────────────────────────

    def create_session(self, request: CreateSessionRequest) -> SessionView:
        """Create a session from stored settings plus request overrides."""
        settings = self.settings_service.get_settings()

        minutes = request.time_limit_minutes if request.time_limit_minutes is not None else settings.time_limit_minutes
        config = SessionConfig(
            time_limit_seconds=minutes * 60,
            word_limit=request.word_limit if request.word_limit is not None else settings.word_limit,
            deletion_limit=request.deletion_limit if request.deletion_limit is not None else settings.backspace_limit,
        )

        state = create_session(config, topic=request.topic)
        state.created_at = state.updated_at = self._clock()
        try:
            self.session_repo.create(state)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseException("create session", e) from e
        logger.info(
            f"Created session {state.session_id} "
            f"(time={config.time_limit_seconds}s, words={config.word_limit}, deletions={config.deletion_limit})"
        )
        return SessionView.from_state(state)

    def get_session(self, session_id: str) -> SessionView:
        """Return the session with its timer caught up to now."""
        try:
            view, _ = self._apply(session_id, lambda controller, now: None)
        except StaleStateError:
            # A concurrent writer caught the clock up first; its state is current.
            logger.info(f"Session {session_id} changed during read, retrying")
            view, _ = self._apply(session_id, lambda controller, now: None)
        return view

    def apply_edit(self, session_id: str, content: str) -> SessionView:
        view, _ = self._apply(session_id, lambda controller, now: controller.apply_edit(content, now))
        return view

    def handle_key(self, session_id: str, key: str) -> KeyEventResponse:
        view, blocked = self._apply(session_id, lambda controller, now: controller.block_deletion_key(key))
        return KeyEventResponse(blocked=blocked, session=view)

    def tick(self, session_id: str) -> SessionView:
        """Advance the timer one second unless the wall-clock catch-up already did."""
        view, _ = self._apply(session_id, lambda controller, now: None, manual_tick=True)
        return view

    def start_timer(self, session_id: str) -> SessionView:
        view, _ = self._apply(session_id, lambda controller, now: controller.start_timer(now))
        return view

    def pause_timer(self, session_id: str) -> SessionView:
        view, _ = self._apply(session_id, lambda controller, now: controller.pause_timer(now))
        return view

    def submit(self, session_id: str) -> SessionView:
        """Manual submission. Submitting twice is a no-op, not an error."""
        view, _ = self._apply(session_id, lambda controller, now: controller.submit(manual=True, now=now))
        return view

    # ─── Grading & history ────────────────────────────────────────────

    def get_grading(self, session_id: str) -> SessionGradingResponse:
        row = self.session_repo.get_by_id(session_id)
        if not row:
            raise SessionNotFoundException(session_id)
        report = GradingReport.model_validate_json(row.grading_json) if row.grading_json else None
        return SessionGradingResponse(session_id=session_id, grading_status=row.grading_status, report=report)

    def list_sessions(self) -> list[SessionSummary]:
        """Session history, newest first."""
        summaries = []
        for row in reversed(self.session_repo.list_all()):
            state = SessionState.model_validate_json(row.state_json)
            summaries.append(SessionSummary(
                session_id=row.id,
                created_at=row.created_at,
                submitted_at=row.submitted_at,
                topic_title=state.topic.title if state.topic else None,
                word_count=row.word_count or 0,
                characters_deleted=row.characters_deleted or 0,
                elapsed_seconds=row.elapsed_seconds or 0,
                submitted=bool(row.submitted),
                auto_submitted=bool(row.auto_submitted),
                submission_reason=row.submission_reason,
                grading_status=row.grading_status,
                overall_score=row.overall_score,
            ))
        return summaries

    def restart_progress(self) -> int:
        """Delete all session history."""
        count = self.session_repo.delete_all()
        logger.info(f"Progress reset: deleted {count} sessions")
        return count

    # ─── Internals ────────────────────────────────────────────────────

    def _apply(
        self, session_id: str, operation: Operation, manual_tick: bool = False
    ) -> Tuple[SessionView, Any]:
        row = self.session_repo.get_by_id(session_id)
        if not row:
            raise SessionNotFoundException(session_id)
        expected_version = row.state_version or 1
        grading_status = row.grading_status

        state = SessionState.model_validate_json(row.state_json)
        before = state.model_dump_json()

        submitted_now: list[SessionState] = []
        controller = SessionController(state, on_submit=submitted_now.append)

        now = self._clock()
        caught_up = controller.advance_clock(now)
        if manual_tick and not caught_up:
            controller.tick(now)
        result = operation(controller, now)

        if state.model_dump_json() != before:
            if submitted_now:
                grading_status = GRADING_PENDING
            try:
                saved = self.session_repo.save_state(
                    session_id,
                    state,
                    expected_version,
                    grading_status=GRADING_PENDING if submitted_now else None,
                )
                if saved:
                    self.db.commit()
            except SQLAlchemyError as e:
                self.db.rollback()
                raise DatabaseException("save session", e) from e
            if not saved:
                raise StaleStateError(
                    f"Session {session_id} was modified concurrently (expected version {expected_version})"
                )

            if submitted_now:
                self._dispatch_grading(session_id)

        return SessionView.from_state(state, grading_status), result

    def _dispatch_grading(self, session_id: str) -> None:
        try:
            self._dispatch(session_id)
        except Exception as e:
            # The session stays submitted with grading_status='pending'.
            logger.error(f"Could not dispatch grading for {session_id}: {e}", exc_info=True)
