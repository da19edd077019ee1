"""Essay session API endpoints."""
import logging
import traceback
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session as DBSession

from database import get_db
from essay.services.session_service import EssaySessionService
from essay.services.stats_service import StatsService
from shared.models.schemas import (
    CreateSessionRequest,
    EditRequest,
    KeyEventRequest,
    KeyEventResponse,
    PerformanceStats,
    RestartProgressResponse,
    SessionGradingResponse,
    SessionSummary,
    SessionView,
)
from shared.utils.exceptions import EssayWriterException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/essay-sessions", tags=["essay-sessions"])


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"Error {action}: {str(e)}\n{traceback.format_exc()}")
    return HTTPException(status_code=500, detail={"message": f"Error {action}: {str(e)}", "type": type(e).__name__})


@router.post("", response_model=SessionView, status_code=201)
def create_session(request: CreateSessionRequest, db: DBSession = Depends(get_db)):
    """Start a new essay session from the stored settings."""
    try:
        return EssaySessionService(db).create_session(request)
    except EssayWriterException as e:
        raise e.to_http_exception()
    except Exception as e:
        raise _internal_error("creating session", e)


@router.get("", response_model=List[SessionSummary])
def list_sessions(db: DBSession = Depends(get_db)):
    """Session history, newest first."""
    try:
        return EssaySessionService(db).list_sessions()
    except Exception as e:
        raise _internal_error("listing sessions", e)


@router.delete("", response_model=RestartProgressResponse)
def restart_progress(db: DBSession = Depends(get_db)):
    """Delete all session history."""
    try:
        return RestartProgressResponse(deleted_sessions=EssaySessionService(db).restart_progress())
    except Exception as e:
        raise _internal_error("restarting progress", e)


@router.get("/stats", response_model=PerformanceStats)
def get_stats(db: DBSession = Depends(get_db)):
    """Performance statistics over graded sessions."""
    try:
        return StatsService(db).get_stats()
    except Exception as e:
        raise _internal_error("computing stats", e)


@router.get("/{session_id}", response_model=SessionView)
def get_session(session_id: str, db: DBSession = Depends(get_db)):
    """Current session state, with the timer caught up to now."""
    try:
        return EssaySessionService(db).get_session(session_id)
    except EssayWriterException as e:
        raise e.to_http_exception()
    except Exception as e:
        raise _internal_error("loading session", e)


@router.post("/{session_id}/edits", response_model=SessionView)
def apply_edit(session_id: str, request: EditRequest, db: DBSession = Depends(get_db)):
    """Replace the essay buffer with the edited content."""
    try:
        return EssaySessionService(db).apply_edit(session_id, request.content)
    except EssayWriterException as e:
        raise e.to_http_exception()
    except Exception as e:
        raise _internal_error("applying edit", e)


@router.post("/{session_id}/keys", response_model=KeyEventResponse)
def key_event(session_id: str, request: KeyEventRequest, db: DBSession = Depends(get_db)):
    """Ask whether a keystroke must be suppressed before it edits the buffer."""
    try:
        return EssaySessionService(db).handle_key(session_id, request.key)
    except EssayWriterException as e:
        raise e.to_http_exception()
    except Exception as e:
        raise _internal_error("handling key event", e)


@router.post("/{session_id}/tick", response_model=SessionView)
def tick(session_id: str, db: DBSession = Depends(get_db)):
    """Advance the session timer by one second."""
    try:
        return EssaySessionService(db).tick(session_id)
    except EssayWriterException as e:
        raise e.to_http_exception()
    except Exception as e:
        raise _internal_error("advancing timer", e)


@router.post("/{session_id}/timer/start", response_model=SessionView)
def start_timer(session_id: str, db: DBSession = Depends(get_db)):
    try:
        return EssaySessionService(db).start_timer(session_id)
    except EssayWriterException as e:
        raise e.to_http_exception()
    except Exception as e:
        raise _internal_error("starting timer", e)


@router.post("/{session_id}/timer/pause", response_model=SessionView)
def pause_timer(session_id: str, db: DBSession = Depends(get_db)):
    try:
        return EssaySessionService(db).pause_timer(session_id)
    except EssayWriterException as e:
        raise e.to_http_exception()
    except Exception as e:
        raise _internal_error("pausing timer", e)


@router.post("/{session_id}/submit", response_model=SessionView)
def submit(session_id: str, db: DBSession = Depends(get_db)):
    """Submit the essay manually. Re-submitting returns the submitted state unchanged."""
    try:
        return EssaySessionService(db).submit(session_id)
    except EssayWriterException as e:
        raise e.to_http_exception()
    except Exception as e:
        raise _internal_error("submitting session", e)


@router.get("/{session_id}/grading", response_model=SessionGradingResponse)
def get_grading(session_id: str, db: DBSession = Depends(get_db)):
    """Grading status and, once complete, the report."""
    try:
        return EssaySessionService(db).get_grading(session_id)
    except EssayWriterException as e:
        raise e.to_http_exception()
    except Exception as e:
        raise _internal_error("loading grading", e)
