"""Pydantic API request/response schemas."""
from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from essay.models.grading import GradingReport
from essay.models.session_state import SessionConfig, SessionPhase, SessionState, SubmissionReason, TopicSelection
from shared.utils.constants import (
    BACKSPACE_LIMIT_RANGE,
    DEFAULT_AUTO_SAVE,
    DEFAULT_BACKSPACE_LIMIT,
    DEFAULT_SPACING_AFTER_WORDS,
    DEFAULT_TIME_LIMIT_MINUTES,
    DEFAULT_WORD_LIMIT,
    SPACING_AFTER_WORDS_RANGE,
    TIME_LIMIT_MINUTES_RANGE,
    WORD_LIMIT_RANGE,
)


# ─── Settings ─────────────────────────────────────────────────────────

class EssaySettings(BaseModel):
    """Writing preferences for a settings profile."""
    time_limit_minutes: int = Field(
        default=DEFAULT_TIME_LIMIT_MINUTES, ge=TIME_LIMIT_MINUTES_RANGE[0], le=TIME_LIMIT_MINUTES_RANGE[1]
    )
    word_limit: int = Field(default=DEFAULT_WORD_LIMIT, ge=WORD_LIMIT_RANGE[0], le=WORD_LIMIT_RANGE[1])
    backspace_limit: int = Field(
        default=DEFAULT_BACKSPACE_LIMIT, ge=BACKSPACE_LIMIT_RANGE[0], le=BACKSPACE_LIMIT_RANGE[1],
        description="Cumulative characters that may be deleted"
    )
    spacing_after_words: int = Field(
        default=DEFAULT_SPACING_AFTER_WORDS, ge=SPACING_AFTER_WORDS_RANGE[0], le=SPACING_AFTER_WORDS_RANGE[1]
    )
    auto_save: bool = DEFAULT_AUTO_SAVE

    def to_session_config(self) -> SessionConfig:
        return SessionConfig(
            time_limit_seconds=self.time_limit_minutes * 60,
            word_limit=self.word_limit,
            deletion_limit=self.backspace_limit,
        )


class SettingsUpdate(BaseModel):
    """Partial settings update; omitted fields keep their stored value."""
    time_limit_minutes: Optional[int] = Field(
        default=None, ge=TIME_LIMIT_MINUTES_RANGE[0], le=TIME_LIMIT_MINUTES_RANGE[1]
    )
    word_limit: Optional[int] = Field(default=None, ge=WORD_LIMIT_RANGE[0], le=WORD_LIMIT_RANGE[1])
    backspace_limit: Optional[int] = Field(default=None, ge=BACKSPACE_LIMIT_RANGE[0], le=BACKSPACE_LIMIT_RANGE[1])
    spacing_after_words: Optional[int] = Field(
        default=None, ge=SPACING_AFTER_WORDS_RANGE[0], le=SPACING_AFTER_WORDS_RANGE[1]
    )
    auto_save: Optional[bool] = None


# ─── Essay sessions ───────────────────────────────────────────────────

class CreateSessionRequest(BaseModel):
    """Start a session from stored settings, optionally overriding limits."""
    topic: Optional[TopicSelection] = None
    time_limit_minutes: Optional[int] = None
    word_limit: Optional[int] = None
    deletion_limit: Optional[int] = None


class EditRequest(BaseModel):
    """Full buffer contents after a user edit."""
    content: str


class KeyEventRequest(BaseModel):
    key: str


class SessionView(BaseModel):
    """Session state plus derived fields, as returned to clients."""
    session_id: str
    phase: SessionPhase
    config: SessionConfig
    topic: Optional[TopicSelection] = None
    content: str
    word_count: int
    elapsed_seconds: int
    remaining_seconds: int
    timer_running: bool
    deleted_character_count: int
    deletions_remaining: int
    backspace_key_count: int
    has_started_writing: bool
    submitted: bool
    auto_submitted: bool
    submission_reason: Optional[SubmissionReason] = None
    submitted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    grading_status: Optional[str] = None

    @classmethod
    def from_state(cls, state: SessionState, grading_status: Optional[str] = None) -> "SessionView":
        return cls(
            session_id=state.session_id,
            phase=state.phase,
            config=state.config,
            topic=state.topic,
            content=state.content,
            word_count=state.word_count,
            elapsed_seconds=state.elapsed_seconds,
            remaining_seconds=state.remaining_seconds,
            timer_running=state.timer_running,
            deleted_character_count=state.deleted_character_count,
            deletions_remaining=state.deletions_remaining,
            backspace_key_count=state.backspace_key_count,
            has_started_writing=state.has_started_writing,
            submitted=state.submitted,
            auto_submitted=state.auto_submitted,
            submission_reason=state.submission_reason,
            submitted_at=state.submitted_at,
            created_at=state.created_at,
            updated_at=state.updated_at,
            grading_status=grading_status,
        )


class KeyEventResponse(BaseModel):
    blocked: bool
    session: SessionView


class SessionSummary(BaseModel):
    """History row for one session."""
    session_id: str
    created_at: datetime
    submitted_at: Optional[datetime] = None
    topic_title: Optional[str] = None
    word_count: int
    characters_deleted: int
    elapsed_seconds: int
    submitted: bool
    auto_submitted: bool
    submission_reason: Optional[str] = None
    grading_status: Optional[str] = None
    overall_score: Optional[int] = None


class SessionGradingResponse(BaseModel):
    session_id: str
    grading_status: Optional[str] = None
    report: Optional[GradingReport] = None


class RestartProgressResponse(BaseModel):
    deleted_sessions: int


# ─── Standalone text tools ────────────────────────────────────────────

class TextRequest(BaseModel):
    """Arbitrary essay text for grading or proofreading."""
    content: str = ""


# ─── Performance statistics ───────────────────────────────────────────

class ChartPoint(BaseModel):
    essay_number: int
    session_id: str
    score: int
    word_count: int
    time_spent: int
    characters_deleted: int
    grammar_issues: int
    date: Optional[datetime] = None


class PerformanceStats(BaseModel):
    total_essays: int = 0
    current_score: int = 0
    best_score: int = 0
    average_score: int = 0
    improvement_trend: int = 0
    total_words: int = 0
    average_words: int = 0
    total_time_seconds: int = 0
    average_time_seconds: int = 0
    total_characters_deleted: int = 0
    average_characters_deleted: int = 0
    total_grammar_issues: int = 0
    average_grammar_issues: int = 0
    words_per_minute: int = 0
    chart: List[ChartPoint] = Field(default_factory=list)
