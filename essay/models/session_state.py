"""
Essay Session State Models

Configuration and mutable state of a single essay-writing attempt. The
state is plain data; every mutation goes through SessionController.
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
import uuid

from shared.utils.exceptions import InvalidSessionConfigError


SubmissionReason = Literal["manual", "word_limit", "deletion_limit", "time_limit"]
SessionPhase = Literal["not_started", "writing", "submitted"]


def count_words(content: str) -> int:
    """Whitespace-tokenized word count."""
    return len(content.split())


class SessionConfig(BaseModel):
    """Limits for one session. Immutable once the session exists."""

    model_config = ConfigDict(frozen=True)

    time_limit_seconds: int = Field(description="Writing time limit in seconds")
    word_limit: int = Field(description="Word count that triggers submission")
    deletion_limit: int = Field(description="Cumulative deleted characters allowed")

    @model_validator(mode="after")
    def _check_limits(self) -> "SessionConfig":
        if self.time_limit_seconds <= 0:
            raise InvalidSessionConfigError("time_limit_seconds", self.time_limit_seconds, "must be > 0")
        if self.word_limit <= 0:
            raise InvalidSessionConfigError("word_limit", self.word_limit, "must be > 0")
        if self.deletion_limit < 0:
            raise InvalidSessionConfigError("deletion_limit", self.deletion_limit, "must be >= 0")
        return self


class TopicSelection(BaseModel):
    """Topic the writer picked before starting."""

    title: str
    description: str = ""
    source_name: Optional[str] = None
    category: Optional[str] = None
    url: Optional[str] = None
    published_at: Optional[str] = None


class SessionState(BaseModel):
    """Complete state of one essay-writing session."""

    # Identification
    session_id: str = Field(
        default_factory=lambda: f"essay_{uuid.uuid4().hex[:12]}",
        description="Unique session identifier",
    )
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    config: SessionConfig
    topic: Optional[TopicSelection] = None

    # Buffer
    content: str = ""
    word_count: int = 0

    # Timer
    elapsed_seconds: int = Field(default=0, ge=0)
    timer_running: bool = False
    clock_anchor: Optional[datetime] = Field(
        default=None,
        description="Wall-clock instant up to which elapsed time has been counted",
    )

    # Typing discipline
    deleted_character_count: int = Field(default=0, ge=0)
    backspace_key_count: int = Field(default=0, ge=0, description="Backspace presses, statistics only")

    # Lifecycle
    has_started_writing: bool = False
    submitted: bool = False
    auto_submitted: bool = False
    submission_reason: Optional[SubmissionReason] = None
    submitted_at: Optional[datetime] = None

    @property
    def remaining_seconds(self) -> int:
        return max(0, self.config.time_limit_seconds - self.elapsed_seconds)

    @property
    def phase(self) -> SessionPhase:
        if self.submitted:
            return "submitted"
        if self.has_started_writing:
            return "writing"
        return "not_started"

    @property
    def deletions_remaining(self) -> int:
        return max(0, self.config.deletion_limit - self.deleted_character_count)

    @property
    def deletion_limit_exceeded(self) -> bool:
        return self.deleted_character_count > self.config.deletion_limit

    @property
    def completion_percentage(self) -> float:
        return min(100.0, self.word_count / self.config.word_limit * 100)


def create_session(
    config: SessionConfig,
    topic: Optional[TopicSelection] = None,
) -> SessionState:
    """Create a fresh session in the NotStarted phase."""
    return SessionState(config=config, topic=topic)
