"""SQLAlchemy ORM database models."""
from datetime import datetime
from sqlalchemy import Column, String, Integer, Text, DateTime, Boolean, Index
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class EssaySession(Base):
    """Essay session table - one row per writing attempt."""
    __tablename__ = "essay_sessions"

    id = Column(String, primary_key=True)
    state_json = Column(Text, nullable=False)   # Full SessionState serialized
    config_json = Column(Text, nullable=False)  # JSON: {time_limit_seconds, word_limit, deletion_limit}
    topic_json = Column(Text, nullable=True)    # JSON: TopicSelection

    # Denormalized for history and stats queries
    submitted = Column(Boolean, default=False, nullable=False)
    auto_submitted = Column(Boolean, default=False, nullable=False)
    submission_reason = Column(String, nullable=True)  # manual, word_limit, deletion_limit, time_limit
    word_count = Column(Integer, default=0, nullable=False)
    characters_deleted = Column(Integer, default=0, nullable=False)
    elapsed_seconds = Column(Integer, default=0, nullable=False)

    # Grading result, written by the background grader
    grading_status = Column(String, nullable=True)  # pending, running, complete, failed
    grading_json = Column(Text, nullable=True)      # GradingReport serialized
    overall_score = Column(Integer, nullable=True)

    state_version = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    submitted_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index("idx_essay_sessions_submitted", "submitted", "submitted_at"),
    )


class EssaySetting(Base):
    """Key-value settings store, one row per (profile, key)."""
    __tablename__ = "essay_settings"

    profile = Column(String, primary_key=True)  # e.g. "default"
    key = Column(String, primary_key=True)      # e.g. "word_limit"
    value_json = Column(Text, nullable=False)   # JSON-encoded value
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
