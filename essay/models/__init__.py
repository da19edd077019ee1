"""Essay session models."""
from essay.models.session_state import (
    SessionConfig,
    SessionState,
    TopicSelection,
    count_words,
    create_session,
)
from essay.models.grading import GradingIssue, GradingReport, StructureAnalysis, EssayMetrics
from essay.models.proofreading import ProofreadingResult
