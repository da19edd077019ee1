"""Grading report models returned by the grading fallback chain."""

from typing import Literal, Optional
from pydantic import BaseModel, Field

from shared.utils.constants import FAILING_GRADE, GRADE_BANDS


Grade = Literal["A", "B", "C", "D", "F"]
GradingProvider = Literal["openai", "gemini", "local-fallback", "local-emergency"]
IssueCategory = Literal[
    "spelling",
    "grammar",
    "punctuation",
    "capitalization",
    "sentence_structure",
    "subject_verb_agreement",
]


def grade_for_score(score: float) -> Grade:
    """Map a 0-100 score to a letter grade."""
    for lower_bound, letter in GRADE_BANDS:
        if score >= lower_bound:
            return letter
    return FAILING_GRADE


class GradingIssue(BaseModel):
    """A single problem found in the essay."""

    category: IssueCategory
    original_text: str = Field(description="Text containing the problem")
    correction: str = Field(default="", description="Suggested replacement")
    message: str = Field(default="", description="Explanation shown to the writer")
    position: Optional[int] = Field(default=None, description="Character offset in the essay")


class StructureAnalysis(BaseModel):
    """Essay structure checklist."""

    has_introduction: bool = False
    has_thesis: bool = False
    has_body_paragraphs: bool = False
    has_conclusion: bool = False
    logical_flow: bool = False
    feedback: str = "Structure analysis not available"


class EssayMetrics(BaseModel):
    """Typing-discipline metrics attached to a session's grading."""

    word_count: int
    characters_deleted: int
    deletion_limit: int
    time_spent: int = Field(description="Seconds elapsed on the session timer")
    completion_percentage: float
    grammar_issues: int = 0
    spelling_issues: int = 0
    punctuation_issues: int = 0
    total_issues: int = 0


class GradingReport(BaseModel):
    """Structured score/issue report for one essay."""

    overall_score: int = Field(ge=0, le=100)
    grade: Grade
    structure_score: int = Field(default=0, ge=0)
    thesis_score: int = Field(default=0, ge=0)
    language_score: int = Field(default=0, ge=0)
    grammar_score: int = Field(default=0, ge=0)
    academic_score: int = Field(default=0, ge=0)
    structure_analysis: StructureAnalysis = Field(default_factory=StructureAnalysis)
    issues: list[GradingIssue] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    summary: str = ""
    provider: GradingProvider
    metrics: Optional[EssayMetrics] = None
    discipline_penalty_applied: bool = False

    @property
    def total_issues(self) -> int:
        return len(self.issues)

    def issues_by_category(self) -> dict[str, list[GradingIssue]]:
        grouped: dict[str, list[GradingIssue]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.category, []).append(issue)
        return grouped

    def count(self, category: str) -> int:
        return sum(1 for issue in self.issues if issue.category == category)
