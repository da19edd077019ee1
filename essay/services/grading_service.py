"""
Grading Service

Grades essay text through a provider fallback chain:
OpenAI (rubric prompt) → Gemini (grammar prompt) → local regex analysis.
Provider failures never reach the caller; the worst case is a local report.
"""

import json
import logging
import math
import re
from typing import Any, Optional

from pydantic import ValidationError

from config import Settings, get_settings
from essay.grammar.local_checker import analyze
from essay.models.grading import (
    EssayMetrics,
    GradingIssue,
    GradingReport,
    StructureAnalysis,
    grade_for_score,
)
from essay.models.session_state import SessionState
from essay.prompts.templates import (
    GEMINI_GRADING_TEMPLATE,
    GRADING_SYSTEM_MESSAGE,
    GRADING_TEMPLATE,
)
from shared.services.llm_service import LLMService, LLMServiceError
from shared.utils.constants import (
    ACADEMIC_MAX,
    DELETION_LIMIT_PENALTY,
    FAILING_GRADE,
    GRAMMAR_MAX,
    LANGUAGE_MAX,
    LOCAL_BASE_SCORE,
    LOCAL_GRAMMAR_MIN,
    LOCAL_GRAMMAR_PENALTY_PER_ISSUE,
    LOCAL_MIN_SCORE,
    LOCAL_PENALTY_PER_ISSUE,
    STRUCTURE_MAX,
    THESIS_MAX,
)

logger = logging.getLogger(__name__)

GRADING_TEMPERATURE = 0.05
GRADING_MAX_TOKENS = 3000

# Response list key → issue category
_ISSUE_LISTS = {
    "spellingIssues": "spelling",
    "grammarIssues": "grammar",
    "punctuationIssues": "punctuation",
    "capitalizationIssues": "capitalization",
    "sentenceStructureIssues": "sentence_structure",
    "subjectVerbAgreementIssues": "subject_verb_agreement",
}

_SCORE_FIELDS = {
    "structure_score": ("structureScore", STRUCTURE_MAX),
    "thesis_score": ("thesisScore", THESIS_MAX),
    "language_score": ("languageScore", LANGUAGE_MAX),
    "grammar_score": ("grammarScore", GRAMMAR_MAX),
    "academic_score": ("academicScore", ACADEMIC_MAX),
}


def extract_json(raw: str) -> Optional[dict[str, Any]]:
    """Best-effort recovery of a JSON object from an LLM response.

    Takes the outermost {...} block, strips trailing commas and normalises
    whitespace. If that still fails, tries to close a truncated object.
    Returns None when nothing parseable remains.
    """
    if not raw:
        return None

    match = re.search(r"\{.*\}", raw, re.DOTALL)
    candidate = match.group(0) if match else raw.strip()

    candidate = re.sub(r",\s*}", "}", candidate)
    candidate = re.sub(r",\s*]", "]", candidate)
    candidate = re.sub(r"\s+", " ", candidate.replace("\n", " ")).strip()

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError:
        if candidate.endswith('"'):
            candidate += "}"
        elif not candidate.endswith("}"):
            candidate += '"}]}'
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            return None

    return parsed if isinstance(parsed, dict) else None


def _has_usable_score(data: dict[str, Any]) -> bool:
    score = data.get("overallScore")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return False
    if isinstance(score, float) and not math.isfinite(score):
        return False
    return score > 0


def _clamp(value: Any, upper: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return max(0, min(upper, int(round(value))))


def _issue_from_item(item: Any, category: str) -> Optional[GradingIssue]:
    if not isinstance(item, dict):
        return None
    position = item.get("position")
    return GradingIssue(
        category=category,
        original_text=str(item.get("text") or item.get("word") or ""),
        correction=str(item.get("correction") or ""),
        message=str(item.get("message") or ""),
        position=position if isinstance(position, int) and not isinstance(position, bool) else None,
    )


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item]


def report_from_response(data: dict[str, Any], provider: str) -> GradingReport:
    """Normalise a provider's camelCase JSON into a GradingReport."""
    overall = _clamp(data["overallScore"], 100)
    grade = data.get("grade")
    if grade not in ("A", "B", "C", "D", "F"):
        grade = grade_for_score(overall)

    issues = []
    for key, category in _ISSUE_LISTS.items():
        items = data.get(key)
        if not isinstance(items, list):
            continue
        for item in items:
            issue = _issue_from_item(item, category)
            if issue is not None:
                issues.append(issue)

    raw_structure = data.get("structureAnalysis")
    if isinstance(raw_structure, dict):
        structure = StructureAnalysis(
            has_introduction=bool(raw_structure.get("hasIntroduction")),
            has_thesis=bool(raw_structure.get("hasThesis")),
            has_body_paragraphs=bool(raw_structure.get("hasBodyParagraphs")),
            has_conclusion=bool(raw_structure.get("hasConclusion")),
            logical_flow=bool(raw_structure.get("logicalFlow")),
            feedback=str(raw_structure.get("feedback") or StructureAnalysis().feedback),
        )
    else:
        structure = StructureAnalysis()

    scores = {field: _clamp(data.get(key), upper) for field, (key, upper) in _SCORE_FIELDS.items()}

    return GradingReport(
        overall_score=overall,
        grade=grade,
        structure_analysis=structure,
        issues=issues,
        strengths=_string_list(data.get("strengths")),
        improvements=_string_list(data.get("improvements")),
        summary=str(data.get("summary") or ""),
        provider=provider,
        **scores,
    )


def local_report(content: str, provider: str = "local-emergency") -> GradingReport:
    """Score ``content`` with the local rule tables only."""
    analysis = analyze(content)
    n = analysis.total_issues
    sentences = analysis.sentence_count

    overall = max(LOCAL_MIN_SCORE, LOCAL_BASE_SCORE - LOCAL_PENALTY_PER_ISSUE * n)

    if provider == "local-fallback":
        found = f"Found {n} grammar/spelling issues." if n > 0 else "No major issues detected."
        feedback = f"Essay has {sentences} sentences and {analysis.word_count} words. {found}"
        strengths = ["Good grammar overall", "Clear writing"] if n < 3 else ["Essay completed"]
        if n > 0:
            improvements = [f"Fix {n} grammar/spelling errors", "Review punctuation usage", "Check sentence structure"]
        else:
            improvements = ["Consider adding more detail", "Strengthen thesis statement"]
        summary = f"Local analysis found {n} issues. " + (
            "Good work!" if n == 0 else "Please review the identified errors."
        )
    else:
        feedback = f"Local analysis: {sentences} sentences, {analysis.word_count} words. {n} issues found."
        strengths = ["Essay analysis completed using local checking"]
        improvements = [f"Review {n} identified errors"] if n > 0 else ["Consider expanding content"]
        summary = f"Local grammar check completed. {n} issues detected."

    return GradingReport(
        overall_score=overall,
        grade=grade_for_score(overall),
        structure_score=18 if sentences >= 3 else 12,
        thesis_score=15 if analysis.character_count > 200 else 8,
        language_score=12,
        grammar_score=max(LOCAL_GRAMMAR_MIN, GRAMMAR_MAX - LOCAL_GRAMMAR_PENALTY_PER_ISSUE * n),
        academic_score=10,
        structure_analysis=StructureAnalysis(
            has_introduction=sentences > 0,
            has_thesis=analysis.character_count > 100,
            has_body_paragraphs=sentences >= 3,
            has_conclusion=sentences > 1,
            logical_flow=sentences >= 2,
            feedback=feedback,
        ),
        issues=analysis.issues,
        strengths=strengths,
        improvements=improvements,
        summary=summary,
        provider=provider,
    )


def session_metrics(state: SessionState, report: GradingReport) -> EssayMetrics:
    grammar_like = (
        report.count("grammar")
        + report.count("subject_verb_agreement")
        + report.count("sentence_structure")
        + report.count("capitalization")
    )
    return EssayMetrics(
        word_count=state.word_count,
        characters_deleted=state.deleted_character_count,
        deletion_limit=state.config.deletion_limit,
        time_spent=state.elapsed_seconds,
        completion_percentage=round(state.completion_percentage, 1),
        grammar_issues=grammar_like,
        spelling_issues=report.count("spelling"),
        punctuation_issues=report.count("punctuation"),
        total_issues=report.total_issues,
    )


class GradingService:
    """Runs the grading fallback chain."""

    def __init__(
        self,
        openai_llm: Optional[LLMService] = None,
        gemini_llm: Optional[LLMService] = None,
    ):
        self.openai_llm = openai_llm
        self.gemini_llm = gemini_llm

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "GradingService":
        settings = settings or get_settings()
        openai_llm = None
        gemini_llm = None
        if settings.openai_api_key:
            openai_llm = LLMService(
                settings.openai_api_key,
                provider="openai",
                model_id=settings.grading_model,
                max_retries=settings.llm_max_retries,
                timeout=settings.grading_timeout_seconds,
            )
        if settings.gemini_api_key:
            gemini_llm = LLMService(
                settings.gemini_api_key,
                provider="google",
                model_id=settings.gemini_model,
                max_retries=settings.llm_max_retries,
                timeout=settings.llm_timeout_seconds,
            )
        return cls(openai_llm=openai_llm, gemini_llm=gemini_llm)

    def grade(self, content: str) -> GradingReport:
        """Grade free text. Raises ValueError only for empty content."""
        if not content or not content.strip():
            raise ValueError("No content provided")

        answered = False
        for provider, call in self._providers(content):
            try:
                raw = call()
            except LLMServiceError as e:
                logger.warning(f"Grading provider {provider} failed: {e}")
                continue

            answered = True
            data = extract_json(raw)
            if data is None or not _has_usable_score(data):
                logger.warning(f"Grading provider {provider} returned an unusable response: {raw[:200]!r}")
                continue

            try:
                report = report_from_response(data, provider)
            except (ValidationError, TypeError, ValueError, OverflowError) as e:
                logger.warning(f"Grading provider {provider} response failed validation: {e}")
                continue

            logger.info(f"Essay graded by {provider}: {report.overall_score} ({report.grade})")
            return report

        provider = "local-fallback" if answered else "local-emergency"
        logger.info(f"Grading with local analysis ({provider})")
        return local_report(content, provider)

    def grade_session(self, state: SessionState) -> GradingReport:
        """Grade a submitted session and apply the typing-discipline adjustment."""
        if state.content.strip():
            report = self.grade(state.content)
        else:
            report = GradingReport(
                overall_score=0,
                grade=FAILING_GRADE,
                summary="No content was written before submission.",
                provider="local-emergency",
            )

        updates: dict[str, Any] = {"metrics": session_metrics(state, report)}
        if state.deletion_limit_exceeded:
            updates["overall_score"] = max(0, report.overall_score - DELETION_LIMIT_PENALTY)
            updates["grade"] = FAILING_GRADE
            updates["discipline_penalty_applied"] = True
            logger.info(
                f"Session {state.session_id}: deletion limit exceeded, "
                f"score {report.overall_score} -> {updates['overall_score']}"
            )
        return report.model_copy(update=updates)

    def _providers(self, content: str):
        if self.openai_llm is not None:
            yield "openai", lambda: self.openai_llm.call(
                GRADING_TEMPLATE.render(content=content),
                system_message=GRADING_SYSTEM_MESSAGE,
                temperature=GRADING_TEMPERATURE,
                max_tokens=GRADING_MAX_TOKENS,
                json_mode=True,
            )
        if self.gemini_llm is not None:
            yield "gemini", lambda: self.gemini_llm.call(
                GEMINI_GRADING_TEMPLATE.render(content=content),
                temperature=GRADING_TEMPERATURE,
                json_mode=True,
            )
