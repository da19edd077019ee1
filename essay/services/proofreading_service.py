"""
Proofreading Service

Groq-backed automated proofreading with a local rule-table fallback.
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from config import Settings, get_settings
from essay.grammar import rules
from essay.models.proofreading import (
    Correction,
    OverallFeedback,
    ProofreadingResult,
    ProofreadingStatistics,
    StyleEnhancement,
)
from essay.prompts.templates import PROOFREADING_TEMPLATE
from essay.services.grading_service import extract_json
from shared.services.llm_service import LLMService, LLMServiceError
from shared.utils.constants import (
    MISSING_PERIOD_MIN_LINE_LENGTH,
    PROOFREADING_MIN_SCORE,
    PROOFREADING_PENALTY_PER_CORRECTION,
)

logger = logging.getLogger(__name__)

PROOFREADING_TEMPERATURE = 0.1
PROOFREADING_MAX_TOKENS = 4000


def _fix_capitalization(text: str) -> str:
    text = rules.LINE_START_LOWER.sub(lambda m: m.group(0).upper(), text)
    return rules.AFTER_TERMINATOR_LOWER.sub(lambda m: f"{m.group(1)} {m.group(2).upper()}", text)


def _add_missing_periods(text: str) -> str:
    lines = []
    for line in text.split("\n"):
        trimmed = line.strip()
        if len(trimmed) > MISSING_PERIOD_MIN_LINE_LENGTH and trimmed[-1] not in ".!?":
            line = line.rstrip() + "."
        lines.append(line)
    return "\n".join(lines)


def local_proofread(text: str) -> ProofreadingResult:
    """Proofread with the local rule tables.

    Grammar and spelling rules rewrite the text; style rules only suggest.
    Matches are located in the original text, so positions refer to it.
    """
    corrections: list[Correction] = []
    corrected = text

    for pattern, replacement, meta in rules.PROOFREADING_GRAMMAR + rules.PROOFREADING_SPELLING:
        matches = list(pattern.finditer(text))
        for match in matches:
            corrections.append(Correction(
                type=meta["type"],
                original_text=match.group(0),
                corrected_text=replacement,
                position=match.start(),
                explanation=meta["explanation"],
                category=meta.get("category") or ("Spelling" if meta["type"] == "spelling" else "Grammar"),
                severity="medium",
                grammar_tip=f"Tip: {meta['explanation']}",
            ))
        if matches:
            corrected = pattern.sub(replacement, corrected)

    enhancements = [
        StyleEnhancement(
            original_phrase=match.group(0),
            enhanced_phrase=enhancement,
            reason=meta["reason"],
            position=match.start(),
        )
        for pattern, enhancement, meta in rules.PROOFREADING_STYLE
        for match in pattern.finditer(text)
    ]

    corrected = _add_missing_periods(_fix_capitalization(corrected))

    return ProofreadingResult(
        corrected_text=corrected,
        corrections=corrections,
        style_enhancements=enhancements,
        overall_feedback=OverallFeedback(
            strengths=["Clear topic focus", "Good essay structure", "Relevant examples"],
            improvements=["Grammar accuracy", "Vocabulary enhancement", "Sentence variety"],
            writing_score=max(
                PROOFREADING_MIN_SCORE,
                100 - PROOFREADING_PENALTY_PER_CORRECTION * len(corrections),
            ),
            academic_tone="Good" if len(corrections) < 3 else "Needs improvement",
            clarity="Good" if len(enhancements) < 2 else "Can be improved",
        ),
        statistics=ProofreadingStatistics(
            total_corrections=len(corrections) + len(enhancements),
            grammar_errors=sum(1 for c in corrections if c.type == "grammar"),
            spelling_errors=sum(1 for c in corrections if c.type == "spelling"),
            punctuation_errors=sum(1 for c in corrections if c.type == "punctuation"),
            style_improvements=len(enhancements),
            vocabulary_enhancements=len(enhancements),
        ),
        provider="local-enhanced",
    )


def result_from_response(data: dict[str, Any], original: str) -> ProofreadingResult:
    """Normalise Groq's camelCase JSON into a ProofreadingResult."""
    corrections = [
        Correction(
            type=str(item.get("type") or "grammar"),
            original_text=str(item.get("originalText") or ""),
            corrected_text=str(item.get("correctedText") or ""),
            position=int(item.get("position") or 0),
            explanation=str(item.get("explanation") or ""),
            category=str(item.get("category") or ""),
            severity=item.get("severity") if item.get("severity") in ("high", "medium", "low") else "medium",
            grammar_tip=str(item.get("grammarTip") or ""),
        )
        for item in data.get("corrections") or []
        if isinstance(item, dict)
    ]
    enhancements = [
        StyleEnhancement(
            original_phrase=str(item.get("originalPhrase") or ""),
            enhanced_phrase=str(item.get("enhancedPhrase") or ""),
            reason=str(item.get("reason") or ""),
            position=int(item.get("position") or 0),
        )
        for item in data.get("styleEnhancements") or []
        if isinstance(item, dict)
    ]

    feedback = data.get("overallFeedback")
    if not isinstance(feedback, dict):
        feedback = {}
    stats = data.get("statistics")
    if not isinstance(stats, dict):
        stats = {}

    return ProofreadingResult(
        corrected_text=str(data.get("correctedText") or original),
        corrections=corrections,
        style_enhancements=enhancements,
        overall_feedback=OverallFeedback(
            strengths=[str(s) for s in feedback.get("strengths") or []],
            improvements=[str(s) for s in feedback.get("improvements") or []],
            writing_score=max(0, min(100, int(feedback.get("writingScore") or 75))),
            academic_tone=str(feedback.get("academicTone") or ""),
            clarity=str(feedback.get("clarity") or ""),
        ),
        statistics=ProofreadingStatistics(
            total_corrections=int(stats.get("totalCorrections") or len(corrections)),
            grammar_errors=int(stats.get("grammarErrors") or 0),
            spelling_errors=int(stats.get("spellingErrors") or 0),
            punctuation_errors=int(stats.get("punctuationErrors") or 0),
            style_improvements=int(stats.get("styleImprovements") or len(enhancements)),
            vocabulary_enhancements=int(stats.get("vocabularyEnhancements") or 0),
        ),
        provider="groq",
    )


class ProofreadingService:
    """Groq first, local rule tables otherwise."""

    def __init__(self, groq_llm: Optional[LLMService] = None):
        self.groq_llm = groq_llm

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ProofreadingService":
        settings = settings or get_settings()
        groq_llm = None
        if settings.groq_api_key:
            groq_llm = LLMService(
                settings.groq_api_key,
                provider="groq",
                model_id=settings.proofreading_model,
                base_url=settings.groq_base_url,
                max_retries=settings.llm_max_retries,
                timeout=settings.llm_timeout_seconds,
            )
        return cls(groq_llm=groq_llm)

    def proofread(self, text: str) -> ProofreadingResult:
        if not text or not text.strip():
            raise ValueError("No content provided")

        if self.groq_llm is not None:
            try:
                raw = self.groq_llm.call(
                    PROOFREADING_TEMPLATE.render(content=text),
                    temperature=PROOFREADING_TEMPERATURE,
                    max_tokens=PROOFREADING_MAX_TOKENS,
                    json_mode=False,
                )
                data = extract_json(raw)
                if data is not None:
                    return result_from_response(data, text)
                logger.warning(f"Groq proofreading response was not JSON: {raw[:200]!r}")
            except LLMServiceError as e:
                logger.warning(f"Groq proofreading failed: {e}")
            except (ValidationError, TypeError, ValueError) as e:
                logger.warning(f"Groq proofreading response could not be normalised: {e}")

        return local_proofread(text)
