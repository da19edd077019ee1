"""Proofreading result models."""

from typing import Literal
from pydantic import BaseModel, Field


ProofreadingProvider = Literal["groq", "local-enhanced", "passthrough"]


class Correction(BaseModel):
    type: str = Field(description="grammar | spelling | punctuation | style | vocabulary")
    original_text: str
    corrected_text: str
    position: int = 0
    explanation: str = ""
    category: str = ""
    severity: Literal["high", "medium", "low"] = "medium"
    grammar_tip: str = ""


class StyleEnhancement(BaseModel):
    original_phrase: str
    enhanced_phrase: str
    reason: str = ""
    position: int = 0


class OverallFeedback(BaseModel):
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    writing_score: int = Field(default=75, ge=0, le=100)
    academic_tone: str = ""
    clarity: str = ""


class ProofreadingStatistics(BaseModel):
    total_corrections: int = 0
    grammar_errors: int = 0
    spelling_errors: int = 0
    punctuation_errors: int = 0
    style_improvements: int = 0
    vocabulary_enhancements: int = 0


class ProofreadingResult(BaseModel):
    corrected_text: str
    corrections: list[Correction] = Field(default_factory=list)
    style_enhancements: list[StyleEnhancement] = Field(default_factory=list)
    overall_feedback: OverallFeedback = Field(default_factory=OverallFeedback)
    statistics: ProofreadingStatistics = Field(default_factory=ProofreadingStatistics)
    provider: ProofreadingProvider
