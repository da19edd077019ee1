"""
Prompt Templates

Grading and proofreading prompts with {variable} placeholders.
"""

from typing import Any, Optional
from string import Formatter

from shared.utils.exceptions import PromptTemplateError


class PromptTemplate:
    """Reusable template for generating prompts with {variable} placeholders."""

    def __init__(
        self,
        template: str,
        name: Optional[str] = None,
        defaults: Optional[dict[str, Any]] = None,
    ):
        self.template = template.strip()
        self.name = name or "unnamed"
        self.defaults = defaults or {}
        self.required_vars = self._extract_variables()

    def _extract_variables(self) -> set[str]:
        variables = set()
        for _, field_name, _, _ in Formatter().parse(self.template):
            if field_name:
                variables.add(field_name.split(".")[0].split("[")[0])
        return variables

    def render(self, **kwargs: Any) -> str:
        values = {**self.defaults, **kwargs}
        missing = self.required_vars - set(values.keys())
        if missing:
            raise PromptTemplateError(template_name=self.name, missing_vars=sorted(missing))
        return self.template.format(**values)

    def __repr__(self) -> str:
        return f"PromptTemplate(name='{self.name}', vars={self.required_vars})"


GRADING_SYSTEM_MESSAGE = (
    "You are an expert English teacher and grammar specialist with 20+ years of experience. "
    "You are extremely thorough in finding ALL types of errors - punctuation, grammar, spelling, "
    "and sentence formation. Always respond with valid JSON only, no additional text. "
    "Be as strict as a university professor grading essays."
)


GRADING_TEMPLATE = PromptTemplate(
    """You are an expert English teacher and academic writing assessor. Evaluate this essay comprehensively based on academic essay standards and provide detailed feedback.

EVALUATION CRITERIA:

1. ESSAY STRUCTURE (25 points): introduction with a clear thesis, body paragraphs with topic sentences and evidence, a conclusion, coherence between paragraphs.
2. THESIS STATEMENT & ARGUMENT DEVELOPMENT (20 points): clear, debatable thesis; evidence and reasoning; effective examples and analysis.
3. LANGUAGE & STYLE (15 points): clarity, concision, active voice, formal academic tone, no repetition.
4. GRAMMAR & MECHANICS (25 points): complete sentences, subject-verb agreement, punctuation, spelling, capitalization.
5. ACADEMIC WRITING CONVENTIONS (15 points): academic vocabulary, consistent tone, transitions, evident planning.

SCORING GUIDE:
- 90-100: Excellent (A)
- 80-89: Good (B)
- 70-79: Satisfactory (C)
- 60-69: Needs Improvement (D)
- Below 60: Unsatisfactory (F)

Deduct for every error found: grammar -2, punctuation -1, spelling -1, sentence structure -3.

Respond with JSON in exactly this format:
{{
  "overallScore": <0-100>,
  "grade": "A" | "B" | "C" | "D" | "F",
  "totalIssues": <number>,
  "structureScore": <0-25>,
  "thesisScore": <0-20>,
  "languageScore": <0-15>,
  "grammarScore": <0-25>,
  "academicScore": <0-15>,
  "structureAnalysis": {{
    "hasIntroduction": <bool>,
    "hasThesis": <bool>,
    "hasBodyParagraphs": <bool>,
    "hasConclusion": <bool>,
    "logicalFlow": <bool>,
    "feedback": "<specific feedback on structure>"
  }},
  "spellingIssues": [{{"word": "", "correction": "", "position": <number>, "message": "", "category": "spelling"}}],
  "sentenceStructureIssues": [{{"text": "", "correction": "", "position": <number>, "message": "", "category": "sentence_structure"}}],
  "subjectVerbAgreementIssues": [{{"text": "", "correction": "", "position": <number>, "message": "", "category": "subject_verb_agreement"}}],
  "capitalizationIssues": [{{"text": "", "correction": "", "position": <number>, "message": "", "category": "capitalization"}}],
  "punctuationIssues": [{{"text": "", "correction": "", "position": <number>, "message": "", "category": "punctuation"}}],
  "strengths": ["<positive aspects>"],
  "improvements": ["<suggestions>"],
  "summary": "<brief overall assessment>"
}}

Essay to analyze:
"{content}"

Check every sentence for punctuation, every subject-verb pair for agreement, every word for spelling, and every sentence for proper formation.""",
    name="essay_grading",
)


GEMINI_GRADING_TEMPLATE = PromptTemplate(
    """You are an expert English teacher and grammar checker. Analyze the following essay for spelling, grammar, and capitalization errors.

Respond with JSON in exactly this format:
{{
  "overallScore": <0-100>,
  "grade": "A" | "B" | "C" | "D" | "F",
  "totalIssues": <number>,
  "spellingIssues": [{{"word": "", "correction": "", "position": <number>, "message": "", "category": "spelling"}}],
  "grammarIssues": [{{"text": "", "correction": "", "position": <number>, "message": "", "category": "grammar"}}],
  "capitalizationIssues": [{{"text": "", "correction": "", "position": <number>, "message": "", "category": "capitalization"}}],
  "strengths": ["<positive aspects>"],
  "improvements": ["<suggestions>"],
  "summary": "<brief overall assessment>"
}}

Essay to analyze:
"{content}"

Focus on:
1. Spelling mistakes
2. Grammar errors (subject-verb agreement, tense consistency, word usage)
3. Capitalization errors (sentence beginnings, proper nouns)

Provide specific corrections and explanations for each error found.""",
    name="gemini_grading",
)


PROOFREADING_TEMPLATE = PromptTemplate(
    """You are an expert proofreading assistant specializing in error correction and style enhancement. Analyze the following essay.

1. GRAMMAR: subject-verb agreement, tense consistency, fragments, run-ons, pronoun usage.
2. SPELLING & PUNCTUATION: misspellings, punctuation, capitalization, apostrophes.
3. STYLE & VOCABULARY: word choice, sentence flow, academic tone, clarity, redundancy.
4. Explain every correction.

Respond with JSON in exactly this format:
{{
  "correctedText": "<fully corrected essay>",
  "corrections": [{{
    "type": "grammar|spelling|punctuation|style|vocabulary",
    "originalText": "", "correctedText": "", "position": <number>,
    "explanation": "", "category": "", "severity": "high|medium|low", "grammarTip": ""
  }}],
  "styleEnhancements": [{{"originalPhrase": "", "enhancedPhrase": "", "reason": "", "position": <number>}}],
  "overallFeedback": {{
    "strengths": [""], "improvements": [""], "writingScore": <0-100>,
    "academicTone": "", "clarity": ""
  }},
  "statistics": {{
    "totalCorrections": <number>, "grammarErrors": <number>, "spellingErrors": <number>,
    "punctuationErrors": <number>, "styleImprovements": <number>, "vocabularyEnhancements": <number>
  }}
}}

Essay to proofread:
"{content}"

Be thorough, accurate, and educational.""",
    name="proofreading",
)
