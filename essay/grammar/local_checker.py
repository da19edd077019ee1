"""
Local Grammar Checker

Offline regex analysis used when no grading provider produced a usable
report. Each rule table is applied to the essay independently.
"""

import re
from dataclasses import dataclass, field

from essay.grammar import rules
from essay.models.grading import GradingIssue

_SEGMENT = re.compile(r"[^.!?]+")


@dataclass
class LocalAnalysis:
    """Issues found by the local checker, with basic text counts."""

    issues: list[GradingIssue] = field(default_factory=list)
    sentence_count: int = 0
    word_count: int = 0
    character_count: int = 0

    @property
    def total_issues(self) -> int:
        return len(self.issues)


def _sentences(content: str) -> list[tuple[int, str]]:
    """(offset, trimmed text) of each non-empty sentence segment."""
    result = []
    for match in _SEGMENT.finditer(content):
        segment = match.group(0)
        trimmed = segment.strip()
        if trimmed:
            offset = match.start() + (len(segment) - len(segment.lstrip()))
            result.append((offset, trimmed))
    return result


def check_spelling(content: str) -> list[GradingIssue]:
    issues = []
    for pattern, replacement, meta in rules.COMMON_MISSPELLINGS:
        for match in pattern.finditer(content):
            issues.append(GradingIssue(
                category=meta["category"],
                original_text=match.group(0),
                correction=replacement,
                message=f'Spelling error: "{match.group(0)}" should be "{replacement}"',
                position=match.start(),
            ))
    return issues


def check_subject_verb_agreement(content: str) -> list[GradingIssue]:
    issues = []
    for pattern, _, meta in rules.SUBJECT_VERB_AGREEMENT:
        for match in pattern.finditer(content):
            issues.append(GradingIssue(
                category=meta["category"],
                original_text=match.group(0),
                correction=rules.swap_verb_number(match.group(0)),
                message=meta["message"],
                position=match.start(),
            ))
    return issues


def check_missing_periods(content: str) -> list[GradingIssue]:
    """Flag every line but the last that ends without terminal punctuation."""
    lines = [(m.start(), m.group(0)) for m in re.finditer(r"[^\n]+", content) if m.group(0).strip()]
    issues = []
    for offset, line in lines[:-1]:
        trimmed = line.rstrip()
        if not rules.TERMINAL_PUNCTUATION.search(trimmed):
            issues.append(GradingIssue(
                category="punctuation",
                original_text=trimmed.strip(),
                correction=trimmed.strip() + ".",
                message="Missing period at end of sentence",
                position=offset + len(trimmed),
            ))
    return issues


def check_conjunction_commas(content: str) -> list[GradingIssue]:
    issues = []
    for offset, sentence in _sentences(content):
        for match in rules.CONJUNCTION.finditer(sentence):
            before = sentence[:match.start()]
            if len(before.split()) > rules.CONJUNCTION_MIN_CLAUSE_WORDS and not before.endswith(","):
                conjunction = match.group(1)
                issues.append(GradingIssue(
                    category="punctuation",
                    original_text=match.group(0),
                    correction=f", {conjunction} ",
                    message=f'Missing comma before "{conjunction}" in compound sentence',
                    position=offset + match.start(),
                ))
    return issues


def check_capitalization(content: str) -> list[GradingIssue]:
    issues = []
    for offset, sentence in _sentences(content):
        if rules.LOWERCASE_START.match(sentence):
            issues.append(GradingIssue(
                category="capitalization",
                original_text=sentence[0],
                correction=sentence[0].upper(),
                message="First letter of sentence should be capitalized",
                position=offset,
            ))
    return issues


def analyze(content: str) -> LocalAnalysis:
    """Run every local check over ``content``."""
    issues: list[GradingIssue] = []
    issues.extend(check_spelling(content))
    issues.extend(check_missing_periods(content))
    issues.extend(check_conjunction_commas(content))
    issues.extend(check_capitalization(content))
    issues.extend(check_subject_verb_agreement(content))

    return LocalAnalysis(
        issues=issues,
        sentence_count=len(_sentences(content)),
        word_count=len(content.split()),
        character_count=len(content),
    )
