"""
Rule tables for local grammar analysis and proofreading.

Each table is an ordered list of ``(pattern, replacement, metadata)``
triples. Tables are applied independently; there is no parsing.
"""

import re
from typing import Any, Optional


Rule = tuple[re.Pattern, Optional[str], dict[str, Any]]


def _word(word: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)


# ─── Grading checks ───────────────────────────────────────────────────

COMMON_MISSPELLINGS: list[Rule] = [
    (_word(wrong), right, {"category": "spelling"})
    for wrong, right in [
        ("recieve", "receive"),
        ("seperate", "separate"),
        ("definately", "definitely"),
        ("occured", "occurred"),
        ("begining", "beginning"),
        ("writting", "writing"),
        ("grammer", "grammar"),
        ("alot", "a lot"),
        ("thier", "their"),
        ("freind", "friend"),
        ("importent", "important"),
        ("techenology", "technology"),
        ("informations", "information"),
    ]
]

# Replacement is None: the correction swaps the verb, see swap_verb_number().
SUBJECT_VERB_AGREEMENT: list[Rule] = [
    (
        re.compile(r"\b(he|she|it)\s+(are|were)\b", re.IGNORECASE),
        None,
        {"category": "subject_verb_agreement", "message": "Singular subject requires singular verb"},
    ),
    (
        re.compile(r"\b(they|we)\s+(is|was)\b", re.IGNORECASE),
        None,
        {"category": "subject_verb_agreement", "message": "Plural subject requires plural verb"},
    ),
    (
        re.compile(r"\bmany\s+\w+\s+is\b", re.IGNORECASE),
        None,
        {"category": "subject_verb_agreement", "message": '"Many" requires plural verb "are"'},
    ),
    (
        re.compile(r"\beach\s+\w+\s+are\b", re.IGNORECASE),
        None,
        {"category": "subject_verb_agreement", "message": '"Each" requires singular verb "is"'},
    ),
]

CONJUNCTION = re.compile(r"\s+(and|but|or|so|yet)\s+", re.IGNORECASE)

# A clause needs more than this many words before the conjunction to want a comma.
CONJUNCTION_MIN_CLAUSE_WORDS = 3

SENTENCE_SPLIT = re.compile(r"[.!?]+")
LOWERCASE_START = re.compile(r"^[a-z]")
TERMINAL_PUNCTUATION = re.compile(r"[.!?:;]\s*$")

_VERB_SWAP = {"is": "are", "are": "is", "was": "were", "were": "was"}
_VERB = re.compile(r"\b(is|are|was|were)\b", re.IGNORECASE)


def swap_verb_number(text: str) -> str:
    """Swap singular/plural forms of 'to be' in ``text``."""
    return _VERB.sub(lambda m: _VERB_SWAP[m.group(0).lower()], text)


# ─── Proofreading ─────────────────────────────────────────────────────

PROOFREADING_GRAMMAR: list[Rule] = [
    (
        re.compile(r"\btheir\s+are\b", re.IGNORECASE),
        "there are",
        {"type": "grammar", "category": "Pronoun Usage",
         "explanation": 'Use "there are" for existence, "their" for possession'},
    ),
    (
        re.compile(r"\bits\s+a\b", re.IGNORECASE),
        "it's a",
        {"type": "grammar", "category": "Contraction",
         "explanation": 'Use "it\'s" (it is) instead of "its" (possessive)'},
    ),
    (
        re.compile(r"\byour\s+welcome\b", re.IGNORECASE),
        "you're welcome",
        {"type": "grammar", "category": "Contraction",
         "explanation": 'Use "you\'re" (you are) instead of "your" (possessive)'},
    ),
    (
        re.compile(r"\bto\s+much\b", re.IGNORECASE),
        "too much",
        {"type": "grammar", "category": "Word Choice",
         "explanation": 'Use "too" for excess, "to" for direction'},
    ),
]

PROOFREADING_SPELLING: list[Rule] = [
    (_word("importent"), "important", {"type": "spelling", "explanation": 'Correct spelling is "important"'}),
    (_word("knowlegeable"), "knowledgeable", {"type": "spelling", "explanation": 'Correct spelling includes "dge"'}),
    (_word("criticaly"), "critically", {"type": "spelling", "explanation": 'Adverb form requires "ally" ending'}),
    (_word("sucess"), "success", {"type": "spelling", "explanation": 'Correct spelling has double "c"'}),
    (_word("recieve"), "receive", {"type": "spelling", "explanation": 'Remember: "i before e except after c"'}),
    (_word("seperate"), "separate", {"type": "spelling", "explanation": 'Correct spelling has "a" in the middle'}),
]

# Style rules only suggest; they never rewrite the text.
PROOFREADING_STYLE: list[Rule] = [
    (_word("very good"), "excellent", {"reason": "More precise and academic language"}),
    (_word("a lot of"), "numerous", {"reason": "More formal academic expression"}),
    (_word("get"), "obtain", {"reason": "More formal verb choice"}),
    (_word("big"), "significant", {"reason": "More academic and precise"}),
    (_word("thing"), "aspect", {"reason": "More specific and academic"}),
]

LINE_START_LOWER = re.compile(r"^[a-z]", re.MULTILINE)
AFTER_TERMINATOR_LOWER = re.compile(r"([.!?])\s*([a-z])")
