"""Application constants - all magic numbers centralized."""

# Default writing limits (settings store)
DEFAULT_TIME_LIMIT_MINUTES = 30
DEFAULT_WORD_LIMIT = 500
DEFAULT_BACKSPACE_LIMIT = 10
DEFAULT_SPACING_AFTER_WORDS = 1
DEFAULT_AUTO_SAVE = True
DEFAULT_SETTINGS_PROFILE = "default"

# Accepted settings ranges (inclusive)
TIME_LIMIT_MINUTES_RANGE = (1, 300)
WORD_LIMIT_RANGE = (50, 10000)
BACKSPACE_LIMIT_RANGE = (0, 100)
SPACING_AFTER_WORDS_RANGE = (1, 3)

# Deletion keys intercepted before they mutate content
DELETION_KEYS = frozenset({"Backspace", "Delete"})

# Grade bands (overall score lower bounds)
GRADE_BANDS = [(90, "A"), (80, "B"), (70, "C"), (60, "D")]
FAILING_GRADE = "F"

# Rubric maxima
STRUCTURE_MAX = 25
THESIS_MAX = 20
LANGUAGE_MAX = 15
GRAMMAR_MAX = 25
ACADEMIC_MAX = 15

# Local fallback scoring
LOCAL_BASE_SCORE = 85
LOCAL_MIN_SCORE = 40
LOCAL_PENALTY_PER_ISSUE = 3
LOCAL_GRAMMAR_MIN = 5
LOCAL_GRAMMAR_PENALTY_PER_ISSUE = 2

# Typing discipline
DELETION_LIMIT_PENALTY = 20

# Proofreading
PROOFREADING_MIN_SCORE = 60
PROOFREADING_PENALTY_PER_CORRECTION = 5
MISSING_PERIOD_MIN_LINE_LENGTH = 10

# Topic source
ARTICLES_PER_FEED = 5
MAX_TOPICS = 20
DESCRIPTION_MAX_CHARS = 200
BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
