"""Centralized constants for mneme.

All scheduling defaults live here so every layer imports from a single
source of truth. Configuration may override the policy values at runtime.
"""

# ---------- Mastery ----------
MASTERY_MIN = 0
MASTERY_MAX = 100
CORRECT_DELTA = 10
INCORRECT_DELTA = -5

# ---------- Confidence / progress bands ----------
HIGH_CONFIDENCE_MASTERY = 80
MEDIUM_CONFIDENCE_MASTERY = 50
MASTERED_THRESHOLD = 80
STREAK_WORD_THRESHOLD = 3

# ---------- Scheduling ----------
# Days until the next review, indexed by consecutive-correct streak.
INTERVAL_DAYS = (1, 1, 3, 7, 14, 30, 60)
MAX_INTERVAL_DAYS = 36500

# ---------- Selection ----------
DIFFICULT_THRESHOLD = 50
# (minimum mastery, days since last review) for records without a schedule.
FALLBACK_BANDS = ((80, 7), (60, 3), (40, 2), (0, 1))
DEFAULT_QUEUE_LIMIT = 50

# ---------- Graded outcomes ----------
MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3
DIFFICULTY_QUALITY = {"again": 1, "hard": 3, "medium": 4, "easy": 5}
