"""
Domain models for word mastery tracking.

These are pure data structures with no I/O or external dependencies.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from types import MappingProxyType

from .constants import (
    DIFFICULTY_QUALITY,
    HIGH_CONFIDENCE_MASTERY,
    MASTERY_MAX,
    MASTERY_MIN,
    MAX_QUALITY,
    MEDIUM_CONFIDENCE_MASTERY,
    MIN_QUALITY,
    PASSING_QUALITY,
)


def clamp(value: int, low: int = MASTERY_MIN, high: int = MASTERY_MAX) -> int:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


class ActivityType(StrEnum):
    FLASHCARD = "flashcard"
    QUIZ = "quiz"
    TYPING = "typing"
    REVIEW = "review"


class ReviewMode(StrEnum):
    SCHEDULED = "scheduled"
    DIFFICULT = "difficult"


class Confidence(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class ActivityStat:
    """
    Usage counter for one study activity.

    Attributes:
        count: Reviews recorded through this activity.
        last_used: Time of the latest review through this activity.
    """

    count: int = 0
    last_used: datetime | None = None


@dataclass(frozen=True)
class ReviewOutcome:
    """
    The result of a single review event.

    Only `correct` drives the scheduling math. `activity_type` and `quality`
    are carried for analytics.
    """

    correct: bool
    activity_type: ActivityType | None = None
    quality: int | None = None

    @classmethod
    def from_quality(
        cls, quality: int, activity_type: ActivityType | None = None
    ) -> "ReviewOutcome":
        """
        Build an outcome from an SM-2 style grade.

        Grades 0-2 are failed recalls, 3-5 are successful ones.
        """
        if not MIN_QUALITY <= quality <= MAX_QUALITY:
            raise ValueError(
                f"Quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {quality}"
            )
        return cls(
            correct=quality >= PASSING_QUALITY,
            activity_type=activity_type,
            quality=quality,
        )

    @classmethod
    def from_difficulty(
        cls, difficulty: str, activity_type: ActivityType | None = None
    ) -> "ReviewOutcome":
        """Build an outcome from a flashcard button label (again/hard/medium/easy)."""
        try:
            quality = DIFFICULTY_QUALITY[difficulty.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown difficulty {difficulty!r}; expected one of "
                f"{', '.join(DIFFICULTY_QUALITY)}"
            ) from None
        return cls.from_quality(quality, activity_type=activity_type)


@dataclass(frozen=True)
class WordReviewRecord:
    """
    Review state of one word for one user.

    Attributes:
        word_id: Opaque word identifier.
        mastery_level: Retention confidence, 0-100. Clamped on construction.
        total_reviews: All review events applied so far.
        correct_count: Correct reviews.
        incorrect_count: Incorrect reviews.
        streak_count: Consecutive correct reviews since the last incorrect one.
        last_reviewed_at: Time of the latest review, None if never reviewed.
        next_review_at: Time the word is next due, None if never scheduled.
        first_reviewed_at: Time of the first review, set once.
        last_result: Whether the latest review was correct.
        last_activity: Activity of the latest review.
        activity_stats: Per-activity usage counters. Read-only, and left out
            of the hash.
    """

    word_id: str
    mastery_level: int = 0
    total_reviews: int = 0
    correct_count: int = 0
    incorrect_count: int = 0
    streak_count: int = 0
    last_reviewed_at: datetime | None = None
    next_review_at: datetime | None = None
    first_reviewed_at: datetime | None = None
    last_result: bool | None = None
    last_activity: ActivityType | None = None
    activity_stats: Mapping[ActivityType, ActivityStat] = field(
        default_factory=dict, hash=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "mastery_level", clamp(int(self.mastery_level)))
        object.__setattr__(
            self, "activity_stats", MappingProxyType(dict(self.activity_stats))
        )

    @classmethod
    def new(cls, word_id: str) -> "WordReviewRecord":
        """A record for a word presented for the first time (or reset)."""
        return cls(word_id=word_id)

    @property
    def is_studied(self) -> bool:
        return self.total_reviews > 0

    @property
    def confidence(self) -> Confidence:
        if self.mastery_level >= HIGH_CONFIDENCE_MASTERY:
            return Confidence.HIGH
        if self.mastery_level >= MEDIUM_CONFIDENCE_MASTERY:
            return Confidence.MEDIUM
        return Confidence.LOW
