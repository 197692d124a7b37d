"""
Mastery updater: applies one review outcome to a word's record.

This is a pure computation module with no I/O.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from mneme.domain.constants import CORRECT_DELTA, INCORRECT_DELTA
from mneme.domain.models import (
    ActivityStat,
    ReviewOutcome,
    WordReviewRecord,
    clamp,
)


@dataclass(frozen=True)
class MasteryPolicy:
    """
    Point deltas applied to mastery_level per review.

    Attributes:
        correct_delta: Added on a correct review.
        incorrect_delta: Added on an incorrect review (normally negative).
    """

    correct_delta: int = CORRECT_DELTA
    incorrect_delta: int = INCORRECT_DELTA


class MasteryUpdater:
    """
    Maps (record, outcome) to a fresh record.

    Stateless and side-effect free. Never writes next_review_at.
    """

    def __init__(self, policy: MasteryPolicy | None = None):
        self.policy = policy or MasteryPolicy()

    def apply(
        self,
        record: WordReviewRecord | None,
        outcome: ReviewOutcome,
        now: datetime,
        word_id: str | None = None,
    ) -> WordReviewRecord:
        """
        Apply a review outcome.

        Args:
            record: Current record, or None for a word's first review.
            outcome: The review result.
            now: Time of the review.
            word_id: Required when record is None.

        Returns:
            A new record; the input is left untouched.

        Raises:
            ValueError: If the record carries a negative streak or counter.
        """
        if record is None:
            if word_id is None:
                raise ValueError("word_id is required for a first review")
            record = WordReviewRecord.new(word_id)

        for name in ("streak_count", "total_reviews", "correct_count", "incorrect_count"):
            if getattr(record, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(record, name)}")

        base = clamp(record.mastery_level)
        if outcome.correct:
            mastery = clamp(base + self.policy.correct_delta)
            streak = record.streak_count + 1
            correct_count = record.correct_count + 1
            incorrect_count = record.incorrect_count
        else:
            mastery = clamp(base + self.policy.incorrect_delta)
            streak = 0
            correct_count = record.correct_count
            incorrect_count = record.incorrect_count + 1

        activity_stats = dict(record.activity_stats)
        if outcome.activity_type is not None:
            previous = activity_stats.get(outcome.activity_type, ActivityStat())
            activity_stats[outcome.activity_type] = ActivityStat(
                count=previous.count + 1, last_used=now
            )

        return replace(
            record,
            mastery_level=mastery,
            total_reviews=record.total_reviews + 1,
            correct_count=correct_count,
            incorrect_count=incorrect_count,
            streak_count=streak,
            last_reviewed_at=now,
            first_reviewed_at=record.first_reviewed_at or now,
            last_result=outcome.correct,
            last_activity=outcome.activity_type or record.last_activity,
            activity_stats=activity_stats,
        )


_default_updater = MasteryUpdater()


def apply_review(
    record: WordReviewRecord | None,
    outcome: ReviewOutcome,
    now: datetime,
    word_id: str | None = None,
) -> WordReviewRecord:
    """Apply a review with the default +10/-5 policy."""
    return _default_updater.apply(record, outcome, now, word_id=word_id)
