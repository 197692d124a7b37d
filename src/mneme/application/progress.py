"""
Progress summary for a user's vocabulary.

This is a pure computation module with no I/O.
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from mneme.domain.constants import MASTERED_THRESHOLD, STREAK_WORD_THRESHOLD
from mneme.domain.models import ReviewMode, WordReviewRecord

from .selector import ReviewSelector


@dataclass
class ProgressSummary:
    """Aggregate study statistics over all words of a user."""

    total_words: int
    total_studied: int
    total_mastered: int
    average_mastery: int  # Rounded mean over studied words
    streak_words: int
    due_count: int
    difficult_count: int
    activity_counts: dict[str, int] = field(default_factory=dict)


def summarize_progress(
    records: Iterable[WordReviewRecord],
    now: datetime,
    selector: ReviewSelector | None = None,
) -> ProgressSummary:
    """
    Summarize a user's records.

    A word is studied once it has at least one review. Mastered words are at
    or above 80 mastery; streak words have three or more correct in a row.
    """
    selector = selector or ReviewSelector()
    records = list(records)
    studied = [r for r in records if r.is_studied]

    average = 0
    if studied:
        average = round(sum(r.mastery_level for r in studied) / len(studied))

    activity_counts: Counter[str] = Counter()
    for record in records:
        for activity, stat in record.activity_stats.items():
            activity_counts[str(activity)] += stat.count

    return ProgressSummary(
        total_words=len(records),
        total_studied=len(studied),
        total_mastered=sum(1 for r in records if r.mastery_level >= MASTERED_THRESHOLD),
        average_mastery=average,
        streak_words=sum(1 for r in records if r.streak_count >= STREAK_WORD_THRESHOLD),
        due_count=len(selector.select(records, ReviewMode.SCHEDULED, now)),
        difficult_count=len(selector.select(records, ReviewMode.DIFFICULT, now)),
        activity_counts=dict(activity_counts),
    )
