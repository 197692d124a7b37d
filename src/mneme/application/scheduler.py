"""
Review scheduler: spaced-repetition intervals keyed by correct streak.

This is a pure computation module with no I/O.
"""

from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime, timedelta

from mneme.domain.constants import INTERVAL_DAYS, MAX_INTERVAL_DAYS
from mneme.domain.models import WordReviewRecord


class IntervalTable:
    """
    Days until the next review for a given consecutive-correct streak.

    Streaks inside the table map directly. Each step past the end doubles
    the last entry, bounded by max_days.
    """

    def __init__(
        self,
        days: Sequence[int] = INTERVAL_DAYS,
        max_days: int = MAX_INTERVAL_DAYS,
    ):
        days = tuple(days)
        if not days:
            raise ValueError("Interval table must not be empty")
        if any(d < 1 for d in days):
            raise ValueError(f"Intervals must be at least one day: {days}")
        if any(a > b for a, b in zip(days, days[1:])):
            raise ValueError(f"Interval table must be non-decreasing: {days}")
        if max_days < days[-1]:
            raise ValueError(
                f"max_days ({max_days}) is below the last table entry ({days[-1]})"
            )
        if max_days > timedelta.max.days:
            raise ValueError(f"max_days must be at most {timedelta.max.days}, got {max_days}")
        self.days = days
        self.max_days = max_days

    def interval_days(self, streak: int) -> int:
        if streak < 0:
            raise ValueError(f"streak_count must be non-negative, got {streak}")

        if streak < len(self.days):
            return self.days[streak]

        last = self.days[-1]
        extra = streak - len(self.days) + 1
        # Stop doubling once past the ceiling so huge streaks stay cheap.
        interval = last
        for _ in range(extra):
            interval *= 2
            if interval >= self.max_days:
                return self.max_days
        return interval


class ReviewScheduler:
    """
    Computes next_review_at from a freshly updated record.

    The only writer of next_review_at.
    """

    def __init__(self, table: IntervalTable | None = None):
        self.table = table or IntervalTable()

    def interval_days(self, record: WordReviewRecord) -> int:
        return self.table.interval_days(record.streak_count)

    def next_due(self, record: WordReviewRecord, now: datetime) -> datetime:
        """
        Next due time of a record.

        A record that was never reviewed is due immediately. Dates past
        datetime.max are pinned to it.
        """
        if record.last_reviewed_at is None:
            return now
        interval = timedelta(days=self.interval_days(record))
        latest = datetime.max.replace(tzinfo=record.last_reviewed_at.tzinfo)
        if interval > latest - record.last_reviewed_at:
            return latest
        return record.last_reviewed_at + interval

    def schedule(self, record: WordReviewRecord, now: datetime) -> WordReviewRecord:
        """Return the record with next_review_at filled in."""
        return replace(record, next_review_at=self.next_due(record, now))


_default_scheduler = ReviewScheduler()


def compute_next_due(record: WordReviewRecord, now: datetime) -> datetime:
    """Next due time using the default 1/1/3/7/14/30/60 day table."""
    return _default_scheduler.next_due(record, now)
