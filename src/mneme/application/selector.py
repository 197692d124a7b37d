"""
Review selector for building study queues.

Picks the records due for study and orders them hardest first:
1. `scheduled` mode uses next_review_at, falling back to mastery bands
   for records that were never scheduled
2. `difficult` mode picks reviewed words below a mastery threshold
3. Both modes sort by mastery, then by longest time since review
"""

from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from mneme.domain.constants import DIFFICULT_THRESHOLD, FALLBACK_BANDS
from mneme.domain.models import ReviewMode, WordReviewRecord


@dataclass(frozen=True)
class SelectionPolicy:
    """
    Thresholds used when selecting review candidates.

    Attributes:
        difficult_threshold: Mastery below this counts as difficult.
        fallback_bands: (minimum mastery, days) pairs, checked in order, for
            records without next_review_at.
    """

    difficult_threshold: int = DIFFICULT_THRESHOLD
    fallback_bands: tuple[tuple[int, int], ...] = FALLBACK_BANDS

    def band_days(self, mastery_level: int) -> int:
        for min_mastery, days in self.fallback_bands:
            if mastery_level >= min_mastery:
                return days
        return self.fallback_bands[-1][1]


def _sort_key(record: WordReviewRecord) -> tuple:
    # Never-reviewed words sort before any reviewed word.
    last = record.last_reviewed_at
    return (
        record.mastery_level,
        last is not None,
        last.timestamp() if last is not None else 0.0,
        record.word_id,
    )


class ReviewSelection(Sequence[WordReviewRecord]):
    """
    Ordered review candidates, computed on first access.

    Iterating always starts from the first candidate.
    """

    def __init__(
        self,
        records: Iterable[WordReviewRecord],
        select: Callable[[list[WordReviewRecord]], list[WordReviewRecord]],
        limit: int | None = None,
    ):
        self._records = records
        self._select = select
        self._limit = limit
        self._items: list[WordReviewRecord] | None = None

    def _materialize(self) -> list[WordReviewRecord]:
        if self._items is None:
            items = sorted(self._select(list(self._records)), key=_sort_key)
            if self._limit is not None:
                items = items[: self._limit]
            self._items = items
            self._records = ()
        return self._items

    def __getitem__(self, index):
        return self._materialize()[index]

    def __len__(self) -> int:
        return len(self._materialize())

    def __iter__(self) -> Iterator[WordReviewRecord]:
        return iter(self._materialize())

    def __repr__(self) -> str:
        state = "pending" if self._items is None else f"{len(self._items)} records"
        return f"<ReviewSelection {state}>"


class ReviewSelector:
    """
    Filters and orders caller-supplied records. Never touches storage.
    """

    def __init__(self, policy: SelectionPolicy | None = None):
        self.policy = policy or SelectionPolicy()

    def select(
        self,
        records: Iterable[WordReviewRecord],
        mode: ReviewMode | str,
        now: datetime,
        limit: int | None = None,
        include_new: bool = False,
    ) -> ReviewSelection:
        """
        Select records for review.

        Args:
            records: Records of one user.
            mode: 'scheduled' or 'difficult'.
            now: Current time.
            limit: Optional cap on the number of returned records.
            include_new: In scheduled mode, also return never-reviewed words.

        Returns:
            A lazy ReviewSelection ordered hardest first.
        """
        mode = ReviewMode(mode)
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        if mode is ReviewMode.DIFFICULT:
            return ReviewSelection(records, self._difficult, limit)

        def scheduled(items: list[WordReviewRecord]) -> list[WordReviewRecord]:
            return self._scheduled(items, now, include_new)

        return ReviewSelection(records, scheduled, limit)

    def _difficult(self, records: list[WordReviewRecord]) -> list[WordReviewRecord]:
        return [
            r
            for r in records
            if r.total_reviews > 0 and r.mastery_level < self.policy.difficult_threshold
        ]

    def _scheduled(
        self,
        records: list[WordReviewRecord],
        now: datetime,
        include_new: bool,
    ) -> list[WordReviewRecord]:
        due = [r for r in records if r.next_review_at is not None and r.next_review_at <= now]
        if not due:
            due = [r for r in records if self._overdue_by_band(r, now)]

        if include_new:
            picked = {id(r) for r in due}
            due.extend(
                r for r in records if r.last_reviewed_at is None and id(r) not in picked
            )
        return due

    def _overdue_by_band(self, record: WordReviewRecord, now: datetime) -> bool:
        if record.last_reviewed_at is None:
            return False
        elapsed = now - record.last_reviewed_at
        return elapsed >= timedelta(days=self.policy.band_days(record.mastery_level))


_default_selector = ReviewSelector()


def select_for_review(
    records: Iterable[WordReviewRecord],
    mode: ReviewMode | str,
    now: datetime,
    limit: int | None = None,
    include_new: bool = False,
) -> ReviewSelection:
    """Select review candidates with the default thresholds."""
    return _default_selector.select(
        records, mode, now, limit=limit, include_new=include_new
    )
