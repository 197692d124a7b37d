"""
Review Service — Application layer orchestrator.

Coordinates loading records from the repository, applying review outcomes,
scheduling, and selecting review queues.
"""

import asyncio
import logging
from collections import Counter
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from mneme.domain.models import ReviewMode, ReviewOutcome, WordReviewRecord
from mneme.domain.ports import ReviewRecordRepository

from .mastery import MasteryUpdater
from .progress import ProgressSummary, summarize_progress
from .scheduler import ReviewScheduler
from .selector import ReviewSelection, ReviewSelector

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Application service for recording reviews and building review queues.

    Follows Dependency Inversion: depends on ReviewRecordRepository abstraction,
    not concrete adapter implementations.

    Reviews of the same (user, word) are serialized with a per-key lock so
    two concurrent events never both build on the same stale record.
    """

    def __init__(
        self,
        repository: ReviewRecordRepository,
        updater: MasteryUpdater | None = None,
        scheduler: ReviewScheduler | None = None,
        selector: ReviewSelector | None = None,
    ):
        """
        Args:
            repository: The repository (port) holding review records.
            updater: Optional custom mastery updater; uses default if not provided.
            scheduler: Optional custom scheduler; uses default if not provided.
            selector: Optional custom selector; uses default if not provided.
        """
        self._repo = repository
        self._updater = updater or MasteryUpdater()
        self._scheduler = scheduler or ReviewScheduler()
        self._selector = selector or ReviewSelector()
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}
        self._lock_users: Counter[tuple[str, str]] = Counter()

    @asynccontextmanager
    async def _word_lock(self, user_id: str, word_id: str) -> AsyncIterator[None]:
        # A key stays in _locks only while someone holds or awaits its lock.
        key = (user_id, word_id)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    async def record_review(
        self,
        user_id: str,
        word_id: str,
        outcome: ReviewOutcome,
        now: datetime,
    ) -> WordReviewRecord:
        """
        Apply one review event and persist the scheduled result.

        Args:
            user_id: Owner of the record.
            word_id: Reviewed word.
            outcome: Review result.
            now: Time of the review.

        Returns:
            The stored record, with next_review_at set.
        """
        async with self._word_lock(user_id, word_id):
            current = await self._repo.get(user_id, word_id)
            updated = self._updater.apply(current, outcome, now, word_id=word_id)
            scheduled = self._scheduler.schedule(updated, now)
            await self._repo.save(user_id, scheduled)

        logger.info(
            f"Reviewed {word_id} ({'correct' if outcome.correct else 'incorrect'}): "
            f"mastery {scheduled.mastery_level}, streak {scheduled.streak_count}, "
            f"next {scheduled.next_review_at.isoformat()}"
        )
        return scheduled

    async def reset_progress(self, user_id: str, word_id: str) -> WordReviewRecord:
        """
        Replace a word's record with a fresh one.
        """
        async with self._word_lock(user_id, word_id):
            fresh = WordReviewRecord.new(word_id)
            await self._repo.save(user_id, fresh)

        logger.info(f"Reset progress of {word_id} for {user_id}")
        return fresh

    async def review_queue(
        self,
        user_id: str,
        mode: ReviewMode | str,
        now: datetime,
        limit: int | None = None,
        include_new: bool = False,
    ) -> ReviewSelection:
        """
        Fetch the user's records and select the ones to review.

        Useful as the single entry point for a review page.
        """
        records = await self._repo.list_records(user_id)
        selection = self._selector.select(
            records, mode, now, limit=limit, include_new=include_new
        )
        logger.debug(f"{len(selection)} of {len(records)} words selected ({mode})")
        return selection

    async def progress(self, user_id: str, now: datetime) -> ProgressSummary:
        records = await self._repo.list_records(user_id)
        return summarize_progress(records, now, selector=self._selector)
