"""
In-memory record repository.

Implements ReviewRecordRepository with a process-local dictionary. Used by
tests and by the `memory` backend for throwaway sessions.
"""

from mneme.domain.models import WordReviewRecord
from mneme.domain.ports import ReviewRecordRepository


class InMemoryRecordRepository(ReviewRecordRepository):
    def __init__(self) -> None:
        self._records: dict[str, dict[str, WordReviewRecord]] = {}

    async def get(self, user_id: str, word_id: str) -> WordReviewRecord | None:
        return self._records.get(user_id, {}).get(word_id)

    async def save(self, user_id: str, record: WordReviewRecord) -> None:
        self._records.setdefault(user_id, {})[record.word_id] = record

    async def list_records(self, user_id: str) -> list[WordReviewRecord]:
        return list(self._records.get(user_id, {}).values())
