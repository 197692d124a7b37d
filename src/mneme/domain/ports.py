"""
Ports (interfaces) for review record persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import WordReviewRecord


class ReviewRecordRepository(ABC):
    """
    Port for loading and saving review records keyed by (user_id, word_id).

    Implementations:
        - InMemoryRecordRepository: Process-local dictionary.
        - YamlRecordRepository: A single YAML file on disk.
    """

    @abstractmethod
    async def get(self, user_id: str, word_id: str) -> WordReviewRecord | None:
        """
        Fetch the record of one word.

        Returns:
            The stored record, or None if the user never studied the word.
        """
        pass

    @abstractmethod
    async def save(self, user_id: str, record: WordReviewRecord) -> None:
        """
        Store a record, replacing any previous record of the same word.
        """
        pass

    @abstractmethod
    async def list_records(self, user_id: str) -> list[WordReviewRecord]:
        """
        Fetch every record of a user.

        Returns:
            Records in no particular order.
        """
        pass
