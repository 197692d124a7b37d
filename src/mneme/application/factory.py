"""
Review Service Factory
Centralizes the logic for selecting the record store and wiring policies.
"""

from mneme.domain.ports import ReviewRecordRepository
from mneme.infrastructure.adapters.memory_store import InMemoryRecordRepository
from mneme.infrastructure.adapters.yaml_store import YamlRecordRepository

from .config import AppConfig
from .mastery import MasteryUpdater
from .review_service import ReviewService
from .scheduler import ReviewScheduler
from .selector import ReviewSelector


def get_record_repository(config: AppConfig) -> ReviewRecordRepository:
    """
    Returns the ReviewRecordRepository implementation selected by config.
    """
    if config.backend == "memory":
        return InMemoryRecordRepository()
    return YamlRecordRepository(config.store_path)


def get_review_service(
    config: AppConfig, repository: ReviewRecordRepository | None = None
) -> ReviewService:
    """
    Builds a ReviewService whose policies come from config.
    """
    return ReviewService(
        repository or get_record_repository(config),
        updater=MasteryUpdater(config.mastery_policy()),
        scheduler=ReviewScheduler(config.interval_table()),
        selector=ReviewSelector(config.selection_policy()),
    )
