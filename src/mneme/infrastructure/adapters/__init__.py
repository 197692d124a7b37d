# Record store adapters
from .memory_store import InMemoryRecordRepository
from .yaml_store import YamlRecordRepository

__all__ = ["InMemoryRecordRepository", "YamlRecordRepository"]
