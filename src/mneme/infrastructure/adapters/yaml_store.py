"""
YAML Record Repository — Infrastructure adapter for a single progress file.

Implements ReviewRecordRepository on top of one YAML document:

    users:
      <user_id>:
        <word_id>: {mastery_level: 10, streak_count: 1, ...}
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml  # type: ignore
from pydantic import ValidationError

from mneme.domain.errors import RecordStoreError
from mneme.domain.models import WordReviewRecord
from mneme.domain.ports import ReviewRecordRepository

from .record_schema import record_from_dict, record_to_dict

logger = logging.getLogger(__name__)


class YamlRecordRepository(ReviewRecordRepository):
    """
    Reads the whole file per call and rewrites it atomically on save.

    Missing files read as empty. A malformed file or record raises
    RecordStoreError instead of being silently overwritten.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    async def get(self, user_id: str, word_id: str) -> WordReviewRecord | None:
        raw = self._user_section(self._load(), user_id).get(word_id)
        if raw is None:
            return None
        return self._parse(raw, word_id)

    async def save(self, user_id: str, record: WordReviewRecord) -> None:
        doc = self._load()
        users = doc.setdefault("users", {})
        section = users.setdefault(user_id, {})
        section[record.word_id] = record_to_dict(record)
        self._dump(doc)
        logger.debug(f"Saved {record.word_id} for {user_id} to {self.path}")

    async def list_records(self, user_id: str) -> list[WordReviewRecord]:
        section = self._user_section(self._load(), user_id)
        return [self._parse(raw, word_id) for word_id, raw in section.items()]

    def _parse(self, raw: Any, word_id: str) -> WordReviewRecord:
        if not isinstance(raw, dict):
            raise RecordStoreError(f"Record {word_id!r} in {self.path} is not a mapping")
        try:
            return record_from_dict({"word_id": word_id, **raw})
        except ValidationError as e:
            raise RecordStoreError(f"Invalid record {word_id!r} in {self.path}: {e}") from e

    def _user_section(self, doc: dict[str, Any], user_id: str) -> dict[str, Any]:
        section = doc.get("users", {}).get(user_id) or {}
        if not isinstance(section, dict):
            raise RecordStoreError(f"User section {user_id!r} in {self.path} is not a mapping")
        return section

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            doc = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Could not read progress file {self.path}: {e}")
            raise RecordStoreError(f"Could not read {self.path}: {e}") from e

        if doc is None:
            return {}
        if not isinstance(doc, dict) or not isinstance(doc.get("users", {}), dict):
            raise RecordStoreError(f"{self.path} is not a mneme progress file")
        return doc

    def _dump(self, doc: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                yaml.safe_dump(doc, fh, sort_keys=True, allow_unicode=True)
            os.replace(tmp, self.path)
        except OSError as e:
            logger.error(f"Could not write progress file {self.path}: {e}")
            raise RecordStoreError(f"Could not write {self.path}: {e}") from e
