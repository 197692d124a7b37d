"""Tests for the YAML record repository."""

from datetime import datetime, timezone

import pytest
import yaml

from mneme.domain.errors import RecordStoreError
from mneme.domain.models import WordReviewRecord
from mneme.infrastructure.adapters.memory_store import InMemoryRecordRepository
from mneme.infrastructure.adapters.yaml_store import YamlRecordRepository

T = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "progress.yaml"


@pytest.mark.asyncio
async def test_missing_file_reads_empty(store_path):
    repo = YamlRecordRepository(store_path)
    assert await repo.get("u1", "w") is None
    assert await repo.list_records("u1") == []


@pytest.mark.asyncio
async def test_save_and_reload(store_path):
    record = WordReviewRecord(
        "lucid", mastery_level=20, total_reviews=2, correct_count=2, streak_count=2,
        last_reviewed_at=T, next_review_at=T, first_reviewed_at=T,
    )
    await YamlRecordRepository(store_path).save("u1", record)

    assert store_path.exists()
    fresh = YamlRecordRepository(store_path)
    assert await fresh.get("u1", "lucid") == record
    assert await fresh.list_records("u1") == [record]
    assert await fresh.list_records("u2") == []


@pytest.mark.asyncio
async def test_file_layout(store_path):
    repo = YamlRecordRepository(store_path)
    await repo.save("u1", WordReviewRecord("a", mastery_level=10))
    await repo.save("u2", WordReviewRecord("b", mastery_level=20))

    doc = yaml.safe_load(store_path.read_text(encoding="utf-8"))
    assert set(doc["users"]) == {"u1", "u2"}
    assert doc["users"]["u1"]["a"]["mastery_level"] == 10


@pytest.mark.asyncio
async def test_save_replaces_existing(store_path):
    repo = YamlRecordRepository(store_path)
    await repo.save("u1", WordReviewRecord("a", mastery_level=10))
    await repo.save("u1", WordReviewRecord("a", mastery_level=30))
    assert (await repo.get("u1", "a")).mastery_level == 30
    assert len(await repo.list_records("u1")) == 1


@pytest.mark.asyncio
async def test_hand_edited_legacy_record(store_path):
    store_path.parent.mkdir(parents=True)
    store_path.write_text(
        "users:\n  u1:\n    lucid:\n      masteryLevel: 0.5\n      streakCount: 2\n",
        encoding="utf-8",
    )
    record = await YamlRecordRepository(store_path).get("u1", "lucid")
    assert record.mastery_level == 50
    assert record.streak_count == 2


@pytest.mark.asyncio
async def test_corrupt_yaml_raises(store_path):
    store_path.parent.mkdir(parents=True)
    store_path.write_text("users: [unclosed\n", encoding="utf-8")
    with pytest.raises(RecordStoreError):
        await YamlRecordRepository(store_path).list_records("u1")


@pytest.mark.asyncio
async def test_wrong_shape_raises(store_path):
    store_path.parent.mkdir(parents=True)
    store_path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(RecordStoreError):
        await YamlRecordRepository(store_path).get("u1", "w")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "entry",
    [
        "mastery_level: lots",
        "mastery_level: [1]",
        "streak_count: [1]",
        "total_reviews: {n: 1}",
        "activityStats: {quiz: {count: [2]}}",
    ],
)
async def test_invalid_record_raises(store_path, entry):
    store_path.parent.mkdir(parents=True)
    store_path.write_text(f"users:\n  u1:\n    w:\n      {entry}\n", encoding="utf-8")
    with pytest.raises(RecordStoreError, match="Invalid record"):
        await YamlRecordRepository(store_path).get("u1", "w")


@pytest.mark.asyncio
async def test_in_memory_repository():
    repo = InMemoryRecordRepository()
    record = WordReviewRecord("a", mastery_level=10)
    await repo.save("u1", record)
    assert await repo.get("u1", "a") is record
    assert await repo.get("u1", "b") is None
    assert await repo.list_records("u1") == [record]
    assert await repo.list_records("u2") == []
