"""
Stored document schema for review records.

Converts between plain dicts (as kept in a store file or a document
database) and domain WordReviewRecord objects. Older documents use the
camelCase field names of the web app, nest their fields under
`studyStatus`, and sometimes store mastery as a 0-1 fraction; all of that
is normalized here so the engine only ever sees integer percentages.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from mneme.domain.models import ActivityStat, ActivityType, WordReviewRecord, clamp

_LEGACY_RESULTS = {"correct": True, "incorrect": False, "skipped": None}


def normalize_mastery(value: Any) -> int:
    """
    Coerce a stored mastery value to an integer percentage in [0, 100].

    Floats in [0.0, 1.0] are fractions; anything else is already a
    percentage. Out-of-range values are clamped.
    """
    if value is None:
        return 0
    if isinstance(value, float) and 0.0 <= value <= 1.0:
        value = value * 100
    try:
        return clamp(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"mastery must be a number, got {value!r}") from None


def _counter(value: Any) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"expected a whole number, got {value!r}") from None


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class StoredActivityStat(BaseModel):
    model_config = ConfigDict(extra="ignore")

    count: int = 0
    last_used: datetime | None = Field(
        default=None, validation_alias=AliasChoices("last_used", "lastUsed")
    )

    @field_validator("count", mode="before")
    @classmethod
    def non_negative_count(cls, v: Any) -> int:
        return _counter(v)

    @field_validator("last_used")
    @classmethod
    def utc_last_used(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)


class StoredRecord(BaseModel):
    """One review record as persisted by a store."""

    model_config = ConfigDict(extra="ignore")

    word_id: str = Field(validation_alias=AliasChoices("word_id", "wordId"))
    mastery_level: int = Field(
        default=0, validation_alias=AliasChoices("mastery_level", "masteryLevel")
    )
    total_reviews: int = Field(
        default=0,
        validation_alias=AliasChoices("total_reviews", "totalReviews", "reviewCount"),
    )
    correct_count: int = Field(
        default=0, validation_alias=AliasChoices("correct_count", "correctCount")
    )
    incorrect_count: int = Field(
        default=0, validation_alias=AliasChoices("incorrect_count", "incorrectCount")
    )
    streak_count: int = Field(
        default=0, validation_alias=AliasChoices("streak_count", "streakCount")
    )
    last_reviewed_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("last_reviewed_at", "lastReviewedAt", "lastStudied"),
    )
    next_review_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("next_review_at", "nextReviewAt", "nextReviewDate"),
    )
    first_reviewed_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("first_reviewed_at", "firstReviewedAt"),
    )
    last_result: bool | None = Field(
        default=None, validation_alias=AliasChoices("last_result", "lastResult")
    )
    last_activity: ActivityType | None = Field(
        default=None, validation_alias=AliasChoices("last_activity", "lastActivity")
    )
    activity_stats: dict[ActivityType, StoredActivityStat] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("activity_stats", "activityStats"),
    )

    @model_validator(mode="before")
    @classmethod
    def flatten_study_status(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("studyStatus"), dict):
            flat = {k: v for k, v in data.items() if k != "studyStatus"}
            flat.update(data["studyStatus"])
            return flat
        return data

    @field_validator("mastery_level", mode="before")
    @classmethod
    def percentage_mastery(cls, v: Any) -> int:
        return normalize_mastery(v)

    @field_validator(
        "total_reviews", "correct_count", "incorrect_count", "streak_count", mode="before"
    )
    @classmethod
    def non_negative_counter(cls, v: Any) -> int:
        return _counter(v)

    @field_validator("last_result", mode="before")
    @classmethod
    def legacy_result(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _LEGACY_RESULTS.get(v.lower())
        return v

    @field_validator("last_reviewed_at", "next_review_at", "first_reviewed_at")
    @classmethod
    def utc_timestamps(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v)

    @classmethod
    def from_domain(cls, record: WordReviewRecord) -> "StoredRecord":
        return cls(
            word_id=record.word_id,
            mastery_level=record.mastery_level,
            total_reviews=record.total_reviews,
            correct_count=record.correct_count,
            incorrect_count=record.incorrect_count,
            streak_count=record.streak_count,
            last_reviewed_at=record.last_reviewed_at,
            next_review_at=record.next_review_at,
            first_reviewed_at=record.first_reviewed_at,
            last_result=record.last_result,
            last_activity=record.last_activity,
            activity_stats={
                activity: StoredActivityStat(count=stat.count, last_used=stat.last_used)
                for activity, stat in record.activity_stats.items()
            },
        )

    def to_domain(self) -> WordReviewRecord:
        return WordReviewRecord(
            word_id=self.word_id,
            mastery_level=self.mastery_level,
            total_reviews=self.total_reviews,
            correct_count=self.correct_count,
            incorrect_count=self.incorrect_count,
            streak_count=self.streak_count,
            last_reviewed_at=self.last_reviewed_at,
            next_review_at=self.next_review_at,
            first_reviewed_at=self.first_reviewed_at,
            last_result=self.last_result,
            last_activity=self.last_activity,
            activity_stats={
                activity: ActivityStat(count=stat.count, last_used=stat.last_used)
                for activity, stat in self.activity_stats.items()
            },
        )


def record_to_dict(record: WordReviewRecord) -> dict[str, Any]:
    """Serialize a record to JSON/YAML friendly primitives."""
    return StoredRecord.from_domain(record).model_dump(mode="json")


def record_from_dict(data: dict[str, Any]) -> WordReviewRecord:
    """Parse a stored document (current or legacy layout) into a record."""
    return StoredRecord.model_validate(data).to_domain()
