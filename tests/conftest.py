from datetime import datetime, timedelta, timezone

import pytest

from mneme.domain.models import WordReviewRecord

T = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
DAY = timedelta(days=1)


@pytest.fixture
def now():
    return T


@pytest.fixture
def make_record():
    """Builds a reviewed record with sensible defaults."""

    def _make(word_id="word", **kwargs):
        kwargs.setdefault("last_reviewed_at", T - DAY)
        kwargs.setdefault("total_reviews", 1)
        kwargs.setdefault("correct_count", kwargs["total_reviews"])
        return WordReviewRecord(word_id=word_id, **kwargs)

    return _make


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Keep user config files and MNEME_* variables out of tests
    monkeypatch.setenv("HOME", str(home))
    for var in ("MNEME_STORE_PATH", "MNEME_USER_ID", "MNEME_BACKEND"):
        monkeypatch.delenv(var, raising=False)
    return home
