"""Tests for CLI commands: review, due, stats, reset, config, version."""

import json

import pytest
from typer.testing import CliRunner

from mneme.interface.cli import app

runner = CliRunner()

NOW = "2026-03-01T09:00:00+00:00"


@pytest.fixture
def store(tmp_path):
    return str(tmp_path / "progress.yaml")


def invoke(*args):
    return runner.invoke(app, list(args))


# --- Help ---


def test_cli_help():
    result = invoke("--help")
    assert result.exit_code == 0
    assert "spaced-repetition scheduling" in result.stdout
    for command in ("review", "due", "stats", "reset", "config"):
        assert command in result.stdout


def test_version():
    result = invoke("version")
    assert result.exit_code == 0
    assert result.stdout.strip() == "0.1.0"


# --- Review ---


def test_review_correct(store):
    result = invoke("review", "lucid", "correct", "--now", NOW, "--store", store)
    assert result.exit_code == 0, result.stdout
    assert "lucid: mastery 10% (low), streak 1" in result.stdout
    assert "Next review: 2026-03-02T09:00:00+00:00" in result.stdout


def test_review_accumulates(store):
    invoke("review", "lucid", "correct", "--now", "2026-03-01T09:00:00+00:00", "--store", store)
    invoke("review", "lucid", "correct", "--now", "2026-03-02T09:00:00+00:00", "--store", store)
    result = invoke("review", "lucid", "incorrect", "--now", "2026-03-05T09:00:00+00:00", "--store", store)

    assert result.exit_code == 0
    assert "mastery 15%" in result.stdout
    assert "streak 0" in result.stdout
    assert "Next review: 2026-03-06T09:00:00+00:00" in result.stdout


@pytest.mark.parametrize("grade,streak", [("easy", 1), ("again", 0), ("4", 1), ("1", 0)])
def test_review_graded(store, grade, streak):
    result = invoke("review", "w", grade, "--now", NOW, "--store", store)
    assert result.exit_code == 0
    assert f"streak {streak}" in result.stdout


def test_review_bad_result(store):
    result = invoke("review", "w", "maybe", "--store", store)
    assert result.exit_code != 0


def test_review_bad_now(store):
    result = invoke("review", "w", "correct", "--now", "yesterday", "--store", store)
    assert result.exit_code != 0


def test_review_with_activity_counts_in_stats(store):
    invoke("review", "w", "correct", "--activity", "quiz", "--now", NOW, "--store", store)
    result = invoke("stats", "--json", "--now", NOW, "--store", store)
    assert result.exit_code == 0
    assert json.loads(result.stdout)["activity_counts"] == {"quiz": 1}


# --- Due ---


def test_due_empty(store):
    result = invoke("due", "--store", store)
    assert result.exit_code == 0
    assert "No words to review." in result.stdout


def test_due_scheduled_and_difficult(store):
    invoke("review", "strong", "correct", "--now", "2026-02-01T09:00:00+00:00", "--store", store)
    invoke("review", "weak", "incorrect", "--now", "2026-02-01T09:00:00+00:00", "--store", store)
    invoke("review", "fresh", "correct", "--now", NOW, "--store", store)

    result = invoke("due", "--json", "--now", NOW, "--store", store)
    assert result.exit_code == 0
    assert [r["word_id"] for r in json.loads(result.stdout)] == ["weak", "strong"]

    result = invoke("due", "--mode", "difficult", "--limit", "1", "--json", "--now", NOW, "--store", store)
    assert [r["word_id"] for r in json.loads(result.stdout)] == ["weak"]

    result = invoke("due", "--now", NOW, "--store", store)
    assert "Words to review (scheduled): 2" in result.stdout


def test_due_bad_mode(store):
    result = invoke("due", "--mode", "soon", "--store", store)
    assert result.exit_code != 0


def test_due_corrupt_store(tmp_path):
    path = tmp_path / "progress.yaml"
    path.write_text("users: [unclosed\n", encoding="utf-8")
    result = invoke("due", "--store", str(path))
    assert result.exit_code == 1
    assert "Error:" in result.stdout


# --- Stats ---


def test_stats(store):
    invoke("review", "a", "correct", "--now", NOW, "--store", store)
    invoke("review", "b", "incorrect", "--now", NOW, "--store", store)
    result = invoke("stats", "--now", NOW, "--store", store)
    assert result.exit_code == 0
    assert "Words: 2  Studied: 2" in result.stdout


# --- Reset ---


def test_reset_forced(store):
    invoke("review", "lucid", "correct", "--now", NOW, "--store", store)
    result = invoke("reset", "lucid", "--force", "--store", store)
    assert result.exit_code == 0

    stats = json.loads(invoke("stats", "--json", "--now", NOW, "--store", store).stdout)
    assert stats["total_words"] == 1
    assert stats["total_studied"] == 0


def test_reset_declined(store):
    invoke("review", "lucid", "correct", "--now", NOW, "--store", store)
    result = runner.invoke(app, ["reset", "lucid", "--store", store], input="n\n")
    assert result.exit_code == 1

    stats = json.loads(invoke("stats", "--json", "--now", NOW, "--store", store).stdout)
    assert stats["total_studied"] == 1


# --- Config ---


def test_config_show(monkeypatch):
    monkeypatch.setenv("MNEME_USER_ID", "alice")
    result = invoke("config", "show")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["user_id"] == "alice"
    assert data["interval_days"] == [1, 1, 3, 7, 14, 30, 60]
