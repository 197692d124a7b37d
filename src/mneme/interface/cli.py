"""mneme CLI — record reviews, list due words, and inspect progress."""

import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any

import typer

from mneme.application.config import AppConfig, resolve_config
from mneme.domain.errors import MnemeError
from mneme.domain.models import ActivityType, ReviewMode, ReviewOutcome, WordReviewRecord

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="mneme: spaced-repetition scheduling for vocabulary.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage mneme configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Shared options
# ---------------------------------------------------------------------------

UserOption = Annotated[str | None, typer.Option("--user", help="User whose progress to use.")]
StoreOption = Annotated[Path | None, typer.Option("--store", help="Progress file path.")]
BackendOption = Annotated[str | None, typer.Option(help="Record store: yaml, memory.")]
NowOption = Annotated[
    str | None,
    typer.Option("--now", help="ISO timestamp to use as the current time. Defaults to now."),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON.")]


def _resolve_with_overrides(ctx: typer.Context, **overrides: Any) -> AppConfig:
    overrides["verbose"] = ctx.obj.get("verbose_bonus", 1) if ctx.obj else 1
    try:
        return resolve_config(overrides)
    except ValueError as e:
        typer.secho(f"Invalid configuration: {e}", fg="red")
        raise typer.Exit(2) from e


def _parse_now(value: str | None) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(f"Not an ISO timestamp: {value}", param_hint="--now") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_outcome(result: str, activity: ActivityType | None) -> ReviewOutcome:
    value = result.strip().lower()
    if value in ("correct", "c", "y", "yes"):
        return ReviewOutcome(correct=True, activity_type=activity)
    if value in ("incorrect", "wrong", "n", "no"):
        return ReviewOutcome(correct=False, activity_type=activity)
    try:
        if value.isdigit():
            return ReviewOutcome.from_quality(int(value), activity_type=activity)
        return ReviewOutcome.from_difficulty(value, activity_type=activity)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="RESULT") from e


def _run(coro):
    try:
        return asyncio.run(coro)
    except MnemeError as e:
        typer.secho(f"Error: {e}", fg="red")
        raise typer.Exit(1) from e


def _record_summary(record: WordReviewRecord) -> dict[str, Any]:
    return {
        "word_id": record.word_id,
        "mastery_level": record.mastery_level,
        "confidence": str(record.confidence),
        "streak_count": record.streak_count,
        "total_reviews": record.total_reviews,
        "last_reviewed_at": (
            record.last_reviewed_at.isoformat() if record.last_reviewed_at else None
        ),
        "next_review_at": record.next_review_at.isoformat() if record.next_review_at else None,
    }


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 1,
):
    """Global settings for mneme."""
    ctx.ensure_object(dict)
    ctx.obj["verbose_bonus"] = verbose
    logging.getLogger("mneme").setLevel(logging.DEBUG if verbose > 1 else logging.INFO)


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def review(
    ctx: typer.Context,
    word: Annotated[str, typer.Argument(help="Word identifier.")],
    result: Annotated[
        str,
        typer.Argument(
            help="correct, incorrect, a grade 0-5, or again/hard/medium/easy."
        ),
    ],
    activity: Annotated[
        ActivityType | None, typer.Option(help="Study activity, recorded for analytics.")
    ] = None,
    now: NowOption = None,
    user: UserOption = None,
    store: StoreOption = None,
    backend: BackendOption = None,
):
    """[bold green]Record[/bold green] one review of a word and schedule the next."""
    from mneme.application.factory import get_review_service

    outcome = _parse_outcome(result, activity)
    config = _resolve_with_overrides(ctx, user_id=user, store_path=store, backend=backend)
    service = get_review_service(config)

    record = _run(service.record_review(config.user_id, word, outcome, _parse_now(now)))

    color = "green" if outcome.correct else "yellow"
    typer.secho(
        f"{record.word_id}: mastery {record.mastery_level}% ({record.confidence}), "
        f"streak {record.streak_count}",
        fg=color,
    )
    typer.echo(f"Next review: {record.next_review_at.isoformat()}")


@app.command()
def due(
    ctx: typer.Context,
    mode: Annotated[
        ReviewMode,
        typer.Option(
            help=(
                "'scheduled' = words whose review date has passed. "
                "'difficult' = studied words below the mastery threshold."
            )
        ),
    ] = ReviewMode.SCHEDULED,
    limit: Annotated[int | None, typer.Option(help="Maximum words to list.")] = None,
    include_new: Annotated[
        bool, typer.Option("--include-new", help="Include never-reviewed words.")
    ] = False,
    json_output: JsonOption = False,
    now: NowOption = None,
    user: UserOption = None,
    store: StoreOption = None,
    backend: BackendOption = None,
):
    """List words to review, hardest first."""
    from mneme.application.factory import get_review_service

    config = _resolve_with_overrides(ctx, user_id=user, store_path=store, backend=backend)
    service = get_review_service(config)

    selection = _run(
        service.review_queue(
            config.user_id,
            mode,
            _parse_now(now),
            limit=limit if limit is not None else config.queue_limit,
            include_new=include_new,
        )
    )

    if json_output:
        typer.echo(json.dumps([_record_summary(r) for r in selection], indent=2))
        return

    if not selection:
        typer.secho("No words to review.", fg="yellow")
        return

    typer.echo(f"Words to review ({mode}): {len(selection)}")
    for record in selection:
        last = record.last_reviewed_at.date().isoformat() if record.last_reviewed_at else "never"
        typer.echo(f"  {record.word_id:<24} {record.mastery_level:>3}%  last: {last}")


@app.command()
def stats(
    ctx: typer.Context,
    json_output: JsonOption = False,
    now: NowOption = None,
    user: UserOption = None,
    store: StoreOption = None,
    backend: BackendOption = None,
):
    """Show study progress."""
    from dataclasses import asdict

    from mneme.application.factory import get_review_service

    config = _resolve_with_overrides(ctx, user_id=user, store_path=store, backend=backend)
    service = get_review_service(config)
    summary = _run(service.progress(config.user_id, _parse_now(now)))

    if json_output:
        typer.echo(json.dumps(asdict(summary), indent=2))
        return

    typer.echo(f"Words: {summary.total_words}  Studied: {summary.total_studied}")
    typer.echo(f"Mastered: {summary.total_mastered}  Average mastery: {summary.average_mastery}%")
    typer.echo(f"On a streak: {summary.streak_words}")
    typer.echo(f"Due: {summary.due_count}  Difficult: {summary.difficult_count}")
    for activity, count in sorted(summary.activity_counts.items()):
        typer.echo(f"  {activity:<10} {count}")


@app.command()
def reset(
    ctx: typer.Context,
    word: Annotated[str, typer.Argument(help="Word identifier.")],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation.")
    ] = False,
    user: UserOption = None,
    store: StoreOption = None,
    backend: BackendOption = None,
):
    """Reset a word's progress to a fresh record."""
    from mneme.application.factory import get_review_service

    config = _resolve_with_overrides(ctx, user_id=user, store_path=store, backend=backend)
    if not force and not typer.confirm(f"Reset all progress for '{word}'?"):
        raise typer.Exit(1)

    service = get_review_service(config)
    _run(service.reset_progress(config.user_id, word))
    typer.secho(f"Reset '{word}'.", fg="green")


@app.command()
def version():
    """Print the mneme version."""
    from mneme.consts import VERSION

    typer.echo(VERSION)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve_with_overrides(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
