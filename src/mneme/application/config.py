from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from mneme.domain.constants import (
    CORRECT_DELTA,
    DEFAULT_QUEUE_LIMIT,
    DIFFICULT_THRESHOLD,
    FALLBACK_BANDS,
    INCORRECT_DELTA,
    INTERVAL_DAYS,
    MAX_INTERVAL_DAYS,
)

from .mastery import MasteryPolicy
from .scheduler import IntervalTable
from .selector import SelectionPolicy

def config_files() -> list[Path]:
    return [
        Path.home() / ".config/mneme/config.toml",
        Path.home() / ".mneme.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for mneme.
    Supports loading from:
    1. Environment variables (MNEME_*)
    2. Config file (~/.config/mneme/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="MNEME_",
        extra="ignore",
    )

    # Storage
    backend: Literal["yaml", "memory"] = "yaml"
    store_path: Path = Field(
        default_factory=lambda: Path.home() / ".config/mneme/progress.yaml"
    )
    user_id: str = "default"

    # Mastery policy
    correct_delta: int = CORRECT_DELTA
    incorrect_delta: int = INCORRECT_DELTA

    # Scheduling
    interval_days: list[int] = Field(default_factory=lambda: list(INTERVAL_DAYS))
    max_interval_days: int = MAX_INTERVAL_DAYS

    # Selection
    difficult_threshold: int = DIFFICULT_THRESHOLD
    fallback_bands: list[tuple[int, int]] = Field(
        default_factory=lambda: list(FALLBACK_BANDS)
    )
    queue_limit: int = DEFAULT_QUEUE_LIMIT

    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = next((f for f in config_files() if f.exists()), None)

        # Earlier sources take priority: CLI overrides, then env, then file.
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("store_path", mode="before")
    @classmethod
    def resolve_store_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("fallback_bands")
    @classmethod
    def sort_bands(cls, v: list[tuple[int, int]]) -> list[tuple[int, int]]:
        if not v:
            raise ValueError("fallback_bands must not be empty")
        # Highest mastery band is checked first
        return sorted(v, key=lambda band: band[0], reverse=True)

    @model_validator(mode="after")
    def check_interval_table(self) -> "AppConfig":
        # Surface a bad table at load time rather than on the first review.
        self.interval_table()
        return self

    def mastery_policy(self) -> MasteryPolicy:
        return MasteryPolicy(
            correct_delta=self.correct_delta,
            incorrect_delta=self.incorrect_delta,
        )

    def interval_table(self) -> IntervalTable:
        return IntervalTable(self.interval_days, max_days=self.max_interval_days)

    def selection_policy(self) -> SelectionPolicy:
        return SelectionPolicy(
            difficult_threshold=self.difficult_threshold,
            fallback_bands=tuple(tuple(band) for band in self.fallback_bands),
        )


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/mneme/config.toml (if exists)
    3. Environment variables (MNEME_*)
    4. cli_overrides (passed from Typer)
    """
    # Typer passes None for options the user did not set.
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
