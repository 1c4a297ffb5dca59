from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from flashsprint.domain.constants import QUESTION_PREVIEW_WIDTH


def config_dir() -> Path:
    return Path.home() / ".config/flashsprint"


def config_file() -> Path:
    return config_dir() / "config.toml"


class AppConfig(BaseSettings):
    """
    Configuration model for flashsprint.
    Supports loading from:
    1. Environment variables (FLASHSPRINT_*)
    2. Config file (~/.config/flashsprint/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="FLASHSPRINT_",
        extra="ignore",
    )

    # Paths
    deck_file: Path = Field(default_factory=lambda: config_dir() / "deck.txt")

    # Behaviour
    seed_samples: bool = False
    preview_width: int = Field(default=QUESTION_PREVIEW_WIDTH, ge=10)
    verbose: int = 0

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

        # First listed source wins: CLI overrides, then env, then the TOML file.
        toml_path = config_file()
        if toml_path.exists():
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_path),
            )
        return (init_settings, env_settings)

    @field_validator("deck_file", mode="before")
    @classmethod
    def resolve_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/flashsprint/config.toml (if exists)
    3. Environment variables (FLASHSPRINT_*)
    4. cli_overrides (passed from Typer; None values are ignored)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
