"""Configuration management using pydantic-settings."""

from pathlib import Path
from typing import Any, Literal, Tuple, Type

import yaml
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

# (section, key) in the YAML file -> Settings field
_YAML_FIELDS: dict[tuple[str, str], str] = {
    ("conversion", "max_convert_process"): "max_convert_process",
    ("conversion", "adapter_timeout_seconds"): "adapter_timeout_seconds",
    ("conversion", "disabled_backends"): "disabled_backends",
    ("paths", "uploads_dir"): "uploads_dir",
    ("paths", "output_dir"): "output_dir",
    ("database", "url"): "results_db_url",
    ("logging", "level"): "log_level",
    ("logging", "format"): "log_format",
}


def load_yaml_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load configuration from YAML file.

    Priority:
    1. Explicitly provided config_path
    2. ~/.formatrouter/config.yaml (default location)
    3. Empty dict if no file exists

    Example file:

        conversion:
          max_convert_process: 4
          disabled_backends: [inkscape]
        paths:
          uploads_dir: /srv/uploads
          output_dir: /srv/output
        database:
          url: sqlite:////srv/results.db

    Args:
        config_path: Optional path to config file

    Returns:
        Settings field values found in the file
    """
    if config_path is None:
        config_path = Path.home() / ".formatrouter" / "config.yaml"

    if not config_path.exists():
        return {}

    try:
        with open(config_path) as f:
            yaml_data = yaml.safe_load(f) or {}

        return {
            field: yaml_data[section][key]
            for (section, key), field in _YAML_FIELDS.items()
            if isinstance(yaml_data.get(section), dict) and key in yaml_data[section]
        }

    except Exception as e:
        import warnings

        warnings.warn(f"Failed to load config from {config_path}: {e}")
        return {}


_config_path: Path | None = None


class YamlSettingsSource(PydanticBaseSettingsSource):
    """
    Custom settings source that loads configuration from YAML file.

    This allows YAML config to be loaded with proper priority in the settings chain.
    """

    def get_field_value(self, field: Any, field_name: str) -> Tuple[Any, str, bool]:
        """Not used since we override __call__."""
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        return load_yaml_config(_config_path)


class Settings(BaseSettings):
    """
    formatrouter configuration settings.

    Configuration priority (highest to lowest):
    1. Environment variables (e.g., MAX_CONVERT_PROCESS=4)
    2. YAML configuration file (~/.formatrouter/config.yaml)
    3. Default values defined in this class
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    max_convert_process: int = Field(
        default=0,
        description="Files converted concurrently per chunk (<= 0 runs the whole batch at once)",
    )
    adapter_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Optional wall-clock limit for a single external tool run",
    )
    disabled_backends: list[str] = Field(
        default_factory=list,
        description="Backend names left out of the registry",
    )

    uploads_dir: Path = Field(
        default=Path("~/.formatrouter/uploads"),
        description="Directory holding the files to convert",
    )
    output_dir: Path = Field(
        default=Path("~/.formatrouter/output"),
        description="Directory converted files are written to",
    )

    results_db_url: str = Field(
        default="sqlite:///~/.formatrouter/results.db",
        description="SQLAlchemy database URL for recorded file results",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json", description="Log format"
    )

    @field_validator("uploads_dir", "output_dir")
    @classmethod
    def validate_paths(cls, v: Path) -> Path:
        """Ensure paths are absolute."""
        if not v.is_absolute():
            v = v.expanduser().resolve()
        return v

    @field_validator("results_db_url")
    @classmethod
    def validate_db_url(cls, v: str) -> str:
        """Validate database URL format and expand ~ in SQLite paths."""
        if not (v.startswith("sqlite") or v.startswith("postgresql")):
            raise ValueError("Database URL must be SQLite or PostgreSQL")

        if v.startswith("sqlite:///"):
            path_part = v[10:]

            if path_part.startswith("~"):
                expanded_path = Path(path_part).expanduser()
                v = f"sqlite:///{expanded_path}"

        return v

    @property
    def is_sqlite(self) -> bool:
        """Check if using SQLite backend."""
        return self.results_db_url.startswith("sqlite")

    @property
    def is_postgresql(self) -> bool:
        """Check if using PostgreSQL backend."""
        return self.results_db_url.startswith("postgresql")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """
        Customize settings sources priority.

        Priority order (highest to lowest):
        1. Explicit kwargs (init_settings) - for testing and programmatic config
        2. Environment variables
        3. YAML configuration file
        4. .env file
        5. Field defaults
        """
        return (
            init_settings,
            env_settings,
            YamlSettingsSource(settings_cls),
            dotenv_settings,
        )


_settings: Settings | None = None


def get_settings(config_path: Path | None = None, reload: bool = False) -> Settings:
    """
    Get global settings instance.

    Args:
        config_path: Optional path to YAML config file (defaults to ~/.formatrouter/config.yaml)
        reload: If True, force reload settings (useful for testing)

    Returns:
        Settings instance with merged configuration
    """
    global _settings, _config_path
    if _settings is None or reload:
        _config_path = config_path

        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
