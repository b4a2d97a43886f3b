"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.time_parsing import is_valid_time_format, parse_time_to_minutes

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class DefaultsConfig(BaseModel):
    """Default settings for schedules and bookings."""
    slot_duration_minutes: int = 50
    slot_buffer_minutes: int = 10
    booking_duration_minutes: int | None = None
    work_start: str = "09:00"
    work_end: str = "17:00"

    @field_validator("slot_duration_minutes", "booking_duration_minutes")
    @classmethod
    def validate_duration(cls, value: int | None) -> int | None:
        """Ensure durations are positive. An unset booking duration is allowed."""
        if value is not None and value <= 0:
            raise ValueError("durations must be greater than zero")
        return value

    @field_validator("slot_buffer_minutes")
    @classmethod
    def validate_buffer(cls, value: int) -> int:
        if value < 0:
            raise ValueError("slot_buffer_minutes must not be negative")
        return value

    @field_validator("work_start", "work_end")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate "HH:MM" format."""
        if not is_valid_time_format(value):
            raise ValueError(f"Time must be in HH:MM format, got {value!r}")
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "DefaultsConfig":
        """Ensure the default work window opens before it closes."""
        if parse_time_to_minutes(self.work_end) <= parse_time_to_minutes(self.work_start):
            raise ValueError("work_end must be later than work_start")
        return self

    def default_work_periods(self) -> list:
        return [{"start": self.work_start, "end": self.work_end}]


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    data_file: Path | None = None
    log_level: str = "WARNING"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        A relative ``data_file`` is resolved against the config file's folder.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if config.data_file is not None and not config.data_file.is_absolute():
            config = config.model_copy(
                update={"data_file": config_path.parent / config.data_file}
            )
        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
