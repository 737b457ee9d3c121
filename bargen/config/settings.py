"""
Bar generator configuration using pydantic-settings with nested structure
"""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


# ============================================================================
# NESTED CONFIGURATION MODELS
# ============================================================================

# Absolute path to the .env file (project root)
_BASE_DIR = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BASE_DIR / ".env"


class BarGeneratorSettings(BaseSettings):
    """Bar generator runtime configuration.

    The stale threshold and forced bar offset are policy constants of the
    watchdog; they are exposed here so deployments with a slower feed can
    widen them without code changes.
    """
    timezone: str = "Asia/Shanghai"
    stale_threshold_seconds: float = Field(default=120.0, gt=0)
    forced_bar_offset_seconds: float = Field(default=60.0, ge=0)
    watchdog_interval_seconds: float = Field(default=1.0, gt=0)
    model_config = SettingsConfigDict(env_prefix="BAR_GENERATOR__", extra="ignore")

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone '{value}'") from e
        return value


class LoggerConfig(BaseSettings):
    """Logger configuration settings."""
    default_level: str = "INFO"
    file_path: str = ""  # empty disables the file sink
    rotation: str = "10 MB"
    retention: str = "30 days"
    filter_enabled: bool = True
    filter_max_history: int = 5
    filter_time_threshold_seconds: float = 1.0
    model_config = SettingsConfigDict(env_prefix="LOGGER__", extra="ignore")


# ============================================================================
# MAIN SETTINGS CLASS
# ============================================================================

class Settings(BaseSettings):
    """Settings loaded from environment variables.

    Use double underscore (__) in env vars to reach nested sections.

    Example:
        LOGGER__DEFAULT_LEVEL=DEBUG
        BAR_GENERATOR__TIMEZONE=America/New_York
        BAR_GENERATOR__STALE_THRESHOLD_SECONDS=180
    """

    APP_NAME: str = "bargen"
    APP_VERSION: str = "1.0.0"

    # Nested sections read their own prefixed environment variables
    BAR_GENERATOR: BarGeneratorSettings = Field(default_factory=BarGeneratorSettings)
    LOGGER: LoggerConfig = Field(default_factory=LoggerConfig)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Rebuild so each section applies its own env_prefix and validators
        self.BAR_GENERATOR = BarGeneratorSettings()
        self.LOGGER = LoggerConfig()

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        env_nested_delimiter="__",
        env_prefix=""
    )


# Global settings instance
from dotenv import load_dotenv

# Load .env file into environment variables
if _ENV_FILE.exists():
    load_dotenv(str(_ENV_FILE), override=False)

settings = Settings()
