from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


THROTTLE_STRATEGIES = ("fixed_delay", "token_bucket", "none")


class Settings(BaseSettings):
    # Database
    mongodb_url: str = Field(default="mongodb://localhost:27017", description="MongoDB connection URL")
    database_name: str = Field(default="shopwatch", min_length=1, description="MongoDB database name")
    users_collection: str = Field(default="users", min_length=1, description="Collection holding user records")

    # Discord
    discord_api_base_url: str = "https://discord.com/api/v10"
    discord_bot_token: str = Field(default="", description="Bot token used for the REST API")
    discord_timeout_seconds: float = Field(default=15.0, gt=0, le=300, description="HTTP timeout for chat API calls")

    # Alerts
    alerts_enabled: bool = Field(default=False, description="Enable the scheduled alert check")
    alerts_check_interval_minutes: int = Field(
        default=60, gt=0, le=24 * 60,
        description="Minutes between two alert cycles"
    )
    alerts_delay_seconds: float = Field(
        default=5.0, ge=0, le=600,
        description="Pause between two users inside one cycle"
    )
    alerts_throttle_strategy: str = Field(default="fixed_delay", description="fixed_delay, token_bucket or none")
    alerts_throttle_burst: int = Field(default=1, gt=0, le=1000, description="Token bucket capacity")

    # Localization
    default_locale: str = "en-US"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True
    log_dir: Optional[str] = Field(default="logs", description="Directory for rotating log files, empty disables files")

    # Celery
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "redis://localhost:6379/1"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("alerts_throttle_strategy")
    @classmethod
    def validate_throttle_strategy(cls, v: str) -> str:
        strategy = v.strip().lower()
        if strategy not in THROTTLE_STRATEGIES:
            raise ValueError(f"Unknown throttle strategy: {v}")
        return strategy

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
