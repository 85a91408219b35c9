"""Application configuration."""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="RunPlan", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: str = Field(default="development", description="Environment")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Log level")

    # Run trigger
    running_action_name: str = Field(
        default="workflowRunning",
        description="UI action name held while a run is in flight",
    )
    single_webhook_trigger_types: List[str] = Field(
        default=[
            "telegram.trigger",
            "slack.trigger",
            "facebook_lead_ads.trigger",
        ],
        description="Trigger types that allow only one webhook registration",
    )

    # Execution backend
    execution_backend_url: Optional[str] = Field(
        default=None, description="Execution backend base URL"
    )
    execution_backend_timeout: float = Field(
        default=30.0, description="Execution backend request timeout in seconds"
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() in ("development", "dev")

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment.lower() in ("production", "prod")

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment.lower() in ("testing", "test")


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return Settings()


# Global settings instance
settings = get_settings()
