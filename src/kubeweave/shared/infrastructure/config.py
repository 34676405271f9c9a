"""
Application configuration using Pydantic Settings.

Loads configuration from KUBEWEAVE_* environment variables and .env file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="KUBEWEAVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="kubeweave", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/production)")
    log_level: str = Field(default="INFO", description="Logging level")
    log_redaction_enabled: bool = Field(
        default=True,
        description="Mask secret-bearing fields in log events",
    )

    # Project
    config_file: str = Field(
        default="kubeweave_config.py",
        description="Python module exposing the project `config` object",
    )

    # Cluster apply
    kubectl_path: str = Field(default="kubectl", description="kubectl binary")
    kubectl_timeout: float = Field(default=120.0, description="Timeout for a single kubectl apply, in seconds")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env.lower() == "production"


# Global settings instance
settings = Settings()
