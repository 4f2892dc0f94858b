"""Configuration management with Pydantic and YAML support."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from nexus_flow.notifications.rules import NotificationThresholds


class WebConfig(BaseModel):
    """REST API server configuration."""

    host: str = Field(default="127.0.0.1", description="Bind to localhost only")
    port: int = Field(default=3001, ge=1024, le=65535)
    cors_origins: list[str] | str = Field(
        default_factory=lambda: ["http://localhost:5173"],
        description="Allowed browser origins, list or comma-separated string",
    )
    enable_docs: bool = Field(default=True, description="Serve OpenAPI docs at /documentation")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


class ClientConfig(BaseModel):
    """API client configuration for the terminal front end."""

    api_url: str = Field(default="http://localhost:3001/api")
    token: str | None = Field(default=None, description="Bearer token sent with every request")


class FocusConfig(BaseModel):
    """Focus timer configuration."""

    tick_seconds: float = Field(default=1.0, gt=0, description="Wall-clock seconds per timer tick")
    default_minutes: int = Field(default=25, ge=1, le=240)


class NotificationConfig(BaseModel):
    """Alert thresholds and delivery settings."""

    due_soon_days: int = Field(default=2, ge=0)
    expense_warning_ratio: float = Field(default=0.75, gt=0)
    expense_critical_ratio: float = Field(default=0.9, gt=0)
    large_expense_ratio: float = Field(default=0.1, gt=0)
    focus_ending_minutes: int = Field(default=5, ge=1)
    check_interval_seconds: float = Field(default=60.0, gt=0)
    desktop_enabled: bool = Field(default=False, description="Send native desktop notifications")

    def thresholds(self) -> NotificationThresholds:
        """Thresholds consumed by the alert rules."""
        return NotificationThresholds(
            due_soon_days=self.due_soon_days,
            expense_warning_ratio=self.expense_warning_ratio,
            expense_critical_ratio=self.expense_critical_ratio,
            large_expense_ratio=self.large_expense_ratio,
            focus_ending_minutes=self.focus_ending_minutes,
        )


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="NEXUS_FLOW_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field(default="development", pattern="^(development|staging|production)$")

    # Paths
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/nexus-flow")
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".local/state/nexus-flow")
    config_dir: Path = Field(default_factory=lambda: Path.home() / ".config/nexus-flow")

    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    database_url: str | None = Field(
        default=None, description="SQLAlchemy async URL, defaults to SQLite in data_dir"
    )
    auth_secret: str | None = Field(default=None, description="Auth provider secret")

    # Sub-configurations
    web: WebConfig = Field(default_factory=WebConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    focus: FocusConfig = Field(default_factory=FocusConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment beats the YAML values passed in as init data
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @property
    def db_url(self) -> str:
        """Database URL, falling back to a SQLite file in the data directory."""
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.data_dir / 'nexus_flow.db'}"

    @property
    def docs_enabled(self) -> bool:
        """OpenAPI docs are never served in production."""
        return self.web.enable_docs and self.environment != "production"

    @property
    def config_file(self) -> Path:
        """Path to YAML config file."""
        return self.config_dir / "config.yaml"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        os.chmod(self.data_dir, 0o700)

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from YAML file, environment variables, and defaults.

        Priority (highest to lowest):
        1. Environment variables (and .env)
        2. YAML config file
        3. Default values
        """
        config_path = config_path or Path.home() / ".config/nexus-flow/config.yaml"

        yaml_config: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f) or {}

        return cls(**yaml_config)

    def save(self, config_path: Path | None = None) -> None:
        """Save current configuration to YAML file."""
        config_path = config_path or self.config_file
        config_path.parent.mkdir(parents=True, exist_ok=True)

        # Secrets stay in the environment
        data = self.model_dump(
            mode="json",
            exclude={"auth_secret": True, "client": {"token"}},
            exclude_none=True,
        )

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        os.chmod(config_path, 0o600)


@lru_cache
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.load()
