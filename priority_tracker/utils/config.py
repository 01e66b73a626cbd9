"""Configuration management with YAML support and Pydantic validation."""

from datetime import tzinfo
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from priority_tracker.utils.weeks import resolve_timezone


class DatabaseConfig(BaseModel):
    """Database configuration."""

    url: str = Field(default="sqlite:///priority_tracker.db", description="Database connection URL")
    echo: bool = Field(default=False, description="Echo SQL statements for debugging")


class AuthConfig(BaseModel):
    """Session and credential configuration."""

    secret_key: str = Field(default="change-this-secret-in-production", description="JWT signing secret")
    algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    token_expire_minutes: int = Field(default=480, gt=0, description="Session lifetime in minutes")
    cookie_name: str = Field(default="pt_session", description="Name of the session cookie")
    cookie_secure: bool = Field(default=False, description="Only send the session cookie over HTTPS")
    min_password_length: int = Field(default=6, ge=1, description="Minimum password length")


class InitiativeSeed(BaseModel):
    """A strategic initiative created by ``pt init-db``."""

    name: str
    color: str = "#3B82F6"
    description: str = ""


def _default_initiatives() -> list[InitiativeSeed]:
    return [
        InitiativeSeed(name="Generación de ingresos", color="#10b981"),
        InitiativeSeed(name="Nuevo negocio con clientes actuales", color="#3b82f6"),
        InitiativeSeed(name="Eficiencia Operativa", color="#f59e0b"),
        InitiativeSeed(name="Analítica Avanzada, Talento y Cultura", color="#8b5cf6"),
        InitiativeSeed(name="Orca SNS", color="#ec4899"),
    ]


class BootstrapConfig(BaseModel):
    """Initial data created when the database is first set up."""

    admin_name: str = Field(default="Administrador")
    admin_email: str = Field(default="admin@empresa.com")
    admin_password: str = Field(default="", description="Initial admin password (generated when empty)")
    initiatives: list[InitiativeSeed] = Field(default_factory=_default_initiatives)


class DashboardConfig(BaseModel):
    """Dashboard behaviour."""

    max_weekly_priorities: int = Field(
        default=5,
        ge=1,
        description="Users above this many priorities in one week are flagged",
    )
    timezone: str = Field(
        default="UTC",
        description="IANA zone that week boundaries are computed in",
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Ensure the zone name can be loaded."""
        resolve_timezone(v)
        return v

    @property
    def zone(self) -> tzinfo:
        return resolve_timezone(self.timezone)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")
    format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure level is a standard logging level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PT_",
        env_nested_delimiter="__",
    )

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    bootstrap: BootstrapConfig = Field(default_factory=BootstrapConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to the YAML configuration file. Defaults to config.yaml in CWD.

    Returns:
        Validated Config object.
    """
    if config_path is None:
        config_path = Path("config.yaml")
    else:
        config_path = Path(config_path)

    config_data: dict[str, Any] = {}

    if config_path.exists():
        with open(config_path) as f:
            loaded = yaml.safe_load(f)
            if loaded:
                config_data = loaded

    return Config(**config_data)


# Global config instance - initialized lazily
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: Config) -> None:
    """Replace the global configuration (used by the CLI ``--config`` option)."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
