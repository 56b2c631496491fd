"""
Configuration management for Messager.

Sources, lowest priority first: field defaults, default.yaml, <env>.yaml,
then environment variables (a dotenv file is loaded into the environment
without replacing what is already set).

The YAML files ship inside this package; point MESSAGER_CONFIG_DIR (or
the config_dir argument) at another directory to replace them.
"""

import os
from importlib.resources import files
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import Field, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Messager configuration schema.

    Token secrets have no YAML entry; they are expected from
    ACCESS_TOKEN_SECRET / REFRESH_TOKEN_SECRET.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    # Application
    APP_NAME: str = "Messager"
    APP_VERSION: str = "0.1.0"
    ENV: str = Field(default="production", description="Environment name")
    DEBUG: bool = Field(default=False, description="Debug mode")

    # API Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        description="Allowed origins for cross-origin requests",
    )
    client_url: str = Field(
        default="http://localhost:5173",
        description="Frontend URL, used in emails",
    )

    # Tokens
    access_token_secret: Optional[str] = Field(
        default=None, description="Access token signing secret (from environment)"
    )
    refresh_token_secret: Optional[str] = Field(
        default=None, description="Refresh token signing secret (must differ)"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT algorithm")
    access_token_expire_minutes: int = Field(default=15, ge=1)
    refresh_token_expire_days: int = Field(default=7, ge=1)

    # Refresh cookie
    refresh_cookie_name: str = Field(default="refresh_token")
    refresh_cookie_secure: bool = Field(
        default=True, description="Only send the refresh cookie over HTTPS"
    )
    refresh_cookie_samesite: str = Field(default="lax")
    refresh_cookie_path: str = Field(default="/api/auth")

    # Persistence
    database_url: Optional[str] = Field(
        default=None,
        description="Async SQLAlchemy URL (in-memory stores if unset)",
    )
    database_echo: bool = Field(default=False, description="Log SQL statements")

    # Messages
    max_image_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1024,
        description="Maximum image reference size in bytes",
    )
    max_text_length: int = Field(default=5000, ge=1)

    # Connections
    heartbeat_interval: int = Field(default=30, ge=1, le=300)
    max_connections_per_user: int = Field(
        default=0, ge=0, description="0 = unlimited"
    )

    # Rate limiting (signup, login, refresh)
    auth_rate_limit: int = Field(
        default=20, ge=0, description="Requests per window per client, 0 = unlimited"
    )
    auth_rate_limit_window: int = Field(default=60, ge=1, description="Seconds")

    # Graceful Shutdown
    shutdown_timeout: int = Field(
        default=30, ge=1, description="Seconds each shutdown callback may take"
    )
    shutdown_grace_period: int = Field(
        default=5, ge=0, description="Seconds to wait for WebSocket clients to close"
    )

    # Mail service
    mail_service_url: Optional[str] = Field(
        default=None, description="External mail service URL (disabled if unset)"
    )
    mail_api_key: Optional[str] = Field(default=None)
    mail_sender_name: str = Field(default="Messager")
    mail_timeout: float = Field(default=5.0, gt=0)

    # Logging
    log_level: str = Field(default="info")
    log_dir: Optional[str] = Field(default=None)
    verbose: int = Field(default=1, ge=0, le=3)

    @field_validator("log_level", "refresh_cookie_samesite")
    @classmethod
    def validate_choice(cls, v: str, info: ValidationInfo) -> str:
        """Normalize to lowercase and check against the allowed values."""
        allowed = CHOICES[info.field_name]
        v = v.lower()
        if v not in allowed:
            raise ValueError(f"Invalid {info.field_name}. Must be one of: {allowed}")
        return v

    @model_validator(mode="after")
    def validate_distinct_secrets(self) -> "Settings":
        """Access and refresh secrets must differ when both are set."""
        if (
            self.access_token_secret
            and self.refresh_token_secret
            and self.access_token_secret == self.refresh_token_secret
        ):
            raise ValueError("access_token_secret and refresh_token_secret must differ")
        return self


CHOICES = {
    "log_level": ["debug", "info", "warning", "error", "critical"],
    "refresh_cookie_samesite": ["lax", "strict", "none"],
}

CONFIG_DIR_ENV = "MESSAGER_CONFIG_DIR"


def default_config_dir() -> Union[Path, Traversable]:
    """MESSAGER_CONFIG_DIR if set, else the YAML files bundled with the package."""
    override = os.getenv(CONFIG_DIR_ENV)
    if override:
        return Path(override)
    return files("messager.config")


def _read_yaml(path: Union[Path, Traversable]) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
    env: Optional[str] = None,
    config_dir: Optional[Union[Path, Traversable]] = None,
) -> Settings:
    """
    Build Settings from default.yaml, <env>.yaml, a .env file and the
    process environment, later sources winning.

    Args:
        config_file: YAML file layered on default.yaml (default "<env>.yaml")
        env_file: dotenv file relative to the working directory (default
            ".env.<env>", falling back to ".env")
        env: Environment name (default: $ENV, then "production")
        config_dir: Directory holding the YAML files (default: see
            default_config_dir)

    Raises:
        pydantic.ValidationError: If a value is invalid
    """
    environment = env or os.getenv("ENV", "production")
    config_dir = config_dir or default_config_dir()

    dotenv_candidates = [env_file] if env_file else [f".env.{environment}", ".env"]
    for candidate in dotenv_candidates:
        path = Path(candidate)
        if path.is_file():
            # Never overrides variables already set in the process
            load_dotenv(path, override=False)
            break

    values = _read_yaml(config_dir / "default.yaml")
    values.update(_read_yaml(config_dir / (config_file or f"{environment}.yaml")))
    values["ENV"] = environment

    # Keys present in the environment are left to pydantic-settings
    overridden = {key.lower() for key in os.environ}
    return Settings(**{k: v for k, v in values.items() if k.lower() not in overridden})
