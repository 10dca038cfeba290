"""
Configuration management for Gardien.

Hybrid configuration system using YAML files and environment variables.
Priority: Environment variables > YAML config > Pydantic defaults
Environment variables carry the GARDIEN_ prefix (GARDIEN_RPC_URL, GARDIEN_PORT).
"""

import os
from pathlib import Path
from typing import List, Optional, Tuple, Type

import yaml
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

BASE_MAINNET_RPC_URL = "https://mainnet.base.org"


class Settings(BaseSettings):
    """
    Gardien configuration schema.

    Loads configuration from:
    1. Environment variables (highest priority)
    2. YAML configuration files
    3. Pydantic defaults (lowest priority)

    Configuration files:
        - config/default.yaml: Base defaults
        - config/production.yaml: Production overrides
        - config/development.yaml: Development overrides
        - config/test.yaml: Test overrides
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GARDIEN_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Gardien"
    APP_VERSION: str = "0.1.0"
    ENV: str = Field(default="production", description="Environment name")
    DEBUG: bool = Field(default=False, description="Debug mode")

    # API Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3001, ge=1024, le=65535)
    api_prefix: str = Field(
        default="",
        description="Path prefix for the challenge and verify routes (e.g. /api/auth)",
    )
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed to call the API from a browser",
    )

    # Challenges
    nonce_bytes: int = Field(
        default=16,
        ge=16,
        le=64,
        description="Random bytes per challenge token",
    )
    nonce_sweep_enabled: bool = Field(
        default=True,
        description="Periodically clear all outstanding challenges",
    )
    nonce_sweep_interval_seconds: float = Field(
        default=600,
        gt=0,
        description="Seconds between challenge registry sweeps",
    )

    # Blockchain (on-chain verification of contract wallets)
    rpc_url: Optional[str] = Field(
        default=BASE_MAINNET_RPC_URL,
        description="EVM JSON-RPC endpoint; unset disables contract wallet checks",
    )
    rpc_timeout_seconds: float = Field(default=10.0, gt=0)

    # Circuit Breaker
    cb_failure_threshold: int = Field(default=5, ge=1)
    cb_recovery_timeout: float = Field(default=30.0, gt=0)

    # Monitoring
    metrics_enabled: bool = Field(default=True)

    # Logging
    log_level: str = Field(default="info")
    log_dir: Optional[str] = Field(
        default=None, description="Directory for gardien.log (stdout only when unset)"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """Environment beats YAML values passed as init kwargs."""
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["debug", "info", "warning", "error", "critical"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid log_level. Must be one of: {allowed}")
        return v_lower

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Normalise prefix to '' or '/segment' without trailing slash."""
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    @field_validator("rpc_url")
    @classmethod
    def validate_rpc_url(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty RPC URL as disabled."""
        if v is None or not v.strip():
            return None
        return v.strip()


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
    env: Optional[str] = None,
) -> Settings:
    """
    Load configuration from YAML files and environment variables.

    Priority: ENV vars > environment-specific YAML > default YAML > defaults

    Args:
        config_file: Optional YAML config filename override
        env_file: Optional .env filename (e.g., ".env.development")
        env: Optional environment name override

    Returns:
        Settings instance

    Raises:
        ValidationError: If a configured value is invalid
    """
    # Project root is 4 levels up: config -> gardien -> src -> root
    current_file = Path(__file__).resolve()
    project_root = current_file.parent.parent.parent.parent
    config_dir = project_root / "config"

    environment = env or os.getenv("GARDIEN_ENV", "production")

    env_map = {
        "production": (".env.production", "production.yaml"),
        "development": (".env.development", "development.yaml"),
        "test": (".env.test", "test.yaml"),
    }

    default_env_file, default_config_file = env_map.get(
        environment, (".env.production", "production.yaml")
    )
    if env_file is None:
        env_file = default_env_file
    if config_file is None:
        config_file = default_config_file

    # .env must be loaded before Settings reads the environment
    env_file_path = project_root / env_file
    if env_file_path.exists():
        load_dotenv(env_file_path, override=True)

    merged_config = _read_yaml(config_dir / "default.yaml")
    # Environment-specific values replace defaults, None included
    merged_config.update(_read_yaml(config_dir / config_file))
    merged_config.setdefault("ENV", environment)

    return Settings(**merged_config)


def _read_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    with open(path, "r") as f:
        loaded = yaml.safe_load(f)
    return loaded or {}


# Global settings singleton (lazy initialization)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or initialize global settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """
    Override global settings (for testing).

    Args:
        new_settings: New Settings instance to use
    """
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to force re-initialization (for testing)."""
    global _settings
    _settings = None
