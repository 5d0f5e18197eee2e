import os
import re
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env early so env vars are available for YAML interpolation
load_dotenv(Path.cwd() / ".env")

# Pattern to match $VAR_NAME environment variable references
ENV_VAR_PATTERN = re.compile(r"\$([A-Z_][A-Z0-9_]*)")

CONFIG_FILE_NAME = "app.yaml"


def interpolate_env_vars(value):
    """Recursively replace $VAR_NAME with os.environ values."""
    if isinstance(value, str):

        def replace(match):
            var = match.group(1)
            val = os.environ.get(var)
            if val is None:
                raise ValueError(f"Environment variable ${var} not set")
            return val

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: interpolate_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [interpolate_env_vars(item) for item in value]
    return value


def get_config_path() -> Path:
    return Path.cwd() / CONFIG_FILE_NAME


def load_app_config(config_path: Path | None = None) -> dict:
    """Load and parse app.yaml with environment variable interpolation."""
    config_path = config_path or get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"{CONFIG_FILE_NAME} not found at {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    return interpolate_env_vars(config)


class CsrfConfig(BaseModel):
    """CSRF token configuration."""

    enabled: bool = True
    expire: int = 7200
    session_key: str = "csrftokens"
    field_name: str = "csrftoken"
    max_tokens: int = 20


class UploadConfig(BaseModel):
    """File upload configuration."""

    max_size: int = 8 * 1024 * 1024
    sniff_bytes: int = 2048


class SessionConfig(BaseModel):
    """Session cookie configuration for the demo application."""

    max_age: int = 86400
    cookie_domain: str | None = None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FORMHANDLER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Application
    debug: bool = False
    secret_key: str = ""

    csrf: CsrfConfig = CsrfConfig()
    uploads: UploadConfig = UploadConfig()
    session: SessionConfig = SessionConfig()


SECTION_MODELS: dict[str, type[BaseModel]] = {
    "csrf": CsrfConfig,
    "uploads": UploadConfig,
    "session": SessionConfig,
}


def build_settings(app_config: dict | None = None) -> Settings:
    """Create settings from the environment, merged with an app.yaml mapping."""
    base_settings = Settings()
    if not app_config:
        return base_settings

    updates = {}
    for section, model in SECTION_MODELS.items():
        if section in app_config:
            updates[section] = model(**(app_config[section] or {}))

    for key in ("debug", "secret_key"):
        if key in app_config:
            updates[key] = app_config[key]

    if updates:
        return base_settings.model_copy(update=updates)

    return base_settings


@lru_cache
def get_settings() -> Settings:
    """Load settings from .env and app.yaml."""
    try:
        app_config = load_app_config()
    except FileNotFoundError:
        return build_settings()

    return build_settings(app_config)
