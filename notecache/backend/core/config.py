"""
Configuration.

Settings come from config/settings/*.yaml and are validated against the
models in config_schema. Secrets (DB_PASSWORD, REDIS_PASSWORD) come from
the environment or config/.env, environment first. Both are read once
per process; call ``cache_clear()`` on the getters to reload.

Paths are resolved from the directory holding the ``.project_root``
marker, so the service and the CLI behave the same from any working
directory inside the project.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, TypeVar
from urllib.parse import quote

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from notecache.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    LoggingSchema,
)

PROJECT_MARKER = ".project_root"

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def find_project_root() -> Path:
    """Nearest directory at or above the working directory with the marker file."""
    cwd = Path.cwd()
    for candidate in (cwd, *cwd.parents):
        if (candidate / PROJECT_MARKER).exists():
            return candidate
    raise RuntimeError(f"Project root not found: no {PROJECT_MARKER} above {cwd}")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Parse ``config/settings/<filename>``; an empty file gives ``{}``."""
    path = find_project_root() / "config" / "settings" / filename
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def _parse(filename: str, schema: type[SchemaT]) -> SchemaT:
    try:
        return schema.model_validate(load_yaml_config(filename))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e


class Settings(BaseSettings):
    """Secrets only. Everything else belongs in YAML."""

    db_password: str
    redis_password: str = ""

    model_config = SettingsConfigDict(env_file_encoding="utf-8", extra="ignore")


class AppConfig:
    """Validated contents of the three settings files."""

    def __init__(self) -> None:
        self.application = _parse("application.yaml", ApplicationSchema)
        self.database = _parse("database.yaml", DatabaseSchema)
        self.logging = _parse("logging.yaml", LoggingSchema)


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=find_project_root() / "config" / ".env")


@lru_cache
def get_app_config() -> AppConfig:
    return AppConfig()


def get_database_url(async_driver: bool = True) -> str:
    """PostgreSQL URL for asyncpg (default) or the sync driver."""
    db = get_app_config().database
    url = URL.create(
        "postgresql+asyncpg" if async_driver else "postgresql",
        username=db.user,
        password=get_settings().db_password,
        host=db.host,
        port=db.port,
        database=db.name,
    )
    return url.render_as_string(hide_password=False)


def get_redis_url() -> str:
    """Redis URL; the password part is left out when no password is set."""
    redis = get_app_config().database.redis
    password = get_settings().redis_password
    auth = f":{quote(password, safe='')}@" if password else ""
    return f"redis://{auth}{redis.host}:{redis.port}/{redis.db}"
