"""
Configuration Schemas.

One model per file in config/settings/, checked when AppConfig loads:

    ApplicationSchema  <- application.yaml
    DatabaseSchema     <- database.yaml (PostgreSQL, Redis, note cache)
    LoggingSchema      <- logging.yaml

Unknown keys are rejected so a misspelt setting fails at startup.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

Port = Annotated[int, Field(ge=1, le=65535)]
PositiveInt = Annotated[int, Field(gt=0)]


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ServerSchema(_Section):
    host: str
    port: Port


class CorsSchema(_Section):
    origins: list[str] = Field(default_factory=list)


class HealthSchema(_Section):
    # Upper bound for the whole readiness check, both stores together.
    ready_timeout_seconds: float = Field(gt=0)


class ApplicationSchema(_Section):
    name: str
    version: str
    description: str = ""
    environment: str
    debug: bool = False
    api_prefix: str = Field(pattern=r"^/")
    docs_enabled: bool = True
    server: ServerSchema
    cors: CorsSchema = Field(default_factory=CorsSchema)
    health: HealthSchema


class RedisSchema(_Section):
    host: str
    port: Port
    db: int = Field(ge=0)
    socket_timeout: float = Field(gt=0)


class CacheSchema(_Section):
    """Note cache: key namespace, optional expiry and corruption policy."""

    key_prefix: str = Field(min_length=1)
    ttl_seconds: PositiveInt | None = None
    self_heal_corrupt_entries: bool = False


class DatabaseSchema(_Section):
    host: str
    port: Port
    name: str
    user: str
    pool_size: PositiveInt
    max_overflow: int = Field(ge=0)
    pool_timeout: PositiveInt
    pool_recycle: int
    echo: bool = False
    redis: RedisSchema
    cache: CacheSchema


class LoggingSchema(_Section):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    format: Literal["console", "json"]
