"""
Application Configuration
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Literal

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError
from pydantic_settings import BaseSettings, SettingsConfigDict

from monitoring_demo.core.addresses import cassandra_address, memcache_address
from monitoring_demo.core.errors import ConfigurationError


BACKENDS = ("mysql", "pgsql", "redis", "memcache", "mongodb", "cassandra", "rabbitmq")

# Environment variable holding each backend's address
ADDRESS_VARS = {
    "mysql": "MYSQL_URL",
    "pgsql": "PGSQL_URL",
    "redis": "REDIS_URL",
    "memcache": "MEMCACHE_ADDR",
    "mongodb": "MONGODB_URL",
    "cassandra": "CASSANDRA_URL",
    "rabbitmq": "RABBITMQ_URL",
}


@dataclass(frozen=True)
class BackendSettings:
    """Per-backend view of the settings"""
    name: str
    url: str
    iterations: int
    teardown: bool


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        # VAR= behaves like an unset VAR
        env_ignore_empty=True,
        populate_by_name=True,
    )

    # App
    APP_NAME: str = "CF Monitoring Demo Application"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Backend addresses (required)
    MYSQL_URL: str
    PGSQL_URL: str
    REDIS_URL: str
    MEMCACHE_ADDR: str
    MONGODB_URL: str = Field(validation_alias=AliasChoices("MONGODB_URL", "MONGODB_ADDR"))
    CASSANDRA_URL: str = Field(validation_alias=AliasChoices("CASSANDRA_URL", "CASSANDRA_HOST"))
    RABBITMQ_URL: str

    # Iteration counts
    MYSQL_NUM: int = Field(default=1000, ge=0)
    PGSQL_NUM: int = Field(default=1000, ge=0)
    REDIS_NUM: int = Field(default=10000, ge=0)
    MEMCACHE_NUM: int = Field(default=10000, ge=0)
    MONGODB_NUM: int = Field(default=1000, ge=0)
    CASSANDRA_NUM: int = Field(default=1000, ge=0)
    RABBITMQ_NUM: int = Field(default=1000, ge=0)

    # Drop the ephemeral schema once a run finishes
    MYSQL_TEARDOWN: bool = True
    PGSQL_TEARDOWN: bool = True
    MONGODB_TEARDOWN: bool = True
    CASSANDRA_TEARDOWN: bool = True

    # Load shape
    LOAD_SEC: int = Field(default=900, ge=0)
    LOAD_MODE: Literal["count", "timer"] = "count"
    RUN_MODE: Literal["sync", "background"] = "sync"
    WORKER_POOL_SIZE: int = Field(default=len(BACKENDS), ge=1)

    # RabbitMQ
    RABBITMQ_CONSUME_TIMEOUT: float = Field(default=5.0, gt=0)

    @field_validator(*ADDRESS_VARS.values(), mode="before")
    @classmethod
    def reject_empty(cls, v):
        if isinstance(v, str) and not v.strip():
            raise PydanticCustomError("empty", "is required")
        return v

    @field_validator("MEMCACHE_ADDR")
    @classmethod
    def check_memcache_address(cls, v):
        memcache_address(v)
        return v

    @field_validator("CASSANDRA_URL")
    @classmethod
    def check_cassandra_address(cls, v):
        cassandra_address(v)
        return v

    def backend(self, name: str) -> BackendSettings:
        """Collect url, iteration count and teardown flag for one backend"""
        if name not in BACKENDS:
            raise KeyError(name)

        prefix = name.upper()
        return BackendSettings(
            name=name,
            url=getattr(self, ADDRESS_VARS[name]),
            iterations=getattr(self, f"{prefix}_NUM"),
            teardown=getattr(self, f"{prefix}_TEARDOWN", True),
        )


def _split_errors(exc: ValidationError):
    """Sort pydantic errors into missing and invalid variable names"""
    missing: List[str] = []
    invalid: List[str] = []

    for error in exc.errors():
        name = str(error["loc"][0]) if error["loc"] else "?"
        if error["type"] in ("missing", "empty"):
            missing.append(name)
        else:
            invalid.append(f"{name}: {error['msg']}")

    return missing, invalid


def load_settings(**overrides) -> Settings:
    """
    Build and validate settings.

    Raises:
        ConfigurationError: if a required variable is missing or a value
            cannot be parsed. Nothing is started before this succeeds.
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        missing, invalid = _split_errors(exc)
        raise ConfigurationError(missing=missing, invalid=invalid) from exc


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return load_settings()
