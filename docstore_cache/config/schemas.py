"""
docstore-cache — Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.
All configuration is validated when the registry is built.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StoreBackend(str, Enum):
    """Supported document store backends."""

    MEMORY = "memory"
    REDIS = "redis"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StoreConfig(BaseModel):
    """Document store configuration shared by every configured cache."""

    backend: StoreBackend = Field(default=StoreBackend.MEMORY, description="Store backend to use")

    # Redis-specific settings (only used when backend=redis)
    redis_url: str | None = Field(default=None, description="Redis connection URL")
    redis_max_connections: int = Field(default=10, ge=1, description="Redis connection pool size")
    redis_socket_timeout: int = Field(default=5, ge=1, description="Redis socket timeout in seconds")

    @model_validator(mode="after")
    def validate_redis_url(self) -> "StoreConfig":
        """Ensure redis_url is provided when backend is redis."""
        if self.backend == StoreBackend.REDIS and not self.redis_url:
            raise ValueError("redis_url is required when store backend is 'redis'")
        return self


class CacheConfig(BaseModel):
    """Per-cache settings."""

    ttl_seconds: int = Field(default=0, ge=0, description="Document TTL in seconds (0 = no expiry)")
    always_flush: bool = Field(
        default=False,
        description="Flush the whole store on clear() instead of removing this cache's documents",
    )


class RegistryConfig(BaseModel):
    """Root configuration for docstore-cache."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Level for the package JSON log handler")

    store: StoreConfig = Field(default_factory=StoreConfig)
    caches: dict[str, CacheConfig] = Field(default_factory=dict, description="Cache name -> settings")

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    def ttl_configuration(self) -> dict[str, int]:
        """Return the cache name -> TTL mapping expected by CacheRegistry."""
        return {name: cache.ttl_seconds for name, cache in self.caches.items()}

    def always_flush_names(self) -> set[str]:
        """Return the names of caches configured to always flush."""
        return {name for name, cache in self.caches.items() if cache.always_flush}
