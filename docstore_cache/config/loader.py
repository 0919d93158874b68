"""
docstore-cache — Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a singleton configuration instance for the runtime.
"""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import RegistryConfig

logger = logging.getLogger(__name__)

_config_instance: RegistryConfig | None = None


def _split_list(raw: str | None) -> list[str]:
    """Split a comma separated environment value, dropping blanks."""
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_ttls(raw: str | None) -> dict[str, int]:
    """Parse CACHE_TTLS entries of the form ``name=seconds``."""
    ttls: dict[str, int] = {}
    for entry in _split_list(raw):
        name, sep, seconds = entry.partition("=")
        if not sep:
            raise ConfigurationError(
                f"Invalid CACHE_TTLS entry '{entry}', expected name=seconds",
                details={"env": "CACHE_TTLS", "entry": entry},
            )
        try:
            ttls[name.strip()] = int(seconds.strip())
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid TTL for cache '{name.strip()}': {seconds.strip()}",
                details={"env": "CACHE_TTLS", "entry": entry},
            ) from e
    return ttls


def _build_caches() -> dict[str, dict[str, Any]]:
    names = _split_list(os.getenv("CACHE_NAMES"))
    ttls = _parse_ttls(os.getenv("CACHE_TTLS"))
    always_flush = set(_split_list(os.getenv("CACHE_ALWAYS_FLUSH")))

    # A TTL or flush setting implies the cache exists
    for name in [*ttls, *sorted(always_flush)]:
        if name not in names:
            names.append(name)

    return {
        name: {
            "ttl_seconds": ttls.get(name, 0),
            "always_flush": name in always_flush,
        }
        for name in names
    }


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> RegistryConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated RegistryConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    if env_file:
        env_path = Path(env_file)
    else:
        env_path = Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    # Auto-detect store backend: Redis if REDIS_URL is set, else memory
    redis_url = os.getenv("REDIS_URL")
    store_backend = "redis" if redis_url else "memory"

    try:
        config_dict = {
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
            "store": {
                "backend": os.getenv("STORE_BACKEND", store_backend),
                "redis_url": redis_url,
                "redis_max_connections": int(os.getenv("REDIS_MAX_CONNECTIONS", "10")),
                "redis_socket_timeout": int(os.getenv("REDIS_SOCKET_TIMEOUT", "5")),
            },
            "caches": _build_caches(),
        }
        _config_instance = RegistryConfig(**config_dict)  # type: ignore[arg-type]
        logger.info(
            f"Configuration loaded successfully ({len(_config_instance.caches)} cache(s))",
            extra={
                "log_level": _config_instance.log_level,
                "store_backend": _config_instance.store.backend,
                "cache_count": len(_config_instance.caches),
            },
        )
        return _config_instance
    except ConfigurationError:
        raise
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors()},
            exc_info=True,
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables and configuration.",
            details={"validation_errors": e.errors()},
        ) from e
    except Exception as e:
        logger.error(
            f"Unexpected error loading configuration: {e}",
            extra={"error": str(e)},
            exc_info=True,
        )
        raise ConfigurationError(
            f"Failed to load configuration: {e}",
            details={"error": str(e)},
        ) from e


def get_config() -> RegistryConfig:
    """Get the current configuration instance, loading it on first access."""
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> RegistryConfig:
    """Force reload configuration."""
    return load_config(env_file=env_file, reload=True)
