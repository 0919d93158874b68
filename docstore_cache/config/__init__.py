"""
docstore-cache — Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config
from .schemas import (
    CacheConfig,
    LogLevel,
    RegistryConfig,
    StoreBackend,
    StoreConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    # Main config
    "RegistryConfig",
    # Enums
    "StoreBackend",
    "LogLevel",
    # Config sections
    "StoreConfig",
    "CacheConfig",
]
