from .config_manager import (
    AppConfig,
    ConfigManager,
    get_config,
    init_config,
    ConfigValidationError,
    Environment,
    LogLevel,
    LoggingConfig,
    StorageConfig,
    TenantCacheConfig,
    VectorStoreConfig,
)
from .logging_setup import setup_logging

__all__ = [
    "AppConfig",
    "ConfigManager",
    "get_config",
    "init_config",
    "ConfigValidationError",
    "Environment",
    "LogLevel",
    "LoggingConfig",
    "StorageConfig",
    "TenantCacheConfig",
    "VectorStoreConfig",
    "setup_logging",
]
