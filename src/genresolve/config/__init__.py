"""Application configuration helpers."""

from __future__ import annotations

from .batch import BatchConfig, get_batch_config
from .errors import ConfigurationError
from .logging import configure_logging
from .resolution import ResolutionConfig, get_resolution_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "BatchConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "ResolutionConfig",
    "StorageConfig",
    "configure_logging",
    "get_batch_config",
    "get_database_config",
    "get_resolution_config",
    "get_storage_config",
]
