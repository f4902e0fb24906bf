"""
Logging configuration presets for dcache.
"""
import os
from typing import Any, Dict, Optional

from dcache.exceptions import ConfigurationError

from .logging import LogManager, initialize_logging


class LoggingPresets:
    """Pre-configured logging setups for different environments."""

    @staticmethod
    def development(log_file: Optional[str] = None) -> LogManager:
        """Verbose JSON logging, cache evictions and purges included."""
        return initialize_logging(
            log_level="DEBUG",
            log_format="json",
            log_file=log_file,
            max_bytes=5 * 1024 * 1024,  # 5MB
            backup_count=3,
            force=True,
        )

    @staticmethod
    def production(log_file: Optional[str] = None) -> LogManager:
        return initialize_logging(
            log_level="INFO",
            log_format="json",
            log_file=log_file,
            max_bytes=50 * 1024 * 1024,  # 50MB
            backup_count=10,
            force=True,
        )

    @staticmethod
    def testing(log_file: Optional[str] = None) -> LogManager:
        return initialize_logging(
            log_level="WARNING",
            log_format="text",
            log_file=log_file,
            max_bytes=1 * 1024 * 1024,  # 1MB
            backup_count=1,
            force=True,
        )


def configure_from_environment() -> LogManager:
    """
    Configure logging based on environment variables.

    Environment variables:
    - DCACHE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - DCACHE_LOG_FORMAT: Log format (json, text)
    - DCACHE_LOG_FILE: Log file path
    - DCACHE_LOG_MAX_BYTES: Max file size in bytes
    - DCACHE_LOG_BACKUP_COUNT: Number of backup files

    Returns:
        Configured log manager

    Raises:
        ConfigurationError: If a variable holds an invalid value
    """
    try:
        return initialize_logging(
            log_level=os.getenv("DCACHE_LOG_LEVEL", "INFO"),
            log_format=os.getenv("DCACHE_LOG_FORMAT", "json"),
            log_file=os.getenv("DCACHE_LOG_FILE") or None,
            max_bytes=int(os.getenv("DCACHE_LOG_MAX_BYTES", "10485760")),  # 10MB default
            backup_count=int(os.getenv("DCACHE_LOG_BACKUP_COUNT", "5")),
            force=True,
        )
    except ValueError as e:
        raise ConfigurationError("Invalid dcache logging configuration in environment", e) from e


def get_logging_config() -> Dict[str, Any]:
    """
    Get current logging configuration.

    Returns:
        Dictionary with current logging configuration
    """
    from . import logging as dcache_logging

    manager = dcache_logging._log_manager
    if manager is None:
        return {"status": "not_initialized"}

    return {
        "status": "initialized",
        "log_level": manager.log_level,
        "log_format": manager.log_format,
        "log_file": manager.log_file,
        "max_bytes": manager.max_bytes,
        "backup_count": manager.backup_count,
    }
