"""dcache utility modules."""

from .logging import (
    get_logger,
    initialize_logging,
    shutdown_logging,
    log_stats
)
from .logging_config import (
    LoggingPresets,
    configure_from_environment,
    get_logging_config
)

__all__ = [
    # Logging functions
    "get_logger",
    "initialize_logging",
    "shutdown_logging",
    "log_stats",
    # Logging configuration
    "LoggingPresets",
    "configure_from_environment",
    "get_logging_config"
]
