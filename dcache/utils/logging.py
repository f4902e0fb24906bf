"""
Logging setup for dcache.

The backends log through ``logging.getLogger(__name__)`` and never install
handlers themselves. Applications that want dcache's output formatted can call
``initialize_logging`` once, which configures the root logger with a console
handler and an optional rotating file handler, in JSON or plain text.
"""
import json
import logging
import logging.handlers
import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

# LogRecord attributes that are not user supplied extra fields.
_RESERVED_ATTRS = frozenset([
    'name', 'msg', 'args', 'levelname', 'levelno',
    'pathname', 'filename', 'module', 'lineno',
    'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process',
    'exc_info', 'exc_text', 'stack_info', 'taskName', 'message',
])


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for log records.

    Every record becomes one JSON object with timestamp, level, logger name,
    message and source location, plus any ``extra`` fields of basic types.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        for key, value in record.__dict__.items():
            if key.startswith('_') or key in _RESERVED_ATTRS:
                continue
            if isinstance(value, (str, int, float, bool, list, dict, type(None))):
                log_entry[key] = value

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class LogManager:
    """
    Process-wide logging configuration for dcache.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'text')
        log_file: Path to log file (optional)
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
    """

    def __init__(self,
                 log_level: str = "INFO",
                 log_format: str = "json",
                 log_file: Optional[str] = None,
                 max_bytes: int = 10 * 1024 * 1024,  # 10MB
                 backup_count: int = 5):
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {log_level}")
        if log_format not in ("json", "text"):
            raise ValueError(f"Unknown log format: {log_format}")

        self.log_level = level
        self.log_format = log_format
        self.log_file = log_file
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.handlers = []

        self._configure_root_logger()

    def _create_formatter(self) -> logging.Formatter:
        if self.log_format == "json":
            return StructuredFormatter()
        return logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    def _configure_root_logger(self):
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)
        formatter = self._create_formatter()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(formatter)
        self.handlers.append(console_handler)

        if self.log_file:
            log_path = Path(self.log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                self.log_file,
                maxBytes=self.max_bytes,
                backupCount=self.backup_count
            )
            file_handler.setLevel(self.log_level)
            file_handler.setFormatter(formatter)
            self.handlers.append(file_handler)

        for handler in self.handlers:
            root_logger.addHandler(handler)

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    def shutdown(self):
        """Detach and close the handlers this manager installed."""
        root_logger = logging.getLogger()
        for handler in self.handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self.handlers = []


_log_manager: Optional[LogManager] = None
_log_manager_lock = threading.RLock()


def initialize_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    force: bool = False,
) -> LogManager:
    """
    Initialize the global logging configuration.

    Subsequent calls return the existing manager unless ``force`` is set, in
    which case the previous handlers are removed first.

    Returns:
        The active log manager
    """
    global _log_manager

    with _log_manager_lock:
        if _log_manager is not None and force:
            _log_manager.shutdown()
            _log_manager = None
        if _log_manager is None:
            _log_manager = LogManager(
                log_level=log_level,
                log_format=log_format,
                log_file=log_file,
                max_bytes=max_bytes,
                backup_count=backup_count,
            )

    return _log_manager


def shutdown_logging():
    """Remove the handlers installed by ``initialize_logging``."""
    global _log_manager

    with _log_manager_lock:
        if _log_manager is not None:
            _log_manager.shutdown()
            _log_manager = None


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger, initializing the default configuration on first use.
    """
    with _log_manager_lock:
        if _log_manager is None:
            initialize_logging()
        return _log_manager.get_logger(name)


def log_stats(backend: Any, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
    """
    Log a snapshot of a backend's statistics as structured fields.

    Args:
        backend: Any object with a ``get_stats()`` method
        logger: Logger to use, defaults to the ``dcache.stats`` logger
        level: Log level of the record
    """
    stats = backend.get_stats()
    (logger or logging.getLogger("dcache.stats")).log(
        level,
        f"Cache stats for {stats.get('backend', type(backend).__name__)}",
        extra={f"cache_{key}": value for key, value in stats.items()},
    )
