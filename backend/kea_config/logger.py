"""Application logging with rotation and cleanup of old rotated files"""
import logging
from logging.handlers import RotatingFileHandler
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from kea_config.config import settings

DEFAULT_LOGGER_NAME = "kea-config"

# Library loggers routed into the application log file
LIBRARY_LOGGERS = ["sqlalchemy.engine", "uvicorn", "uvicorn.error"]


def cleanup_old_logs(logs_dir: Path, max_age_days: int = 30) -> int:
    """Remove rotated log files older than max_age_days.

    Args:
        logs_dir: Directory containing log files
        max_age_days: Maximum age in days

    Returns:
        Number of removed files
    """
    if not logs_dir.exists():
        return 0

    now = datetime.now()
    removed = 0

    for log_file in logs_dir.glob("*.log*"):
        # Current log is never removed
        if log_file.name == settings.log_file.name:
            continue

        file_time = datetime.fromtimestamp(log_file.stat().st_mtime)
        if (now - file_time).days > max_age_days:
            log_file.unlink()
            removed += 1

    return removed


class OperationLogger:
    """Logger for configuration changes, one line per committed or failed write."""

    def __init__(
        self,
        log_file: Optional[Path] = None,
        console_output: bool = False,
        name: str = DEFAULT_LOGGER_NAME,
    ):
        self.log_file = log_file or settings.log_file
        self.console_output = console_output
        self.name = name
        self._setup_logger()

    def _setup_logger(self):
        """Setup the logger with rotation.

        Only the handlers of this instance's own named logger are replaced.
        """
        self.logger = logging.getLogger(self.name)
        self.logger.setLevel(logging.DEBUG)

        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        self.log_file.parent.mkdir(parents=True, exist_ok=True)

        # Rotating file handler (100 MB max)
        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=100 * 1024 * 1024,  # 100 MB
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)

        # Format: timestamp | level | logger | message
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        file_handler.setFormatter(formatter)

        self.logger.addHandler(file_handler)
        self.file_handler = file_handler

        # Console handler for development
        if self.console_output:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.INFO)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

    def capture(self, logger_names: Iterable[str]):
        """Route other loggers into this instance's log file.

        SQL echo goes through the sqlalchemy.engine logger.
        """
        for logger_name in logger_names:
            logger_obj = logging.getLogger(logger_name)
            logger_obj.handlers.clear()
            logger_obj.addHandler(self.file_handler)

    def log_operation(
        self,
        operator: str,
        action: str,
        obj: str,
        details: Optional[str] = None,
        level: str = "INFO",
    ):
        """Log an operation.

        Args:
            operator: Tag of the server performing the change
            action: Action type (CREATE, ROLLBACK, etc.)
            obj: Object being operated on
            details: Additional details
            level: Log level (INFO, WARNING, ERROR)
        """
        message = f"{operator} | {action} | {obj}"
        if details:
            message += f" | {details}"

        if level == "ERROR":
            self.logger.error(message)
        elif level == "WARNING":
            self.logger.warning(message)
        else:
            self.logger.info(message)

    def get_logs(self, limit: int = 100, filter_operator: Optional[str] = None) -> list:
        """Get recent operation entries, newest first.

        Args:
            limit: Maximum number of entries to return
            filter_operator: Optional server tag filter

        Returns:
            List of log entries
        """
        entries = []

        if not self.log_file.exists():
            return entries

        with open(self.log_file, "r", encoding="utf-8") as f:
            lines = f.readlines()

        for line in reversed(lines):
            line = line.strip()
            if not line:
                continue

            parts = line.split(" | ")
            # Only lines written by the operation logger itself
            if len(parts) < 6 or parts[2] != self.logger.name:
                continue

            entry = {
                "timestamp": parts[0],
                "level": parts[1].strip(),
                "logger": parts[2],
                "operator": parts[3],
                "action": parts[4],
                "object": parts[5],
                "details": " | ".join(parts[6:]),
            }

            if filter_operator and entry["operator"] != filter_operator:
                continue

            entries.append(entry)

            if len(entries) >= limit:
                break

        return entries


# Global logger instance
operation_logger = OperationLogger(console_output=settings.debug)
operation_logger.capture(LIBRARY_LOGGERS)


def log_operation(
    operator: str,
    action: str,
    obj: str,
    details: Optional[str] = None,
    level: str = "INFO",
):
    """Convenience function to log an operation."""
    operation_logger.log_operation(operator, action, obj, details, level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'services.writer')

    Returns:
        Logger instance
    """
    return logging.getLogger(f"{DEFAULT_LOGGER_NAME}.{name}")
