"""
Unified logging for Task Master.

Every module gets its logger through ``get_logger`` so that level and format
are configured in one place. Log output goes to stderr; stdout is reserved
for command output.

Usage:
    from task_master.utils.logging import get_logger

    logger = get_logger(__name__)
    logger.warning("Complexity report not found in default locations")

Environment:
    TASKMASTER_LOG_LEVEL: DEBUG, INFO, WARNING (default), ERROR, CRITICAL
    TASKMASTER_LOG_FORMAT: text (default) or json
"""

import json
import logging
import os
import sys
import uuid
from typing import Optional, Union

DEFAULT_LEVEL = "WARNING"
DEFAULT_FORMAT = "text"
ROOT_LOGGER = "task_master"

# Level forced by the CLI (--verbose / global.debug); wins over the environment.
_level_override: Optional[int] = None


class RunContextFilter(logging.Filter):
    """
    Filter that stamps every record with the id of the current CLI run.
    """

    def __init__(self, run_id: Optional[str] = None):
        super().__init__()
        self.run_id = run_id or uuid.uuid4().hex[:8]

    def filter(self, record):
        record.run_id = getattr(record, "run_id", self.run_id)
        return True


class JsonFormatter(logging.Formatter):
    """
    Format log records as JSON for structured logging.
    """

    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
            "run_id": getattr(record, "run_id", "-"),
        }

        if hasattr(record, "extra"):
            log_data.update(record.extra)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        if _level_override is not None:
            return _level_override
        level = os.getenv("TASKMASTER_LOG_LEVEL", DEFAULT_LEVEL)
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def _is_package_logger(name: str) -> bool:
    return name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + ".")


def _package_loggers():
    for name in list(logging.root.manager.loggerDict):
        if _is_package_logger(name):
            yield logging.getLogger(name)


class StderrHandler(logging.StreamHandler):
    """
    Stream handler bound to whatever ``sys.stderr`` is when a record is
    emitted, so output follows stream swaps made by test runners.
    """

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


def setup_logger(
    name: str,
    level: Union[int, str, None] = None,
    log_format: Optional[str] = None,
    run_id: Optional[str] = None,
) -> logging.Logger:
    """
    Configure and return a logger that writes to stderr.

    Only the ``task_master`` logger is set up this way; module loggers
    propagate to it.

    Args:
        name: The name of the logger
        level: The logging level; defaults to TASKMASTER_LOG_LEVEL
        log_format: ``text`` or ``json``; defaults to TASKMASTER_LOG_FORMAT
        run_id: Optional id shared by all records of one invocation

    Returns:
        A configured logger instance
    """
    log_format = log_format or os.getenv("TASKMASTER_LOG_FORMAT", DEFAULT_FORMAT)

    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    if log_format.lower() == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler = StderrHandler()
    console_handler.setFormatter(formatter)
    # On the handler so records propagated from module loggers are stamped too
    console_handler.addFilter(RunContextFilter(run_id))
    logger.addHandler(console_handler)

    return logger


def get_logger(name: str, level: Union[int, str, None] = None) -> logging.Logger:
    """
    Get a logger instance.

    Module loggers under ``task_master`` carry a level only and hand their
    records to the package logger's handler.

    Args:
        name: The name of the logger (usually __name__)
        level: Override the default logging level for this logger

    Returns:
        A logger instance
    """
    if name == ROOT_LOGGER or not _is_package_logger(name):
        return setup_logger(name, level=level)

    if not logging.getLogger(ROOT_LOGGER).handlers:
        setup_logger(ROOT_LOGGER)
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))
    return logger


def configure_logging(run_id: Optional[str] = None) -> logging.Logger:
    """
    Re-read TASKMASTER_LOG_LEVEL and TASKMASTER_LOG_FORMAT.

    Called by the CLI after the project's ``.env`` is loaded. Clears any
    level forced by an earlier run; ``set_global_level`` applies a new one.
    """
    global _level_override

    _level_override = None
    logger = setup_logger(ROOT_LOGGER, run_id=run_id)
    for package_logger in _package_loggers():
        package_logger.setLevel(logger.level)
    return logger


def set_global_level(level: Union[int, str]) -> None:
    """
    Apply ``level`` to every Task Master logger, present and future.

    Called by the CLI once ``--verbose`` and the project config are known.
    """
    global _level_override

    _level_override = _resolve_level(level)
    for package_logger in _package_loggers():
        package_logger.setLevel(_level_override)


logger = get_logger(ROOT_LOGGER)
