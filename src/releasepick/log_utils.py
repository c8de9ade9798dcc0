import logging
import os
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator, Optional

import platformdirs
from rich.logging import RichHandler  # Keep Rich for console

from releasepick.constants import (
    DEBUG_LOG_FORMAT,
    DISABLE_FILE_LOGGING_ENV_VAR,
    INFO_LOG_FORMAT,
    LOG_DATE_FORMAT,
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_MAX_BYTES,
    LOG_FILE_NAME,
    LOG_LEVEL_ENV_VAR,
    LOGGER_NAME,
)

logger = logging.getLogger(LOGGER_NAME)

# Module-level file handler so it can be replaced on reconfiguration
_file_handler: Optional[RotatingFileHandler] = None


def _formatter_for(handler: logging.Handler, level: int) -> logging.Formatter:
    # Rich renders its own time and level columns
    if isinstance(handler, RichHandler):
        return logging.Formatter("%(message)s")
    if level >= logging.INFO:
        return logging.Formatter(INFO_LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    return logging.Formatter(DEBUG_LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def set_log_level(level_name: str) -> None:
    """
    Set the log level for the releasepick logger and reconfigure all attached handlers.

    If `level_name` is not a valid logging level name (e.g., "DEBUG", "INFO"), a
    warning is logged and the current configuration is left unchanged.

    Parameters:
        level_name (str): Case-insensitive name of the desired logging level.
    """
    level = getattr(logging, level_name.upper(), None)
    if not isinstance(level, int):
        logger.warning(f"Invalid log level name: {level_name}. Using current level.")
        return

    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
        handler.setFormatter(_formatter_for(handler, level))

    logger.debug(f"Log level set to {logging.getLevelName(level)}")


def default_log_dir() -> Path:
    """Return the per-user log directory for releasepick."""
    return Path(platformdirs.user_log_dir(LOGGER_NAME))


def file_logging_disabled() -> bool:
    return os.environ.get(DISABLE_FILE_LOGGING_ENV_VAR, "").strip().lower() in {
        "1",
        "true",
        "yes",
    }


def add_file_logging(
    log_dir_path: Optional[Path] = None, level_name: str = "INFO"
) -> Optional[Path]:
    """
    Enable rotating file logging for the releasepick logger.

    Creates the directory if necessary and attaches a RotatingFileHandler writing
    to `releasepick.log` inside it (the platformdirs user log directory when no
    directory is given). Existing file logging configured by this module is
    removed and closed first. Invalid level names fall back to INFO.

    Returns:
        Optional[Path]: The log file path, or None when file logging is disabled
        through the environment.
    """
    global _file_handler
    if file_logging_disabled():
        logger.debug("File logging disabled by %s", DISABLE_FILE_LOGGING_ENV_VAR)
        return None

    if _file_handler and _file_handler in logger.handlers:
        logger.removeHandler(_file_handler)
        _file_handler.close()

    log_dir_path = log_dir_path or default_log_dir()
    log_dir_path.mkdir(parents=True, exist_ok=True)
    log_file = log_dir_path / LOG_FILE_NAME

    resolved = getattr(logging, level_name.upper(), None)
    if not isinstance(resolved, int):
        logger.warning(
            f"Invalid file log level name: {level_name}. Defaulting to INFO."
        )
        resolved = logging.INFO

    _file_handler = RotatingFileHandler(
        log_file,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    _file_handler.setFormatter(_formatter_for(_file_handler, resolved))
    _file_handler.setLevel(resolved)

    logger.addHandler(_file_handler)
    logger.debug(
        f"File logging enabled at {log_file} with level {logging.getLevelName(resolved)}"
    )
    return log_file


@contextmanager
def console_logging_suspended() -> Iterator[None]:
    """
    Silence the Rich console handler while a full-screen session owns the terminal.

    Console output written while curses is active would corrupt the screen; file
    logging is unaffected. Previous handler levels are restored on exit.
    """
    saved = {}
    for handler in logger.handlers:
        if isinstance(handler, RichHandler):
            saved[handler] = handler.level
            handler.setLevel(logging.CRITICAL + 1)
    try:
        yield
    finally:
        for handler, level in saved.items():
            handler.setLevel(level)


def _initialize_logger() -> None:
    """
    Initialize the releasepick logger with a console RichHandler and an initial log level.

    Removes any existing handlers, disables propagation to the root logger and
    reads the initial level from the environment variable named by
    LOG_LEVEL_ENV_VAR (INFO when unset or invalid).
    """
    logger.propagate = False

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        rich_tracebacks=True,
        show_time=True,
        show_level=True,
        show_path=False,
        markup=False,
        log_time_format=LOG_DATE_FORMAT,
    )

    default_log_level = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper()
    resolved = getattr(logging, default_log_level, None)
    if not isinstance(resolved, int):
        logger.warning(
            f"Invalid {LOG_LEVEL_ENV_VAR}={default_log_level}; defaulting to INFO."
        )
        resolved = logging.INFO

    logger.addHandler(console_handler)
    set_log_level(logging.getLevelName(resolved))


# Initialize the logger when the module is imported
_initialize_logger()
