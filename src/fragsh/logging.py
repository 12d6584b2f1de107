"""fragsh logging configuration.

Console output stays quiet unless debug is enabled; a per-session log file
under ~/.fragsh/logs/<session-id>.log captures everything, including
tracebacks of fragments that failed to load.
"""
from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import Optional

# Directory for log files
LOGS_DIR = Path.home() / ".fragsh" / "logs"

# Root logger for the package
PACKAGE_LOGGER = "fragsh"

# Module-level state
_console_handler: Optional[logging.Handler] = None
_session_handler: Optional[logging.FileHandler] = None
_session_log_path: Optional[Path] = None


def _ensure_logs_dir() -> None:
    """Ensure the logs directory exists."""
    LOGS_DIR.mkdir(parents=True, exist_ok=True)


def get_log_path(session_id: str) -> Path:
    """Get the log file path for a session."""
    _ensure_logs_dir()
    return LOGS_DIR / f"{session_id}.log"


def configure_console_logging(debug: bool = False) -> None:
    """Attach a stderr handler to the package logger.

    Args:
        debug: Show DEBUG and up when True, otherwise only WARNING and up.
    """
    global _console_handler

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if _console_handler is not None:
        pkg_logger.removeHandler(_console_handler)

    _console_handler = logging.StreamHandler(sys.stderr)
    _console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    _console_handler.setFormatter(logging.Formatter("fragsh: %(levelname)s: %(message)s"))
    pkg_logger.addHandler(_console_handler)
    pkg_logger.setLevel(logging.DEBUG)


def configure_session_logging(
    session_id: str,
    level: int = logging.DEBUG,
) -> Path:
    """Configure file logging for a shell session.

    Args:
        session_id: The session ID (uses first 8 chars)
        level: Logging level for file output (default DEBUG)

    Returns:
        Path to the log file
    """
    global _session_handler, _session_log_path

    short_id = session_id[:8] if len(session_id) > 8 else session_id
    log_path = get_log_path(short_id)

    close_session_logging()

    _session_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    _session_handler.setLevel(level)
    _session_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    pkg_logger.addHandler(_session_handler)
    pkg_logger.setLevel(logging.DEBUG)

    _session_log_path = log_path
    pkg_logger.info(f"=== Session started: {session_id} ===")

    return log_path


def close_session_logging() -> None:
    """Close the current session's file logging."""
    global _session_handler, _session_log_path

    if _session_handler is not None:
        pkg_logger = logging.getLogger(PACKAGE_LOGGER)
        pkg_logger.info("=== Session ended ===")
        pkg_logger.removeHandler(_session_handler)
        _session_handler.close()
        _session_handler = None
        _session_log_path = None


def get_current_log_path() -> Optional[Path]:
    """Get the current session's log file path, or None."""
    return _session_log_path


def log_fragment_exception(
    error: BaseException,
    context: str = "",
    verbose: bool = False,
    logger: Optional[logging.Logger] = None,
) -> str:
    """Log a fragment failure with its traceback.

    The full traceback always goes to the log at DEBUG (the session file
    keeps it); with verbose it is also emitted at WARNING so the console
    shows it.

    Args:
        error: The exception to log
        context: What was happening (e.g. "Failed to load fragment x.py")
        verbose: Debug flag
        logger: Logger to use (default: the package logger)

    Returns:
        User-friendly one-line message (without traceback)
    """
    logger = logger or logging.getLogger(PACKAGE_LOGGER)

    error_type = type(error).__name__
    error_msg = str(error)
    user_msg = f"{context}: {error_msg}" if context else f"{error_type}: {error_msg}"

    tb_str = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    log_msg = f"{context}\n{error_type}: {error_msg}\n\nTraceback:\n{tb_str}"

    logger.log(logging.WARNING if verbose else logging.DEBUG, log_msg)
    return user_msg
