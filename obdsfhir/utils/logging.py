"""
obds-to-fhir Logging Utilities - Session Logging for Mapping Runs

Overview:
---------
Centralised logging configuration for report consolidation and mapping runs.
Provides session-based file logging with unique identifiers and configurable
verbosity, so malformed source records can be traced back to the run that
encountered them.

Log Location:
-------------
- Default: ~/.obdsfhir/logs/
- Each CLI run creates a timestamped log file with session ID
- A symlink 'obdsfhir.log' always points to the latest session
- Can be overridden via OBDSFHIR_LOG_DIR environment variable

Log Levels:
-----------
- DEBUG: Per-report consolidation decisions
- INFO: Batch summaries (reports in, reports kept, resources emitted)
- WARNING: Unconvertible identifiers, duplicate version numbers
- ERROR: Reports skipped because of structural or date format errors

Usage:
------
    from obdsfhir.utils.logging import get_logger, setup_logging

    # Call once at startup (CLI entry point)
    log_file = setup_logging(level="DEBUG")

    # Get logger in any module
    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
import os
import sys
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

# ============================================================================
# Constants
# ============================================================================

DEFAULT_LOG_DIR = Path.home() / ".obdsfhir" / "logs"
DEFAULT_LOG_LEVEL = "INFO"
SYMLINK_NAME = "obdsfhir.log"
ROOT_LOGGER = "obdsfhir"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Detailed format for file logging (includes line numbers)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s:%(lineno)d | %(message)s"

# Track logging state
_logging_initialised = False
_log_file_path: Optional[Path] = None
_session_id: Optional[str] = None


# ============================================================================
# Session ID Filter - Adds session_id to all log records
# ============================================================================

class SessionIdFilter(logging.Filter):
    """Add session_id to all log records."""

    def __init__(self, session_id: str):
        super().__init__()
        self.session_id = session_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = self.session_id  # type: ignore[attr-defined]
        return True


class SessionFormatter(logging.Formatter):
    """Formatter that adds session_id, defaulting to 'N/A' if not present."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "session_id"):
            record.session_id = _session_id or "N/A"  # type: ignore[attr-defined]
        return super().format(record)


# ============================================================================
# Setup Functions
# ============================================================================

def generate_session_id() -> str:
    """Generate a short unique session ID (6 characters)."""
    return uuid.uuid4().hex[:6]


def get_log_directory() -> Path:
    """Get the log directory, respecting OBDSFHIR_LOG_DIR environment variable."""
    env_log_dir = os.getenv("OBDSFHIR_LOG_DIR")
    if env_log_dir:
        return Path(env_log_dir)
    return DEFAULT_LOG_DIR


def generate_log_filename(session_id: str) -> str:
    """Generate a timestamped log filename with session ID."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"obdsfhir_{timestamp}_{session_id}.log"


def setup_logging(
    level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    console_output: bool = False,
    quiet: bool = False,
) -> Path:
    """
    Initialise logging with session-based file and optional console output.

    Parameters
    ----------
    level : str, optional
        Log level: DEBUG, INFO, WARNING, ERROR. Defaults to INFO.
        Can also be set via OBDSFHIR_LOG_LEVEL environment variable.
    log_dir : Path, optional
        Directory for log files. Defaults to ~/.obdsfhir/logs/
    console_output : bool
        If True, also log to console (stderr). Default False.
    quiet : bool
        If True, suppress console output entirely. Default False.

    Returns
    -------
    Path
        Path to the log file being written to.
    """
    global _logging_initialised, _log_file_path, _session_id

    _session_id = generate_session_id()

    if level is None:
        level = os.getenv("OBDSFHIR_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_dir is None:
        log_dir = get_log_directory()
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / generate_log_filename(_session_id)
    _log_file_path = log_file

    package_logger = logging.getLogger(ROOT_LOGGER)

    # Clear any existing handlers and filters
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()
    for f in package_logger.filters[:]:
        package_logger.removeFilter(f)

    package_logger.setLevel(log_level)
    package_logger.addFilter(SessionIdFilter(_session_id))

    # File handler (no rotation - each session gets its own file)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(SessionFormatter(FILE_LOG_FORMAT, LOG_DATE_FORMAT))
    package_logger.addHandler(file_handler)

    if console_output and not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(SessionFormatter(LOG_FORMAT, LOG_DATE_FORMAT))
        package_logger.addHandler(console_handler)

    # Prevent propagation to root logger (avoid duplicate logs)
    package_logger.propagate = False

    symlink_path = log_dir / SYMLINK_NAME
    try:
        if symlink_path.is_symlink() or symlink_path.exists():
            symlink_path.unlink()
        symlink_path.symlink_to(log_file.name)
    except OSError:
        # Symlink creation may fail on some systems (e.g., Windows without admin)
        pass

    _logging_initialised = True

    package_logger.info("=" * 80)
    package_logger.info("obds-to-fhir Logging Session Started")
    package_logger.info(f"  Session ID: {_session_id}")
    package_logger.info(f"  Log file: {log_file}")
    package_logger.info(f"  Log level: {level.upper()}")
    package_logger.info("=" * 80)

    return log_file


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module name.

    Sets up session logging with defaults on first use.
    """
    if not _logging_initialised:
        setup_logging()

    if name.startswith(ROOT_LOGGER):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def get_current_log_file() -> Optional[Path]:
    """Return the path to the current log file, if logging is initialised."""
    return _log_file_path


def get_session_id() -> Optional[str]:
    """Return the current session ID, if logging is initialised."""
    return _session_id


# ============================================================================
# Logging Helper Functions - Structured Logging
# ============================================================================

def log_consolidation_summary(
    logger: logging.Logger,
    total: int,
    kept: int,
    skipped: int = 0,
) -> None:
    """Log how many reports survived filtering and version deduplication."""
    msg = f"Consolidated {total} report(s) into {kept} canonical report(s)"
    if skipped:
        msg += f" | {skipped} malformed report(s) skipped"
    logger.info(msg)


def log_mapping_complete(
    logger: logging.Logger,
    processed: int,
    failed: int,
    resources: int,
) -> None:
    """Log a mapping run completion summary."""
    logger.info("-" * 60)
    status = "SUCCEEDED" if failed == 0 else "COMPLETED WITH ERRORS"
    logger.info(f"MAPPING {status}")
    logger.info(f"  Reports mapped: {processed}")
    logger.info(f"  Reports failed: {failed}")
    logger.info(f"  Resources emitted: {resources}")
    logger.info("-" * 60)
