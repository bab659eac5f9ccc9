"""
Logging configuration for media-resolver.

This module sets up the logging system with multiple outputs:
    - Console: Colored, tqdm-compatible output
    - log_full.log: Complete log of all events (DEBUG and above)
    - log_errors.log: Only ERROR and CRITICAL level messages
    - skipped_entries.log: Search result entries skipped as malformed

File outputs are only created when a log directory is configured
(logging.directory in config.yaml). Without one, only the console
handler is installed.

Usage:
    from media_resolver.core.logger import setup_logging, get_logger

    setup_logging(log_dir)  # Call once at startup
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Resolving URL")
    log_skipped_entry(logger, "videoRenderer", "Missing title", entry_id="abc")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


# Log file name prefixes (created in the log directory)
LOG_FULL_FILENAME = "log_full"
LOG_ERRORS_FILENAME = "log_errors"
SKIPPED_ENTRIES_FILENAME = "skipped_entries"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Custom formatter that adds colors to console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as '<colored level>: <message>'."""
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        colored_levelname = f"{color}{record.levelname}{Colors.RESET}"
        return f"{colored_levelname}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to console without breaking tqdm progress bars.

    Playlist resolution shows a tqdm bar while missing tracks are fetched;
    writing log lines with tqdm.write() keeps them above the bar instead
    of tearing it.

    Attributes:
        stream: The output stream, or None for whatever sys.stderr is at emit time.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


class SkippedEntryHandler(logging.Handler):
    """
    Handler that records search entries skipped by the results walk.

    A renderer that is present but malformed is skipped rather than
    aborting the whole search. This handler keeps a plain report of those
    entries so layout drift on the YouTube side is easy to spot:

        videoRenderer abc123
        Missing required field 'videoRenderer.title.runs.0.text'

        playlistRenderer ?
        Missing required field 'playlistRenderer.playlistId'

    The handler looks for specific extra fields in log records:
        - 'skipped_renderer': The renderer key of the entry
        - 'skipped_entry_id': The entry id, when it could be read
        - 'skipped_reason': Why the entry was skipped

    Only records containing these fields are written to the report.

    Attributes:
        report_path: Path to the skipped_entries.log file.
        report_file: Open file handle (opened by open()).
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """Open the report file for writing (overwrites existing content)."""
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        """
        Write skipped entry info to the report if present in the log record.

        Records without a 'skipped_renderer' attribute are ignored.
        """
        if not hasattr(record, "skipped_renderer"):
            return

        if self.report_file is None:
            return

        try:
            renderer = getattr(record, "skipped_renderer", "unknown")
            entry_id = getattr(record, "skipped_entry_id", None)
            reason = getattr(record, "skipped_reason", "")

            self.report_file.write(f"{renderer} {entry_id or '?'}\n")
            self.report_file.write(f"{reason}\n\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """Close the report file handle. Safe to call multiple times."""
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """
    Filter that only allows ERROR and CRITICAL level records.

    Used by the error log file handler to exclude DEBUG, INFO, and WARNING.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Path | None = None, verbose: bool = False) -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before any other operations.

    Args:
        log_dir: Directory where log files will be created, or None for
                 console output only.
        verbose: If True, the console shows DEBUG messages (every request
                 URL, every skipped entry). Otherwise INFO and above.

    Behavior:
        1. Configure root logger level to DEBUG
        2. Replace existing handlers with a TqdmLoggingHandler
        3. If log_dir is given:
           - Create it if it doesn't exist
           - Add log_full_{timestamp}.log (DEBUG)
           - Add log_errors_{timestamp}.log (ERROR+ via ErrorOnlyFilter)
           - Add skipped_entries_{timestamp}.log (SkippedEntryHandler)
        4. Quiet urllib3's connection-level DEBUG chatter

    Thread Safety:
        This function is NOT thread-safe. Call it once from the main thread.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Close before clearing so file handles from a previous call are released
    for handler in root_logger.handlers[:]:
        handler.close()
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    full_handler = logging.FileHandler(
        log_dir / f"{LOG_FULL_FILENAME}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(
        log_dir / f"{LOG_ERRORS_FILENAME}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    skipped_handler = SkippedEntryHandler(log_dir / f"{SKIPPED_ENTRIES_FILENAME}_{timestamp}.log")
    skipped_handler.open()
    root_logger.addHandler(skipped_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Returns:
        logging.Logger: A logger instance configured by setup_logging().

    Note:
        Loggers obtained before setup_logging() is called propagate to
        whatever the root logger has, which under pytest is the capture
        handler.
    """
    return logging.getLogger(name)


def format_resolved_message(kind: str, title: str, url: str) -> str:
    """
    Format a 'Resolved' message with colors.

    Args:
        kind: Entity kind ("track", "playlist", "video", ...).
        title: Entity title.
        url: Canonical URL.

    Returns:
        Colored message string.
    """
    return (
        f"{Colors.GREEN}{kind}{Colors.RESET}: "
        f"{title} -> "
        f"{Colors.CYAN}{url}{Colors.RESET}"
    )


def log_skipped_entry(
    logger: logging.Logger,
    renderer: str,
    reason: str,
    entry_id: str | None = None
) -> None:
    """
    Log a search result entry that was skipped as malformed.

    Logs a WARNING and attaches the extra fields that SkippedEntryHandler
    writes to skipped_entries.log.

    Args:
        logger: The logger to use for the message.
        renderer: Renderer key of the entry (e.g. "videoRenderer").
        reason: Why the entry could not be parsed.
        entry_id: The entry id if it could be read.

    Example:
        log_skipped_entry(
            logger,
            renderer="videoRenderer",
            reason="Missing required field 'videoRenderer.title.runs.0.text'",
            entry_id="dQw4w9WgXcQ"
        )
    """
    logger.warning(
        f"Skipped malformed {renderer} ({entry_id or 'no id'}): {reason}",
        extra={
            "skipped_renderer": renderer,
            "skipped_entry_id": entry_id,
            "skipped_reason": reason,
        }
    )


def shutdown_logging() -> None:
    """
    Properly shut down the logging system.

    Flushes and closes every handler on the root logger, then removes it.
    Called by the CLI in a finally block.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except OSError:
            pass
        root_logger.removeHandler(handler)
