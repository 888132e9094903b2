"""
Logging configuration and utilities for playlist-player
Provides colored console output and file logging with separation between user and technical messages
"""

import logging
import logging.handlers
import re
import sys
import time
from pathlib import Path
from typing import Optional
import colorama
from colorama import Fore, Back, Style

from ..config.settings import get_settings


# Initialize colorama for Windows compatibility
colorama.init()


class ConsoleMessageFilter(logging.Filter):
    """Filter to allow only user-facing messages to console"""

    def __init__(self, verbose: bool = False, level: int = logging.INFO):
        super().__init__()
        self.verbose = verbose
        self.level = level

    def filter(self, record):
        # Verbose mode shows technical messages at the configured level too
        if self.verbose and record.levelno >= self.level:
            return True

        if record.levelno >= logging.WARNING:
            return True

        if getattr(record, 'console_output', False):
            return True

        if record.name.endswith('.console') or record.name.endswith('.user'):
            return True

        return False


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colored output for console"""

    # Color mapping for log levels
    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Back.WHITE + Style.BRIGHT,
    }

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True):
        """
        Initialize colored formatter

        Args:
            fmt: Log format string
            use_colors: Whether to use colored output
        """
        super().__init__()
        self.use_colors = use_colors
        self.fmt = fmt or '%(message)s'

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors"""
        formatter = logging.Formatter(self.fmt)
        message = formatter.format(record)
        if self.use_colors and record.levelno >= logging.WARNING and record.levelname in self.COLORS:
            # Warnings and errors are user-facing, color the whole line
            return f"{self.COLORS[record.levelname]}{message}{Style.RESET_ALL}"
        return message


class ProgressHandler(logging.Handler):
    """Handler that clears the current terminal line before writing"""

    def __init__(self, stream=None):
        super().__init__()
        self.stream = stream or sys.stderr

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            # Clear current line (status or progress bar) and print log message
            self.stream.write(f'\r{" " * 80}\r{msg}\n')
            self.stream.flush()
        except Exception:
            self.handleError(record)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    console_output: bool = True,
    colored_output: bool = True,
    max_size: str = "10MB",
    backup_count: int = 3,
    verbose: bool = False
) -> None:
    """
    Setup application logging configuration with separated console/file output

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (None to disable file logging)
        console_output: Enable console logging
        colored_output: Enable colored console output
        max_size: Maximum log file size before rotation
        backup_count: Number of backup log files to keep
        verbose: Show technical messages on the console as well
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture everything, filter at handler level

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    # Console handler - only user-facing messages unless verbose
    if console_output:
        console_handler = ProgressHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG)
        console_handler.addFilter(ConsoleMessageFilter(verbose=verbose, level=numeric_level))
        console_handler.setFormatter(ColoredFormatter(fmt='%(message)s', use_colors=colored_output))
        root_logger.addHandler(console_handler)

    # File handler with full detail logging
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=parse_size(max_size),
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)

        file_formatter = logging.Formatter(
            fmt='%(asctime)s | %(name)-30s | %(levelname)-8s | %(funcName)-20s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    # Silence chatty third-party loggers
    for lib in ['pydub', 'pydub.converter', 'blessed']:
        lib_logger = logging.getLogger(lib)
        lib_logger.setLevel(logging.CRITICAL)
        lib_logger.propagate = False

    logger = logging.getLogger('playlist-player')
    logger.info(f"Logging initialized - Level: {level}, Console: {console_output}, File: {log_file}")


def get_current_log_file() -> Optional[Path]:
    """
    Get the current log file path from active file handlers

    Returns:
        Path to current log file or None if no file logging
    """
    for handler in logging.getLogger().handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            return Path(handler.baseFilename)
    return None


def parse_size(size_str: str) -> int:
    """
    Parse size string to bytes

    Args:
        size_str: Size string like "10MB", "1GB", "500KB"

    Returns:
        Size in bytes
    """
    size_str = size_str.upper().strip()

    multipliers = {
        'B': 1,
        'KB': 1024,
        'MB': 1024 ** 2,
        'GB': 1024 ** 3,
        'TB': 1024 ** 4,
    }

    match = re.match(r'^(\d+(?:\.\d+)?)\s*([KMGT]?B)$', size_str)
    if not match:
        raise ValueError(f"Invalid size format: {size_str}")

    number, unit = match.groups()
    return int(float(number) * multipliers[unit])


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance for a module

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance with console helper methods attached
    """
    logger = logging.getLogger(name)

    def console_info(message: str):
        """Log message that should appear on console for user"""
        logger.info(message, extra={'console_output': True})

    def console_warning(message: str):
        logger.warning(message)  # Warnings already go to console

    def console_error(message: str):
        logger.error(message)  # Errors already go to console

    logger.console_info = console_info
    logger.console_warning = console_warning
    logger.console_error = console_error

    return logger


def configure_from_settings(verbose: bool = False) -> None:
    """Configure logging from application settings"""
    settings = get_settings()

    log_file_path = None
    if settings.logging.file:
        if Path(settings.logging.file).is_absolute():
            log_file_path = settings.logging.file
        else:
            log_file_path = settings.get_config_directory() / settings.logging.file

    setup_logging(
        level=settings.logging.level,
        log_file=str(log_file_path) if log_file_path else None,
        console_output=settings.logging.console_output,
        colored_output=settings.logging.colored_output,
        max_size=settings.logging.max_size,
        backup_count=settings.logging.backup_count,
        verbose=verbose
    )


class OperationLogger:
    """Logger for tracking long-running operations with a progress bar"""

    def __init__(self, logger: logging.Logger, operation_name: str):
        """
        Initialize operation logger

        Args:
            logger: Base logger instance
            operation_name: Name of the operation
        """
        self.logger = logger
        self.operation_name = operation_name
        self.start_time = None
        self.progress_bar = None

    def start(self, message: Optional[str] = None) -> None:
        """Start tracking operation - show to user"""
        self.start_time = time.time()
        self.logger.console_info(message or f"Starting {self.operation_name}")
        self.logger.debug(f"Operation started: {self.operation_name}")

    def progress(self, message: str, current: int, total: int) -> None:
        """Log progress update and advance the progress bar"""
        self.logger.debug(f"{self.operation_name}: {message} ({current}/{total})")

        if self.progress_bar is None:
            from tqdm import tqdm
            self.progress_bar = tqdm(
                total=total,
                desc=self.operation_name,
                bar_format="{desc} {n}/{total} {bar} {percentage:3.0f}%",
                ncols=80,
                leave=False,
            )

        self.progress_bar.n = current
        self.progress_bar.refresh()

    def complete(self, message: Optional[str] = None) -> None:
        """Mark operation as complete - close progress bar"""
        if self.progress_bar:
            self.progress_bar.close()
            self.progress_bar = None

        self.logger.console_info(message or f"{self.operation_name} completed")
        if self.start_time:
            duration = time.time() - self.start_time
            self.logger.debug(f"Operation completed: {self.operation_name} in {duration:.2f}s")

    def warning(self, message: str) -> None:
        """Log operation warning - show to user"""
        self.logger.warning(f"{self.operation_name}: {message}")


def create_operation_logger(name: str, operation: str) -> OperationLogger:
    """
    Create operation logger for tracking long-running tasks

    Args:
        name: Logger name
        operation: Operation description

    Returns:
        OperationLogger instance
    """
    return OperationLogger(get_logger(name), operation)


# Initialize logging when module is imported
try:
    configure_from_settings()
except (ValueError, OSError):
    # Fallback to basic logging if settings are unusable
    setup_logging(level="INFO", console_output=True)
