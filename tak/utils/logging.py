"""Logging configuration for tak

All tak loggers live under the ``tak`` logger, which gets its own handlers
and does not propagate to the root logger. With ``--debug`` GitPython's
``git`` logger, which logs every git command it runs, also writes to the
debug log file.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = 'tak'
GIT_LOGGER_NAME = 'git'


def default_log_file() -> Path:
    return Path.home() / '.tak' / 'tak.log'


def short_name(name: str) -> str:
    """Logger name without the package prefix, e.g. ``core.manager``."""
    if name.startswith(f'{LOGGER_NAME}.'):
        return name[len(LOGGER_NAME) + 1:]
    return name


class ColoredFormatter(logging.Formatter):
    """Formatter that shortens tak logger names and colors level names on a TTY."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'       # Reset
    }

    def __init__(self, fmt=None, datefmt=None, use_color: Optional[bool] = None):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = sys.stderr.isatty() if use_color is None else use_color

    def format(self, record):
        # Work on a copy so other handlers see the original record
        record = logging.makeLogRecord(record.__dict__)
        record.name = short_name(record.name)
        if self.use_color and record.levelname in self.COLORS:
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in logger.handlers[:]:
        if getattr(handler, '_tak_handler', False):
            logger.removeHandler(handler)
            handler.close()


def setup_logging(
    verbose: bool = False, debug: bool = False, log_file: Optional[Path] = None
) -> Optional[Path]:
    """
    Configure logging for tak.

    Safe to call more than once; handlers from an earlier call are replaced.

    Args:
        verbose: If True, show INFO level messages
        debug: If True, show DEBUG level messages and write them to a log file
        log_file: Debug log location, ~/.tak/tak.log by default

    Returns:
        Path of the debug log file, or None when not debugging
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    git_logger = logging.getLogger(GIT_LOGGER_NAME)
    _reset_handlers(logger)
    _reset_handlers(git_logger)
    git_logger.setLevel(logging.NOTSET)

    logger.setLevel(level)
    logger.propagate = False

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler._tak_handler = True
    console_handler.setLevel(level)
    if debug:
        console_handler.setFormatter(ColoredFormatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
    else:
        console_handler.setFormatter(ColoredFormatter(fmt='[%(name)s] %(message)s'))
    logger.addHandler(console_handler)

    if not debug:
        return None

    log_file = Path(log_file) if log_file else default_log_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')  # Overwrite each run
    file_handler._tak_handler = True
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    logger.addHandler(file_handler)

    git_logger.setLevel(logging.DEBUG)
    git_logger.addHandler(file_handler)

    return log_file


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the tak logger.

    Args:
        name: Name of the module (typically __name__)

    Returns:
        Logger instance
    """
    if name != LOGGER_NAME and not name.startswith(f'{LOGGER_NAME}.'):
        name = f'{LOGGER_NAME}.{name}'
    return logging.getLogger(name)
