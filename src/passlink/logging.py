"""
Logger for the passlink package.

Console output goes through tqdm.write so a running generation progress bar
is redrawn below log lines instead of being torn apart by them.
"""
import sys, logging
from logging.handlers import RotatingFileHandler
from tqdm import tqdm

LOGGER_NAME = "passlink"
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_FILE_MAX_BYTES = 5_000_000
LOG_FILE_BACKUPS = 3


class TqdmStreamHandler(logging.StreamHandler):
    """StreamHandler that writes to stderr via tqdm.write."""

    def __init__(self):
        super().__init__(stream=sys.stderr)

    def emit(self, record):
        try:
            tqdm.write(self.format(record), file=self.stream)
            self.flush()
        except Exception:
            self.handleError(record)


def _attach(log: logging.Logger, handler: logging.Handler, level: str) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    log.addHandler(handler)


def setup_logging(*, level: str="INFO", quiet: bool=False, log_file: str|None=None, use_tqdm_handler: bool=True):
    """
    (Re)configure the package logger. Handlers from an earlier call are
    closed first, so calling this once per CLI invocation is safe.
    quiet drops the console handler; log_file adds a rotating file.
    """
    level = level.upper()
    if level not in LEVELS:
        raise ValueError(f"Unknown log level {level!r}; expected one of {', '.join(LEVELS)}")

    log = get_logger()
    log.setLevel(level)
    while log.handlers:
        old = log.handlers[0]
        log.removeHandler(old)
        old.close()

    if not quiet:
        console = TqdmStreamHandler() if use_tqdm_handler else logging.StreamHandler(stream=sys.stderr)
        _attach(log, console, level)

    if log_file:
        rotating = RotatingFileHandler(
            log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
        )
        _attach(log, rotating, level)

    return log


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)
