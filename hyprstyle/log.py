"""Console logging with the [INFO]/[WARN]/[ERROR] prefixes."""

import logging
import sys

_LOGGER_NAME = "hyprstyle"

GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
RED = "\033[0;31m"
BLUE = "\033[0;34m"
NC = "\033[0m"

_PREFIXES = {
    logging.DEBUG: ("DEBUG", BLUE),
    logging.INFO: ("INFO", GREEN),
    logging.WARNING: ("WARN", YELLOW),
    logging.ERROR: ("ERROR", RED),
    logging.CRITICAL: ("ERROR", RED),
}


class PrefixFormatter(logging.Formatter):
    def __init__(self, color=True):
        super().__init__()
        self.color = color

    def format(self, record):
        label, color = _PREFIXES.get(record.levelno, (record.levelname, ""))
        message = record.getMessage()
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        if self.color and color:
            return f"{color}[{label}]{NC} {message}"
        return f"[{label}] {message}"


def configure_logging(verbose=False, stream=None):
    """Install the console handler on the package logger.

    Calling it again replaces the previous handler, so the CLI can be invoked
    repeatedly in one process.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_hyprstyle_console", False):
            logger.removeHandler(handler)

    stream = stream or sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setFormatter(PrefixFormatter(color=hasattr(stream, "isatty") and stream.isatty()))
    handler._hyprstyle_console = True
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger
