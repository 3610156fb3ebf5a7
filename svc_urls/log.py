# svc_urls/log.py
import logging
import sys
from typing import Optional

from svc_urls.config import settings

# Third-party loggers that are chatty at DEBUG
QUIET_LOGGERS = ("kubernetes", "urllib3")

# stderr handler installed by the last setup_logging() call
_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None, format_string: Optional[str] = None) -> None:
    """
    Configure root logging for one CLI run.

    Logs go to stderr so stdout only ever carries the rendered result.
    Calling it twice replaces the previous handler instead of stacking one.
    """
    global _handler

    log_level = getattr(logging, (level or settings.log_level).upper(), logging.WARNING)
    formatter = logging.Formatter(format_string or settings.log_format)

    remove_handler()
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.addHandler(_handler)
    root_logger.setLevel(log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def remove_handler() -> None:
    global _handler
    if _handler is not None:
        logging.getLogger().removeHandler(_handler)
        _handler = None
