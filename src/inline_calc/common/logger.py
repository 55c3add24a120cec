"""Package-wide logger."""
import logging
import os

LOG_LEVEL_ENV: str = "INLINE_CALC_LOG_LEVEL"
LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _build_logger(name: str = "inline_calc") -> logging.Logger:
    """
    Build the shared logger with a single stream handler.

    The level is read from the ``INLINE_CALC_LOG_LEVEL`` environment variable (default ``INFO``).

    :param str name: Logger name

    :return: Configured logger
    :rtype: logging.Logger
    """
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    level = getattr(logging, os.environ.get(LOG_LEVEL_ENV, "INFO").upper(), logging.INFO)
    # Unknown names fall back to INFO
    log.setLevel(level if isinstance(level, int) else logging.INFO)
    return log


def set_verbose(verbose: bool) -> None:
    """Switch the shared logger between DEBUG and INFO."""
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


logger: logging.Logger = _build_logger()
