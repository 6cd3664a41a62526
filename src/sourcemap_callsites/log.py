"""Logging helper module."""

from logging import (
    DEBUG,
    Formatter,
    Logger,
    StreamHandler,
    getLogger,
)

PACKAGE_LOGGER_NAME = "sourcemap_callsites"

_debug_handler: StreamHandler | None = None


def get_logger(name: str) -> Logger:
    """Proxy for logging.getLogger."""
    return getLogger(name)


def enable_debug_logging() -> Logger:
    """Send the package's DEBUG logs to stderr.

    The library never touches the root logger. Calling this more than once
    keeps a single handler attached.

    Returns:
        The package logger.

    """
    global _debug_handler  # noqa: PLW0603

    package_logger = getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(DEBUG)
    if _debug_handler is None:
        _debug_handler = StreamHandler()
        _debug_handler.setLevel(DEBUG)
        _debug_handler.setFormatter(
            Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        )
        package_logger.addHandler(_debug_handler)
        package_logger.debug("Debug logging enabled.")
    return package_logger


def disable_debug_logging() -> None:
    """Detach the handler added by enable_debug_logging."""
    global _debug_handler  # noqa: PLW0603

    if _debug_handler is not None:
        package_logger = getLogger(PACKAGE_LOGGER_NAME)
        package_logger.removeHandler(_debug_handler)
        package_logger.setLevel(0)
        _debug_handler = None
