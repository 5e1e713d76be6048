"""Logging configuration for the Onboard service and CLI.

Everything goes through loguru. Records of the standard ``logging`` module
(uvicorn, httpx, asyncio) are handed over by ``InterceptHandler``. Messages
bound with a ``component`` (``logger.bind(component="HttpTransport")``) show
it in the service format.
"""

import logging
import sys

from loguru import logger

SERVICE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> - <level>{message}</level>"
)
WIZARD_FORMAT = "<level>{level: <8}</level> | <level>{message}</level>"
DEFAULT_COMPONENT = "onboard"

# Loggers that follow the application level instead of their own defaults
FOLLOWING_LOGGERS = ("httpcore", "httpx", "uvicorn", "uvicorn.access", "uvicorn.error", "asyncio", "onboard")


class InterceptHandler(logging.Handler):
    """Hand standard logging records over to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip the logging module's own frames so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.bind(component=record.name).opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def intercept_standard_logging(log_level: str) -> None:
    """Route the root logger and every logger created so far through loguru.

    Args:
        log_level: Level applied to ``FOLLOWING_LOGGERS``
    """
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in list(logging.Logger.manager.loggerDict):
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False

    for name in FOLLOWING_LOGGERS:
        logging.getLogger(name).setLevel(log_level)


def setup_logging(log_level: str, compact: bool = False) -> None:
    """Configure loguru logging for the entire application.

    Args:
        log_level: Log level to use (from settings, which handles env vars and CLI args).
        compact: Use the terse ``level | message`` format of the terminal wizard.
    """
    log_level = log_level.upper()

    logger.remove()
    logger.configure(extra={"component": DEFAULT_COMPONENT})
    logger.add(sys.stderr, format=WIZARD_FORMAT if compact else SERVICE_FORMAT, level=log_level, colorize=True)

    intercept_standard_logging(log_level)
    logger.debug(f"Log level set to: {log_level}")
