"""
Logging setup for the turismo service.

All output goes through loguru. Records from the standard library loggers
used by the server stack (uvicorn, fastapi, slowapi) are forwarded into it,
and every line carries the service name so logs from several services can
share one sink.
"""

import logging
import sys

from loguru import logger

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "{extra[service]} | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

FORWARDED_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "fastapi", "slowapi")


class InterceptHandler(logging.Handler):
    """Forward stdlib records to loguru, keeping the original call site."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip frames that belong to the logging module itself
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", service: str = "turismo-auth", json_logs: bool = False):
    """
    Send all logs to stdout through loguru.

    Args:
        level: Minimum level for the stdout sink.
        service: Value of the `service` field on every record.
        json_logs: Emit one JSON object per line instead of colored text.
    """
    logger.remove()
    logger.configure(extra={"service": service})

    if json_logs:
        logger.add(sys.stdout, level=level.upper(), serialize=True)
    else:
        logger.add(sys.stdout, format=TEXT_FORMAT, level=level.upper(), colorize=True)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in FORWARDED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False

    logger.debug(f"Logging configured level={level.upper()} json={json_logs}")
