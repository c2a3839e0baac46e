import sys
from typing import Optional
from loguru import logger
import logging

from app.core.config import settings

CONSOLE_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# Storage client internals (supabase -> httpx/hpack) and per-request access lines
NOISY_LOGGERS = ("uvicorn.access", "httpx", "hpack")

class InterceptHandler(logging.Handler):
    """Routes stdlib logging records (uvicorn, the seed loader, httpx) into loguru."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Report the original caller, not the logging module
        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())

def setup_logging(level: Optional[str] = None, error_log: Optional[str] = None):
    """
    Configures loguru sinks for the API process.

    Args:
        level: console level, defaults to settings.LOG_LEVEL
        error_log: rotating ERROR file sink, defaults to settings.ERROR_LOG_PATH.
            An empty path disables the file sink.
    """
    level = (level or settings.LOG_LEVEL).upper()
    error_log = settings.ERROR_LOG_PATH if error_log is None else error_log

    logger.remove()
    logger.add(sys.stdout, level=level, format=CONSOLE_FORMAT)

    if error_log:
        logger.add(
            error_log,
            level="ERROR",
            rotation="10 MB",
            retention="1 month",
            compression="zip",
            format=FILE_FORMAT,
        )

    root = logging.getLogger()
    root.handlers = [InterceptHandler()]
    # loguru sinks do the level filtering
    root.setLevel(logging.NOTSET)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug(f"Logging configured (level={level}, error_log={error_log or 'disabled'})")

__all__ = ["logger", "setup_logging"]
