import logging
import sys
from .config import settings


def setup_logging(stream=None) -> None:
    """Configure application logging (stdout unless another stream is given)."""

    # Create formatter
    formatter = logging.Formatter(settings.log_format)

    # Create console handler
    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level.upper()))
    root_logger.handlers = [console_handler]

    # Keep request logs of the HTTP client quiet unless debugging
    if settings.log_level.upper() != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)

    # Configure uvicorn loggers
    logging.getLogger("uvicorn.access").handlers = [console_handler]
    logging.getLogger("uvicorn.error").handlers = [console_handler]


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name."""
    return logging.getLogger(name)
