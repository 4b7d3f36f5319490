"""Logging configuration for Deployer."""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Loggers uvicorn creates; the server runs with log_config=None so these
# write through the root handlers configured here.
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(
    level: str = "INFO", log_file: str | None = None, access_log: bool = True
) -> None:
    """Configure logging for the webhook server.

    Signature rejections from ``deployer.auth.middleware`` and uvicorn's own
    server and access lines share one format and one set of handlers.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs to
        access_log: Emit one uvicorn access line per request
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
        server_logger.setLevel(log_level)

    logging.getLogger("uvicorn.access").disabled = not access_log

    logging.getLogger(__name__).info(
        "Logging configured: level=%s access_log=%s", level, access_log
    )
