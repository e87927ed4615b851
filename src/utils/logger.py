"""
Logging setup shared by services and the API
"""
import logging
import sys

from config.settings import LOG_LEVEL, LOG_FILE

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str, level: str = LOG_LEVEL) -> logging.Logger:
    """
    Create a logger writing to the console and to LOG_FILE

    Args:
        name: Logger name (usually __name__)
        level: Log level name

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())

    # Handlers are attached once per logger name
    if logger.handlers:
        return logger

    formatter = logging.Formatter(_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    file_handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logger.propagate = False
    return logger
