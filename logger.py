"""Logging configuration for Spendwise.

Sets up logging to a dated log file and, optionally, the console. The
categorization core logs through the single ``spendwise`` logger so that
fallbacks (learning failures, remote classifier errors) end up in one place.
"""

import logging
from datetime import date
from config import Config

APP_LOGGER_NAME = "spendwise"

# Chatty loggers of the LLM client stack
_THIRD_PARTY_LOGGERS = ("openai", "httpx", "httpcore")


def setup_logging(config: Config, console: bool = True) -> logging.Logger:
    """Set up application logging with file and console handlers.

    Args:
        config: Application configuration containing log settings.
        console: Whether to also log to the console.

    Returns:
        Configured logger instance.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(config.log_level)

    # Clear any existing handlers (in case this is called multiple times)
    logger.handlers.clear()

    file_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    log_file_path = config.log_dir / f"spendwise-{date.today().isoformat()}.log"
    file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(config.log_level)
        console_handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
        logger.addHandler(console_handler)

    for name in _THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def get_logger() -> logging.Logger:
    """Get the application logger.

    Returns:
        The spendwise logger instance.
    """
    return logging.getLogger(APP_LOGGER_NAME)
