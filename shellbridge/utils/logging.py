# shellbridge/utils/logging.py
"""
Logging configuration for shellbridge.
"""
import sys

from loguru import logger
from shellbridge.constants import APP_NAME, LOG_DIR, LOG_FORMAT, LOG_ROTATION, LOG_RETENTION
from shellbridge.utils.enhanced_logging import EnhancedLogger

# Dictionary to store enhanced logger instances
_enhanced_loggers = {}

def setup_logging(debug: bool = False, log_to_file: bool = True) -> None:
    """
    Configure the application logging.

    Args:
        debug: Whether to enable debug logging.
        log_to_file: Whether to add the rotating text and JSON file sinks.
    """
    # Remove default handlers
    logger.remove()
    logger.configure(extra={"name": APP_NAME, "context": {}})

    # Console output stays quiet unless debugging; stdout is reserved for results
    log_level = "DEBUG" if debug else "WARNING"
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level=log_level,
        diagnose=debug,  # Include variable values in traceback if debug is True
    )

    if not log_to_file:
        return

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"Cannot create log directory {LOG_DIR}, file logging disabled: {e}")
        return

    log_file = LOG_DIR / "shellbridge.log"
    logger.add(
        log_file,
        format=LOG_FORMAT,
        level="INFO",
        rotation=LOG_ROTATION,
        retention=LOG_RETENTION,
        compression="zip",
    )

    # Structured JSON log file
    json_log_file = LOG_DIR / "shellbridge_structured.log"
    logger.add(
        json_log_file,
        serialize=True,
        level="INFO",
        rotation=LOG_ROTATION,
        retention=LOG_RETENTION,
        compression="zip",
    )

    logger.debug(f"Logging initialized. Log files: {log_file}, {json_log_file}")


def get_logger(name: str = APP_NAME) -> EnhancedLogger:
    """
    Get a logger instance with the given name.

    Args:
        name: The name for the logger.

    Returns:
        An enhanced logger instance.
    """
    if name in _enhanced_loggers:
        return _enhanced_loggers[name]

    enhanced_logger = EnhancedLogger(name)
    _enhanced_loggers[name] = enhanced_logger

    return enhanced_logger
