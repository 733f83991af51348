# shellbridge/utils/enhanced_logging.py
from typing import Dict, Any, Optional

from loguru import logger as _root_logger


class EnhancedLogger:
    """Enhanced logger with context tracking on top of loguru."""

    def __init__(self, name: str):
        self._name = name
        self._context: Dict[str, Any] = {}

    def add_context(self, key: str, value: Any) -> None:
        """Add context information for subsequent log messages."""
        self._context[key] = value

    def remove_context(self, key: str) -> None:
        """Remove context information."""
        if key in self._context:
            del self._context[key]

    def clear_context(self) -> None:
        """Clear all context information."""
        self._context.clear()

    def with_context(self, **context) -> 'EnhancedLogger':
        """Create a new logger with added context."""
        new_logger = EnhancedLogger(self._name)
        new_logger._context = {**self._context, **context}
        return new_logger

    def _bound(self, extra: Optional[Dict[str, Any]] = None):
        """Bind the logger name and the combined context to a loguru logger."""
        context = {**self._context}
        if extra:
            context.update(extra)
        # depth=1 attributes the record to the caller of debug()/info()/...
        return _root_logger.bind(name=self._name, context=context).opt(depth=1)

    def debug(self, msg: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log a debug message with context."""
        self._bound(extra).debug(msg)

    def info(self, msg: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log an info message with context."""
        self._bound(extra).info(msg)

    def warning(self, msg: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log a warning message with context."""
        self._bound(extra).warning(msg)

    def error(self, msg: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log an error message with context."""
        self._bound(extra).error(msg)

    def critical(self, msg: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log a critical message with context."""
        self._bound(extra).critical(msg)

    def exception(self, msg: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log an error message together with the active exception's traceback."""
        self._bound(extra).exception(msg)

    @property
    def name(self) -> str:
        """Get the logger name."""
        return self._name

    @property
    def context(self) -> Dict[str, Any]:
        """Get a copy of the current context."""
        return dict(self._context)
