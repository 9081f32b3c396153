# newsitem/utils/logger.py

import logging
import traceback
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..models.types import ChangeEvent, NewsItemError


class NewsItemLogger:
    """Centralized logging for news item metadata operations."""

    def __init__(
        self,
        name: str = "newsitem",
        level: Union[str, int] = logging.INFO,
        log_file: Optional[Path] = None
    ):
        self.logger = logging.getLogger(name)
        self._setup_logger(level, log_file)

    def _setup_logger(self, level: Union[str, int], log_file: Optional[Path]) -> None:
        """Configure logging with proper formatters."""
        self.logger.setLevel(level)

        # Handlers are installed once per logger name
        if self.logger.handlers:
            return

        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s'
        ))
        self.logger.addHandler(console)

        if log_file:
            file_handler = logging.FileHandler(str(log_file))
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            self.logger.addHandler(file_handler)

    def debug(self, message: str) -> None:
        self.logger.debug(message)

    def info(self, message: str) -> None:
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.logger.error(message)

    def log_change(self, event: ChangeEvent) -> None:
        """Log a committed change."""
        node = f", node: {event.node.uuid or event.node.title}" if event.node else ""
        self.logger.debug(
            f"{event.actor} {event.action.value} {event.entity_type}{node}"
        )

    def log_error(self, error: NewsItemError, entity_type: Optional[str] = None) -> None:
        """Log a news item error with context."""
        self.logger.warning(
            f"{type(error).__name__} during {entity_type or 'operation'}: "
            f"{error.message} "
            f"Context: {error.context}"
        )

    def create_error_log(self, e: Exception, context: Dict[str, Any]) -> None:
        """Create comprehensive error log entry."""
        self.logger.error(
            "Error Details:\n"
            f"Timestamp: {datetime.now().isoformat()}\n"
            f"Error Type: {type(e).__name__}\n"
            f"Message: {str(e)}\n"
            f"Context: {context}\n"
            f"Stacktrace:\n{traceback.format_exc()}"
        )


def log_mutation(entity_type: str):
    """Decorator for logging mutating operations."""
    def decorator(func):
        @wraps(func)
        def wrapper(self, actor, *args, **kwargs):
            self.logger.debug(f"{actor}: {func.__name__} ({entity_type})")
            try:
                return func(self, actor, *args, **kwargs)
            except NewsItemError as e:
                self.logger.log_error(e, entity_type)
                raise
            except Exception as e:
                self.logger.create_error_log(e, {
                    'entity_type': entity_type,
                    'function': func.__name__,
                    'actor': actor,
                    'args': args
                })
                raise
        return wrapper
    return decorator
