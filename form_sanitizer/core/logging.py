"""
Value-safe logging module.
CRITICAL: Never log submitted field values, raw or sanitized.
Only log: field name, sanitize type, outcome, error code, counts.
"""
import logging
import sys
from typing import Any, Optional

from form_sanitizer.core.config import get_settings


def setup_logging() -> None:
    """Configure logging with the value-safe format."""
    settings = get_settings()

    log_level = logging.DEBUG if settings.service_env == "dev" else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True
    )


class SafeLogger:
    """
    Value-safe logger wrapper.
    Only allows logging of safe fields; anything else passed as context is dropped.
    """

    SAFE_FIELDS = frozenset({
        "field_name",
        "sanitize_type",
        "outcome",
        "error_code",
        "allowed_count",
        "rule_count",
        "exception_class",
    })

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    def _format_safe_context(self, context: dict[str, Any]) -> str:
        """Format only safe fields from context."""
        safe_items = []
        for key, value in context.items():
            if key in self.SAFE_FIELDS:
                safe_items.append(f"{key}={value}")
        return " | ".join(safe_items) if safe_items else ""

    def _emit(self, level: int, message: str, context: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        ctx = self._format_safe_context(context)
        self._logger.log(level, f"{message} | {ctx}" if ctx else message)

    def info(self, message: str, **context: Any) -> None:
        """Log info with safe context only."""
        self._emit(logging.INFO, message, context)

    def warning(self, message: str, **context: Any) -> None:
        """Log warning with safe context only."""
        self._emit(logging.WARNING, message, context)

    def error(
        self,
        message: str,
        error_code: Optional[str] = None,
        **context: Any
    ) -> None:
        """
        Log error with safe context only.
        NEVER log exception messages that might echo a submitted value.
        """
        if error_code:
            context["error_code"] = error_code
        self._emit(logging.ERROR, message, context)

    def debug(self, message: str, **context: Any) -> None:
        """Log debug with safe context only."""
        self._emit(logging.DEBUG, message, context)


def get_safe_logger(name: str) -> SafeLogger:
    """Get a value-safe logger instance."""
    return SafeLogger(name)
