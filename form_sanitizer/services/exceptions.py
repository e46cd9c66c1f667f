"""
Exceptions for sanitizer misconfiguration.
Submitted input never raises; these only signal caller-side mistakes.
Messages carry tags and field names, never submitted values.
"""
from enum import Enum
from typing import Optional


class SanitizerErrorCode(str, Enum):
    """Value-safe error codes for sanitizer failures."""
    UNKNOWN_SANITIZE_TYPE = "UNKNOWN_SANITIZE_TYPE"
    INVALID_FIELD_RULE = "INVALID_FIELD_RULE"


class SanitizerError(Exception):
    """
    Base exception for sanitizer errors.

    Attributes:
        error_code: Value-safe error code for logging
        message: Value-safe message
    """

    def __init__(
        self,
        error_code: SanitizerErrorCode,
        message: str = "Sanitization failed"
    ):
        self.error_code = error_code
        self.message = message
        super().__init__(message)


class UnknownSanitizeTypeError(SanitizerError):
    """Raised for an unrecognized sanitize-type tag when strict mode is on."""

    def __init__(self, sanitize_type: str, field_name: Optional[str] = None):
        self.sanitize_type = sanitize_type
        self.field_name = field_name
        target = f" for field '{field_name}'" if field_name else ""
        super().__init__(
            error_code=SanitizerErrorCode.UNKNOWN_SANITIZE_TYPE,
            message=f"Unknown sanitize type '{sanitize_type}'{target}"
        )


class InvalidFieldRuleError(SanitizerError, ValueError):
    """Raised when a field rule declaration is inconsistent."""

    def __init__(self, reason: str, field_name: Optional[str] = None):
        self.field_name = field_name
        target = f"Field '{field_name}': " if field_name else ""
        super().__init__(
            error_code=SanitizerErrorCode.INVALID_FIELD_RULE,
            message=f"{target}{reason}"
        )
