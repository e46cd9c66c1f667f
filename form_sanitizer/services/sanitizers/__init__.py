"""
Sanitizers module.
Contains field-level sanitization for submitted form data.
"""
from form_sanitizer.services.sanitizers.input_sanitizer import (
    FieldSanitizer,
    SanitizeType,
    SanitizedResult,
    sanitize_fields,
)
from form_sanitizer.services.sanitizers.rules import (
    sanitize_boolean,
    sanitize_email,
    sanitize_key,
    sanitize_number_int,
    sanitize_text_field,
    sanitize_textarea_field,
    sanitize_url,
)

__all__ = [
    "FieldSanitizer",
    "SanitizeType",
    "SanitizedResult",
    "sanitize_fields",
    "sanitize_boolean",
    "sanitize_email",
    "sanitize_key",
    "sanitize_number_int",
    "sanitize_text_field",
    "sanitize_textarea_field",
    "sanitize_url",
]
