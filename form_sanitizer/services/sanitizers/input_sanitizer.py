"""
Field-level sanitization of submitted form data.

FieldSanitizer looks a field up in a caller-supplied mapping (the parsed
POST body) and runs the rule selected by its sanitize-type tag:

- text / unknown tag: plain single-line text
- email, number, url, key: format-specific cleanup
- textarea: text that keeps its newlines
- checkbox: strict boolean
- radio: text, but only when the value is in the allow-list

Absence is reported as None. A field that was not submitted and a radio
value outside the allow-list both produce None.

Value-safe: No logging of field values.
"""
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Union

from form_sanitizer.core.config import get_settings
from form_sanitizer.core.logging import get_safe_logger
from form_sanitizer.schemas.field_rules import FieldRule, FormRules
from form_sanitizer.services.exceptions import UnknownSanitizeTypeError
from form_sanitizer.services.sanitizers.rules import (
    sanitize_boolean,
    sanitize_email,
    sanitize_key,
    sanitize_number_int,
    sanitize_text_field,
    sanitize_textarea_field,
    sanitize_url,
)

logger = get_safe_logger(__name__)

SanitizedResult = Union[str, bool, None]


class SanitizeType(str, Enum):
    """Recognized sanitize-type tags."""
    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    URL = "url"
    CHECKBOX = "checkbox"
    TEXTAREA = "textarea"
    KEY = "key"
    RADIO = "radio"

    @classmethod
    def parse(cls, tag: Union[str, "SanitizeType"]) -> Optional["SanitizeType"]:
        """Return the member for a recognized tag (case-sensitive), else None."""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError:
            return None


_RULES: Dict[SanitizeType, Callable[[Any], SanitizedResult]] = {
    SanitizeType.TEXT: sanitize_text_field,
    SanitizeType.EMAIL: sanitize_email,
    SanitizeType.NUMBER: sanitize_number_int,
    SanitizeType.URL: sanitize_url,
    SanitizeType.CHECKBOX: sanitize_boolean,
    SanitizeType.TEXTAREA: sanitize_textarea_field,
    SanitizeType.KEY: sanitize_key,
}


class FieldSanitizer:
    """Static helpers for sanitizing one submitted field at a time."""

    @staticmethod
    def sanitize(
        source: Mapping[str, Any],
        field_name: str,
        sanitize_type: Union[str, SanitizeType],
        allowed_values: Sequence[str] = (),
    ) -> SanitizedResult:
        """
        Sanitize a field based on its type.

        Args:
            source: Raw submitted values keyed by field name (read-only)
            field_name: Name of the field to sanitize
            sanitize_type: Tag selecting the rule; unknown tags use the text rule
            allowed_values: Allow-list for the radio rule, ignored otherwise

        Returns:
            The sanitized value: bool for checkbox, str otherwise.
            None when the field is missing (or submitted as None), and None
            when a radio value is not in allowed_values.

        Raises:
            UnknownSanitizeTypeError: unknown tag while strict_sanitize_types is on
        """
        value = source.get(field_name)
        if value is None:
            logger.debug("Field absent", field_name=field_name, outcome="absent")
            return None

        resolved = SanitizeType.parse(sanitize_type)
        if resolved is None:
            tag = getattr(sanitize_type, "value", sanitize_type)
            if get_settings().strict_sanitize_types:
                logger.error(
                    "Unknown sanitize type",
                    error_code="UNKNOWN_SANITIZE_TYPE",
                    field_name=field_name,
                    sanitize_type=tag,
                )
                raise UnknownSanitizeTypeError(str(tag), field_name=field_name)
            logger.debug(
                "Unknown sanitize type, using text",
                field_name=field_name,
                sanitize_type=tag,
                outcome="fallback",
            )
            resolved = SanitizeType.TEXT

        if resolved is SanitizeType.RADIO:
            return FieldSanitizer._sanitize_radio(field_name, value, allowed_values)

        return _RULES[resolved](value)

    @staticmethod
    def _sanitize_radio(
        field_name: str,
        value: Any,
        allowed_values: Sequence[str],
    ) -> Optional[str]:
        """Exact, type-strict allow-list match; cleaned as text when accepted."""
        # A bare string is one allowed entry, not a sequence of characters
        if isinstance(allowed_values, str):
            allowed_values = (allowed_values,)

        if isinstance(value, str) and any(value == allowed for allowed in allowed_values):
            return sanitize_text_field(value)

        logger.debug(
            "Radio value rejected",
            field_name=field_name,
            allowed_count=len(allowed_values),
            outcome="rejected",
        )
        return None


def sanitize_fields(
    source: Mapping[str, Any],
    rules: Union[FormRules, Iterable[FieldRule]],
) -> Dict[str, SanitizedResult]:
    """
    Sanitize every field a form declares.

    Args:
        source: Raw submitted values keyed by field name
        rules: FormRules, or any iterable of FieldRule

    Returns:
        Field name -> sanitized value (None when absent/rejected), in rule order.
        Submitted fields without a rule are not included.
    """
    field_rules = rules.fields if isinstance(rules, FormRules) else list(rules)

    result: Dict[str, SanitizedResult] = {}
    for rule in field_rules:
        result[rule.name] = FieldSanitizer.sanitize(
            source,
            rule.name,
            rule.sanitize_type,
            rule.allowed_values,
        )

    logger.debug("Form sanitized", rule_count=len(field_rules))
    return result
